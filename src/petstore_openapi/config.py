"""Settings for the generated document and the mock endpoints.

Values come from the environment only through ``OpenApiSettings.from_env()``;
everything downstream receives them explicitly.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel

from petstore_openapi.compiler.document import Contact, DocumentInfo, License

DEFAULT_DOC_VERSION = "1.0.0"
DEFAULT_DOC_TITLE = "Swagger Petstore"
DEFAULT_DOC_DESCRIPTION = "This is a sample server Petstore API designed by http://swagger.io."

CONTACT = Contact(
    name="Santosh Ganti",
    email="admin@homelab.santoshganti.net",
    url="https://www.homelab.santoshganti.net",
)
LICENSE = License(name="MIT", url="http://opensource.org/licenses/MIT")
TERMS_OF_SERVICE = "https://github.com/Azure/azure-functions-openapi-extension"


class OpenApiSettings(BaseModel):
    doc_version: str = DEFAULT_DOC_VERSION
    doc_title: str = DEFAULT_DOC_TITLE
    doc_description: str = DEFAULT_DOC_DESCRIPTION
    host_names: list[str] = []
    mock_seed: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "OpenApiSettings":
        env = os.environ if environ is None else environ
        seed = env.get("PETSTORE_MOCK_SEED", "").strip()
        hosts = env.get("OpenApi__HostNames", "")
        return cls(
            doc_version=env.get("OpenApi__DocVersion", DEFAULT_DOC_VERSION),
            doc_title=env.get("OpenApi__DocTitle", DEFAULT_DOC_TITLE),
            doc_description=env.get("OpenApi__DocDescription", DEFAULT_DOC_DESCRIPTION),
            host_names=[h.strip() for h in hosts.split(",") if h.strip()],
            mock_seed=int(seed) if seed else None,
        )

    def document_info(self) -> DocumentInfo:
        return DocumentInfo(
            title=self.doc_title,
            version=self.doc_version,
            description=self.doc_description,
            terms_of_service=TERMS_OF_SERVICE,
            contact=CONTACT,
            license=LICENSE,
            servers=self.host_names,
        )
