"""In-process request and response objects passed between dispatcher and handlers."""

import json
from typing import Any

from pydantic import BaseModel


class MockRequest(BaseModel):
    method: str
    path: str
    query: dict[str, list[str]] = {}
    headers: dict[str, str] = {}
    path_params: dict[str, str] = {}
    body: str | None = None

    def query_values(self, name: str) -> list[str]:
        """All values for a query parameter, splitting comma separated values."""
        values = []
        for raw in self.query.get(name, []):
            values.extend(v.strip() for v in raw.split(",") if v.strip())
        return values


class MockResponse(BaseModel):
    status: int = 200
    media_type: str = "application/json"
    body: Any = None
    headers: dict[str, str] = {}

    def render(self) -> str:
        if self.body is None:
            return ""
        if self.media_type == "application/json":
            return json.dumps(self.body, indent=2, ensure_ascii=False)
        return str(self.body)
