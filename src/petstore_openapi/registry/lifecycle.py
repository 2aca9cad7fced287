"""Open -> Sealed lifecycle shared by a set of registries."""

import logging
from enum import Enum

from petstore_openapi.registry.errors import RegistryClosedError

logger = logging.getLogger(__name__)


class RegistryState(str, Enum):
    OPEN = "open"
    SEALED = "sealed"


class Lifecycle:
    """One-way switch guarding every registry in a set."""

    def __init__(self):
        self.state = RegistryState.OPEN

    @property
    def sealed(self) -> bool:
        return self.state is RegistryState.SEALED

    def ensure_open(self, action: str) -> None:
        if self.sealed:
            raise RegistryClosedError(action)

    def seal(self) -> None:
        if not self.sealed:
            logger.debug("Sealing registry set")
            self.state = RegistryState.SEALED
