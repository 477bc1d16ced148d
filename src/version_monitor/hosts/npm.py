"""
npm host service.

Tracks packages on the npm registry. The registry has no call budget, so no
rate limiter is attached.
"""

from ..clients.npm import NpmClient
from ..models import HostType
from ..storage.manager import ProjectStore
from .base import HostService

MAX_NAME_LENGTH = 214


class NpmHostService(HostService):
    """Host service for npm packages."""

    host_identifier = "npm"
    host_type = HostType.NPM

    def __init__(self, client: NpmClient, store: ProjectStore):
        super().__init__(client, store)

    def valid_identifier(self, identifier: str) -> bool:
        """Apply npm's package naming rules: length and leading character."""
        if not identifier or len(identifier) > MAX_NAME_LENGTH:
            return False
        return not identifier.startswith((".", "-", "_"))
