"""
Base authorization client interface.

The reconciliation driver and the credential provisioner only depend on this
interface, so tests can substitute a fake for the real Artifactory API.
"""

from abc import ABC, abstractmethod
from typing import Any

from permissions_updater.core.models import ObjectKind


class AuthorizationClient(ABC):
    """Base class for clients of a permission API."""

    @abstractmethod
    def list_generated(self, kind: ObjectKind) -> list[str]:
        """List the names of objects of `kind` that this tool manages."""
        pass

    @abstractmethod
    def create_or_replace(self, kind: ObjectKind, name: str, payload: dict[str, Any]) -> None:
        """Create the object `name`, or replace it if it exists."""
        pass

    @abstractmethod
    def delete(self, kind: ObjectKind, name: str) -> None:
        """Delete the object `name`."""
        pass

    @abstractmethod
    def issue_token(self, username: str, group: str, ttl_seconds: int) -> str | None:
        """
        Issue an access token for `username` scoped to `group`.

        Returns:
            The token, or None in dry-run mode
        """
        pass
