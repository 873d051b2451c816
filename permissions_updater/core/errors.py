"""
Core error classes for the permissions updater.

Errors come in two tiers. A `ConfigurationError` means the input corpus or the
environment is wrong; it aborts the run before anything remote is changed. A
`RemoteOperationError` means a single remote call failed; it is recorded
against the affected object and the run carries on.
"""

from typing import Any


class ConfigurationError(Exception):
    """Raised for any problem that must abort the run before remote changes."""

    pass


class DefinitionError(ConfigurationError):
    """Raised when a component definition file cannot be read or is invalid."""

    def __init__(self, file_name: str, problems: list[str]) -> None:
        self.file_name = file_name
        self.problems = problems
        super().__init__(f"Failed to read {file_name}: {'; '.join(problems)}")


class TeamError(ConfigurationError):
    """Raised when a team file is invalid or a team reference cannot be resolved."""

    pass


class UnknownUserError(ConfigurationError):
    """Raised when a maintainer is missing from a required user directory.

    Carries the short title and long details that are published to the
    pull request checks so the maintainer knows where to log in.
    """

    def __init__(self, username: str, title: str, details: str, message: str) -> None:
        self.username = username
        self.title = title
        self.details = details
        super().__init__(message)


class OutputDirectoryError(ConfigurationError):
    """Raised when the payload output directory already exists."""

    pass


class RemoteOperationError(Exception):
    """Raised when a call to a remote API fails."""

    def __init__(
        self,
        message: str,
        *,
        kind: str | None = None,
        name: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)

    def as_log_context(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "status_code": self.status_code,
            "error": str(self),
        }


class PublicKeyUnavailableError(RemoteOperationError):
    """Raised when a repository's secrets public key cannot be retrieved."""

    pass
