"""
Artifactory configuration.
"""

from dataclasses import dataclass


@dataclass
class ArtifactoryConfig:
    """Artifactory configuration."""

    token: str
    object_prefix: str
    url: str = "https://repo.jenkins-ci.org"

    @property
    def permissions_api_url(self) -> str:
        return f"{self.url}/api/security/permissions"

    @property
    def groups_api_url(self) -> str:
        return f"{self.url}/api/security/groups"

    @property
    def token_api_url(self) -> str:
        return f"{self.url}/access/api/v1/tokens"
