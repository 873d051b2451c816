from permissions_updater.integrations.artifactory.base import AuthorizationClient
from permissions_updater.integrations.artifactory.client import ArtifactoryClient

__all__ = [
    "ArtifactoryClient",
    "AuthorizationClient",
]
