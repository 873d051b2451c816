from permissions_updater.integrations.github.client import GitHubSecretsClient
from permissions_updater.integrations.github.models import EncryptedSecret, RepositoryPublicKey

__all__ = [
    "EncryptedSecret",
    "GitHubSecretsClient",
    "RepositoryPublicKey",
]
