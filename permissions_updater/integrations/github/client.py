from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from permissions_updater.core.config.github_config import GitHubConfig
from permissions_updater.core.errors import PublicKeyUnavailableError, RemoteOperationError
from permissions_updater.core.utils.retry import call_with_fixed_retry
from permissions_updater.integrations.github.models import EncryptedSecret, RepositoryPublicKey

logger = structlog.get_logger(__name__)

SECRET_STORED_STATUS_CODES = (201, 204)


class GitHubSecretsClient:
    """
    A client for the GitHub Actions secrets API.

    Authenticates with basic auth, as the API does not issue an auth
    challenge. Every call is attempted a bounded number of times with a
    fixed pause in between.
    """

    def __init__(
        self,
        config: GitHubConfig,
        max_attempts: int = 3,
        delay_seconds: float = 0.2,
        http_client: httpx.Client | None = None,
    ):
        self.config = config
        self.max_attempts = max_attempts
        self.delay_seconds = delay_seconds
        self._http = http_client or httpx.Client(
            base_url=config.api_base_url,
            auth=(config.username, config.token),
            headers={"Accept": "application/vnd.github.v3+json"},
        )

    def _fetch_public_key(self, repository: str) -> RepositoryPublicKey:
        try:
            response = self._http.get(f"/repos/{repository}/actions/secrets/public-key")
        except httpx.HTTPError as e:
            raise PublicKeyUnavailableError(f"Public key request for {repository} failed: {e}", name=repository) from e

        if response.status_code != 200:
            raise PublicKeyUnavailableError(
                f"Failed to retrieve public key for {repository}",
                name=repository,
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            return RepositoryPublicKey.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise PublicKeyUnavailableError(f"Malformed public key for {repository}: {e}", name=repository) from e

    def get_public_key(self, repository: str) -> RepositoryPublicKey:
        """
        Retrieve the public key of a repository.

        Raises:
            PublicKeyUnavailableError: If every attempt failed
        """
        logger.info("public_key_requested", repository=repository)
        return call_with_fixed_retry(
            self._fetch_public_key,
            repository,
            max_attempts=self.max_attempts,
            delay_seconds=self.delay_seconds,
        )

    def _put_secret(self, repository: str, name: str, body: EncryptedSecret) -> None:
        url = f"/repos/{repository}/actions/secrets/{quote(name, safe='')}"
        try:
            response = self._http.put(url, json=body.model_dump())
        except httpx.HTTPError as e:
            raise RemoteOperationError(f"Storing secret {name} for {repository} failed: {e}", name=repository) from e

        if response.status_code not in SECRET_STORED_STATUS_CODES:
            raise RemoteOperationError(
                f"Failed to create/update secret {name} for {repository}",
                name=repository,
                status_code=response.status_code,
                response_body=response.text,
            )

    def create_or_update_secret(self, repository: str, name: str, encrypted_value: str, key_id: str) -> None:
        """
        Store an already encrypted secret in a repository.

        Raises:
            RemoteOperationError: If every attempt failed
        """
        logger.info("secret_create_or_update", repository=repository, secret=name, key_id=key_id)
        call_with_fixed_retry(
            self._put_secret,
            repository,
            name,
            EncryptedSecret(encrypted_value=encrypted_value, key_id=key_id),
            max_attempts=self.max_attempts,
            delay_seconds=self.delay_seconds,
        )

    def close(self) -> None:
        self._http.close()
