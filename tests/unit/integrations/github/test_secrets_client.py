import json

import httpx
import pytest
import respx
from httpx import Response

from permissions_updater.core.config.github_config import GitHubConfig
from permissions_updater.core.errors import PublicKeyUnavailableError, RemoteOperationError
from permissions_updater.integrations.github import GitHubSecretsClient

API_URL = "https://api.github.example"
REPOSITORY = "jenkinsci/delphix-plugin"
PUBLIC_KEY_URL = f"{API_URL}/repos/{REPOSITORY}/actions/secrets/public-key"
SECRET_URL = f"{API_URL}/repos/{REPOSITORY}/actions/secrets/MAVEN_TOKEN"


@pytest.fixture
def client():
    config = GitHubConfig(username="bot", token="ghp", secret_name_prefix="MAVEN_", api_base_url=API_URL)
    secrets = GitHubSecretsClient(config, max_attempts=3, delay_seconds=0)
    yield secrets
    secrets.close()


class TestPublicKey:
    @respx.mock
    def test_get_public_key(self, client: GitHubSecretsClient) -> None:
        route = respx.get(PUBLIC_KEY_URL).mock(return_value=Response(200, json={"key_id": "123", "key": "abc="}))

        key = client.get_public_key(REPOSITORY)

        assert (key.key_id, key.key) == ("123", "abc=")
        assert route.calls.last.request.headers["Authorization"].startswith("Basic ")

    @respx.mock
    def test_retries_until_success(self, client: GitHubSecretsClient) -> None:
        route = respx.get(PUBLIC_KEY_URL).mock(
            side_effect=[
                Response(502),
                httpx.ConnectError("reset"),
                Response(200, json={"key_id": "123", "key": "abc="}),
            ]
        )

        assert client.get_public_key(REPOSITORY).key_id == "123"
        assert route.call_count == 3

    @respx.mock
    def test_gives_up_after_three_attempts(self, client: GitHubSecretsClient) -> None:
        route = respx.get(PUBLIC_KEY_URL).mock(return_value=Response(404, text="Not Found"))

        with pytest.raises(PublicKeyUnavailableError) as exc_info:
            client.get_public_key(REPOSITORY)

        assert route.call_count == 3
        assert exc_info.value.status_code == 404

    @respx.mock
    def test_malformed_key_response(self, client: GitHubSecretsClient) -> None:
        respx.get(PUBLIC_KEY_URL).mock(return_value=Response(200, json={"key": "abc="}))

        with pytest.raises(PublicKeyUnavailableError):
            client.get_public_key(REPOSITORY)


class TestSecrets:
    @pytest.mark.parametrize("status_code", [201, 204])
    @respx.mock
    def test_stores_secret(self, client: GitHubSecretsClient, status_code: int) -> None:
        route = respx.put(SECRET_URL).mock(return_value=Response(status_code))

        client.create_or_update_secret(REPOSITORY, "MAVEN_TOKEN", "ZW5j", "123")

        assert route.call_count == 1
        assert json.loads(route.calls.last.request.content) == {"encrypted_value": "ZW5j", "key_id": "123"}

    @respx.mock
    def test_other_success_status_is_a_failure(self, client: GitHubSecretsClient) -> None:
        route = respx.put(SECRET_URL).mock(return_value=Response(200))

        with pytest.raises(RemoteOperationError):
            client.create_or_update_secret(REPOSITORY, "MAVEN_TOKEN", "ZW5j", "123")

        assert route.call_count == 3

    @respx.mock
    def test_retries_failed_upload(self, client: GitHubSecretsClient) -> None:
        route = respx.put(SECRET_URL).mock(side_effect=[Response(500), Response(201)])

        client.create_or_update_secret(REPOSITORY, "MAVEN_TOKEN", "ZW5j", "123")

        assert route.call_count == 2
