import json
from urllib.parse import parse_qs

import httpx
import pytest
import respx
from httpx import Response

from permissions_updater.core.config.artifactory_config import ArtifactoryConfig
from permissions_updater.core.errors import RemoteOperationError
from permissions_updater.core.models import ObjectKind
from permissions_updater.integrations.artifactory import ArtifactoryClient
from permissions_updater.naming import NameCodec

ARTIFACTORY_URL = "https://artifactory.example.org"
PERMISSIONS_URL = f"{ARTIFACTORY_URL}/api/security/permissions"
GROUPS_URL = f"{ARTIFACTORY_URL}/api/security/groups"


def make_client(dry_run: bool = False) -> ArtifactoryClient:
    config = ArtifactoryConfig(token="s3cr3t", object_prefix="generatedv2-", url=ARTIFACTORY_URL)
    return ArtifactoryClient(config, NameCodec(config.object_prefix), dry_run=dry_run)


@pytest.fixture
def client():
    artifactory = make_client()
    yield artifactory
    artifactory.close()


class TestListGenerated:
    @respx.mock
    def test_filters_to_managed_prefix(self, client: ArtifactoryClient) -> None:
        respx.get(GROUPS_URL).mock(
            return_value=Response(
                200, json=[{"name": "generatedv2-cd-a"}, {"name": "readers"}, {"name": "generateddev-cd-a"}]
            )
        )

        assert client.list_generated(ObjectKind.GROUP) == ["generatedv2-cd-a"]

    @respx.mock
    def test_sends_bearer_token(self, client: ArtifactoryClient) -> None:
        route = respx.get(PERMISSIONS_URL).mock(return_value=Response(200, json=[]))

        client.list_generated(ObjectKind.PERMISSION_TARGET)

        assert route.calls.last.request.headers["Authorization"] == "Bearer s3cr3t"

    @respx.mock
    def test_listing_happens_in_dry_run(self) -> None:
        respx.get(PERMISSIONS_URL).mock(return_value=Response(200, json=[{"name": "generatedv2-x"}]))

        assert make_client(dry_run=True).list_generated(ObjectKind.PERMISSION_TARGET) == ["generatedv2-x"]

    @respx.mock
    def test_error_status_raises(self, client: ArtifactoryClient) -> None:
        respx.get(PERMISSIONS_URL).mock(return_value=Response(500, text="oops"))

        with pytest.raises(RemoteOperationError) as exc_info:
            client.list_generated(ObjectKind.PERMISSION_TARGET)

        assert exc_info.value.status_code == 500
        assert exc_info.value.response_body == "oops"
        assert exc_info.value.kind == "permission target"

    @respx.mock
    def test_transport_error_raises(self, client: ArtifactoryClient) -> None:
        respx.get(GROUPS_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(RemoteOperationError):
            client.list_generated(ObjectKind.GROUP)


class TestMutations:
    @respx.mock
    def test_create_or_replace(self, client: ArtifactoryClient) -> None:
        route = respx.put(f"{PERMISSIONS_URL}/generatedv2-x").mock(return_value=Response(200))

        client.create_or_replace(ObjectKind.PERMISSION_TARGET, "generatedv2-x", {"name": "generatedv2-x"})

        assert route.called
        assert json.loads(route.calls.last.request.content) == {"name": "generatedv2-x"}

    @respx.mock
    def test_names_are_url_encoded(self, client: ArtifactoryClient) -> None:
        route = respx.delete(f"{GROUPS_URL}/generatedv2-a%20b").mock(return_value=Response(204))

        client.delete(ObjectKind.GROUP, "generatedv2-a b")

        assert route.called

    @respx.mock
    def test_failed_delete_raises_with_name(self, client: ArtifactoryClient) -> None:
        respx.delete(f"{GROUPS_URL}/generatedv2-x").mock(return_value=Response(404))

        with pytest.raises(RemoteOperationError) as exc_info:
            client.delete(ObjectKind.GROUP, "generatedv2-x")

        assert exc_info.value.name == "generatedv2-x"
        assert exc_info.value.kind == "group"

    @respx.mock
    def test_dry_run_sends_nothing(self) -> None:
        route = respx.route().mock(return_value=Response(200))
        client = make_client(dry_run=True)

        client.create_or_replace(ObjectKind.GROUP, "generatedv2-x", {})
        client.delete(ObjectKind.GROUP, "generatedv2-x")
        assert client.issue_token("CD-for-a__b", "generatedv2-cd-a_b", 60) is None

        assert not route.called


class TestIssueToken:
    @respx.mock
    def test_issue_token(self, client: ArtifactoryClient) -> None:
        route = respx.post(f"{ARTIFACTORY_URL}/access/api/v1/tokens").mock(
            return_value=Response(200, json={"access_token": "tok", "expires_in": 14400})
        )

        token = client.issue_token("CD-for-jenkinsci__x", "generatedv2-cd-jenkinsci_x", 14400)

        assert token == "tok"
        request = route.calls.last.request
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "username": ["CD-for-jenkinsci__x"],
            "scope": ["applied-permissions/groups:readers,generatedv2-cd-jenkinsci_x"],
            "expires_in": ["14400"],
        }

    @respx.mock
    def test_missing_token_in_response(self, client: ArtifactoryClient) -> None:
        respx.post(f"{ARTIFACTORY_URL}/access/api/v1/tokens").mock(return_value=Response(200, json={}))

        with pytest.raises(RemoteOperationError):
            client.issue_token("CD-for-x", "generatedv2-cd-x", 60)
