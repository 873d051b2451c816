from typing import Any
from urllib.parse import quote

import httpx
import structlog

from permissions_updater.core.config.artifactory_config import ArtifactoryConfig
from permissions_updater.core.errors import RemoteOperationError
from permissions_updater.core.models import ObjectKind
from permissions_updater.integrations.artifactory.base import AuthorizationClient
from permissions_updater.naming import NameCodec

logger = structlog.get_logger(__name__)


class ArtifactoryClient(AuthorizationClient):
    """
    A client for the Artifactory security and access token APIs.

    In dry-run mode nothing is changed: mutating calls only log what they
    would have done, while listing still queries the server.
    """

    def __init__(
        self,
        config: ArtifactoryConfig,
        names: NameCodec,
        dry_run: bool = False,
        http_client: httpx.Client | None = None,
    ):
        self.config = config
        self.names = names
        self.dry_run = dry_run
        headers = {"Authorization": f"Bearer {config.token}"} if config.token else {}
        self._http = http_client or httpx.Client()
        self._http.headers.update(headers)

    def _api_url(self, kind: ObjectKind) -> str:
        if kind is ObjectKind.GROUP:
            return self.config.groups_api_url
        return self.config.permissions_api_url

    def _object_url(self, kind: ObjectKind, name: str) -> str:
        return f"{self._api_url(kind)}/{quote(name, safe='')}"

    def _request(
        self, method: str, url: str, *, kind: ObjectKind | None = None, name: str | None = None, **kwargs: Any
    ) -> httpx.Response:
        kind_label = str(kind) if kind else None
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("artifactory_request_failed", method=method, url=url, error=str(e))
            raise RemoteOperationError(f"{method} {url} failed: {e}", kind=kind_label, name=name) from e

        if not response.is_success:
            logger.error(
                "artifactory_request_failed",
                method=method,
                url=url,
                status_code=response.status_code,
                response_body=response.text,
            )
            raise RemoteOperationError(
                f"{method} {url} returned {response.status_code}",
                kind=kind_label,
                name=name,
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    def list_generated(self, kind: ObjectKind) -> list[str]:
        response = self._request("GET", self._api_url(kind), kind=kind)
        try:
            entries = response.json()
            names = [entry["name"] for entry in entries]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteOperationError(f"Unexpected {kind} list response: {e}", kind=str(kind)) from e

        managed = [name for name in names if self.names.is_managed(name)]
        logger.info("generated_objects_listed", kind=str(kind), total=len(names), managed=len(managed))
        return managed

    def create_or_replace(self, kind: ObjectKind, name: str, payload: dict[str, Any]) -> None:
        if self.dry_run:
            logger.info("dry_run_skip_create_or_replace", kind=str(kind), name=name)
            return

        self._request("PUT", self._object_url(kind, name), kind=kind, name=name, json=payload)
        logger.info("object_created_or_replaced", kind=str(kind), name=name)

    def delete(self, kind: ObjectKind, name: str) -> None:
        if self.dry_run:
            logger.info("dry_run_skip_delete", kind=str(kind), name=name)
            return

        self._request("DELETE", self._object_url(kind, name), kind=kind, name=name)
        logger.info("object_deleted", kind=str(kind), name=name)

    def issue_token(self, username: str, group: str, ttl_seconds: int) -> str | None:
        if self.dry_run:
            logger.info("dry_run_skip_token", username=username, group=group)
            return None

        response = self._request(
            "POST",
            self.config.token_api_url,
            name=username,
            data={
                "username": username,
                "scope": f"applied-permissions/groups:readers,{group}",
                "expires_in": str(ttl_seconds),
            },
        )
        try:
            token = response.json()["access_token"]
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteOperationError(f"Unexpected token response for {username}: {e}", name=username) from e

        logger.info("token_issued", username=username, group=group, expires_in=ttl_seconds)
        return token

    def close(self) -> None:
        self._http.close()
