import re

import httpx
import structlog
from cachetools import LRUCache

from permissions_updater.core.config.jira_config import JiraConfig

logger = structlog.get_logger(__name__)

# Only plain user names are ever sent to Jira
_USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_]+")


class JiraClient:
    """
    A client for the few Jira REST endpoints the updater needs.

    Both lookups are remembered for the lifetime of the client, i.e. one run,
    so a user or component is never requested twice.
    """

    def __init__(self, config: JiraConfig, http_client: httpx.Client | None = None):
        self.config = config
        auth = (config.username, config.password) if config.username else None
        self._http = http_client or httpx.Client(base_url=config.url, auth=auth)
        self._user_cache: LRUCache = LRUCache(maxsize=10_000)
        self._component_ids: dict[str, str] | None = None

    def is_user_present(self, username: str) -> bool:
        if username in self._user_cache:
            return self._user_cache[username]

        present = self._lookup_user(username)
        self._user_cache[username] = present
        return present

    def _lookup_user(self, username: str) -> bool:
        if not _USERNAME_PATTERN.fullmatch(username):
            logger.warning("jira_username_rejected", username=username)
            return False

        logger.info("jira_user_lookup", username=username)
        try:
            response = self._http.get("/rest/api/2/user", params={"username": username})
        except httpx.HTTPError as e:
            logger.error("jira_user_lookup_failed", username=username, error=str(e))
            return False
        return response.status_code == 200

    def _load_components(self) -> dict[str, str]:
        components: dict[str, str] = {}
        logger.info("jira_components_loading", project=self.config.project)
        try:
            response = self._http.get(f"/rest/api/2/project/{self.config.project}/components")
            response.raise_for_status()
            for component in response.json():
                components[component["name"]] = str(component["id"])
        except httpx.HTTPStatusError as e:
            logger.error(
                "jira_components_fetch_failed",
                status_code=e.response.status_code,
                response_body=e.response.text,
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error("jira_components_fetch_failed", error=str(e))
        return components

    def get_component_id(self, component_name: str) -> str | None:
        """
        Resolve a Jira component name to its numeric id.

        Returns:
            The id as a string, or None if the component is unknown or the
            component list could not be retrieved
        """
        if self._component_ids is None:
            self._component_ids = self._load_components()
        return self._component_ids.get(component_name)

    def close(self) -> None:
        self._http.close()
