"""
Known users of Artifactory and Jira.

The user name reports are regenerated periodically by an external job; they
are read once when a run starts. Jira can additionally be asked directly about
a single user, which catches maintainers who logged in after the last report.
"""

from collections.abc import Iterable
from typing import Protocol

import httpx
import structlog

from permissions_updater.core.config.jira_config import KnownUsersConfig

logger = structlog.get_logger(__name__)


class JiraUserLookup(Protocol):
    def is_user_present(self, username: str) -> bool: ...


def load_user_report(url: str, http_client: httpx.Client) -> set[str]:
    """
    Fetch a JSON array of user names.

    A report that cannot be fetched yields an empty set, which makes every
    maintainer lookup against it fail loudly during payload generation.
    """
    try:
        response = http_client.get(url)
        response.raise_for_status()
        names = response.json()
    except httpx.HTTPStatusError as e:
        logger.error("user_report_fetch_failed", url=url, status_code=e.response.status_code)
        return set()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("user_report_fetch_failed", url=url, error=str(e))
        return set()

    if not isinstance(names, list):
        logger.error("user_report_malformed", url=url)
        return set()

    users = {name.lower() for name in names if isinstance(name, str)}
    logger.info("user_report_loaded", url=url, count=len(users))
    return users


class IdentityDirectory:
    """Case-insensitive existence checks against the Artifactory and Jira user directories."""

    def __init__(
        self,
        artifactory_users: Iterable[str],
        jira_users: Iterable[str],
        jira_lookup: JiraUserLookup | None = None,
    ):
        self._artifactory_users = {user.lower() for user in artifactory_users}
        self._jira_users = {user.lower() for user in jira_users}
        self._jira_lookup = jira_lookup

    @classmethod
    def from_reports(
        cls,
        config: KnownUsersConfig,
        http_client: httpx.Client,
        jira_lookup: JiraUserLookup | None = None,
    ) -> "IdentityDirectory":
        return cls(
            artifactory_users=load_user_report(config.artifactory_user_names_url, http_client),
            jira_users=load_user_report(config.jira_user_names_url, http_client),
            jira_lookup=jira_lookup,
        )

    def exists_in_artifactory(self, username: str) -> bool:
        return username.lower() in self._artifactory_users

    def exists_in_jira(self, username: str) -> bool:
        return username.lower() in self._jira_users

    def exists_in_jira_live(self, username: str) -> bool:
        """Check the Jira report first, then ask Jira itself."""
        if self.exists_in_jira(username):
            return True
        if self._jira_lookup is None:
            return False
        return self._jira_lookup.is_user_present(username)
