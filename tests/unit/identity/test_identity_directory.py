from unittest.mock import MagicMock

import httpx
import respx
from httpx import Response

from permissions_updater.core.config.jira_config import KnownUsersConfig
from permissions_updater.identity import IdentityDirectory, load_user_report

ARTIFACTORY_REPORT_URL = "https://reports.example.org/artifactory.json"
JIRA_REPORT_URL = "https://reports.example.org/jira.json"


class TestLookups:
    def test_lookups_ignore_case(self, identity: IdentityDirectory) -> None:
        assert identity.exists_in_artifactory("BOB")
        assert identity.exists_in_artifactory("bob")
        assert identity.exists_in_jira("Alice")

    def test_unknown_user(self, identity: IdentityDirectory) -> None:
        assert not identity.exists_in_artifactory("dave")
        assert identity.exists_in_jira("dave")

    def test_live_lookup_uses_report_first(self) -> None:
        lookup = MagicMock()
        directory = IdentityDirectory([], ["alice"], jira_lookup=lookup)

        assert directory.exists_in_jira_live("alice")
        lookup.is_user_present.assert_not_called()

    def test_live_lookup_falls_back_to_jira(self) -> None:
        lookup = MagicMock()
        lookup.is_user_present.return_value = True
        directory = IdentityDirectory([], [], jira_lookup=lookup)

        assert directory.exists_in_jira_live("newcomer")
        lookup.is_user_present.assert_called_once_with("newcomer")

    def test_live_lookup_without_jira_client(self) -> None:
        assert not IdentityDirectory([], []).exists_in_jira_live("newcomer")


class TestReports:
    @respx.mock
    def test_from_reports(self) -> None:
        respx.get(ARTIFACTORY_REPORT_URL).mock(return_value=Response(200, json=["Alice", "bob"]))
        respx.get(JIRA_REPORT_URL).mock(return_value=Response(200, json=["alice"]))
        config = KnownUsersConfig(artifactory_user_names_url=ARTIFACTORY_REPORT_URL, jira_user_names_url=JIRA_REPORT_URL)

        with httpx.Client() as client:
            directory = IdentityDirectory.from_reports(config, client)

        assert directory.exists_in_artifactory("alice")
        assert directory.exists_in_artifactory("bob")
        assert not directory.exists_in_jira("bob")

    @respx.mock
    def test_failed_report_is_empty(self) -> None:
        respx.get(JIRA_REPORT_URL).mock(return_value=Response(503))

        with httpx.Client() as client:
            assert load_user_report(JIRA_REPORT_URL, client) == set()

    @respx.mock
    def test_malformed_report_is_empty(self) -> None:
        respx.get(JIRA_REPORT_URL).mock(return_value=Response(200, json={"users": ["alice"]}))

        with httpx.Client() as client:
            assert load_user_report(JIRA_REPORT_URL, client) == set()

    @respx.mock
    def test_unreachable_report_is_empty(self) -> None:
        respx.get(JIRA_REPORT_URL).mock(side_effect=httpx.ConnectError("refused"))

        with httpx.Client() as client:
            assert load_user_report(JIRA_REPORT_URL, client) == set()
