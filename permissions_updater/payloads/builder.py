"""
Desired state computation.

Turns the loaded definitions into the Artifactory payloads and the index files
published alongside them. Every check that can fail does so here, before any
remote object is touched.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

import structlog

from permissions_updater.core.errors import ConfigurationError
from permissions_updater.definitions.models import Definition, IssueTracker, LoadedDefinition
from permissions_updater.identity.directory import IdentityDirectory
from permissions_updater.naming import NameCodec
from permissions_updater.payloads.models import (
    DEPLOY_RIGHTS,
    GroupPayload,
    IssueTrackerRecord,
    PermissionTargetPayload,
    Principals,
)
from permissions_updater.reporting.checks import ChecksReporter, unknown_user_error

logger = structlog.get_logger(__name__)

BLOCKED_PATTERN = "blocked"
SNAPSHOTS_REPOSITORY = "snapshots"
RELEASES_REPOSITORY = "releases"
WILDCARD = "*"

GITHUB_URL = "https://github.com"
JIRA_REPORT_REDIRECT_URL = "https://www.jenkins.io/participate/report-issue/redirect/"


class ComponentLookup(Protocol):
    def get_component_id(self, component_name: str) -> str | None: ...


@dataclass
class DesiredState:
    """Everything a run writes to its output directory."""

    permission_targets: list[PermissionTargetPayload] = field(default_factory=list)
    groups: list[GroupPayload] = field(default_factory=list)
    paths_by_repository: dict[str, list[str]] = field(default_factory=dict)
    issue_trackers_by_component: dict[str, list[IssueTrackerRecord]] = field(default_factory=dict)
    cd_repositories: list[str] = field(default_factory=list)
    maintainers_by_coordinate: dict[str, list[str]] = field(default_factory=dict)


def includes_pattern(definition: Definition) -> str:
    """The comma separated path patterns a permission target grants uploads to."""
    if definition.release_blocked:
        return BLOCKED_PATTERN

    patterns = []
    for path in definition.paths:
        patterns.extend(
            [
                f"{path}/*/{definition.name}-*",
                f"{path}/*/maven-metadata.xml",
                f"{path}/*/maven-metadata.xml.*",
                f"{path}/maven-metadata.xml",
                f"{path}/maven-metadata.xml.*",
            ]
        )
    return ",".join(patterns)


class DesiredStateBuilder:
    """
    Computes payloads and indices from definitions.

    The builder is a pure function of its inputs apart from the identity
    lookups and the checks report written when a maintainer is unknown.
    """

    def __init__(
        self,
        names: NameCodec,
        identity: IdentityDirectory,
        checks_reporter: ChecksReporter,
        *,
        development: bool = False,
        cd_allowed_repository_pattern: str = r"(jenkinsci|jenkins-infra)/.+",
        component_lookup: ComponentLookup | None = None,
        jira_url: str = "https://issues.jenkins.io",
    ):
        self.names = names
        self.identity = identity
        self.checks_reporter = checks_reporter
        self.development = development
        self.cd_allowed_repository_pattern = re.compile(cd_allowed_repository_pattern)
        self.component_lookup = component_lookup
        self.jira_url = jira_url.rstrip("/")

    @property
    def repositories(self) -> list[str]:
        if self.development:
            return [SNAPSHOTS_REPOSITORY]
        return [SNAPSHOTS_REPOSITORY, RELEASES_REPOSITORY]

    def build(self, definitions: Iterable[LoadedDefinition]) -> DesiredState:
        state = DesiredState()
        paths_by_repository: dict[str, set[str]] = {}
        cd_repositories: set[str] = set()

        for loaded in definitions:
            definition = loaded.definition
            self._index_paths(definition, paths_by_repository, cd_repositories)
            self._index_issue_trackers(definition, state.issue_trackers_by_component)
            self._index_maintainers(definition, state.maintainers_by_coordinate)
            state.permission_targets.append(self._permission_target(loaded.file_base_name, definition))

        state.paths_by_repository = {repo: sorted(paths) for repo, paths in paths_by_repository.items()}
        state.cd_repositories = sorted(cd_repositories)
        state.groups = [
            GroupPayload(
                name=self.names.group_name(repository),
                description=f"CD group with permissions to deploy from {repository}",
            )
            for repository in state.cd_repositories
        ]

        logger.info(
            "desired_state_built",
            permission_targets=len(state.permission_targets),
            groups=len(state.groups),
        )
        return state

    def _index_paths(
        self,
        definition: Definition,
        paths_by_repository: dict[str, set[str]],
        cd_repositories: set[str],
    ) -> None:
        if definition.github is None:
            return

        if not definition.release_blocked:
            paths_by_repository.setdefault(definition.github, set()).update(definition.paths)

        if not definition.cd_enabled:
            return

        if not self.cd_allowed_repository_pattern.fullmatch(definition.github):
            raise ConfigurationError(
                f"CD is only supported when the GitHub repository is in @jenkinsci, "
                f"not {definition.github} (component: {definition.name})"
            )

        if definition.developers:
            logger.info("cd_component_enabled", component=definition.name, repository=definition.github)
            cd_repositories.add(definition.github)
        else:
            logger.info("cd_component_unmaintained", component=definition.name, repository=definition.github)

    def _issue_record(self, tracker: IssueTracker, repository: str) -> IssueTrackerRecord:
        view_url = None
        report_url = None

        if tracker.is_github_issues:
            view_url = f"{GITHUB_URL}/{tracker.github}/issues"
            report_url = f"{GITHUB_URL}/{tracker.github}/issues/new/choose"
        else:
            component_id = self._jira_component_id(tracker.jira)
            if component_id is not None:
                view_url = f"{self.jira_url}/issues/?jql=component={component_id}"
                report_url = f"{JIRA_REPORT_REDIRECT_URL}#{component_id}"
            else:
                logger.warning("jira_component_unresolved", component=tracker.jira, repository=repository)

        return IssueTrackerRecord(
            type=tracker.type,
            reference=tracker.reference,
            view_url=view_url,
            report_url=report_url if tracker.report else None,
        )

    def _jira_component_id(self, reference: str) -> str | None:
        if reference.isdigit():
            return reference
        if self.component_lookup is None:
            return None
        return self.component_lookup.get_component_id(reference)

    def _index_issue_trackers(
        self, definition: Definition, issue_trackers_by_component: dict[str, list[IssueTrackerRecord]]
    ) -> None:
        if not definition.issues:
            return

        records = [
            self._issue_record(tracker, definition.github)
            for tracker in definition.issues
            if tracker.is_jira or tracker.is_github_issues
        ]
        for name in [*definition.extra_names, definition.name]:
            issue_trackers_by_component[name] = records

    def _index_maintainers(self, definition: Definition, maintainers_by_coordinate: dict[str, list[str]]) -> None:
        for path in definition.paths:
            group_path, _, last_element = path.rpartition("/")
            is_wildcard = WILDCARD in last_element
            if last_element != definition.name and not is_wildcard:
                # Tolerated for unusually structured components
                logger.warning("unexpected_path", path=path, artifact_id=definition.name)

            group_id = group_path.replace("/", ".")
            artifact_ids = definition.extra_names if is_wildcard else [definition.name]
            for artifact_id in artifact_ids:
                coordinate = f"{group_id}:{artifact_id}"
                if coordinate in maintainers_by_coordinate:
                    logger.warning("duplicate_maintainers_entry", coordinate=coordinate)
                    continue
                maintainers_by_coordinate[coordinate] = list(definition.developers)

    def _verify_developer(self, developer: str, exclusive: bool) -> None:
        if exclusive:
            missing = [] if self.identity.exists_in_jira_live(developer) else ["Jira"]
        else:
            missing = []
            if not self.identity.exists_in_artifactory(developer):
                missing.append("Artifactory")
            if not self.identity.exists_in_jira(developer):
                missing.append("Jira")

        if missing:
            error = unknown_user_error(developer, missing)
            self.checks_reporter.report(error)
            raise error

    def _principals(self, definition: Definition) -> Principals:
        if not definition.developers:
            if definition.cd_enabled:
                logger.info("cd_group_skipped_without_maintainers", component=definition.name)
            return Principals()

        users: dict[str, list[str]] = {}
        for developer in definition.developers:
            self._verify_developer(developer, definition.cd_exclusive)
            if not definition.cd_exclusive:
                users[developer.lower()] = list(DEPLOY_RIGHTS)

        groups: dict[str, list[str]] = {}
        if definition.cd_enabled:
            groups[self.names.group_name(definition.github)] = list(DEPLOY_RIGHTS)

        return Principals(users=users, groups=groups)

    def _permission_target(self, file_base_name: str, definition: Definition) -> PermissionTargetPayload:
        return PermissionTargetPayload(
            name=self.names.permission_target_name(file_base_name),
            includes_pattern=includes_pattern(definition),
            repositories=self.repositories,
            principals=self._principals(definition),
        )
