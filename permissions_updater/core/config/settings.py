"""
Main configuration class that composes all configs.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from permissions_updater.core.config.artifactory_config import ArtifactoryConfig
from permissions_updater.core.config.github_config import GitHubConfig
from permissions_updater.core.config.jira_config import JiraConfig, KnownUsersConfig
from permissions_updater.core.config.logging_config import LoggingConfig
from permissions_updater.core.config.sync_config import SyncConfig
from permissions_updater.core.errors import ConfigurationError

# Load environment variables from a .env file
load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


class Config:
    """Main configuration class.

    Values come from the environment; keyword arguments (typically command
    line flags) take precedence over it.
    """

    def __init__(
        self,
        *,
        dry_run: bool | None = None,
        development: bool | None = None,
        definitions_dir: Path | None = None,
        teams_dir: Path | None = None,
        output_dir: Path | None = None,
    ) -> None:
        self._parse_errors: list[str] = []
        self.sync = SyncConfig(
            definitions_dir=definitions_dir or Path(os.getenv("DEFINITIONS_DIR", "./permissions")),
            teams_dir=teams_dir or Path(os.getenv("TEAMS_DIR", "./teams")),
            output_dir=output_dir or Path(os.getenv("ARTIFACTORY_API_TEMP_DIR", "./json")),
            checks_report_dir=Path(os.getenv("CHECKS_REPORT_DIR", ".")),
            dry_run=_env_flag("DRY_RUN") if dry_run is None else dry_run,
            development=_env_flag("DEVELOPMENT") if development is None else development,
            token_minutes_valid=self._env_int("ARTIFACTORY_TOKEN_MINUTES_VALID", 240),
            cd_allowed_repository_pattern=os.getenv("CD_ALLOWED_REPOSITORY_PATTERN", r"(jenkinsci|jenkins-infra)/.+"),
            secret_retry_attempts=self._env_int("SECRET_RETRY_ATTEMPTS", 3),
            secret_retry_delay_ms=self._env_int("SECRET_RETRY_DELAY_MS", 200),
        )

        # Development runs must never collide with objects and secrets owned by production runs
        development_mode = self.sync.development
        self.artifactory = ArtifactoryConfig(
            url=os.getenv("ARTIFACTORY_URL", "https://repo.jenkins-ci.org"),
            token=os.getenv("ARTIFACTORY_TOKEN", ""),
            object_prefix=os.getenv(
                "ARTIFACTORY_OBJECT_PREFIX", "generateddev-" if development_mode else "generatedv2-"
            ),
        )

        self.github = GitHubConfig(
            api_base_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            username=os.getenv("GITHUB_USERNAME", ""),
            token=os.getenv("GITHUB_TOKEN", ""),
            secret_name_prefix=os.getenv(
                "GITHUB_SECRET_NAME_PREFIX", "DEV_MAVEN_" if development_mode else "MAVEN_"
            ),
        )

        self.jira = JiraConfig(
            url=os.getenv("JIRA_URL", "https://issues.jenkins.io"),
            username=os.getenv("JIRA_USERNAME", ""),
            password=os.getenv("JIRA_PASSWORD", ""),
        )

        self.known_users = KnownUsersConfig(
            artifactory_user_names_url=os.getenv(
                "ARTIFACTORY_USER_NAMES_URL", "https://reports.jenkins.io/artifactory-ldap-users-report.json"
            ),
            jira_user_names_url=os.getenv("JIRA_USER_NAMES_URL", "https://reports.jenkins.io/jira-users-report.json"),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(message)s"),
        )

    def _env_int(self, name: str, default: int) -> int:
        value = os.getenv(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            self._parse_errors.append(f"{name} must be an integer, not {value!r}")
            return default

    def validate(self, require_remote: bool = True) -> bool:
        """Validate configuration.

        Args:
            require_remote: Whether credentials for the remote APIs are needed,
                i.e. whether this run talks to Artifactory and GitHub at all.
        """
        errors = list(self._parse_errors)

        if not self.artifactory.object_prefix:
            errors.append("ARTIFACTORY_OBJECT_PREFIX must not be empty")

        if self.sync.token_minutes_valid <= 0:
            errors.append("ARTIFACTORY_TOKEN_MINUTES_VALID must be positive")

        if self.sync.secret_retry_attempts < 1:
            errors.append("SECRET_RETRY_ATTEMPTS must be at least 1")

        if require_remote and not self.sync.dry_run:
            if not self.artifactory.token:
                errors.append("ARTIFACTORY_TOKEN must be provided unless dry-run mode is used")

            if not self.github.username or not self.github.token:
                errors.append("GITHUB_USERNAME and GITHUB_TOKEN must be provided unless dry-run mode is used")

        if errors:
            raise ConfigurationError(f"Configuration errors: {', '.join(errors)}")

        return True
