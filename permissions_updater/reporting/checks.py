"""
Side-channel report for pull request checks.

When a maintainer is unknown to one of the user directories, CI publishes a
short title and a longer markdown explanation as the check result, so the
maintainer can log in and re-trigger the build without asking for help.
"""

from pathlib import Path

import structlog

from permissions_updater.core.errors import UnknownUserError

logger = structlog.get_logger(__name__)

TITLE_FILE_NAME = "checks-title.txt"
DETAILS_FILE_NAME = "checks-details.txt"

_DIRECTORY_LINKS = {
    "Artifactory": "[Artifactory](https://repo.jenkins-ci.org/)",
    "Jira": "[Jira](https://issues.jenkins.io/)",
}

_DETAILS_TEMPLATE = """\
{developer} needs to log in to {links}.

We resync our {directories} user list every 2 hours, so you will need to wait some time before rebuilding your pull request.
The easiest way to trigger a rebuild is to close your pull request, wait a few seconds and then reopen it.

Alternatively the hosting team can re-trigger it if you post a comment saying you have now logged in.
"""


def unknown_user_error(developer: str, missing_directories: list[str]) -> UnknownUserError:
    """
    Build the error for a developer missing from one or more user directories.

    Args:
        developer: User name as written in the definition
        missing_directories: Names of the directories the user is missing from,
            e.g. ``["Artifactory", "Jira"]``
    """
    directories = " and ".join(missing_directories)
    links = " and ".join(_DIRECTORY_LINKS[directory] for directory in missing_directories)
    return UnknownUserError(
        username=developer,
        title=f"{developer} needs to log in to {directories}",
        details=_DETAILS_TEMPLATE.format(developer=developer, links=links, directories=directories),
        message=f"User name not known to {directories}: {developer}",
    )


class ChecksReporter:
    """Writes the check title and details files, replacing earlier ones."""

    def __init__(self, report_dir: Path):
        self.report_dir = report_dir

    @property
    def title_path(self) -> Path:
        return self.report_dir / TITLE_FILE_NAME

    @property
    def details_path(self) -> Path:
        return self.report_dir / DETAILS_FILE_NAME

    def report(self, error: UnknownUserError) -> None:
        self.report_dir.mkdir(parents=True, exist_ok=True)
        self.title_path.write_text(error.title, encoding="utf-8")
        self.details_path.write_text(error.details, encoding="utf-8")
        logger.info("checks_report_written", username=error.username, report_dir=str(self.report_dir))
