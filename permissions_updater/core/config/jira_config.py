"""
Jira and user report configuration.
"""

from dataclasses import dataclass


@dataclass
class JiraConfig:
    """Jira configuration."""

    url: str = "https://issues.jenkins.io"
    username: str = ""
    password: str = ""
    project: str = "JENKINS"


@dataclass
class KnownUsersConfig:
    """Locations of the periodically refreshed user name reports."""

    artifactory_user_names_url: str = "https://reports.jenkins.io/artifactory-ldap-users-report.json"
    jira_user_names_url: str = "https://reports.jenkins.io/jira-users-report.json"
