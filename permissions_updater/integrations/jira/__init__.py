"""
Jira API adapter.
"""

from permissions_updater.integrations.jira.client import JiraClient

__all__ = [
    "JiraClient",
]
