"""
GitHub configuration.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """Credentials and naming for the repository secrets API."""

    username: str
    token: str
    secret_name_prefix: str
    api_base_url: str = "https://api.github.com"
