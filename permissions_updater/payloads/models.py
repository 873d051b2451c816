"""
Payloads as accepted by the Artifactory security API.

Field order matters: payloads are written to disk as JSON and compared between
runs, so models are always dumped `by_alias` in declaration order.
"""

from pydantic import BaseModel, ConfigDict, Field

# Artifactory permission codes for "deploy/cache" and "delete/overwrite"
DEPLOY_RIGHTS = ("w", "n")


class Principals(BaseModel):
    model_config = ConfigDict(frozen=True)

    users: dict[str, list[str]] = Field(default_factory=dict)
    groups: dict[str, list[str]] = Field(default_factory=dict)


class PermissionTargetPayload(BaseModel):
    """A permission target granting upload rights to a set of repository paths."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    includes_pattern: str = Field(alias="includesPattern")
    excludes_pattern: str = Field(default="", alias="excludesPattern")
    repositories: list[str]
    principals: Principals = Field(default_factory=Principals)


class GroupPayload(BaseModel):
    """A group whose only member is the token user of a CD-enabled repository."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str


class IssueTrackerRecord(BaseModel):
    """One entry of the issue tracker index."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: str
    reference: str
    view_url: str | None = Field(default=None, alias="viewUrl")
    report_url: str | None = Field(default=None, alias="reportUrl")
