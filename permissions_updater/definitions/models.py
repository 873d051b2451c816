from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CDPolicy(BaseModel):
    """Continuous delivery settings of a component."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enabled: bool = False
    # Exclusive CD: uploads happen only through the CD group, never by maintainers directly
    exclusive: bool = False


class IssueTracker(BaseModel):
    """An issue tracker declared for a component.

    Exactly one of `jira` (component name or numeric id) and `github`
    (`org/repo`) identifies a supported tracker; entries with neither are
    kept but do not produce index records.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    jira: str | None = None
    github: str | None = None
    report: bool = True

    @field_validator("jira", mode="before")
    @classmethod
    def _coerce_numeric_component(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_single_kind(self) -> "IssueTracker":
        if self.jira is not None and self.github is not None:
            raise ValueError("an issue tracker must be either 'jira' or 'github', not both")
        return self

    @property
    def is_jira(self) -> bool:
        return self.jira is not None

    @property
    def is_github_issues(self) -> bool:
        return self.github is not None

    @property
    def type(self) -> str | None:
        if self.is_jira:
            return "jira"
        if self.is_github_issues:
            return "github"
        return None

    @property
    def reference(self) -> str | None:
        return self.jira if self.is_jira else self.github


class Definition(BaseModel):
    """Upload permissions of one component, as declared in its YAML file."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1)
    paths: list[str] = Field(default_factory=list)
    developers: list[str] = Field(default_factory=list)
    github: str | None = None
    cd: CDPolicy | None = None
    issues: list[IssueTracker] = Field(default_factory=list)
    release_blocked: bool = Field(default=False, alias="releaseBlocked")
    extra_names: list[str] = Field(default_factory=list, alias="extraNames")
    # Metadata for the security team, carried but never interpreted
    security: Any = None

    @field_validator("paths", "developers", "extra_names", "issues", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("github", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def _check_github_requirements(self) -> "Definition":
        problems = []
        if self.cd_enabled and self.github is None:
            problems.append(
                f"Cannot have CD ('cd') enabled without specifying GitHub repository ('github'), for component: {self.name}"
            )
        if self.issues and self.github is None:
            problems.append("Issue trackers ('issues') support requires GitHub repository ('github')")
        if problems:
            raise ValueError("; ".join(problems))
        return self

    @property
    def cd_enabled(self) -> bool:
        return self.cd is not None and self.cd.enabled

    @property
    def cd_exclusive(self) -> bool:
        return self.cd is not None and self.cd.exclusive


class TeamDefinition(BaseModel):
    """A named list of developers that definitions can reference as `@name`."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    developers: list[str] = Field(min_length=1)


class LoadedDefinition(BaseModel):
    """A definition with its team references resolved, plus where it came from."""

    model_config = ConfigDict(frozen=True)

    file_base_name: str
    definition: Definition
