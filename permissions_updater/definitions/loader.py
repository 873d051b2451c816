"""
File-based definition loader.

Reads the team rosters and the component definitions from their directories,
validates them, and resolves `@team` developer references.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError

from permissions_updater.core.errors import DefinitionError, TeamError
from permissions_updater.definitions.models import Definition, LoadedDefinition, TeamDefinition

logger = structlog.get_logger(__name__)

YAML_SUFFIX = ".yml"
TEAM_REFERENCE_MARKER = "@"


def _format_validation_error(error: ValidationError) -> list[str]:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}" if location else item["msg"])
    return problems


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as e:
        raise DefinitionError(path.name, [str(e)]) from e

    if not isinstance(data, dict):
        raise DefinitionError(path.name, ["expected a YAML mapping at the top level"])
    return data


class DefinitionLoader:
    """
    Loads component definitions and teams from YAML files.

    Any problem with the input is a `ConfigurationError`: a malformed corpus
    must stop the run before anything is sent to Artifactory.
    """

    def __init__(self, definitions_dir: Path, teams_dir: Path):
        self.definitions_dir = definitions_dir
        self.teams_dir = teams_dir

    def load_teams(self) -> dict[str, TeamDefinition]:
        if not self.teams_dir.is_dir():
            logger.info("teams_directory_missing", teams_dir=str(self.teams_dir))
            return {}

        teams: dict[str, TeamDefinition] = {}
        for team_file in sorted(self.teams_dir.iterdir()):
            data = _read_yaml(team_file)
            try:
                team = TeamDefinition.model_validate(data)
            except ValidationError as e:
                raise TeamError(f"Failed to read {team_file.name}: {'; '.join(_format_validation_error(e))}") from e

            expected_name = team.name + YAML_SUFFIX
            if team_file.name != expected_name:
                raise TeamError(f"team file should be named {expected_name} instead of the current {team_file.name}")
            teams[team.name] = team

        logger.info("teams_loaded", count=len(teams))
        return teams

    @staticmethod
    def expand_teams(definition: Definition, teams: dict[str, TeamDefinition]) -> Definition:
        """
        Replace every `@team` developer entry with the members of that team.

        Returns:
            A copy of the definition whose developers are deduplicated and sorted
        """
        developers: set[str] = set()
        for developer in definition.developers:
            if not developer.startswith(TEAM_REFERENCE_MARKER):
                developers.add(developer)
                continue

            team_name = developer[len(TEAM_REFERENCE_MARKER) :]
            team = teams.get(team_name)
            if team is None:
                raise TeamError(f"Team {team_name} not found!")
            if not team.developers:
                raise TeamError(f"Team {team_name} is empty?!")
            logger.info("team_expanded", component=definition.name, team=team_name, developers=team.developers)
            developers.update(team.developers)

        return definition.model_copy(update={"developers": sorted(developers)})

    def load_definition(self, path: Path, teams: dict[str, TeamDefinition]) -> LoadedDefinition:
        data = _read_yaml(path)
        try:
            definition = Definition.model_validate(data)
        except ValidationError as e:
            raise DefinitionError(path.name, _format_validation_error(e)) from e

        try:
            definition = self.expand_teams(definition, teams)
        except TeamError as e:
            raise DefinitionError(path.name, [str(e)]) from e

        return LoadedDefinition(file_base_name=path.name.removesuffix(YAML_SUFFIX), definition=definition)

    def load_definitions(self) -> list[LoadedDefinition]:
        if not self.definitions_dir.is_dir():
            raise DefinitionError(str(self.definitions_dir), ["directory does not exist"])

        files = sorted(self.definitions_dir.iterdir())
        if not files:
            raise DefinitionError(str(self.definitions_dir), ["no YAML files found"])

        teams = self.load_teams()
        definitions = []
        for path in files:
            if not path.name.endswith(YAML_SUFFIX):
                raise DefinitionError(path.name, [f"Unexpected file: `{path.name}`. YAML files must end with `.yml`"])
            definitions.append(self.load_definition(path, teams))

        logger.info("definitions_loaded", count=len(definitions))
        return definitions
