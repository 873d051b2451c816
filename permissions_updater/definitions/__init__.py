from permissions_updater.definitions.loader import DefinitionLoader
from permissions_updater.definitions.models import (
    CDPolicy,
    Definition,
    IssueTracker,
    LoadedDefinition,
    TeamDefinition,
)

__all__ = [
    "CDPolicy",
    "Definition",
    "DefinitionLoader",
    "IssueTracker",
    "LoadedDefinition",
    "TeamDefinition",
]
