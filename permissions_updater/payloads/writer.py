"""
Writes a computed desired state to the payload output directory.
"""

import json
from pathlib import Path
from typing import Any

import structlog

from permissions_updater.core.errors import OutputDirectoryError
from permissions_updater.core.models import ObjectKind
from permissions_updater.payloads.builder import DesiredState

logger = structlog.get_logger(__name__)

GITHUB_INDEX_FILE = "github.index.json"
ISSUES_INDEX_FILE = "issues.index.json"
CD_INDEX_FILE = "cd.index.json"
MAINTAINERS_INDEX_FILE = "maintainers.index.json"


def _write_json(target: Path, content: Any, *, sort_keys: bool = False) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(content, indent=4, ensure_ascii=False, sort_keys=sort_keys), encoding="utf-8")


class PayloadWriter:
    """Writes payload files and index files below a fresh output directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def check_output_dir(self) -> None:
        """Refuse to reuse the output of an earlier or concurrent run."""
        if self.output_dir.exists():
            raise OutputDirectoryError(f"Target directory exists, please delete first: {self.output_dir}")

    def write(self, state: DesiredState) -> None:
        self.check_output_dir()

        permissions_dir = self.output_dir / ObjectKind.PERMISSION_TARGET.payload_dir
        groups_dir = self.output_dir / ObjectKind.GROUP.payload_dir
        # An empty payload directory still means "prune every managed object of this kind"
        permissions_dir.mkdir(parents=True)
        groups_dir.mkdir()

        for target in state.permission_targets:
            _write_json(permissions_dir / f"{target.name}.json", target.model_dump(by_alias=True))

        for group in state.groups:
            _write_json(groups_dir / f"{group.name}.json", group.model_dump(by_alias=True))

        issue_trackers = {
            component: [record.model_dump(by_alias=True, exclude_none=True) for record in records]
            for component, records in state.issue_trackers_by_component.items()
        }

        _write_json(self.output_dir / GITHUB_INDEX_FILE, state.paths_by_repository, sort_keys=True)
        _write_json(self.output_dir / ISSUES_INDEX_FILE, issue_trackers, sort_keys=True)
        _write_json(self.output_dir / CD_INDEX_FILE, state.cd_repositories)
        _write_json(self.output_dir / MAINTAINERS_INDEX_FILE, state.maintainers_by_coordinate, sort_keys=True)

        logger.info(
            "payloads_written",
            output_dir=str(self.output_dir),
            permission_targets=len(state.permission_targets),
            groups=len(state.groups),
        )
