"""
Shared fixtures: definition corpora written into a temporary directory.
"""

from pathlib import Path
from typing import Any

import pytest
import yaml

from permissions_updater.identity import IdentityDirectory
from permissions_updater.naming import NameCodec
from permissions_updater.reporting import ChecksReporter


def write_yaml(directory: Path, file_name: str, content: dict[str, Any]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / file_name
    path.write_text(yaml.safe_dump(content, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def definitions_dir(tmp_path: Path) -> Path:
    path = tmp_path / "permissions"
    path.mkdir()
    return path


@pytest.fixture
def teams_dir(tmp_path: Path) -> Path:
    path = tmp_path / "teams"
    path.mkdir()
    return path


@pytest.fixture
def names() -> NameCodec:
    return NameCodec("generatedv2-")


@pytest.fixture
def identity() -> IdentityDirectory:
    return IdentityDirectory(
        artifactory_users=["alice", "Bob", "carol"],
        jira_users=["alice", "bob", "carol", "dave"],
    )


@pytest.fixture
def checks_reporter(tmp_path: Path) -> ChecksReporter:
    return ChecksReporter(tmp_path / "checks")


@pytest.fixture
def yaml_file():
    return write_yaml
