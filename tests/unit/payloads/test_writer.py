import json
from pathlib import Path

import pytest

from permissions_updater.core.errors import OutputDirectoryError
from permissions_updater.definitions import Definition, LoadedDefinition
from permissions_updater.payloads import DesiredState, DesiredStateBuilder, PayloadWriter


@pytest.fixture
def state(names, identity, checks_reporter):
    definitions = [
        LoadedDefinition(
            file_base_name="delphix",
            definition=Definition.model_validate(
                {
                    "name": "delphix",
                    "github": "jenkinsci/delphix-plugin",
                    "paths": ["org/jenkins-ci/plugins/delphix"],
                    "developers": ["alice"],
                    "cd": {"enabled": True},
                    "issues": [{"github": "jenkinsci/delphix-plugin"}],
                }
            ),
        )
    ]
    return DesiredStateBuilder(names, identity, checks_reporter).build(definitions)


def test_writes_payloads_and_indices(state, tmp_path: Path) -> None:
    output_dir = tmp_path / "json"

    PayloadWriter(output_dir).write(state)

    permission = json.loads((output_dir / "permissions" / "generatedv2-delphix.json").read_text())
    assert list(permission) == ["name", "includesPattern", "excludesPattern", "repositories", "principals"]
    assert permission["principals"] == {
        "users": {"alice": ["w", "n"]},
        "groups": {"generatedv2-cd-jenkinsci_delphix-plugin": ["w", "n"]},
    }

    group = json.loads((output_dir / "groups" / "generatedv2-cd-jenkinsci_delphix-plugin.json").read_text())
    assert group["description"] == "CD group with permissions to deploy from jenkinsci/delphix-plugin"

    assert json.loads((output_dir / "cd.index.json").read_text()) == ["jenkinsci/delphix-plugin"]
    assert json.loads((output_dir / "github.index.json").read_text()) == {
        "jenkinsci/delphix-plugin": ["org/jenkins-ci/plugins/delphix"]
    }
    assert json.loads((output_dir / "maintainers.index.json").read_text()) == {
        "org.jenkins-ci.plugins:delphix": ["alice"]
    }
    assert json.loads((output_dir / "issues.index.json").read_text())["delphix"][0]["type"] == "github"


def test_json_is_indented_with_four_spaces(state, tmp_path: Path) -> None:
    output_dir = tmp_path / "json"

    PayloadWriter(output_dir).write(state)

    text = (output_dir / "groups" / "generatedv2-cd-jenkinsci_delphix-plugin.json").read_text()
    assert text.splitlines()[1].startswith('    "name"')


def test_existing_output_directory_is_fatal(state, tmp_path: Path) -> None:
    output_dir = tmp_path / "json"
    output_dir.mkdir()

    with pytest.raises(OutputDirectoryError, match="Target directory exists"):
        PayloadWriter(output_dir).write(state)


def test_output_is_byte_identical_across_runs(state, tmp_path: Path) -> None:
    PayloadWriter(tmp_path / "first").write(state)
    PayloadWriter(tmp_path / "second").write(state)

    first = {path.relative_to(tmp_path / "first"): path.read_bytes() for path in (tmp_path / "first").rglob("*.json")}
    second = {path.relative_to(tmp_path / "second"): path.read_bytes() for path in (tmp_path / "second").rglob("*.json")}
    assert first == second
    assert len(first) == 6


def test_payload_directories_exist_without_payloads(tmp_path: Path) -> None:
    output_dir = tmp_path / "json"

    PayloadWriter(output_dir).write(DesiredState())

    assert list((output_dir / "groups").iterdir()) == []
    assert list((output_dir / "permissions").iterdir()) == []
    assert json.loads((output_dir / "cd.index.json").read_text(encoding="utf-8")) == []
