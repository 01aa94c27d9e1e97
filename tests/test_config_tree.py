"""Tests for the configuration tree model"""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from package_deployer.api.exceptions import ValidationError
from package_deployer.constants import ENV_WORKSPACE
from package_deployer.models.config_tree import (
    NEVER_USED,
    Branch,
    ConfigTree,
    DeploySettings,
    Project,
    Repository,
    most_recent_first,
    validate_repository_name,
)


@pytest.mark.parametrize("name", ["acme/widget", " acme/widget ", "a-b/c.d_e"])
def test_valid_repository_names(name):
    assert validate_repository_name(name) == name.strip()


@pytest.mark.parametrize("name", ["", "acme", "acme/", "/widget", "acme/wid get", "a/b/c"])
def test_invalid_repository_names(name):
    with pytest.raises(ValidationError):
        validate_repository_name(name)


def test_add_repository_is_idempotent():
    tree = ConfigTree()
    first = tree.add_repository("acme/widget", "t1")
    second = tree.add_repository("acme/widget")

    assert first is second
    assert second.token == "t1"
    assert list(tree.repositories) == ["acme/widget"]


def test_add_repository_replaces_token():
    tree = ConfigTree()
    tree.add_repository("acme/widget", "old")
    assert tree.add_repository("acme/widget", "new").token == "new"


def test_repository_owner_and_repo():
    repository = Repository(name="acme/widget")
    assert repository.owner == "acme"
    assert repository.repo == "widget"


def test_find_project_needs_full_triple():
    tree = ConfigTree()
    tree.ensure_chain("acme/widget", "main", "Core").publish_folder = "/out/main"

    assert tree.find_project("acme/widget", "main", "Core").publish_folder == "/out/main"
    assert tree.find_project("acme/widget", "dev", "Core") is None
    assert tree.find_project("acme/gadget", "main", "Core") is None


def test_ensure_chain_reuses_existing_entities():
    tree = ConfigTree()
    project = tree.ensure_chain("acme/widget", "main", "Core")
    assert tree.ensure_chain("acme/widget", "main", "Core") is project
    assert len(tree.repositories["acme/widget"].branches["main"].projects) == 1


def test_touch_never_moves_backwards():
    project = Project(name="Core")
    later = datetime(2024, 5, 1, 12, 0)
    project.touch(later)
    project.touch(later - timedelta(days=1))
    assert project.last_used == later


def test_most_recent_first_breaks_ties_by_name():
    now = datetime(2024, 5, 1)
    branches = [Branch(name="b"), Branch(name="a"), Branch(name="c", last_used=now)]
    assert [b.name for b in most_recent_first(branches)] == ["c", "a", "b"]


def test_tree_round_trip_keeps_ids_and_folders():
    tree = ConfigTree()
    repository = tree.add_repository("acme/widget", "secret")
    branch = repository.add_branch("main")
    branch.latest_commit = "abc123"
    project = branch.add_project("Core")
    project.publish_folder = "/srv/core"
    project.touch(datetime(2024, 1, 2, 3, 4, 5))

    restored = ConfigTree.from_dict(tree.to_dict())
    restored_project = restored.find_project("acme/widget", "main", "Core")

    assert restored.repositories["acme/widget"].token == "secret"
    assert restored.repositories["acme/widget"].branches["main"].latest_commit == "abc123"
    assert restored_project.id == project.id
    assert restored_project.publish_folder == "/srv/core"
    assert restored_project.last_used == datetime(2024, 1, 2, 3, 4, 5)


def test_never_used_timestamp_survives_serialization():
    data = Project(name="Core").to_dict()
    assert Project.from_dict(data).last_used == NEVER_USED


def test_duplicate_repositories_are_merged_on_load():
    data = {
        "repositories": [
            {"name": "acme/widget", "branches": [
                {"name": "main", "projects": [{"name": "Core", "publish_folder": "/a"}]},
            ]},
            {"name": "acme/widget", "token": "t", "branches": [
                {"name": "main", "projects": [{"name": "Core", "publish_folder": "/b"},
                                              {"name": "Cli"}]},
                {"name": "dev"},
            ]},
        ]
    }
    tree = ConfigTree.from_dict(data)
    repository = tree.repositories["acme/widget"]

    assert repository.token == "t"
    assert set(repository.branches) == {"main", "dev"}
    assert set(repository.branches["main"].projects) == {"Core", "Cli"}
    # The first record wins for entries present in both
    assert repository.branches["main"].projects["Core"].publish_folder == "/a"


def test_working_copy_is_per_branch(tmp_path):
    settings = DeploySettings(workspace=str(tmp_path))
    repository = Repository(name="acme/widget")

    main = settings.get_working_copy(repository, "main")
    feature = settings.get_working_copy(repository, "feature/login")

    assert main == tmp_path / "acme" / "widget" / "main"
    assert feature.parent == main.parent
    assert feature.name == "feature%2Flogin"


def test_workspace_environment_override(tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_WORKSPACE, str(tmp_path / "elsewhere"))
    assert DeploySettings().get_workspace() == Path(tmp_path / "elsewhere")


def test_output_subdir_template():
    settings = DeploySettings(configuration="Release", framework="net8.0")
    assert settings.get_output_subdir() == "bin/Release/net8.0"


def test_set_value_converts_types():
    settings = DeploySettings()
    settings.set_value("use_publish", "yes")
    settings.set_value("max_remote_commits", "25")
    settings.set_value("configuration", "Release")

    assert settings.use_publish is True
    assert settings.max_remote_commits == 25
    assert settings.configuration == "Release"


@pytest.mark.parametrize("key,value", [
    ("unknown", "x"),
    ("use_publish", "maybe"),
    ("max_remote_commits", "many"),
    ("output_subdir", "bin/{config}"),
    ("output_subdir", "bin/{0}"),
    ("output_subdir", "bin/{configuration"),
])
def test_set_value_rejects_bad_input(key, value):
    with pytest.raises(ValidationError):
        DeploySettings().set_value(key, value)


def test_rejected_output_subdir_keeps_previous_value():
    settings = DeploySettings()
    with pytest.raises(ValidationError):
        settings.set_value("output_subdir", "bin/{config}")
    assert settings.output_subdir == DeploySettings().output_subdir


def test_broken_output_subdir_from_file_is_a_validation_error():
    settings = DeploySettings(output_subdir="bin/{config}")
    with pytest.raises(ValidationError):
        settings.get_output_subdir()
