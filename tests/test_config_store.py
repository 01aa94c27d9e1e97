"""Tests for YAML persistence of the configuration tree"""

import pytest
import yaml

from package_deployer.api.exceptions import ConfigError
from package_deployer.constants import ENV_CONFIG_PATH
from package_deployer.models.config_tree import ConfigTree
from package_deployer.services.config_store import default_config_path


def test_missing_file_gives_empty_tree(store, tmp_path):
    tree = store.load(tmp_path / "nope.yaml")
    assert tree.repositories == {}


@pytest.mark.parametrize("content", [
    "repositories: [unclosed",
    "repositories:\n  - name: not-a-pair\n",
    "settings:\n  max_remote_commits: 0\n",
    "- just\n- a list\n",
])
def test_malformed_file_gives_empty_tree(store, tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)
    assert store.load(path).repositories == {}


def test_undecodable_file_gives_empty_tree(store, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_bytes(b"repositories:\n  - name: acme/\xff\xfewidget\n")
    assert store.load(path).repositories == {}


def test_parse_reports_schema_location(store):
    with pytest.raises(ConfigError) as exc_info:
        store.parse("repositories:\n  - name: acme/widget\n    branches: nope\n")
    assert "repositories/0/branches" in str(exc_info.value)


def test_empty_document_is_empty_tree(store):
    assert store.parse("").repositories == {}


def test_save_then_load(store, tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    tree = ConfigTree()
    tree.ensure_chain("acme/widget", "main", "Core").publish_folder = "/srv/core"
    tree.settings.configuration = "Release"

    store.save(path, tree)
    loaded = store.load(path)

    assert loaded.settings.configuration == "Release"
    assert loaded.find_project("acme/widget", "main", "Core").publish_folder == "/srv/core"


def test_saved_layout_nests_lists(store, tmp_path):
    path = tmp_path / "config.yaml"
    tree = ConfigTree()
    tree.ensure_chain("acme/widget", "main", "Core")
    store.save(path, tree)

    data = yaml.safe_load(path.read_text())
    repository = data["repositories"][0]
    assert repository["name"] == "acme/widget"
    assert repository["branches"][0]["name"] == "main"
    assert repository["branches"][0]["projects"][0]["name"] == "Core"


def test_save_keeps_backup(store, tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("broken: [")

    store.save(path, ConfigTree())

    assert (tmp_path / "config.yaml.bak").read_text() == "broken: ["
    assert yaml.safe_load(path.read_text())["repositories"] == []


def test_unquoted_timestamps_are_accepted(store):
    tree = store.parse(
        "repositories:\n"
        "  - name: acme/widget\n"
        "    last_used: 2024-02-03 04:05:06\n"
    )
    assert tree.repositories["acme/widget"].last_used.year == 2024


@pytest.mark.parametrize("stamp", ["2024-01-01T00:00:00Z", "\"2024-01-01T00:00:00+02:00\""])
def test_zoned_timestamps_become_local_time(store, stamp):
    tree = store.parse(
        "repositories:\n"
        "  - name: acme/widget\n"
        f"    last_used: {stamp}\n"
    )
    repository = tree.repositories["acme/widget"]
    assert repository.last_used.tzinfo is None

    repository.touch()
    tree.add_repository("acme/other")
    assert [r.name for r in tree.sorted_repositories()] == ["acme/widget", "acme/other"]


def test_environment_variables_are_expanded(store, monkeypatch):
    monkeypatch.setenv("WIDGET_TOKEN", "secret")
    tree = store.parse("repositories:\n  - name: acme/widget\n    token: $WIDGET_TOKEN\n")
    assert tree.repositories["acme/widget"].token == "secret"


def test_default_config_path_precedence(tmp_path, monkeypatch):
    monkeypatch.setenv(ENV_CONFIG_PATH, str(tmp_path / "env.yaml"))
    assert default_config_path(str(tmp_path / "cli.yaml")) == tmp_path / "cli.yaml"
    assert default_config_path() == tmp_path / "env.yaml"

    monkeypatch.delenv(ENV_CONFIG_PATH)
    assert default_config_path().name == "config.yaml"
