"""Tests for the rich console prompter"""

import io
from datetime import datetime

import pytest
from rich.console import Console

from package_deployer.api.exceptions import UserCancelledError
from package_deployer.models.config_tree import Branch, Repository
from package_deployer.services import prompter as prompter_module
from package_deployer.services.prompter import ConsolePrompter, format_last_used


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120)


def scripted(monkeypatch, target, answers):
    answers = list(answers)
    monkeypatch.setattr(target, "ask", lambda *args, **kwargs: answers.pop(0))


def test_select_branch_lists_most_recent_first(monkeypatch, console):
    repository = Repository(name="acme/widget")
    repository.add_branch("main")
    repository.add_branch("dev").touch(datetime(2024, 1, 1))
    scripted(monkeypatch, prompter_module.Prompt, ["1"])

    assert ConsolePrompter(console).select_branch(repository) == "dev"


def test_select_project(monkeypatch, console):
    branch = Branch(name="main")
    branch.add_project("Cli")
    branch.add_project("Core")
    scripted(monkeypatch, prompter_module.Prompt, ["2"])

    assert ConsolePrompter(console).select_project(branch) == "Core"


def test_select_from_nothing_is_cancelled(console):
    with pytest.raises(UserCancelledError):
        ConsolePrompter(console).select("Pick", [])


def test_accept_cached_skips_question(monkeypatch, console):
    def fail(*args, **kwargs):
        raise AssertionError("should not ask")

    monkeypatch.setattr(prompter_module.Confirm, "ask", fail)
    prompter = ConsolePrompter(console, accept_cached=True)

    assert prompter.confirm_cached_folder("acme/widget", "main", "Core", "/srv/core")
    assert "/srv/core" in console.file.getvalue()


def test_publish_folder_is_asked_until_not_blank(monkeypatch, console):
    scripted(monkeypatch, prompter_module.Prompt, ["  ", " /srv/core "])
    prompter = ConsolePrompter(console)
    assert prompter.ask_publish_folder("acme/widget", "main", "Core") == "/srv/core"


def test_repository_name_is_asked_until_valid(monkeypatch, console):
    scripted(monkeypatch, prompter_module.Prompt, ["widget", "acme/widget"])
    assert ConsolePrompter(console).ask_repository_name() == "acme/widget"


def test_format_last_used():
    assert format_last_used(Branch(name="main")) == "never"
    used = Branch(name="main", last_used=datetime(2024, 2, 3, 4, 5))
    assert format_last_used(used) == "2024-02-03 04:05"
