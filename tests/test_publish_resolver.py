"""Tests for publish folder resolution and caching"""

import pytest

from package_deployer.api.exceptions import PublishFolderError
from package_deployer.core.publish_resolver import PublishFolderResolver
from package_deployer.services.config_store import ConfigStore

from conftest import FakePrompter


def test_first_resolve_asks_and_persists(session, config_path, tmp_path):
    target = tmp_path / "out" / "core"
    prompter = FakePrompter(folders=[str(target)])
    resolver = PublishFolderResolver(session, prompter)

    folder = resolver.resolve("acme/widget", "main", "Core")

    assert folder == target
    assert folder.is_dir()
    assert prompter.ask_calls == 1
    assert prompter.confirm_calls == 0

    saved = ConfigStore().load(config_path)
    assert saved.find_project("acme/widget", "main", "Core").publish_folder == str(target)


def test_accepted_cache_is_returned_without_asking(session, tmp_path):
    target = tmp_path / "out" / "core"
    prompter = FakePrompter(folders=[str(target)])
    resolver = PublishFolderResolver(session, prompter)
    resolver.resolve("acme/widget", "main", "Core")

    again = resolver.resolve("acme/widget", "main", "Core")

    assert again == target
    assert prompter.ask_calls == 1
    assert prompter.confirm_calls == 1
    assert not session.is_dirty


def test_rejected_cache_is_overwritten(session, tmp_path):
    first, second = tmp_path / "first", tmp_path / "second"
    prompter = FakePrompter(folders=[str(first), str(second)], accept_cached=False)
    resolver = PublishFolderResolver(session, prompter)
    resolver.resolve("acme/widget", "main", "Core")

    folder = resolver.resolve("acme/widget", "main", "Core")

    assert folder == second
    assert session.tree.find_project("acme/widget", "main", "Core").publish_folder == str(second)


def test_other_branch_does_not_share_the_folder(session, tmp_path):
    prompter = FakePrompter(folders=[str(tmp_path / "main"), str(tmp_path / "dev")])
    resolver = PublishFolderResolver(session, prompter)

    main = resolver.resolve("acme/widget", "main", "Core")
    dev = resolver.resolve("acme/widget", "dev", "Core")

    assert main != dev
    assert prompter.confirm_calls == 0
    assert prompter.ask_calls == 2


def test_other_repository_does_not_share_the_folder(session, tmp_path):
    prompter = FakePrompter(folders=[str(tmp_path / "widget"), str(tmp_path / "gadget")])
    resolver = PublishFolderResolver(session, prompter)

    resolver.resolve("acme/widget", "main", "Core")
    resolver.resolve("acme/gadget", "main", "Core")

    tree = session.tree
    assert tree.find_project("acme/widget", "main", "Core").publish_folder == str(tmp_path / "widget")
    assert tree.find_project("acme/gadget", "main", "Core").publish_folder == str(tmp_path / "gadget")


@pytest.mark.parametrize("answer", ["", "   "])
def test_empty_answer_is_rejected(session, answer):
    resolver = PublishFolderResolver(session, FakePrompter(folders=[answer]))
    with pytest.raises(PublishFolderError):
        resolver.resolve("acme/widget", "main", "Core")
    assert session.tree.find_project("acme/widget", "main", "Core") is None


def test_uncreatable_folder_is_reported(session, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a directory")
    resolver = PublishFolderResolver(session, FakePrompter(folders=[str(blocker / "sub")]))

    with pytest.raises(PublishFolderError):
        resolver.resolve("acme/widget", "main", "Core")


def test_lookup_reports_cached_folder(session):
    session.tree.ensure_chain("acme/widget", "main", "Core").publish_folder = "/srv/core"
    resolver = PublishFolderResolver(session, FakePrompter())

    assert resolver.lookup("acme/widget", "main", "Core").needs_confirmation
    assert not resolver.lookup("acme/widget", "dev", "Core").needs_confirmation


def test_forget_clears_cached_folder(session, tmp_path):
    prompter = FakePrompter(folders=[str(tmp_path / "a"), str(tmp_path / "b")])
    resolver = PublishFolderResolver(session, prompter)
    resolver.resolve("acme/widget", "main", "Core")

    assert resolver.forget("acme/widget", "main", "Core")
    assert not resolver.forget("acme/widget", "main", "Core")

    resolver.resolve("acme/widget", "main", "Core")
    assert prompter.confirm_calls == 0
    assert prompter.ask_calls == 2
