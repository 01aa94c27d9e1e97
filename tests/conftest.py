"""Shared fixtures and fake collaborators"""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from package_deployer.api.deployer import Deployer
from package_deployer.constants import ENV_CONFIG_PATH, ENV_WORKSPACE
from package_deployer.core.session import DeploySession
from package_deployer.models.config_tree import ConfigTree
from package_deployer.services.base import BuildRunner, ExitStatus, VcsAdapter
from package_deployer.services.config_store import ConfigStore


class FakeVcs(VcsAdapter):
    """In-memory remote; clone and pull write the branch files to disk"""

    def __init__(self):
        self.branches: Dict[str, List[str]] = {"main": ["c2", "c1"]}
        self.files: Dict[str, List[str]] = {
            "main": ["Widget.Core/Widget.Core.csproj", "Widget.Cli/Widget.Cli.csproj"],
        }
        self.local: Dict[Path, List[str]] = {}
        self.failures: Dict[str, ExitStatus] = {}
        self.calls: List[tuple] = []

    def set_branch(self, name: str, commits: List[str], files: Optional[List[str]] = None):
        self.branches[name] = commits
        if files is not None:
            self.files[name] = files

    def _checkout_files(self, dest: Path, branch: str) -> None:
        for rel in self.files.get(branch, []):
            path = dest / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("<Project />")
        self.local[dest] = list(self.branches.get(branch, []))

    def _result(self, name: str) -> ExitStatus:
        return self.failures.get(name, ExitStatus(0))

    def list_remote_branches(self, owner, repo, token):
        self.calls.append(("branches", owner, repo, token))
        return list(self.branches)

    def list_remote_commits(self, owner, repo, token, branch):
        self.calls.append(("commits", branch))
        return list(self.branches.get(branch, []))

    def clone(self, owner, repo, branch, dest_path, token=None):
        self.calls.append(("clone", branch, Path(dest_path)))
        status = self._result("clone")
        if status.ok:
            self._checkout_files(Path(dest_path), branch)
        return status

    def fetch_all(self, dest_path):
        self.calls.append(("fetch", Path(dest_path)))
        return self._result("fetch")

    def checkout(self, dest_path, branch):
        self.calls.append(("checkout", branch))
        return self._result("checkout")

    def pull(self, dest_path, branch):
        self.calls.append(("pull", branch))
        status = self._result("pull")
        if status.ok:
            self._checkout_files(Path(dest_path), branch)
        return status

    def local_commit_log(self, dest_path, branch):
        self.calls.append(("log", branch))
        return list(self.local.get(Path(dest_path), []))

    def names(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeBuildRunner(BuildRunner):
    """Writes a fake assembly where the real tool would put its output"""

    def __init__(self, framework: str = "netstandard2.0"):
        self.framework = framework
        self.builds: List[tuple] = []
        self.publishes: List[tuple] = []
        self.build_status = ExitStatus(0)

    def build(self, project_path, configuration):
        self.builds.append((Path(project_path), configuration))
        if self.build_status.ok:
            output = Path(project_path) / "bin" / configuration / self.framework
            output.mkdir(parents=True, exist_ok=True)
            (output / f"{Path(project_path).name}.dll").write_text("binary")
        return self.build_status

    def publish(self, project_path, configuration, output_dir):
        self.publishes.append((Path(project_path), configuration, Path(output_dir)))
        Path(output_dir).mkdir(parents=True, exist_ok=True)
        (Path(output_dir) / f"{Path(project_path).name}.dll").write_text("published")
        return ExitStatus(0)


class FakePrompter:
    """Scripted answers; counts how often each question was asked"""

    def __init__(self, folders: Optional[List[str]] = None, accept_cached: bool = True,
                 branch: str = "main", project: str = "Widget.Core"):
        self.folders = list(folders or [])
        self.accept_cached = accept_cached
        self.branch = branch
        self.project = project
        self.confirm_calls = 0
        self.ask_calls = 0

    def select_branch(self, repository):
        return self.branch

    def select_project(self, branch):
        return self.project

    def confirm_cached_folder(self, repo_name, branch_name, project_name, folder):
        self.confirm_calls += 1
        return self.accept_cached

    def ask_publish_folder(self, repo_name, branch_name, project_name, default=None):
        self.ask_calls += 1
        return self.folders.pop(0)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the real configuration and workspace out of reach"""
    monkeypatch.delenv(ENV_CONFIG_PATH, raising=False)
    monkeypatch.delenv(ENV_WORKSPACE, raising=False)


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "config.yaml"


@pytest.fixture
def store():
    return ConfigStore()


@pytest.fixture
def tree(tmp_path):
    tree = ConfigTree()
    tree.settings.workspace = str(tmp_path / "workspace")
    return tree


@pytest.fixture
def session(tree, store, config_path):
    return DeploySession(tree, store, config_path)


@pytest.fixture
def vcs():
    return FakeVcs()


@pytest.fixture
def build_runner():
    return FakeBuildRunner()


@pytest.fixture
def prompter(tmp_path):
    return FakePrompter(folders=[str(tmp_path / "out" / "first")])


@pytest.fixture
def deployer(session, vcs, build_runner, prompter):
    return Deployer(session, vcs, build_runner, prompter=prompter)
