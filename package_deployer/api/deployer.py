"""Deployer API: one repository-processing session at a time"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol

from ..constants import ErrorCode, MSG_DEPLOY_SUCCESS, PUBLISH_STAGING_DIR
from ..core.branch_reconciler import BranchReconciler
from ..core.project_discovery import discover_projects
from ..core.project_reconciler import ProjectReconciler
from ..core.publish_resolver import FolderPrompter, PublishFolderResolver
from ..core.session import DeploySession
from ..core.update_decider import UpdateDecider
from ..models.config_tree import Branch, Repository
from ..models.result import OperationStatus, SessionResult
from ..services.base import BuildRunner, ExitStatus, VcsAdapter
from ..services.build_runner import Copier, DotnetBuildRunner
from ..services.config_store import ConfigStore, default_config_path
from ..services.vcs_adapter import GitVcsAdapter
from .exceptions import (
    BranchNotFoundError,
    BuildError,
    DeployerError,
    ProjectNotFoundError,
    RepositoryNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class Selector(FolderPrompter, Protocol):
    """Interaction needed for a full deploy session"""

    def select_branch(self, repository: Repository) -> str:
        ...

    def select_project(self, branch: Branch) -> str:
        ...


class Deployer:
    """Fetch latest source, build, and copy output to the publish folder"""

    def __init__(self,
                 session: DeploySession,
                 vcs: VcsAdapter,
                 build_runner: BuildRunner,
                 prompter: Optional[Selector] = None,
                 copier: Optional[Copier] = None,
                 on_step: Optional[Callable[[str], None]] = None):
        """
        Initialize deployer

        Args:
            session: Session owning the configuration tree
            vcs: Version control adapter
            build_runner: Build tool adapter
            prompter: Interaction for selections and folder confirmation
            copier: Build output copier
            on_step: Called with a short description before each step
        """
        self.session = session
        self.vcs = vcs
        self.build_runner = build_runner
        self.prompter = prompter
        self.copier = copier or Copier()
        self.on_step = on_step
        self.branch_reconciler = BranchReconciler()
        self.project_reconciler = ProjectReconciler()
        self.decider = UpdateDecider(vcs)

    @property
    def tree(self):
        return self.session.tree

    @property
    def settings(self):
        return self.session.tree.settings

    def with_session(self, session: DeploySession) -> 'Deployer':
        """Same collaborators, different session"""
        return Deployer(session, self.vcs, self.build_runner, self.prompter,
                        self.copier, self.on_step)

    # Repository registry

    def register_repository(self, name: str, token: Optional[str] = None,
                            save: bool = True) -> Repository:
        """
        Register a repository

        Args:
            name: ``owner/name`` reference
            token: Access token
            save: Persist immediately

        Returns:
            The (possibly pre-existing) repository entry

        Raises:
            ValidationError: If the name is not ``owner/name``
        """
        repository = self.tree.add_repository(name, token)
        if save:
            self.session.checkpoint()
        return repository

    def remove_repository(self, name: str) -> bool:
        if not self.tree.remove_repository(name):
            return False
        self.session.checkpoint()
        return True

    def forget_publish_folder(self, repo_name: str, branch_name: str, project_name: str) -> bool:
        resolver = PublishFolderResolver(self.session, self.prompter)
        return resolver.forget(repo_name, branch_name, project_name)

    # Sessions

    def deploy(self,
               repo_name: str,
               branch_name: Optional[str] = None,
               project_name: Optional[str] = None) -> SessionResult:
        """
        Run a full session: sync, update, build and copy one project

        Args:
            repo_name: Registered repository
            branch_name: Branch to deploy (asked when omitted)
            project_name: Project to deploy (asked when omitted)

        Returns:
            SessionResult; failures are reported there, never raised
        """
        return self._run_session(
            repo_name,
            lambda result: self._deploy(result, branch_name, project_name),
        )

    def sync_repository(self, repo_name: str, branch_name: Optional[str] = None) -> SessionResult:
        """
        Reconcile branches, and when a branch is given also update its
        working copy and reconcile its projects. Nothing is built.
        """
        def operation(result: SessionResult) -> None:
            repository = self._sync_branches(result)
            if branch_name:
                branch = self._pick_branch(repository, branch_name)
                self._update_and_discover(result, repository, branch)
            result.message = f"Synchronized {repository.name}"

        return self._run_session(repo_name, operation)

    def _run_session(self, repo_name: str,
                     operation: Callable[[SessionResult], None]) -> SessionResult:
        result = SessionResult(status=OperationStatus.IN_PROGRESS, repository=repo_name)
        try:
            operation(result)
            result.complete(OperationStatus.SUCCESS)
        except DeployerError as e:
            self._fail(result, e.error_code or ErrorCode.UNEXPECTED_ERROR, str(e))
        except OSError as e:
            self._fail(result, ErrorCode.IO_ERROR, str(e))
        except Exception as e:
            logger.debug("Unexpected session failure", exc_info=True)
            self._fail(result, ErrorCode.UNEXPECTED_ERROR, f"Unexpected error: {e!r}")
        return result

    def _fail(self, result: SessionResult, code: str, message: str) -> None:
        self.session.rollback()
        result.add_error(code, message)
        result.complete(OperationStatus.FAILED)
        logger.error(f"{result.repository}: {message}")

    def _deploy(self, result: SessionResult,
                branch_name: Optional[str],
                project_name: Optional[str]) -> None:
        repository = self._sync_branches(result)
        branch = self._pick_branch(repository, branch_name)
        projects = self._update_and_discover(result, repository, branch)

        project = self._pick_project(branch, project_name)
        result.project = project.name
        project.touch()

        resolver = PublishFolderResolver(self.session, self.prompter)
        folder = resolver.resolve(repository.name, branch.name, project.name)
        result.publish_folder = folder

        self._build_and_copy(projects[project.name], folder)

        self.session.checkpoint()
        result.message = MSG_DEPLOY_SUCCESS.format(project=project.name, folder=folder)

    # Steps

    def _step(self, description: str) -> None:
        logger.info(description)
        if self.on_step:
            self.on_step(description)

    def _repository(self, result: SessionResult) -> Repository:
        repository = self.tree.get_repository(result.repository)
        if repository is None:
            raise RepositoryNotFoundError(result.repository)
        return repository

    def _sync_branches(self, result: SessionResult) -> Repository:
        repository = self._repository(result)
        self._step(f"Listing branches of {repository.name}")
        names = self.vcs.list_remote_branches(repository.owner, repository.repo, repository.token)

        report = self.branch_reconciler.synchronize(repository, names)
        result.branches_added = report.added
        result.branches_removed = report.removed
        self.session.checkpoint()
        return repository

    def _pick_branch(self, repository: Repository, branch_name: Optional[str]) -> Branch:
        if not repository.branches:
            raise ValidationError(f"Repository {repository.name} has no branches")
        if branch_name is None:
            if self.prompter is None:
                raise ValidationError("A branch name is required")
            branch_name = self.prompter.select_branch(repository)

        branch = repository.get_branch(branch_name)
        if branch is None:
            raise BranchNotFoundError(repository.name, branch_name)

        now = datetime.now()
        repository.touch(now)
        branch.touch(now)
        return branch

    def _update_and_discover(self, result: SessionResult,
                             repository: Repository, branch: Branch) -> Dict[str, Path]:
        result.branch = branch.name
        remote_commits = self.vcs.list_remote_commits(
            repository.owner, repository.repo, repository.token, branch.name
        )

        local_path = self.settings.get_working_copy(repository, branch.name)
        self._step(f"Updating working copy {local_path}")
        action = self.decider.run(
            repository.owner, repository.repo, branch.name,
            local_path, remote_commits, repository.token,
        )
        result.update_action = action.value
        if remote_commits:
            branch.latest_commit = remote_commits[0]

        projects = discover_projects(local_path, self.settings.descriptor_extension)
        report = self.project_reconciler.synchronize(branch, projects.keys())
        result.projects_added = report.added
        result.projects_removed = report.removed
        self.session.checkpoint()
        return projects

    def _pick_project(self, branch: Branch, project_name: Optional[str]):
        if not branch.projects:
            raise ValidationError(f"No buildable projects found on branch '{branch.name}'")
        if project_name is None:
            if self.prompter is None:
                raise ValidationError("A project name is required")
            project_name = self.prompter.select_project(branch)

        project = branch.get_project(project_name)
        if project is None:
            raise ProjectNotFoundError(branch.name, project_name)
        return project

    def _build_and_copy(self, project_dir: Path, folder: Path) -> None:
        configuration = self.settings.configuration

        self._step(f"Building {project_dir.name} ({configuration})")
        self._check(self.build_runner.build(project_dir, configuration), "Build")

        if self.settings.use_publish:
            source = project_dir / "bin" / configuration / PUBLISH_STAGING_DIR
            self._step(f"Publishing {project_dir.name} to {source}")
            self._check(self.build_runner.publish(project_dir, configuration, source), "Publish")
        else:
            source = project_dir / self.settings.get_output_subdir()

        self._step(f"Copying {source} to {folder}")
        self.copier.copy_tree(source, folder)

    @staticmethod
    def _check(status: ExitStatus, step: str) -> None:
        if not status.ok:
            details: List[str] = status.error_lines()
            message = f"{step} failed with exit code {status.returncode}"
            if details:
                message = f"{message}: {'; '.join(details)}"
            raise BuildError(message)


def build_deployer(config_path: Optional[str] = None,
                   prompter: Optional[Selector] = None,
                   on_line: Optional[Callable[[str], None]] = None,
                   on_step: Optional[Callable[[str], None]] = None) -> Deployer:
    """
    Create a Deployer wired to git, GitHub and dotnet from the saved settings

    Args:
        config_path: Configuration file (environment or default when omitted)
        prompter: Interaction; non-interactive use requires explicit names
        on_line: Receives build tool output lines
        on_step: Receives step descriptions

    Returns:
        Deployer instance
    """
    session = DeploySession.open(ConfigStore(), default_config_path(config_path))
    settings = session.tree.settings
    vcs = GitVcsAdapter(
        api_url=settings.github_api_url,
        host=settings.github_host,
        max_remote_commits=settings.max_remote_commits,
    )
    runner = DotnetBuildRunner(settings.build_tool, on_line=on_line)
    return Deployer(session, vcs, runner, prompter=prompter, on_step=on_step)


def deploy(repository: str,
           branch: str,
           project: str,
           config_path: Optional[str] = None,
           prompter: Optional[Selector] = None) -> SessionResult:
    """
    Deploy one project of a registered repository

    This is a convenience function that creates a Deployer instance
    and runs a single session.

    Args:
        repository: Registered ``owner/name``
        branch: Branch name
        project: Project name
        config_path: Configuration file
        prompter: Needed when the publish folder is not cached yet

    Returns:
        SessionResult
    """
    deployer = build_deployer(config_path, prompter=prompter)
    return deployer.deploy(repository, branch, project)
