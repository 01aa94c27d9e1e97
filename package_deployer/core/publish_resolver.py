"""Resolution and caching of publish folders per (repository, branch, project)"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from ..api.exceptions import PublishFolderError
from ..utils.file_utils import ensure_dir
from .session import DeploySession

logger = logging.getLogger(__name__)


class FolderPrompter(Protocol):
    """Interaction needed to resolve a publish folder"""

    def confirm_cached_folder(self, repo_name: str, branch_name: str,
                              project_name: str, folder: str) -> bool:
        ...

    def ask_publish_folder(self, repo_name: str, branch_name: str,
                           project_name: str, default: Optional[str] = None) -> str:
        ...


@dataclass
class FolderDecision:
    """Outcome of the cache lookup, before any interaction"""

    repo_name: str
    branch_name: str
    project_name: str
    cached_folder: Optional[str] = None

    @property
    def needs_confirmation(self) -> bool:
        """A cached folder exists and the user may confirm or override it"""
        return bool(self.cached_folder)


class PublishFolderResolver:
    """Resolve where build output of a project is copied to

    Lookups are scoped to the full (repository, branch, project) triple, so
    two branches, or two repositories, never share a cached destination.
    """

    def __init__(self, session: DeploySession, prompter: FolderPrompter):
        self.session = session
        self.prompter = prompter

    def lookup(self, repo_name: str, branch_name: str, project_name: str) -> FolderDecision:
        """Find the cached folder for the triple without asking anything"""
        project = self.session.tree.find_project(repo_name, branch_name, project_name)
        cached = project.publish_folder if project and project.has_publish_folder else None
        return FolderDecision(repo_name, branch_name, project_name, cached)

    def resolve(self, repo_name: str, branch_name: str, project_name: str) -> Path:
        """
        Return the publish folder for a project, asking the user when needed

        A cached folder is offered first; accepting it returns it unchanged.
        Rejecting it, or having none, asks for a new folder which is stored
        under the triple and persisted immediately.

        Returns:
            Existing directory

        Raises:
            PublishFolderError: Empty answer or folder cannot be created
        """
        decision = self.lookup(repo_name, branch_name, project_name)

        if decision.needs_confirmation:
            logger.info(
                f"Found publish folder for {repo_name} [{branch_name}] {project_name}: "
                f"{decision.cached_folder}"
            )
            if self.prompter.confirm_cached_folder(
                    repo_name, branch_name, project_name, decision.cached_folder):
                return self._materialize(decision.cached_folder)

        answer = self.prompter.ask_publish_folder(
            repo_name, branch_name, project_name, decision.cached_folder
        )
        folder = (answer or "").strip()
        if not folder:
            raise PublishFolderError("Publish folder must not be empty")

        resolved = self._materialize(folder)
        self.store(repo_name, branch_name, project_name, str(resolved))
        return resolved

    def store(self, repo_name: str, branch_name: str, project_name: str, folder: str) -> None:
        """Write a folder to the cache for the triple and persist"""
        project = self.session.tree.ensure_chain(repo_name, branch_name, project_name)
        project.publish_folder = folder
        self.session.checkpoint()
        logger.info(f"Saved publish folder for {repo_name} [{branch_name}] {project_name}: {folder}")

    def forget(self, repo_name: str, branch_name: str, project_name: str) -> bool:
        """Clear the cached folder for the triple; returns True if one was set"""
        project = self.session.tree.find_project(repo_name, branch_name, project_name)
        if project is None or not project.has_publish_folder:
            return False
        project.publish_folder = None
        self.session.checkpoint()
        return True

    def _materialize(self, folder: str) -> Path:
        try:
            return ensure_dir(folder)
        except OSError as e:
            raise PublishFolderError(f"Cannot create publish folder {folder}: {e}")
