# package_deployer/services/base.py
"""Abstract interfaces for the external collaborators"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..constants import GIT_FATAL_MARKER


@dataclass
class ExitStatus:
    """Terminal status of an external command"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def fatal_lines(self) -> List[str]:
        """Lines of stderr reported as fatal by the tool"""
        return [
            line.strip() for line in self.stderr.splitlines()
            if GIT_FATAL_MARKER in line
        ]

    def error_lines(self) -> List[str]:
        """Fatal lines if any, otherwise the last non-empty stderr line"""
        fatal = self.fatal_lines()
        if fatal:
            return fatal
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        return lines[-1:]


class VcsAdapter(ABC):
    """Version control and remote hosting operations"""

    @abstractmethod
    def list_remote_branches(self, owner: str, repo: str, token: Optional[str]) -> List[str]:
        """
        List branch names of the remote repository

        Args:
            owner: Repository owner
            repo: Repository name
            token: Access token (may be None for public repositories)

        Returns:
            Branch names
        """
        pass

    @abstractmethod
    def list_remote_commits(self, owner: str, repo: str, token: Optional[str],
                            branch: str) -> List[str]:
        """
        List commit ids of a remote branch, newest first

        Args:
            owner: Repository owner
            repo: Repository name
            token: Access token
            branch: Branch name

        Returns:
            Commit ids
        """
        pass

    @abstractmethod
    def clone(self, owner: str, repo: str, branch: str, dest_path: Path,
              token: Optional[str] = None) -> ExitStatus:
        """Clone ``branch`` of the remote repository into ``dest_path``"""
        pass

    @abstractmethod
    def fetch_all(self, dest_path: Path) -> ExitStatus:
        """Fetch every remote of the working copy"""
        pass

    @abstractmethod
    def checkout(self, dest_path: Path, branch: str) -> ExitStatus:
        """Check out ``branch`` in the working copy"""
        pass

    @abstractmethod
    def pull(self, dest_path: Path, branch: str) -> ExitStatus:
        """Pull ``branch`` into the working copy"""
        pass

    @abstractmethod
    def local_commit_log(self, dest_path: Path, branch: str) -> List[str]:
        """
        Commit ids reachable from the local ``branch``, newest first

        A branch with no local ref yields an empty list.
        """
        pass


class BuildRunner(ABC):
    """Build and publish tool invocation"""

    @abstractmethod
    def build(self, project_path: Path, configuration: str) -> ExitStatus:
        """Build the project in ``project_path``"""
        pass

    @abstractmethod
    def publish(self, project_path: Path, configuration: str, output_dir: Path) -> ExitStatus:
        """Publish the project in ``project_path`` into ``output_dir``"""
        pass
