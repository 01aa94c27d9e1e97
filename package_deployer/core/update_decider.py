"""Clone / update / no-op decision for a local working copy"""

import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..api.exceptions import VcsError
from ..services.base import ExitStatus, VcsAdapter
from ..utils.file_utils import is_empty_dir

logger = logging.getLogger(__name__)


class UpdateAction(Enum):
    """What has to happen to bring a working copy up to date"""
    CLONE = "clone"
    UPDATE = "update"
    NOOP = "noop"


class UpdateState(Enum):
    """States of one decide/apply invocation"""
    START = "start"
    CLONE_IN_PROGRESS = "clone_in_progress"
    COMMIT_DIFF_CHECK = "commit_diff_check"
    UPDATE_IN_PROGRESS = "update_in_progress"
    IDLE = "idle"


ALLOWED_TRANSITIONS: Dict[UpdateState, Set[UpdateState]] = {
    UpdateState.START: {UpdateState.CLONE_IN_PROGRESS, UpdateState.COMMIT_DIFF_CHECK},
    UpdateState.CLONE_IN_PROGRESS: {UpdateState.IDLE, UpdateState.START},
    UpdateState.COMMIT_DIFF_CHECK: {
        UpdateState.UPDATE_IN_PROGRESS, UpdateState.IDLE, UpdateState.START
    },
    UpdateState.UPDATE_IN_PROGRESS: {UpdateState.IDLE, UpdateState.START},
    UpdateState.IDLE: {UpdateState.START},
}


def _not_a_repository(message: str, local_path: Path) -> str:
    """Point at a working copy directory that git does not manage"""
    if (local_path / ".git").exists():
        return message
    return f"{message}; {local_path} is not a git working copy, delete it to clone again"


class UpdateDecider:
    """Decide between clone, incremental update and no-op by diffing commit sets

    The decider is a small state machine; every transition is checked
    against ALLOWED_TRANSITIONS and recorded in ``history``. A failure in
    any state returns it to START and raises VcsError. Nothing is retried.
    """

    def __init__(self, vcs: VcsAdapter):
        self.vcs = vcs
        self.state = UpdateState.START
        self.history: List[Tuple[UpdateState, UpdateState]] = []

    def _transition(self, new_state: UpdateState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Illegal update state transition {self.state.value} -> {new_state.value}"
            )
        self.history.append((self.state, new_state))
        logger.debug(f"Update state {self.state.value} -> {new_state.value}")
        self.state = new_state

    def _fail(self, message: str, errors: Optional[List[str]] = None) -> VcsError:
        if self.state != UpdateState.START:
            self._transition(UpdateState.START)
        return VcsError(message, errors)

    def reset(self) -> None:
        """Return to START before a new invocation"""
        if self.state != UpdateState.START:
            self._transition(UpdateState.START)

    def decide(self,
               local_path: Path,
               remote_commits: Sequence[str],
               branch_name: str) -> UpdateAction:
        """
        Decide what must happen to the working copy

        Args:
            local_path: Working copy location
            remote_commits: Commit ids of the remote branch
            branch_name: Branch to compare

        Returns:
            CLONE when the working copy is missing or empty, UPDATE when the
            remote has commits the local branch lacks, NOOP otherwise

        Raises:
            VcsError: If the local commit log cannot be read
        """
        self.reset()
        local_path = Path(local_path)

        if is_empty_dir(local_path):
            self._transition(UpdateState.CLONE_IN_PROGRESS)
            logger.info(f"No working copy at {local_path}, clone required")
            return UpdateAction.CLONE

        self._transition(UpdateState.COMMIT_DIFF_CHECK)
        try:
            local_commits = self.vcs.local_commit_log(local_path, branch_name)
        except VcsError as e:
            raise self._fail(_not_a_repository("Could not read local commit log", local_path),
                             e.errors or [str(e)])
        except OSError as e:
            raise self._fail(_not_a_repository("Could not read local commit log", local_path),
                             [str(e)])

        missing = set(remote_commits) - set(local_commits)
        if missing:
            self._transition(UpdateState.UPDATE_IN_PROGRESS)
            logger.info(f"{len(missing)} new commit(s) on {branch_name}, update required")
            return UpdateAction.UPDATE

        self._transition(UpdateState.IDLE)
        logger.info(f"Working copy of {branch_name} is up to date")
        return UpdateAction.NOOP

    def apply(self,
              action: UpdateAction,
              owner: str,
              repo: str,
              branch_name: str,
              local_path: Path,
              token: Optional[str] = None) -> None:
        """
        Execute a decided action against the working copy

        Raises:
            VcsError: If any git step exits non-zero or cannot be started
        """
        local_path = Path(local_path)

        if action == UpdateAction.NOOP:
            return

        if action == UpdateAction.CLONE:
            self._expect(UpdateState.CLONE_IN_PROGRESS)
            if local_path.exists():
                # Only empty subdirectories are left here
                shutil.rmtree(local_path)
            local_path.mkdir(parents=True, exist_ok=True)
            self._step("clone", lambda: self.vcs.clone(owner, repo, branch_name, local_path, token))
        else:
            self._expect(UpdateState.UPDATE_IN_PROGRESS)
            self._step("fetch", lambda: self.vcs.fetch_all(local_path), local_path)
            self._step("checkout", lambda: self.vcs.checkout(local_path, branch_name), local_path)
            self._step("pull", lambda: self.vcs.pull(local_path, branch_name), local_path)

        self._transition(UpdateState.IDLE)

    def run(self,
            owner: str,
            repo: str,
            branch_name: str,
            local_path: Path,
            remote_commits: Sequence[str],
            token: Optional[str] = None) -> UpdateAction:
        """Decide and apply in one go; returns the action taken"""
        action = self.decide(local_path, remote_commits, branch_name)
        self.apply(action, owner, repo, branch_name, local_path, token)
        return action

    def _expect(self, state: UpdateState) -> None:
        if self.state != state:
            raise RuntimeError(
                f"Cannot apply action from state {self.state.value}, expected {state.value}"
            )

    def _step(self, name: str, operation,
              local_path: Optional[Path] = None) -> ExitStatus:
        try:
            status = operation()
        except OSError as e:
            raise self._fail(f"git {name} could not be started", [str(e)])
        if not status.ok:
            message = f"git {name} failed with exit code {status.returncode}"
            if local_path is not None:
                message = _not_a_repository(message, local_path)
            raise self._fail(message, status.error_lines())
        return status
