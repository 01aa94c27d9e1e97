"""Git command line and GitHub REST API adapter"""

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests

from ..api.exceptions import RemoteApiError, VcsError
from ..constants import (
    DEFAULT_GITHUB_API_URL,
    DEFAULT_GITHUB_HOST,
    DEFAULT_MAX_REMOTE_COMMITS,
    GIT_WORKING_TREE_ERROR,
    GITHUB_PAGE_SIZE,
    GITHUB_TIMEOUT,
    GITHUB_USER_AGENT,
)
from ..utils.process_utils import run_command
from .base import ExitStatus, VcsAdapter

logger = logging.getLogger(__name__)

_CREDENTIALS_PATTERN = re.compile(r"(https?://)[^@/\s]+@")


def redact(text: str) -> str:
    """Hide credentials embedded in remote URLs"""
    return _CREDENTIALS_PATTERN.sub(r"\1***@", text)


def _field(items: List[Any], key: str) -> List[str]:
    """Pull one string field out of every API record"""
    try:
        return [str(item[key]) for item in items]
    except (KeyError, TypeError) as e:
        raise RemoteApiError(f"API record without '{key}': {e!r}")


class GitVcsAdapter(VcsAdapter):
    """VcsAdapter backed by the git executable and the GitHub REST API"""

    def __init__(self,
                 api_url: str = DEFAULT_GITHUB_API_URL,
                 host: str = DEFAULT_GITHUB_HOST,
                 max_remote_commits: int = DEFAULT_MAX_REMOTE_COMMITS,
                 session: Optional[requests.Session] = None,
                 git_executable: str = "git"):
        self.api_url = api_url.rstrip("/")
        self.host = host
        self.max_remote_commits = max_remote_commits
        self.http = session or requests.Session()
        self.git_executable = git_executable

    # Remote hosting API

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": GITHUB_USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _get_pages(self, path: str, token: Optional[str],
                   params: Optional[Dict[str, Any]] = None,
                   limit: Optional[int] = None) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            query = dict(params or {}, per_page=GITHUB_PAGE_SIZE, page=page)
            url = f"{self.api_url}{path}"
            try:
                response = self.http.get(url, headers=self._headers(token),
                                         params=query, timeout=GITHUB_TIMEOUT)
            except requests.RequestException as e:
                raise RemoteApiError(f"Cannot reach {url}: {e}")

            if response.status_code in (401, 403):
                raise RemoteApiError(
                    f"Access denied by {url} (HTTP {response.status_code}), check the token",
                    response.status_code,
                )
            if response.status_code == 404:
                raise RemoteApiError(f"Not found: {url}", 404)
            if response.status_code >= 400:
                raise RemoteApiError(
                    f"Request to {url} failed with HTTP {response.status_code}",
                    response.status_code,
                )

            try:
                batch = response.json()
            except ValueError as e:
                raise RemoteApiError(f"Malformed response from {url}: {e}", response.status_code)
            if not isinstance(batch, list):
                raise RemoteApiError(f"Unexpected response from {url}, expected a list",
                                     response.status_code)
            items.extend(batch)
            if limit is not None and len(items) >= limit:
                return items[:limit]
            if len(batch) < GITHUB_PAGE_SIZE:
                return items
            page += 1

    def list_remote_branches(self, owner: str, repo: str, token: Optional[str]) -> List[str]:
        branches = self._get_pages(f"/repos/{owner}/{repo}/branches", token)
        names = _field(branches, "name")
        logger.info(f"{owner}/{repo}: {len(names)} remote branch(es)")
        return names

    def list_remote_commits(self, owner: str, repo: str, token: Optional[str],
                            branch: str) -> List[str]:
        commits = self._get_pages(
            f"/repos/{owner}/{repo}/commits", token,
            params={"sha": branch},
            limit=self.max_remote_commits,
        )
        return _field(commits, "sha")

    # Working copy

    def remote_url(self, owner: str, repo: str, token: Optional[str] = None) -> str:
        if token:
            return f"https://{token}@{self.host}/{owner}/{repo}.git"
        return f"https://{self.host}/{owner}/{repo}.git"

    def _git(self, args: List[str], cwd: Optional[Path] = None) -> ExitStatus:
        command = [self.git_executable] + args
        completed = run_command(command, cwd=cwd, display=redact(" ".join(command)))
        return ExitStatus(
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=redact(completed.stderr),
        )

    def clone(self, owner: str, repo: str, branch: str, dest_path: Path,
              token: Optional[str] = None) -> ExitStatus:
        status = self._git([
            "clone", "--branch", branch,
            self.remote_url(owner, repo, token), str(dest_path),
        ])
        if status.ok:
            return status

        errors = status.fatal_lines()
        if errors and all(GIT_WORKING_TREE_ERROR in line for line in errors):
            # Repository data arrived but checkout failed; restore the tree from HEAD
            logger.warning(f"Checkout after clone failed, restoring working tree in {dest_path}")
            return self._git(["restore", "--source=HEAD", ":/"], cwd=dest_path)
        return status

    def fetch_all(self, dest_path: Path) -> ExitStatus:
        return self._git(["fetch", "--all", "--prune"], cwd=dest_path)

    def checkout(self, dest_path: Path, branch: str) -> ExitStatus:
        return self._git(["checkout", branch], cwd=dest_path)

    def pull(self, dest_path: Path, branch: str) -> ExitStatus:
        return self._git(["pull", "origin", branch], cwd=dest_path)

    def has_local_branch(self, dest_path: Path, branch: str) -> bool:
        status = self._git(
            ["rev-parse", "--verify", "--quiet", f"refs/heads/{branch}"], cwd=dest_path
        )
        return status.ok

    def local_commit_log(self, dest_path: Path, branch: str) -> List[str]:
        if not self.has_local_branch(dest_path, branch):
            logger.debug(f"No local branch '{branch}' in {dest_path}")
            return []

        status = self._git(["log", branch, "--pretty=%H"], cwd=dest_path)
        if not status.ok:
            raise VcsError(f"git log {branch} failed", status.error_lines())
        return [line.strip() for line in status.stdout.splitlines() if line.strip()]
