"""Persisted configuration tree: repositories, branches and projects"""

import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Any
from urllib.parse import quote

from ..api.exceptions import ValidationError
from ..constants import (
    CONFIG_VERSION,
    DEFAULT_WORKSPACE,
    DEFAULT_BUILD_TOOL,
    DEFAULT_CONFIGURATION,
    DEFAULT_FRAMEWORK,
    DEFAULT_DESCRIPTOR_EXTENSION,
    DEFAULT_OUTPUT_SUBDIR,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_GITHUB_HOST,
    DEFAULT_MAX_REMOTE_COMMITS,
    ENV_WORKSPACE,
    REPOSITORY_NAME_PATTERN,
)

logger = logging.getLogger(__name__)

NEVER_USED = datetime.min


def _new_id() -> str:
    return str(uuid.uuid4())


def _parse_timestamp(value: Any) -> datetime:
    if not value:
        return NEVER_USED
    if not isinstance(value, datetime):
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        value = datetime.fromisoformat(text)
    if value.tzinfo is not None:
        # Timestamps are compared with naive local time
        value = value.astimezone().replace(tzinfo=None)
    return value


def validate_repository_name(name: str) -> str:
    """Validate an ``owner/name`` repository reference

    Args:
        name: Repository reference entered by the user

    Returns:
        The stripped name

    Raises:
        ValidationError: If the name is not in ``owner/name`` form
    """
    name = (name or "").strip()
    if not REPOSITORY_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Invalid repository name '{name}', expected the form owner/name"
        )
    return name


def most_recent_first(entities: Iterable[Any]) -> List[Any]:
    """Order entities by last use (newest first), ties broken by name"""
    by_name = sorted(entities, key=lambda e: e.name)
    return sorted(by_name, key=lambda e: e.last_used, reverse=True)


class _Tracked:
    """Mixin for entities carrying a last-used timestamp"""

    last_used: datetime

    def touch(self, now: Optional[datetime] = None) -> None:
        """Mark the entity as used; the timestamp never moves backwards"""
        now = now or datetime.now()
        if now > self.last_used:
            self.last_used = now


@dataclass
class Project(_Tracked):
    """A buildable project inside a branch"""

    name: str
    publish_folder: Optional[str] = None
    last_used: datetime = NEVER_USED
    id: str = field(default_factory=_new_id)

    @property
    def has_publish_folder(self) -> bool:
        return bool(self.publish_folder)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "id": self.id,
            "name": self.name,
            "last_used": self.last_used.isoformat(),
        }
        if self.publish_folder:
            data["publish_folder"] = self.publish_folder
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Project':
        """Create from dictionary"""
        return cls(
            name=data["name"],
            publish_folder=data.get("publish_folder") or None,
            last_used=_parse_timestamp(data.get("last_used")),
            id=data.get("id") or _new_id(),
        )


@dataclass
class Branch(_Tracked):
    """A branch of a repository, mirroring a remote branch name"""

    name: str
    last_used: datetime = NEVER_USED
    latest_commit: Optional[str] = None
    projects: Dict[str, Project] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)

    def get_project(self, name: str) -> Optional[Project]:
        return self.projects.get(name)

    def add_project(self, name: str) -> Project:
        """Return the project with this name, creating it if missing"""
        project = self.projects.get(name)
        if project is None:
            project = Project(name=name)
            self.projects[name] = project
        return project

    def merge(self, other: 'Branch') -> None:
        """Merge a duplicate record into this one; existing projects win"""
        for name, project in other.projects.items():
            self.projects.setdefault(name, project)
        if not self.latest_commit:
            self.latest_commit = other.latest_commit
        self.touch(other.last_used)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "id": self.id,
            "name": self.name,
            "last_used": self.last_used.isoformat(),
            "projects": [p.to_dict() for p in self.projects.values()],
        }
        if self.latest_commit:
            data["latest_commit"] = self.latest_commit
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Branch':
        """Create from dictionary"""
        branch = cls(
            name=data["name"],
            last_used=_parse_timestamp(data.get("last_used")),
            latest_commit=data.get("latest_commit"),
            id=data.get("id") or _new_id(),
        )
        for project_data in data.get("projects") or []:
            project = Project.from_dict(project_data)
            if project.name in branch.projects:
                logger.warning(
                    f"Duplicate project '{project.name}' in branch '{branch.name}', keeping the first"
                )
                continue
            branch.projects[project.name] = project
        return branch


@dataclass
class Repository(_Tracked):
    """A registered remote repository (owner/name)"""

    name: str
    token: Optional[str] = None
    last_used: datetime = NEVER_USED
    branches: Dict[str, Branch] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)

    @property
    def owner(self) -> str:
        return self.name.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.name.split("/", 1)[1]

    def get_branch(self, name: str) -> Optional[Branch]:
        return self.branches.get(name)

    def add_branch(self, name: str) -> Branch:
        """Return the branch with this name, creating it if missing"""
        branch = self.branches.get(name)
        if branch is None:
            branch = Branch(name=name)
            self.branches[name] = branch
        return branch

    def merge(self, other: 'Repository') -> None:
        """Merge a duplicate record into this one; existing entries win"""
        for name, branch in other.branches.items():
            if name in self.branches:
                self.branches[name].merge(branch)
            else:
                self.branches[name] = branch
        if not self.token:
            self.token = other.token
        self.touch(other.last_used)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {
            "id": self.id,
            "name": self.name,
            "last_used": self.last_used.isoformat(),
            "branches": [b.to_dict() for b in self.branches.values()],
        }
        if self.token:
            data["token"] = self.token
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Repository':
        """Create from dictionary"""
        repository = cls(
            name=data["name"],
            token=data.get("token"),
            last_used=_parse_timestamp(data.get("last_used")),
            id=data.get("id") or _new_id(),
        )
        for branch_data in data.get("branches") or []:
            branch = Branch.from_dict(branch_data)
            if branch.name in repository.branches:
                repository.branches[branch.name].merge(branch)
            else:
                repository.branches[branch.name] = branch
        return repository


@dataclass
class DeploySettings:
    """Tool settings persisted next to the repository tree"""

    workspace: str = DEFAULT_WORKSPACE
    build_tool: str = DEFAULT_BUILD_TOOL
    configuration: str = DEFAULT_CONFIGURATION
    framework: str = DEFAULT_FRAMEWORK
    descriptor_extension: str = DEFAULT_DESCRIPTOR_EXTENSION
    output_subdir: str = DEFAULT_OUTPUT_SUBDIR
    use_publish: bool = False
    github_api_url: str = DEFAULT_GITHUB_API_URL
    github_host: str = DEFAULT_GITHUB_HOST
    max_remote_commits: int = DEFAULT_MAX_REMOTE_COMMITS

    def get_workspace(self) -> Path:
        """Working copy root, honouring the environment override"""
        workspace = os.environ.get(ENV_WORKSPACE) or self.workspace
        return Path(os.path.expandvars(os.path.expanduser(workspace)))

    def get_working_copy(self, repository: Repository, branch_name: str) -> Path:
        """Local path of the working copy for one branch of a repository"""
        # Slashes in branch names must not create nested working copies
        return (self.get_workspace() / repository.owner / repository.repo
                / quote(branch_name, safe=""))

    def get_output_subdir(self) -> str:
        return self._format_output_subdir(self.output_subdir)

    def _format_output_subdir(self, template: str) -> str:
        try:
            return template.format(
                configuration=self.configuration,
                framework=self.framework,
            )
        except (KeyError, IndexError, AttributeError, TypeError, ValueError) as e:
            raise ValidationError(
                f"Invalid output_subdir '{template}', only {{configuration}} and "
                f"{{framework}} may be used: {e!r}"
            )

    def set_value(self, key: str, value: str) -> None:
        """Set a setting from its string form

        Raises:
            ValidationError: Unknown key or value of the wrong type
        """
        if key not in self.__dataclass_fields__:
            raise ValidationError(f"Unknown setting: {key}")

        current = getattr(self, key)
        if isinstance(current, bool):
            lowered = value.strip().lower()
            if lowered not in ("true", "false", "yes", "no", "1", "0"):
                raise ValidationError(f"Setting '{key}' expects a boolean, got '{value}'")
            converted = lowered in ("true", "yes", "1")
        elif isinstance(current, int):
            try:
                converted = int(value)
            except ValueError:
                raise ValidationError(f"Setting '{key}' expects an integer, got '{value}'")
        else:
            converted = value
            if key == "output_subdir":
                self._format_output_subdir(converted)
        setattr(self, key, converted)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "workspace": self.workspace,
            "build_tool": self.build_tool,
            "configuration": self.configuration,
            "framework": self.framework,
            "descriptor_extension": self.descriptor_extension,
            "output_subdir": self.output_subdir,
            "use_publish": self.use_publish,
            "github_api_url": self.github_api_url,
            "github_host": self.github_host,
            "max_remote_commits": self.max_remote_commits,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DeploySettings':
        """Create from dictionary"""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class ConfigTree:
    """Complete persisted state: settings plus the repository tree"""

    version: str = CONFIG_VERSION
    settings: DeploySettings = field(default_factory=DeploySettings)
    repositories: Dict[str, Repository] = field(default_factory=dict)

    def get_repository(self, name: str) -> Optional[Repository]:
        return self.repositories.get(name)

    def add_repository(self, name: str, token: Optional[str] = None) -> Repository:
        """Register a repository; an existing entry with the same name is returned

        A token given for an existing repository replaces the stored one.
        """
        name = validate_repository_name(name)
        repository = self.repositories.get(name)
        if repository is None:
            repository = Repository(name=name, token=token)
            self.repositories[name] = repository
        elif token:
            repository.token = token
        return repository

    def remove_repository(self, name: str) -> bool:
        return self.repositories.pop(name, None) is not None

    def find_project(self,
                     repo_name: str,
                     branch_name: str,
                     project_name: str) -> Optional[Project]:
        """Find a project by its full (repository, branch, project) triple"""
        repository = self.repositories.get(repo_name)
        if repository is None:
            return None
        branch = repository.get_branch(branch_name)
        if branch is None:
            return None
        return branch.get_project(project_name)

    def ensure_chain(self,
                     repo_name: str,
                     branch_name: str,
                     project_name: str) -> Project:
        """Return the project for a triple, creating missing ancestors"""
        repository = self.add_repository(repo_name)
        branch = repository.add_branch(branch_name)
        return branch.add_project(project_name)

    def sorted_repositories(self) -> List[Repository]:
        """Repositories ordered by most recent use, then name"""
        return most_recent_first(self.repositories.values())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "version": self.version,
            "settings": self.settings.to_dict(),
            "repositories": [r.to_dict() for r in self.repositories.values()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConfigTree':
        """Create from dictionary"""
        tree = cls(
            version=str(data.get("version", CONFIG_VERSION)),
            settings=DeploySettings.from_dict(data.get("settings") or {}),
        )
        for repo_data in data.get("repositories") or []:
            repository = Repository.from_dict(repo_data)
            if repository.name in tree.repositories:
                logger.warning(f"Merging duplicate repository entry '{repository.name}'")
                tree.repositories[repository.name].merge(repository)
            else:
                tree.repositories[repository.name] = repository
        return tree
