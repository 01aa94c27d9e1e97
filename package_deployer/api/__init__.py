"""Public exception API for package-deployer"""

from .exceptions import (
    DeployerError,
    ConfigError,
    ValidationError,
    RepositoryNotFoundError,
    VcsError,
    RemoteApiError,
    BuildError,
    CopyError,
    PublishFolderError,
    UserCancelledError,
    BranchNotFoundError,
    ProjectNotFoundError,
)

__all__ = [
    "DeployerError",
    "ConfigError",
    "ValidationError",
    "RepositoryNotFoundError",
    "VcsError",
    "RemoteApiError",
    "BuildError",
    "CopyError",
    "PublishFolderError",
    "UserCancelledError",
    "BranchNotFoundError",
    "ProjectNotFoundError",
]
