"""Package Deployer - fetch, build and publish projects from GitHub repositories.

Keeps working copies of registered repositories current, builds the
selected project and copies its output to a remembered publish folder.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.deployer import Deployer, build_deployer, deploy
from .core.session import DeploySession

# Data models
from .models.config_tree import Project, Branch, Repository, DeploySettings, ConfigTree
from .models.result import OperationStatus, SessionResult

# Exceptions
from .api.exceptions import (
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
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Deployer",
    "DeploySession",
    "build_deployer",
    "deploy",

    # Models
    "Project",
    "Branch",
    "Repository",
    "DeploySettings",
    "ConfigTree",
    "OperationStatus",
    "SessionResult",

    # Exceptions
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
