# package_deployer/models/__init__.py
"""Data models for package-deployer"""

from .config_tree import (
    Project,
    Branch,
    Repository,
    DeploySettings,
    ConfigTree,
    validate_repository_name,
    most_recent_first,
)
from .result import OperationStatus, ErrorDetail, Result, SessionResult

__all__ = [
    # Configuration tree
    "Project",
    "Branch",
    "Repository",
    "DeploySettings",
    "ConfigTree",
    "validate_repository_name",
    "most_recent_first",

    # Result models
    "OperationStatus",
    "ErrorDetail",
    "Result",
    "SessionResult",
]
