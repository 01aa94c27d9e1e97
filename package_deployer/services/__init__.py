# package_deployer/services/__init__.py
"""External collaborators for package-deployer"""

from .base import ExitStatus, VcsAdapter, BuildRunner
from .config_store import ConfigStore, default_config_path
from .vcs_adapter import GitVcsAdapter
from .build_runner import DotnetBuildRunner, Copier
from .prompter import ConsolePrompter

__all__ = [
    "ExitStatus",
    "VcsAdapter",
    "BuildRunner",
    "ConfigStore",
    "default_config_path",
    "GitVcsAdapter",
    "DotnetBuildRunner",
    "Copier",
    "ConsolePrompter",
]
