# package_deployer/utils/__init__.py
"""Utility functions for package-deployer"""

from .file_utils import (
    is_empty_dir,
    ensure_dir,
    copy_tree,
    atomic_write,
)

from .async_utils import run_async

from .process_utils import (
    CompletedCommand,
    run_command,
)

__all__ = [
    # File utilities
    "is_empty_dir",
    "ensure_dir",
    "copy_tree",
    "atomic_write",

    # Async utilities
    "run_async",

    # Process utilities
    "CompletedCommand",
    "run_command",
]
