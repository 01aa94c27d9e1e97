"""Discovery of buildable projects inside a working copy"""

import logging
import os
from pathlib import Path
from typing import Dict

from ..constants import DEFAULT_DESCRIPTOR_EXTENSION, DISCOVERY_SKIP_DIRS

logger = logging.getLogger(__name__)


def strip_extension(file_name: str, extension: str) -> str:
    """Remove ``extension`` from ``file_name`` (case-insensitive)"""
    if file_name.lower().endswith(extension.lower()):
        return file_name[:-len(extension)]
    return file_name


def discover_projects(root: Path,
                      extension: str = DEFAULT_DESCRIPTOR_EXTENSION) -> Dict[str, Path]:
    """
    Find build descriptors below ``root``

    Args:
        root: Working copy root
        extension: Build descriptor extension, e.g. ``.csproj``

    Returns:
        Mapping of project name (descriptor name without extension) to the
        directory holding the descriptor
    """
    projects: Dict[str, Path] = {}
    if not root.is_dir():
        return projects

    suffix = extension.lower()
    for current, dirs, files in os.walk(root):
        # Prune in place so os.walk skips them, and walk deterministically
        dirs[:] = sorted(d for d in dirs if d not in DISCOVERY_SKIP_DIRS)
        for file_name in sorted(files):
            if not file_name.lower().endswith(suffix) or len(file_name) == len(suffix):
                continue
            name = strip_extension(file_name, extension)
            if name in projects:
                logger.warning(
                    f"Project '{name}' found again in {current}, keeping {projects[name]}"
                )
                continue
            projects[name] = Path(current)

    return projects
