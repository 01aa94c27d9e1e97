"""File operation utilities"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Union


def is_empty_dir(path: Path) -> bool:
    """
    Check whether a path is missing or holds no files

    Directories that only contain empty subdirectories count as empty.

    Args:
        path: Directory path

    Returns:
        True if the path does not exist or no file lives below it
    """
    if not path.exists():
        return True
    if not path.is_dir():
        return False
    return not any(entry.is_file() or entry.is_symlink() for entry in path.rglob("*"))


def ensure_dir(path: Union[str, Path]) -> Path:
    """
    Create a directory (and parents) if it does not exist

    Args:
        path: Directory path

    Returns:
        The directory path, with ~ expanded
    """
    directory = Path(path).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def copy_tree(source: Path, destination: Path) -> int:
    """
    Copy a directory tree, overwriting files that already exist

    Subdirectories are created as needed; files present only in the
    destination are left alone.

    Args:
        source: Source directory
        destination: Destination directory

    Returns:
        Number of files copied
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")

    destination.mkdir(parents=True, exist_ok=True)
    copied = 0

    for entry in sorted(source.iterdir()):
        target = destination / entry.name
        if entry.is_dir():
            copied += copy_tree(entry, target)
        else:
            shutil.copy2(entry, target)
            copied += 1

    return copied


def atomic_write(file_path: Path,
                 content: Union[str, bytes],
                 mode: str = 'w') -> None:
    """
    Write file atomically

    Args:
        file_path: Target file path
        content: Content to write
        mode: Write mode
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Write to temporary file first
    temp_fd, temp_path = tempfile.mkstemp(dir=file_path.parent)

    try:
        with os.fdopen(temp_fd, mode) as f:
            f.write(content)

        # Atomic rename
        os.replace(temp_path, file_path)

    except Exception:
        # Clean up temp file on error
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise
