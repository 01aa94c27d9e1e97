"""Build tool invocation and copying of build output"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..api.exceptions import CopyError
from ..constants import DEFAULT_BUILD_TOOL
from ..utils.file_utils import copy_tree
from ..utils.process_utils import run_command
from .base import BuildRunner, ExitStatus

logger = logging.getLogger(__name__)


class DotnetBuildRunner(BuildRunner):
    """BuildRunner driving ``dotnet build`` / ``dotnet publish``"""

    def __init__(self, tool: str = DEFAULT_BUILD_TOOL,
                 on_line: Optional[Callable[[str], None]] = None):
        self.tool = tool
        self.on_line = on_line

    def _run(self, args) -> ExitStatus:
        completed = run_command([self.tool] + list(args), on_line=self.on_line)
        return ExitStatus(completed.returncode, completed.stdout, completed.stderr)

    def build(self, project_path: Path, configuration: str) -> ExitStatus:
        return self._run(["build", str(project_path), "-c", configuration])

    def publish(self, project_path: Path, configuration: str, output_dir: Path) -> ExitStatus:
        return self._run([
            "publish", str(project_path), "-c", configuration, "-o", str(output_dir)
        ])


class Copier:
    """Recursive copy of a build output tree into a publish folder"""

    def copy_tree(self, source_dir: Path, dest_dir: Path) -> int:
        """
        Copy ``source_dir`` into ``dest_dir``, overwriting existing files

        Returns:
            Number of files copied

        Raises:
            CopyError: Missing source or filesystem failure
        """
        if not source_dir.is_dir():
            raise CopyError(f"Build output not found: {source_dir}")
        try:
            copied = copy_tree(source_dir, dest_dir)
        except OSError as e:
            raise CopyError(f"Copy from {source_dir} to {dest_dir} failed: {e}")
        logger.info(f"Copied {copied} file(s) from {source_dir} to {dest_dir}")
        return copied
