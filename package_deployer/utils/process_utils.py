# package_deployer/utils/process_utils.py
"""Streamed execution of external commands"""

import asyncio
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .async_utils import run_async

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]


class CompletedCommand:
    """Exit code and captured output of a finished command"""

    def __init__(self, args: Sequence[str], returncode: int,
                 stdout_lines: List[str], stderr_lines: List[str]):
        self.args = list(args)
        self.returncode = returncode
        self.stdout_lines = stdout_lines
        self.stderr_lines = stderr_lines

    @property
    def stdout(self) -> str:
        return "\n".join(self.stdout_lines)

    @property
    def stderr(self) -> str:
        return "\n".join(self.stderr_lines)


async def _pump(stream: asyncio.StreamReader,
                sink: List[str],
                on_line: Optional[LineCallback]) -> None:
    while True:
        raw = await stream.readline()
        if not raw:
            break
        line = raw.decode(errors="replace").rstrip("\r\n")
        sink.append(line)
        if on_line:
            on_line(line)


async def _run(args: Sequence[str],
               cwd: Optional[Path],
               on_line: Optional[LineCallback]) -> CompletedCommand:
    process = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout_lines: List[str] = []
    stderr_lines: List[str] = []
    await asyncio.gather(
        _pump(process.stdout, stdout_lines, on_line),
        _pump(process.stderr, stderr_lines, on_line),
    )
    returncode = await process.wait()
    return CompletedCommand(args, returncode, stdout_lines, stderr_lines)


def run_command(args: Sequence[str],
                cwd: Optional[Path] = None,
                on_line: Optional[LineCallback] = None,
                display: Optional[str] = None) -> CompletedCommand:
    """
    Run an external command, streaming its output, and wait for it to exit

    Args:
        args: Program and arguments
        cwd: Working directory
        on_line: Called with every output line (stdout and stderr)
        display: Text used for logging instead of the raw arguments

    Returns:
        CompletedCommand with exit code and captured output

    Raises:
        FileNotFoundError: If the program is not installed
    """
    shown = display or " ".join(args)
    logger.info(f"Running: {shown}")

    def log_line(line: str) -> None:
        logger.debug(line)
        if on_line:
            on_line(line)

    completed = run_async(_run(args, cwd, log_line))
    logger.debug(f"Exit code {completed.returncode}: {shown}")
    return completed
