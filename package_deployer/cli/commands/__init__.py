"""CLI commands"""

from . import repo
from . import deploy
from . import sync
from . import config

__all__ = [
    "repo",
    "deploy",
    "sync",
    "config",
]
