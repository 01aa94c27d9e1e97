"""Command line interface for package-deployer"""

from .main import cli, main

__all__ = ["cli", "main"]
