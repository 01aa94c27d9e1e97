# package_deployer/cli/main.py
"""Main CLI entry point for package-deployer"""

import os
import sys
import logging
from typing import Callable, Optional

import click
from rich.logging import RichHandler

from ..constants import APP_NAME, ENV_LOG_LEVEL, EMOJI_ARROW, LOG_FORMAT
from ..api.deployer import Deployer, build_deployer
from ..services.config_store import default_config_path
from ..services.prompter import ConsolePrompter
from .utils.output import console
from .utils.interactive import MainMenu

# Import all commands
from .commands import (
    repo,
    deploy,
    sync,
    config,
)


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = getattr(logging, os.environ.get(ENV_LOG_LEVEL, "").upper(), logging.WARNING)

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


DeployerFactory = Callable[..., Deployer]


class Context:
    """CLI context object with lazy deployer initialization

    The configuration file is only loaded when a command first asks for
    the deployer, so ``--help`` and ``config path`` never touch it.
    """

    def __init__(self, deployer_factory: Optional[DeployerFactory] = None):
        """Initialize CLI context

        Args:
            deployer_factory: Builds the Deployer; called with the config path
                and the ``prompter`` and ``on_step`` keywords
        """
        self.config_path: Optional[str] = None
        self.verbose: bool = False
        self.debug: bool = False
        self.prompter = ConsolePrompter(console)
        self._deployer_factory = deployer_factory or build_deployer
        self._deployer: Optional[Deployer] = None

    @property
    def resolved_config_path(self):
        return default_config_path(self.config_path)

    @property
    def deployer(self) -> Deployer:
        """Get deployer instance (lazy loading)"""
        if self._deployer is None:
            self._deployer = self._deployer_factory(
                self.config_path,
                prompter=self.prompter,
                on_step=self._show_step,
            )
            if self.debug:
                console.print(f"[dim]Configuration: {self.resolved_config_path}[/dim]")
        return self._deployer

    def _show_step(self, description: str) -> None:
        console.print(f"[cyan]{EMOJI_ARROW}[/cyan] {description}")


@click.group(name=APP_NAME, invoke_without_command=True)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Configuration file (default: ~/.package-deployer/config.yaml)')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path):
    """Package Deployer - fetch, build and publish GitHub projects

    Keeps a working copy of every branch of the registered repositories
    up to date, builds the selected project and copies its output to the
    publish folder remembered for that repository, branch and project.

    Run without a command to start the interactive menu.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    # Tests may pass a prepared context
    if ctx.obj is None:
        ctx.obj = Context()
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug
    ctx.obj.config_path = config_path

    if ctx.invoked_subcommand is None:
        MainMenu(ctx.obj.deployer, ctx.obj.prompter).run()


# Register commands
cli.add_command(repo.repo)
cli.add_command(deploy.deploy)
cli.add_command(sync.sync)
cli.add_command(config.config)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        # Non-standalone so Ctrl-C reaches us instead of click's Abort handling
        cli.main(prog_name=APP_NAME, standalone_mode=False)

    except (KeyboardInterrupt, EOFError, click.Abort):
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
