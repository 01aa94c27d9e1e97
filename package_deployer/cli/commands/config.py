"""Configuration management commands"""

import os
import sys

import click
from rich.table import Table

from ...api.exceptions import ValidationError
from ...constants import EMOJI_SUCCESS, ENV_WORKSPACE
from ..utils.output import console, print_error


@click.group()
def config():
    """Show and change package-deployer settings"""
    pass


@config.command()
@click.pass_context
def show(ctx):
    """Show the current settings"""
    deployer = ctx.obj.deployer
    settings = deployer.settings

    table = Table(title="Settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)

    console.print(f"[dim]Working copies: {settings.get_workspace()}[/dim]")
    if ENV_WORKSPACE in os.environ:
        console.print(f"[dim]Workspace overridden by {ENV_WORKSPACE}[/dim]")
    console.print(f"[dim]Configuration file: {deployer.session.config_path}[/dim]")


@config.command(name='set')
@click.argument('key')
@click.argument('value')
@click.pass_context
def set_value(ctx, key, value):
    """Change one setting

    Examples:

        package-deployer config set configuration Release

        package-deployer config set use_publish true
    """
    deployer = ctx.obj.deployer
    try:
        deployer.settings.set_value(key, value)
    except ValidationError as e:
        print_error("Cannot change setting", e)
        sys.exit(1)

    deployer.session.checkpoint()
    console.print(f"[green]{EMOJI_SUCCESS}[/green] {key} = {getattr(deployer.settings, key)}")


@config.command()
@click.pass_context
def path(ctx):
    """Print the configuration file location"""
    click.echo(str(ctx.obj.resolved_config_path))
