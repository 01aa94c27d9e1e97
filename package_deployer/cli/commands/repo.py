"""Repository registry commands"""

import sys

import click

from ...api.exceptions import DeployerError, ValidationError
from ...constants import EMOJI_SUCCESS, EMOJI_WARNING
from ..utils.output import (
    console,
    format_repository_table,
    format_repository_tree,
    format_session_result,
    print_error,
)


@click.group()
def repo():
    """Manage registered repositories"""
    pass


@repo.command()
@click.argument('name')
@click.option('--token', help='GitHub access token (omit for public repositories)')
@click.option('--no-save', is_flag=True,
              help='Run one deploy session without saving the repository')
@click.pass_context
def add(ctx, name, token, no_save):
    """Register a repository given as owner/name

    Examples:

        # Register a public repository
        package-deployer repo add acme/widget

        # Register a private repository
        package-deployer repo add acme/widget --token ghp_xxx

        # Deploy once without remembering anything
        package-deployer repo add acme/widget --no-save
    """
    deployer = ctx.obj.deployer
    try:
        if no_save:
            transient = deployer.with_session(deployer.session.detach())
            transient.register_repository(name, token, save=False)
            result = transient.deploy(name)
            format_session_result(result)
            if result.is_failed:
                sys.exit(1)
            return

        repository = deployer.register_repository(name, token)
    except ValidationError as e:
        print_error("Invalid repository", e)
        sys.exit(1)

    console.print(f"[green]{EMOJI_SUCCESS}[/green] Registered [cyan]{repository.name}[/cyan]")


@repo.command(name='list')
@click.pass_context
def list_repositories(ctx):
    """List registered repositories, most recently used first"""
    table = format_repository_table(ctx.obj.deployer.tree)
    if table is None:
        console.print(f"{EMOJI_WARNING} No repositories registered")
        return
    console.print(table)


@repo.command()
@click.argument('name')
@click.pass_context
def show(ctx, name):
    """Show branches, projects and publish folders of a repository"""
    repository = ctx.obj.deployer.tree.get_repository(name)
    if repository is None:
        print_error(f"Repository not found: {name}")
        sys.exit(1)
    console.print(format_repository_tree(repository))


@repo.command()
@click.argument('name')
@click.option('--yes', '-y', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def remove(ctx, name, yes):
    """Remove a repository and everything cached for it"""
    deployer = ctx.obj.deployer
    if deployer.tree.get_repository(name) is None:
        print_error(f"Repository not found: {name}")
        sys.exit(1)

    if not yes and not click.confirm(f"Remove {name} and all cached publish folders?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    deployer.remove_repository(name)
    console.print(f"[green]{EMOJI_SUCCESS}[/green] Removed [cyan]{name}[/cyan]")


@repo.command(name='set-token')
@click.argument('name')
@click.option('--token', prompt=True, hide_input=True, help='New access token')
@click.pass_context
def set_token(ctx, name, token):
    """Replace the access token of a repository"""
    deployer = ctx.obj.deployer
    if deployer.tree.get_repository(name) is None:
        print_error(f"Repository not found: {name}")
        sys.exit(1)
    if not token.strip():
        print_error("The token must not be empty")
        sys.exit(1)

    deployer.register_repository(name, token.strip())
    console.print(f"[green]{EMOJI_SUCCESS}[/green] Token updated for [cyan]{name}[/cyan]")


@repo.command(name='forget-folder')
@click.argument('name')
@click.argument('branch')
@click.argument('project')
@click.pass_context
def forget_folder(ctx, name, branch, project):
    """Forget the publish folder cached for a project of a branch"""
    try:
        forgotten = ctx.obj.deployer.forget_publish_folder(name, branch, project)
    except DeployerError as e:
        print_error("Cannot update configuration", e)
        sys.exit(1)

    if forgotten:
        console.print(
            f"[green]{EMOJI_SUCCESS}[/green] Forgot publish folder of "
            f"[cyan]{project}[/cyan] on {name}, branch {branch}"
        )
    else:
        console.print(f"{EMOJI_WARNING} No publish folder cached for {project} on {name}, branch {branch}")
