"""Sync command implementation"""

import sys

import click

from ..utils.output import format_session_result


@click.command()
@click.argument('name')
@click.option('--branch', '-b', help='Also update the working copy of this branch')
@click.pass_context
def sync(ctx, name, branch):
    """Synchronize branches (and projects of one branch) without building

    Examples:

        # Mirror the remote branch list
        package-deployer sync acme/widget

        # Also update the working copy of main and rediscover its projects
        package-deployer sync acme/widget --branch main
    """
    result = ctx.obj.deployer.sync_repository(name, branch_name=branch)
    format_session_result(result)

    if result.is_failed:
        sys.exit(1)
