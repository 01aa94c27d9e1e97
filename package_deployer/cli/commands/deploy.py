"""Deploy command implementation"""

import sys

import click

from ..utils.output import format_session_result


@click.command()
@click.argument('name')
@click.option('--branch', '-b', help='Branch to deploy (asked when omitted)')
@click.option('--project', '-p', help='Project to deploy (asked when omitted)')
@click.option('--yes', '-y', is_flag=True,
              help='Use the cached publish folder without asking')
@click.pass_context
def deploy(ctx, name, branch, project, yes):
    """Update, build and publish one project of a repository

    The working copy of the branch is cloned or updated first, the
    selected project is built and its output is copied to the publish
    folder remembered for this repository, branch and project.

    Examples:

        # Choose branch and project interactively
        package-deployer deploy acme/widget

        # Fully specified, reusing the cached publish folder
        package-deployer deploy acme/widget -b main -p Widget.Core --yes
    """
    if yes:
        ctx.obj.prompter.accept_cached = True

    result = ctx.obj.deployer.deploy(name, branch_name=branch, project_name=project)
    format_session_result(result)

    if result.is_failed:
        sys.exit(1)
