# package_deployer/cli/utils/output.py
"""Output formatting utilities"""

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ...constants import (
    EMOJI_BRANCH,
    EMOJI_ERROR,
    EMOJI_FOLDER,
    EMOJI_PACKAGE,
    MSG_BRANCHES_SYNCED,
    MSG_PROJECTS_SYNCED,
)
from ...models import ConfigTree, Repository, SessionResult, most_recent_first
from ...services.prompter import format_last_used

console = Console()


def format_session_result(result: SessionResult) -> None:
    """Format and display the result of a repository session"""
    lines = []
    if result.branch:
        lines.append(f"[bold]Branch:[/bold] {result.branch}")
    if result.update_action:
        lines.append(f"[bold]Working copy:[/bold] {result.update_action}")
    if result.project:
        lines.append(f"[bold]Project:[/bold] {result.project}")
    if result.publish_folder:
        lines.append(f"[bold]Publish folder:[/bold] {result.publish_folder}")

    if result.branches_added or result.branches_removed:
        lines.append(MSG_BRANCHES_SYNCED.format(
            added=len(result.branches_added), removed=len(result.branches_removed)
        ))
    if result.projects_added or result.projects_removed:
        lines.append(MSG_PROJECTS_SYNCED.format(
            added=len(result.projects_added), removed=len(result.projects_removed)
        ))
    if result.duration is not None:
        lines.append(f"[dim]Took {result.duration:.1f}s[/dim]")

    if result.is_success:
        body = [f"[green]{result.message}[/green]", ""] + lines
        panel = Panel("\n".join(body), title=result.repository, border_style="green")
    else:
        body = [f"[red]{EMOJI_ERROR} {result.error_message}[/red]"]
        if lines:
            body += [""] + lines
        panel = Panel("\n".join(body), title=f"{result.repository} failed", border_style="red")
    console.print(panel)


def format_repository_table(tree: ConfigTree) -> Optional[Table]:
    """Table of registered repositories, most recently used first"""
    repositories = tree.sorted_repositories()
    if not repositories:
        return None

    table = Table(title="Repositories", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("Token", style="dim")
    table.add_column("Branches", style="green")
    table.add_column("Last used", style="yellow")
    for repository in repositories:
        table.add_row(
            repository.name,
            "yes" if repository.token else "no",
            str(len(repository.branches)),
            format_last_used(repository),
        )
    return table


def format_repository_tree(repository: Repository) -> Tree:
    """Branches, projects and publish folders of one repository"""
    root = Tree(f"[bold cyan]{repository.name}[/bold cyan]")
    for branch in most_recent_first(repository.branches.values()):
        label = f"{EMOJI_BRANCH} [green]{branch.name}[/green]"
        if branch.latest_commit:
            label += f" [dim]{branch.latest_commit[:7]}[/dim]"
        node = root.add(label)
        for project in most_recent_first(branch.projects.values()):
            folder = project.publish_folder or "[dim]no publish folder[/dim]"
            node.add(f"{EMOJI_PACKAGE} {project.name} {EMOJI_FOLDER} {folder}")
    return root


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print error message"""
    if error:
        console.print(f"[red]Error:[/red] {message}: {str(error)}")
    else:
        console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    """Print info message"""
    console.print(f"[blue]Info:[/blue] {message}")


def print_success(message: str) -> None:
    """Print success message"""
    console.print(f"[green]Success:[/green] {message}")
