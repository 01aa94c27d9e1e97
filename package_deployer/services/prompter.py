# package_deployer/services/prompter.py
"""Interactive prompts backed by rich"""

from typing import List, Optional, Sequence

from rich.console import Console
from rich.prompt import Prompt, Confirm
from rich.table import Table

from ..api.exceptions import UserCancelledError, ValidationError
from ..constants import (
    MSG_CACHED_FOLDER,
    PROMPT_ENTER_FOLDER,
    PROMPT_ENTER_REPOSITORY,
    PROMPT_ENTER_TOKEN,
    PROMPT_SAVE_REPOSITORY,
    PROMPT_SELECT_BRANCH,
    PROMPT_SELECT_PROJECT,
    PROMPT_USE_CACHED_FOLDER,
)
from ..models.config_tree import (
    NEVER_USED,
    Branch,
    Repository,
    most_recent_first,
    validate_repository_name,
)


def format_last_used(entity) -> str:
    if entity.last_used == NEVER_USED:
        return "never"
    return entity.last_used.strftime('%Y-%m-%d %H:%M')


class ConsolePrompter:
    """Ask the operator for selections, folders and credentials"""

    def __init__(self, console: Console = None, accept_cached: bool = False):
        """
        Args:
            console: Console to print to
            accept_cached: Accept cached publish folders without asking
        """
        self.console = console or Console()
        self.accept_cached = accept_cached

    def select(self, title: str, labels: Sequence[str], table: Optional[Table] = None) -> int:
        """Let the user pick one entry by number; returns its index"""
        if not labels:
            raise UserCancelledError()

        if table is None:
            table = Table(title=title)
            table.add_column("#", style="dim", width=3)
            table.add_column("Name", style="cyan")
            for i, label in enumerate(labels, 1):
                table.add_row(str(i), label)
        self.console.print(table)

        choices = [str(i) for i in range(1, len(labels) + 1)]
        answer = Prompt.ask(title, choices=choices, default="1", console=self.console)
        return int(answer) - 1

    def select_branch(self, repository: Repository) -> str:
        branches = most_recent_first(repository.branches.values())

        table = Table(title=f"{repository.name} branches")
        table.add_column("#", style="dim", width=3)
        table.add_column("Branch", style="cyan")
        table.add_column("Projects", style="green")
        table.add_column("Last used", style="yellow")
        for i, branch in enumerate(branches, 1):
            table.add_row(str(i), branch.name, str(len(branch.projects)), format_last_used(branch))

        index = self.select(PROMPT_SELECT_BRANCH, [b.name for b in branches], table)
        return branches[index].name

    def select_project(self, branch: Branch) -> str:
        projects = most_recent_first(branch.projects.values())

        table = Table(title=f"Projects on {branch.name}")
        table.add_column("#", style="dim", width=3)
        table.add_column("Project", style="cyan")
        table.add_column("Publish folder", style="green")
        table.add_column("Last used", style="yellow")
        for i, project in enumerate(projects, 1):
            table.add_row(str(i), project.name, project.publish_folder or "-",
                          format_last_used(project))

        index = self.select(PROMPT_SELECT_PROJECT, [p.name for p in projects], table)
        return projects[index].name

    def confirm_cached_folder(self, repo_name: str, branch_name: str,
                              project_name: str, folder: str) -> bool:
        self.console.print(MSG_CACHED_FOLDER.format(
            project=project_name, branch=branch_name, folder=folder
        ))
        if self.accept_cached:
            return True
        return Confirm.ask(PROMPT_USE_CACHED_FOLDER, default=True, console=self.console)

    def ask_publish_folder(self, repo_name: str, branch_name: str,
                           project_name: str, default: Optional[str] = None) -> str:
        self.console.print(
            f"\n[bold]Publish folder for[/bold] [cyan]{repo_name}[/cyan] "
            f"branch {branch_name}, [green]{project_name}[/green]"
        )
        while True:
            if default:
                folder = Prompt.ask(PROMPT_ENTER_FOLDER, default=default, console=self.console)
            else:
                folder = Prompt.ask(PROMPT_ENTER_FOLDER, console=self.console)
            if folder and folder.strip():
                return folder.strip()
            self.console.print("[red]The destination folder must not be empty[/red]")

    def ask_repository_name(self) -> str:
        while True:
            name = Prompt.ask(PROMPT_ENTER_REPOSITORY, console=self.console)
            try:
                return validate_repository_name(name)
            except ValidationError as e:
                self.console.print(f"[red]{e}[/red]")

    def ask_token(self) -> str:
        return Prompt.ask(PROMPT_ENTER_TOKEN, password=True, console=self.console).strip()

    def confirm_save_repository(self) -> bool:
        return Confirm.ask(PROMPT_SAVE_REPOSITORY, default=True, console=self.console)

    def confirm(self, question: str, default: bool = False) -> bool:
        return Confirm.ask(question, default=default, console=self.console)

    def choose(self, title: str, options: List[str]) -> str:
        """Pick one of ``options`` and return it"""
        return options[self.select(title, options)]
