"""Interactive main menu"""

import logging

from ...api.deployer import Deployer
from ...api.exceptions import DeployerError
from ...constants import (
    MENU_EXIT,
    MENU_MANAGE_REPOSITORY,
    MENU_NEW_REPOSITORY,
    PROMPT_SELECT_REPOSITORY,
)
from ...services.prompter import ConsolePrompter
from .output import (
    console,
    format_repository_tree,
    format_session_result,
    print_error,
    print_info,
    print_success,
)

logger = logging.getLogger(__name__)

ACTION_SYNC = "Synchronize branches"
ACTION_TOKEN = "Change token"
ACTION_FORGET = "Forget a publish folder"
ACTION_SHOW = "Show branches and projects"
ACTION_REMOVE = "Remove repository"
ACTION_BACK = "Back"


class MainMenu:
    """Loop offering the registered repositories until the user exits"""

    def __init__(self, deployer: Deployer, prompter: ConsolePrompter):
        self.deployer = deployer
        self.prompter = prompter

    def run(self) -> None:
        while True:
            repositories = self.deployer.tree.sorted_repositories()
            options = [r.name for r in repositories] + [MENU_NEW_REPOSITORY]
            if repositories:
                options.append(MENU_MANAGE_REPOSITORY)
            options.append(MENU_EXIT)

            choice = self.prompter.choose(PROMPT_SELECT_REPOSITORY, options)
            if choice == MENU_EXIT:
                return

            # One failed iteration never ends the loop
            try:
                if choice == MENU_NEW_REPOSITORY:
                    self.add_repository()
                elif choice == MENU_MANAGE_REPOSITORY:
                    self.manage_repository()
                else:
                    format_session_result(self.deployer.deploy(choice))
            except DeployerError as e:
                print_error("Operation failed", e)
            except Exception as e:
                logger.debug("Unexpected menu failure", exc_info=True)
                print_error("Unexpected error", e)

    def add_repository(self) -> None:
        """Ask for a new repository, then run a session for it"""
        name = self.prompter.ask_repository_name()
        token = self.prompter.ask_token() or None

        if self.prompter.confirm_save_repository():
            self.deployer.register_repository(name, token)
            result = self.deployer.deploy(name)
        else:
            transient = self.deployer.with_session(self.deployer.session.detach())
            transient.register_repository(name, token, save=False)
            result = transient.deploy(name)
        format_session_result(result)

    def manage_repository(self) -> None:
        names = [r.name for r in self.deployer.tree.sorted_repositories()]
        name = self.prompter.choose("Select a repository to manage", names)
        action = self.prompter.choose(
            f"Manage {name}",
            [ACTION_SYNC, ACTION_SHOW, ACTION_TOKEN, ACTION_FORGET, ACTION_REMOVE, ACTION_BACK],
        )

        if action == ACTION_SYNC:
            format_session_result(self.deployer.sync_repository(name))
        elif action == ACTION_SHOW:
            console.print(format_repository_tree(self.deployer.tree.get_repository(name)))
        elif action == ACTION_TOKEN:
            token = self.prompter.ask_token()
            if token:
                self.deployer.register_repository(name, token)
                print_success(f"Token updated for {name}")
            else:
                print_info(f"Token of {name} left unchanged")
        elif action == ACTION_FORGET:
            self.forget_folder(name)
        elif action == ACTION_REMOVE:
            if self.prompter.confirm(f"Remove {name} and all cached folders?"):
                self.deployer.remove_repository(name)
                print_success(f"Removed {name}")

    def forget_folder(self, name: str) -> None:
        repository = self.deployer.tree.get_repository(name)
        branch_name = self.prompter.select_branch(repository)
        project_name = self.prompter.select_project(repository.get_branch(branch_name))
        if self.deployer.forget_publish_folder(name, branch_name, project_name):
            print_success(f"Forgot publish folder of {project_name} on branch {branch_name}")
        else:
            print_info(f"No publish folder cached for {project_name} on branch {branch_name}")
