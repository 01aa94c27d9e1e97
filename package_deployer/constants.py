"""Global constants for package-deployer"""

import re

APP_NAME = "package-deployer"
LOG_FORMAT = "%(message)s"

# Persisted configuration
CONFIG_VERSION = "1.0"
DEFAULT_CONFIG_DIR = "~/.package-deployer"
DEFAULT_CONFIG_FILE = "config.yaml"
CONFIG_BACKUP_SUFFIX = ".bak"

# Working copies
DEFAULT_WORKSPACE = "~/Documents/Publish"

# Build defaults
DEFAULT_BUILD_TOOL = "dotnet"
DEFAULT_CONFIGURATION = "Debug"
DEFAULT_FRAMEWORK = "netstandard2.0"
DEFAULT_DESCRIPTOR_EXTENSION = ".csproj"
DEFAULT_OUTPUT_SUBDIR = "bin/{configuration}/{framework}"
PUBLISH_STAGING_DIR = "publish"

# Directories never searched for build descriptors
DISCOVERY_SKIP_DIRS = {".git", "bin", "obj", "node_modules"}

# GitHub
DEFAULT_GITHUB_API_URL = "https://api.github.com"
DEFAULT_GITHUB_HOST = "github.com"
DEFAULT_MAX_REMOTE_COMMITS = 100
GITHUB_PAGE_SIZE = 100
GITHUB_TIMEOUT = 30  # seconds
GITHUB_USER_AGENT = "package-deployer"

# Git output markers
GIT_FATAL_MARKER = "fatal:"
GIT_WORKING_TREE_ERROR = "unable to checkout working tree"

# Environment variables
ENV_CONFIG_PATH = "PACKAGE_DEPLOYER_CONFIG"
ENV_WORKSPACE = "PACKAGE_DEPLOYER_WORKSPACE"
ENV_LOG_LEVEL = "PACKAGE_DEPLOYER_LOG_LEVEL"


# Error codes
class ErrorCode:
    CONFIG_FORMAT_ERROR = "PD001"
    VALIDATION_FAILED = "PD002"
    REPOSITORY_NOT_FOUND = "PD003"
    VCS_COMMAND_FAILED = "PD004"
    REMOTE_API_FAILED = "PD005"
    BUILD_FAILED = "PD006"
    COPY_FAILED = "PD007"
    PUBLISH_FOLDER_INVALID = "PD008"
    USER_CANCELLED = "PD009"
    PROJECT_NOT_FOUND = "PD010"
    BRANCH_NOT_FOUND = "PD011"
    IO_ERROR = "PD012"
    UNEXPECTED_ERROR = "PD013"


# Validation patterns
REPOSITORY_NAME_PATTERN = re.compile(r"^[^\s/]+/[^\s/]+$")

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
EMOJI_ARROW = "→"
EMOJI_FOLDER = "📁"
EMOJI_BRANCH = "🌿"
EMOJI_PACKAGE = "📦"

# Message templates
MSG_DEPLOY_SUCCESS = f"{EMOJI_SUCCESS} Project {{project}} built and copied to {{folder}}"
MSG_CACHED_FOLDER = "Found publish folder for project {project}, branch {branch}: {folder}"
MSG_BRANCHES_SYNCED = "Branches synchronized: +{added} / -{removed}"
MSG_PROJECTS_SYNCED = "Projects synchronized: +{added} / -{removed}"

# Interactive prompts
PROMPT_SELECT_REPOSITORY = "Select a repository or create a new configuration"
PROMPT_SELECT_BRANCH = "Select a branch"
PROMPT_SELECT_PROJECT = "Select a project"
PROMPT_ENTER_REPOSITORY = "Enter the repository name (owner/name)"
PROMPT_ENTER_TOKEN = "Enter the GitHub token"
PROMPT_SAVE_REPOSITORY = "Do you wish to save this repository configuration?"
PROMPT_ENTER_FOLDER = "Enter the destination folder"
PROMPT_USE_CACHED_FOLDER = "Use this publish folder?"

# Main menu entries
MENU_NEW_REPOSITORY = "Add new repository"
MENU_MANAGE_REPOSITORY = "Manage existing repository"
MENU_EXIT = "Exit"
