"""Exception definitions for package-deployer"""

from typing import List, Optional


class DeployerError(Exception):
    """Base exception for package-deployer"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ConfigError(DeployerError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, "PD001")


class ValidationError(DeployerError):
    """Validation error"""

    def __init__(self, message: str):
        super().__init__(message, "PD002")


class RepositoryNotFoundError(DeployerError):
    """Repository is not registered in the configuration"""

    def __init__(self, repository_name: str):
        message = f"Repository not found: {repository_name}"
        super().__init__(message, "PD003")
        self.repository_name = repository_name


class VcsError(DeployerError):
    """Version control command failed"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        if errors:
            message = f"{message}: {'; '.join(errors)}"
        super().__init__(message, "PD004")
        self.errors = errors or []


class RemoteApiError(DeployerError):
    """Remote hosting API call failed (network, auth, missing repository)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message, "PD005")
        self.status_code = status_code


class BuildError(DeployerError):
    """Build or publish tool failed"""

    def __init__(self, message: str):
        super().__init__(message, "PD006")


class CopyError(DeployerError):
    """Copying build output failed"""

    def __init__(self, message: str):
        super().__init__(message, "PD007")


class PublishFolderError(DeployerError):
    """Publish folder could not be resolved"""

    def __init__(self, message: str):
        super().__init__(message, "PD008")


class UserCancelledError(DeployerError):
    """User cancelled the operation"""

    def __init__(self):
        super().__init__("Operation cancelled by user", "PD009")


class BranchNotFoundError(DeployerError):
    """Branch is not known for the repository"""

    def __init__(self, repository_name: str, branch_name: str):
        message = f"Branch '{branch_name}' not found in {repository_name}"
        super().__init__(message, "PD011")
        self.repository_name = repository_name
        self.branch_name = branch_name


class ProjectNotFoundError(DeployerError):
    """Project was not discovered on the branch"""

    def __init__(self, branch_name: str, project_name: str):
        message = f"Project '{project_name}' not found on branch '{branch_name}'"
        super().__init__(message, "PD010")
        self.branch_name = branch_name
        self.project_name = project_name
