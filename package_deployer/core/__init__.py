"""Core decision engine for package-deployer"""

from .reconciliation import ReconcileReport, reconcile_keyed
from .branch_reconciler import BranchReconciler
from .project_reconciler import ProjectReconciler
from .update_decider import UpdateAction, UpdateState, UpdateDecider
from .session import DeploySession
from .publish_resolver import FolderDecision, FolderPrompter, PublishFolderResolver
from .project_discovery import discover_projects, strip_extension

__all__ = [
    "ReconcileReport",
    "reconcile_keyed",
    "BranchReconciler",
    "ProjectReconciler",
    "UpdateAction",
    "UpdateState",
    "UpdateDecider",
    "DeploySession",
    "FolderDecision",
    "FolderPrompter",
    "PublishFolderResolver",
    "discover_projects",
    "strip_extension",
]
