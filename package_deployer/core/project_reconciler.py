"""Synchronize branch projects with the projects found in a working copy"""

import logging
from typing import Iterable

from ..models.config_tree import Branch, Project
from .reconciliation import ReconcileReport, reconcile_keyed

logger = logging.getLogger(__name__)


class ProjectReconciler:
    """Mirror discovered project names into a Branch"""

    def synchronize(self,
                    branch: Branch,
                    discovered_project_names: Iterable[str]) -> ReconcileReport:
        """Add newly discovered projects and prune missing ones

        A pruned project loses its cached publish folder; if it shows up
        again it starts as a fresh record.

        Args:
            branch: Branch whose projects are updated in place
            discovered_project_names: Project names found in the working copy

        Returns:
            ReconcileReport of added/removed project names
        """
        report = reconcile_keyed(
            branch.projects,
            discovered_project_names,
            lambda name: Project(name=name),
        )
        for name in report.removed:
            logger.debug(f"Pruned project '{name}' from branch '{branch.name}'")
        return report
