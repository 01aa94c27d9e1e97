"""Synchronize repository branches with the remote branch list"""

import logging
from typing import Iterable

from ..models.config_tree import Branch, Repository
from .reconciliation import ReconcileReport, reconcile_keyed

logger = logging.getLogger(__name__)


class BranchReconciler:
    """Mirror remote branch names into a Repository"""

    def synchronize(self,
                    repository: Repository,
                    remote_branch_names: Iterable[str]) -> ReconcileReport:
        """Add branches seen on the remote and prune the ones that vanished

        Retained branches keep their projects, timestamps and commit cache.
        The caller persists the tree afterwards.

        Args:
            repository: Repository whose branches are updated in place
            remote_branch_names: Branch names reported by the remote

        Returns:
            ReconcileReport of added/removed branch names
        """
        report = reconcile_keyed(
            repository.branches,
            remote_branch_names,
            lambda name: Branch(name=name),
        )
        if report.changed:
            logger.info(
                f"{repository.name}: branches added {report.added or '-'}, "
                f"removed {report.removed or '-'}"
            )
        return report
