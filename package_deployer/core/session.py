"""Explicit session context holding the configuration tree"""

import copy
import logging
from pathlib import Path

from ..models.config_tree import ConfigTree
from ..services.config_store import ConfigStore

logger = logging.getLogger(__name__)


class DeploySession:
    """Exclusive owner of the in-memory ConfigTree for one process

    Components receive the session instead of reaching for shared state.
    The tree is saved only at explicit checkpoints; ``rollback`` discards
    whatever changed since the last checkpoint so a failed step never leaks
    into a later save.
    """

    def __init__(self, tree: ConfigTree, store: ConfigStore, config_path: Path,
                 persistent: bool = True):
        self.tree = tree
        self.store = store
        self.config_path = Path(config_path)
        self.persistent = persistent
        self._snapshot = copy.deepcopy(tree)

    @classmethod
    def open(cls, store: ConfigStore, config_path: Path) -> 'DeploySession':
        """Load the tree from ``config_path`` and start a session"""
        return cls(store.load(config_path), store, config_path)

    def checkpoint(self) -> None:
        """Persist the tree and remember it as the rollback point"""
        if self.persistent:
            self.store.save(self.config_path, self.tree)
            logger.debug(f"Checkpoint written to {self.config_path}")
        self._snapshot = copy.deepcopy(self.tree)

    def detach(self) -> 'DeploySession':
        """Copy of this session whose checkpoints are never written to disk

        Used for repositories the user chose not to save.
        """
        return DeploySession(copy.deepcopy(self.tree), self.store, self.config_path,
                             persistent=False)

    def rollback(self) -> None:
        """Restore the tree as of the last checkpoint"""
        self.tree = copy.deepcopy(self._snapshot)
        logger.debug("Session rolled back to last checkpoint")

    @property
    def is_dirty(self) -> bool:
        """True when the tree differs from the last checkpoint"""
        return self.tree.to_dict() != self._snapshot.to_dict()
