"""Keyed add-missing / prune-absent synchronization"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, TypeVar

T = TypeVar('T')


@dataclass
class ReconcileReport:
    """Names added and removed by one reconciliation pass"""
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)


def reconcile_keyed(entries: Dict[str, T],
                    authoritative_names: Iterable[str],
                    factory: Callable[[str], T]) -> ReconcileReport:
    """
    Make the keys of ``entries`` equal to ``authoritative_names``

    Missing names get a fresh entry from ``factory``; entries whose name is
    absent are removed. Retained entries are left untouched.

    Args:
        entries: Mapping of name to entity, mutated in place
        authoritative_names: Names reported by the source of truth
        factory: Builds a new entity for a name

    Returns:
        ReconcileReport listing added and removed names (sorted)
    """
    wanted = set(authoritative_names)
    report = ReconcileReport()

    for name in sorted(wanted):
        if name not in entries:
            entries[name] = factory(name)
            report.added.append(name)

    for name in sorted(set(entries) - wanted):
        del entries[name]
        report.removed.append(name)

    return report
