"""Resolution of contradicting modifications."""

import logging
from typing import List, Sequence

from ..models import Modification, ModificationKind

logger = logging.getLogger(__name__)

CONFLICTING_PAIRS = (
    (ModificationKind.REDUCE_INTENSITY, ModificationKind.INCREASE_INTENSITY),
    (ModificationKind.REDUCE_VOLUME, ModificationKind.INCREASE_VOLUME),
    (ModificationKind.EXTEND_PHASE, ModificationKind.SHORTEN_PHASE),
)


def are_conflicting(first: Modification, second: Modification) -> bool:
    return any(
        {first.type, second.type} == {a, b}
        for a, b in CONFLICTING_PAIRS
    )


class ConflictResolver:
    """Keep one modification per group of contradicting modifications.

    Groups are built in a single pass: each unassigned modification opens a group
    and pulls in every later unassigned modification that contradicts it. The
    highest priority in a group wins and ties keep the earliest modification.
    """

    def group(self, modifications: Sequence[Modification]) -> List[List[Modification]]:
        groups: List[List[Modification]] = []
        assigned = set()

        for index, modification in enumerate(modifications):
            if index in assigned:
                continue
            group = [modification]
            assigned.add(index)

            for other_index in range(index + 1, len(modifications)):
                if other_index in assigned:
                    continue
                if are_conflicting(modification, modifications[other_index]):
                    group.append(modifications[other_index])
                    assigned.add(other_index)

            groups.append(group)

        return groups

    def resolve(self, modifications: Sequence[Modification]) -> List[Modification]:
        resolved = []
        for group in self.group(modifications):
            if len(group) == 1:
                resolved.append(group[0])
                continue
            # max() returns the first of equal maxima
            winner = max(group, key=lambda m: m.priority.rank)
            logger.debug(f"Resolved conflict between {[m.type.value for m in group]} in favour of "
                         f"{winner.type.value} ({winner.priority.value})")
            resolved.append(winner)
        return resolved
