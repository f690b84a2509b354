"""
Ordering rules for microcycles within a mesocycle.

"The last microcycle" is the one with the highest ``order``. Historical
data contains weeks that share an ``order``; among those the one with the
highest id wins. Numeric ids (including numeric strings) compare as
numbers, other ids compare as text after all numeric ones.
"""

from typing import Iterable, Optional, Tuple

from domain.models.plan import EntityId, Microcycle

# (order, id rank, numeric id, textual id)
MicrocycleSortKey = Tuple[int, int, int, str]


def _id_key(entity_id: Optional[EntityId]) -> Tuple[int, int, str]:
    if entity_id is None:
        return (-1, 0, "")
    if isinstance(entity_id, int):
        return (0, entity_id, "")
    text = str(entity_id).strip()
    if text.lstrip("-").isdigit():
        return (0, int(text), "")
    return (1, 0, text)


def microcycle_sort_key(microcycle: Microcycle) -> MicrocycleSortKey:
    """Sort key placing the "last" microcycle at the end of an ascending sort."""
    rank, numeric, textual = _id_key(microcycle.id)
    return (microcycle.order, rank, numeric, textual)


def select_last_microcycle(
    microcycles: Iterable[Microcycle],
) -> Optional[Microcycle]:
    """Return the microcycle with the highest order (id tie-break), or None."""
    return max(microcycles, key=microcycle_sort_key, default=None)


def next_microcycle_order(microcycles: Iterable[Microcycle]) -> int:
    """1-based order for a microcycle appended after the existing ones."""
    return max((m.order for m in microcycles), default=0) + 1
