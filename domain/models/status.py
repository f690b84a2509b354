"""
Mesocycle lifecycle state machine.

A mesocycle moves through three states:

    draft ──► published ──► active
      └──────────────────────►┘

A coach may demote any mesocycle back to ``draft`` or ``published``.
Activating a mesocycle supersedes whichever mesocycle was active for the
same student; the superseded one is moved back to ``published`` so the
student keeps read access to it as history.

Students only ever see ``published`` and ``active`` mesocycles.
"""

from enum import Enum
from typing import Dict, FrozenSet, Union


class InvalidTransition(ValueError):
    """Raised by the state machine when a status change is not allowed."""

    def __init__(self, current: "MesocycleStatus", target: "MesocycleStatus"):
        super().__init__(
            f"Cannot move mesocycle from '{current.value}' to '{target.value}'"
        )
        self.current = current
        self.target = target


class MesocycleStatus(str, Enum):
    """Lifecycle status of a mesocycle."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ACTIVE = "active"

    @classmethod
    def parse(cls, value: Union[str, "MesocycleStatus"]) -> "MesocycleStatus":
        """
        Parse a raw status value (case-insensitive).

        Raises:
            ValueError: If the value is not one of the known statuses.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(s.value for s in cls)
        raise ValueError(f"Invalid mesocycle status '{value}'. Must be one of: {valid}")

    @property
    def is_student_visible(self) -> bool:
        """Whether a student may see a mesocycle in this status."""
        return self in STUDENT_VISIBLE_STATUSES

    @property
    def supersession_status(self) -> "MesocycleStatus":
        """Status a mesocycle in this state takes when another one is activated."""
        return MesocycleStatus.PUBLISHED if self is MesocycleStatus.ACTIVE else self

    def can_transition_to(self, target: "MesocycleStatus") -> bool:
        """Check whether the coach may move a mesocycle from this status to ``target``."""
        return target is self or target in _TRANSITIONS[self]

    def transition_to(self, target: "MesocycleStatus") -> "MesocycleStatus":
        """
        Return the new status after moving to ``target``.

        Raises:
            InvalidTransition: If the transition is not in the table.
        """
        if not self.can_transition_to(target):
            raise InvalidTransition(self, target)
        return target


STUDENT_VISIBLE_STATUSES: FrozenSet[MesocycleStatus] = frozenset(
    {MesocycleStatus.PUBLISHED, MesocycleStatus.ACTIVE}
)

# Demotion to draft/published is always allowed; activation only from draft or published.
_TRANSITIONS: Dict[MesocycleStatus, FrozenSet[MesocycleStatus]] = {
    MesocycleStatus.DRAFT: frozenset(
        {MesocycleStatus.PUBLISHED, MesocycleStatus.ACTIVE}
    ),
    MesocycleStatus.PUBLISHED: frozenset(
        {MesocycleStatus.DRAFT, MesocycleStatus.ACTIVE}
    ),
    MesocycleStatus.ACTIVE: frozenset(
        {MesocycleStatus.DRAFT, MesocycleStatus.PUBLISHED}
    ),
}
