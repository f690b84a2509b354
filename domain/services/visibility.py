"""
Student visibility rule.

Students only ever see ``published`` and ``active`` mesocycles; drafts are
invisible regardless of how they are queried.

The engine does not gate reads itself. Every student-facing read path that
renders mesocycles must pass them through ``visible_to_student`` first.
"""

from typing import Iterable, List

from domain.models.plan import Mesocycle


def is_visible_to_student(mesocycle: Mesocycle) -> bool:
    return mesocycle.status.is_student_visible


def visible_to_student(mesocycles: Iterable[Mesocycle]) -> List[Mesocycle]:
    """Filter mesocycles down to the ones a student may see, keeping order."""
    return [m for m in mesocycles if is_visible_to_student(m)]
