"""
Student plan queries.

Read-side helpers used by the student app and by coach dashboards:
- the student's single active mesocycle
- the mesocycles a student is allowed to see (published or active)

Lists are cached per student and tagged with every mesocycle they contain,
so a status change on any of them drops the cached list.
"""

import logging
from typing import List, Optional

from application.cache import CacheKey, PlanCache, mesocycle_tag, student_tag
from application.exceptions import InvariantViolation
from application.ports import MesocycleRepository
from domain.models import EntityId, Mesocycle
from domain.services import visible_to_student

logger = logging.getLogger(__name__)


class GetStudentMesocyclesUseCase:
    """
    Use case for reading a student's mesocycles.

    Usage:
        >>> use_case = GetStudentMesocyclesUseCase(mesocycle_repo=repo, cache=cache)
        >>> active = use_case.active(student_id="st-1")
        >>> visible = use_case.visible(student_id="st-1")
    """

    def __init__(
        self,
        mesocycle_repo: MesocycleRepository,
        cache: Optional[PlanCache] = None,
    ) -> None:
        self._mesocycle_repo = mesocycle_repo
        self._cache = cache

    def execute(self, student_id: EntityId) -> List[Mesocycle]:
        """All mesocycles of the student, any status."""
        key = CacheKey.student(student_id)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return list(cached)

        mesocycles = self._mesocycle_repo.list_by_student(student_id)

        if self._cache is not None:
            tags = [student_tag(student_id)] + [mesocycle_tag(m.id) for m in mesocycles]
            self._cache.set(key, list(mesocycles), tags=tags)
        return mesocycles

    def visible(self, student_id: EntityId) -> List[Mesocycle]:
        """Mesocycles the student may see; drafts are filtered out."""
        return visible_to_student(self.execute(student_id))

    def active(self, student_id: EntityId) -> Optional[Mesocycle]:
        """
        The student's active mesocycle.

        Returns:
            The active mesocycle, or None if the student has none

        Raises:
            InvariantViolation: If the backend reports more than one
        """
        active = [m for m in self.execute(student_id) if m.is_active]
        if len(active) > 1:
            ids = [m.id for m in active]
            logger.error(f"Student {student_id} has {len(active)} active mesocycles: {ids}")
            raise InvariantViolation(
                f"Student {student_id} has more than one active mesocycle: {ids}"
            )
        return active[0] if active else None
