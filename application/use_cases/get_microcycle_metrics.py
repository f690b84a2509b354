"""
GetMicrocycleMetrics Use Case (Metrics Aggregator).

Loads a microcycle tree (through the plan cache), resolves muscle groups
the backend did not embed via the exercise catalog, and computes the
week's indicators.

Catalog outages never fail the read: unresolved exercises are counted
under the fallback muscle group and a warning is logged.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from application.cache import CacheKey, PlanCache, mesocycle_tag
from application.exceptions import NotFound, PersistenceFailure
from application.ports import ExerciseCatalog, MicrocycleRepository
from domain.models import CatalogExercise, EntityId, Microcycle
from domain.services import MicrocycleMetrics, compute_microcycle_metrics, top_muscle_groups
from domain.services.metrics import DEFAULT_TOP_MUSCLE_GROUPS

logger = logging.getLogger(__name__)


@dataclass
class MicrocycleMetricsResult:
    """Result of the GetMicrocycleMetrics use case execution."""

    microcycle: Microcycle
    metrics: MicrocycleMetrics
    top_muscle_groups: List[Tuple[str, int]]


class GetMicrocycleMetricsUseCase:
    """
    Use case for the metrics panel of a training week.

    Usage:
        >>> use_case = GetMicrocycleMetricsUseCase(microcycle_repo=repo, catalog=catalog)
        >>> result = use_case.execute(microcycle_id=7)
        >>> result.metrics.progress_percent
        60
    """

    def __init__(
        self,
        microcycle_repo: MicrocycleRepository,
        catalog: Optional[ExerciseCatalog] = None,
        cache: Optional[PlanCache] = None,
    ) -> None:
        self._microcycle_repo = microcycle_repo
        self._catalog = catalog
        self._cache = cache

    def execute(
        self,
        microcycle_id: EntityId,
        top_n: int = DEFAULT_TOP_MUSCLE_GROUPS,
    ) -> MicrocycleMetricsResult:
        """
        Compute metrics for one microcycle.

        Args:
            microcycle_id: Microcycle ID
            top_n: Number of muscle groups to keep for display

        Returns:
            MicrocycleMetricsResult

        Raises:
            NotFound: If the microcycle does not exist
            PersistenceFailure: If the plan backend fails
        """
        microcycle = self._load_microcycle(microcycle_id)
        catalog = self._resolve_catalog(microcycle)
        metrics = compute_microcycle_metrics(microcycle, catalog)

        return MicrocycleMetricsResult(
            microcycle=microcycle,
            metrics=metrics,
            top_muscle_groups=top_muscle_groups(metrics.series_by_muscle_group, top_n),
        )

    def _load_microcycle(self, microcycle_id: EntityId) -> Microcycle:
        key = CacheKey.microcycle(microcycle_id)
        if self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        microcycle = self._microcycle_repo.get_by_id(microcycle_id)
        if microcycle is None:
            raise NotFound("Microcycle", microcycle_id)

        if self._cache is not None:
            tags = [mesocycle_tag(microcycle.mesocycle_id)] if microcycle.mesocycle_id is not None else []
            self._cache.set(key, microcycle, tags=tags)
        return microcycle

    def _resolve_catalog(self, microcycle: Microcycle) -> Dict[str, CatalogExercise]:
        """Catalog entries for exercises whose muscle group was not embedded."""
        wanted = {
            str(exercise.exercise_catalog_id): exercise.exercise_catalog_id
            for day in microcycle.days
            for exercise in day.exercises
            if not exercise.muscle_group
        }
        if not wanted:
            return {}

        resolved: Dict[str, CatalogExercise] = {}
        if self._cache is not None:
            for key in list(wanted):
                entry = self._cache.get(CacheKey.catalog(key))
                if entry is not None:
                    resolved[key] = entry
                    del wanted[key]

        if wanted and self._catalog is not None:
            try:
                fetched = self._catalog.get_many(list(wanted.values()))
            except PersistenceFailure as e:
                logger.warning(
                    f"Exercise catalog unavailable; {len(wanted)} exercise(s) of "
                    f"microcycle {microcycle.id} fall back to the default muscle group: {e}"
                )
                fetched = {}
            for key, entry in fetched.items():
                resolved[key] = entry
                if self._cache is not None:
                    self._cache.set(CacheKey.catalog(key), entry)

        return resolved
