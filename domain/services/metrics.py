"""
Microcycle metrics aggregation.

Pure read-side computation over a fully loaded microcycle: volume per
muscle group, completion, average RIR and the student's readiness/effort
perception. No I/O and no caching; callers own both.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Optional, Tuple

from domain.models.plan import CatalogExercise, EntityId, Exercise, Microcycle

FALLBACK_MUSCLE_GROUP = "Otro"
DEFAULT_TOP_MUSCLE_GROUPS = 10


@dataclass
class MicrocycleMetrics:
    """Aggregated indicators for one training week."""

    total_series: int = 0
    completed_series: int = 0
    progress_percent: int = 0
    average_rir: Optional[float] = None
    series_by_muscle_group: Dict[str, int] = field(default_factory=dict)

    # Readiness indicators from the student's day perception form
    average_readiness: Optional[float] = None
    average_effort: Optional[float] = None
    training_days: int = 0
    completed_days: int = 0

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_series": self.total_series,
            "completed_series": self.completed_series,
            "progress_percent": self.progress_percent,
            "average_rir": self.average_rir,
            "series_by_muscle_group": dict(self.series_by_muscle_group),
            "average_readiness": self.average_readiness,
            "average_effort": self.average_effort,
            "training_days": self.training_days,
            "completed_days": self.completed_days,
        }


def _catalog_key(entity_id: EntityId) -> str:
    return str(entity_id)


def resolve_muscle_group(
    exercise: Exercise,
    catalog: Optional[Mapping[str, CatalogExercise]] = None,
) -> str:
    """
    Muscle group label for an exercise.

    Uses the catalog entry embedded by the backend first, then the lookup
    mapping (keyed by ``str(catalog id)``), then ``FALLBACK_MUSCLE_GROUP``.
    """
    if exercise.muscle_group:
        return exercise.muscle_group
    if catalog:
        entry = catalog.get(_catalog_key(exercise.exercise_catalog_id))
        if entry is not None and entry.muscle_group:
            return entry.muscle_group
    return FALLBACK_MUSCLE_GROUP


def progress_percent(completed: int, total: int) -> int:
    """Whole percentage of completed sets, rounding halves up; 0 when total is 0."""
    if total <= 0:
        return 0
    ratio = Decimal(completed) * 100 / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _mean(values: List[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def compute_microcycle_metrics(
    microcycle: Microcycle,
    catalog: Optional[Mapping[str, CatalogExercise]] = None,
) -> MicrocycleMetrics:
    """
    Compute metrics for a fully loaded microcycle.

    Args:
        microcycle: Microcycle with days, exercises and sets populated
        catalog: Optional catalog entries keyed by ``str(catalog id)`` used
            when the backend did not embed the catalog in each exercise

    Returns:
        MicrocycleMetrics. ``series_by_muscle_group`` is the full, unsorted
        mapping; use ``top_muscle_groups`` for display.
    """
    total = 0
    completed = 0
    rir_values: List[float] = []
    by_group: Dict[str, int] = {}

    for _day, exercise, exercise_set in microcycle.iter_sets():
        total += 1
        if exercise_set.is_done:
            completed += 1
        if exercise_set.actual_rir is not None:
            rir_values.append(float(exercise_set.actual_rir))

        group = resolve_muscle_group(exercise, catalog)
        by_group[group] = by_group.get(group, 0) + 1

    training_days = [day for day in microcycle.days if not day.is_rest_day]
    readiness = [float(d.readiness_pre) for d in training_days if d.readiness_pre is not None]
    effort = [
        float(d.post_workout_effort)
        for d in training_days
        if d.post_workout_effort is not None
    ]

    return MicrocycleMetrics(
        total_series=total,
        completed_series=completed,
        progress_percent=progress_percent(completed, total),
        average_rir=_mean(rir_values),
        series_by_muscle_group=by_group,
        average_readiness=_mean(readiness),
        average_effort=_mean(effort),
        training_days=len(training_days),
        completed_days=sum(1 for d in training_days if d.is_completed or d.completed_at),
    )


def top_muscle_groups(
    series_by_muscle_group: Mapping[str, int],
    limit: int = DEFAULT_TOP_MUSCLE_GROUPS,
) -> List[Tuple[str, int]]:
    """Sort muscle groups by set count (descending, then by label) and keep ``limit``."""
    if limit <= 0:
        return []
    ranked = sorted(series_by_muscle_group.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]
