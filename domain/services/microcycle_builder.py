"""
Microcycle blueprint builder.

Builds the day/exercise/set tree for a new training week, either as an
empty skeleton or as a copy of an existing week.

Copy rules:
- Days keep ``day_number``, ``name``, ``is_rest_day`` and ``notes``.
- Exercises keep the catalog reference, ``order`` and the full
  prescription (series, reps, rest, expected RIR).
- Sets keep ``order``, ``reps``, ``expected_rir`` and ``is_amrap``.
  Logged data is never carried forward.
- An exercise without sets (legacy rows) gets ``DEFAULT_SET_COUNT``
  default sets so every exercise has at least one set.

Deload weeks are labelled only; the copy itself is identical and the coach
lowers intensity by hand afterwards.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from domain.models.blueprint import (
    DayBlueprint,
    ExerciseBlueprint,
    MicrocycleBlueprint,
    SetBlueprint,
)
from domain.models.plan import EntityId, Exercise, Microcycle


DEFAULT_SET_COUNT = 3
DEFAULT_SET_REPS = "8-12"
DEFAULT_SET_RIR = "2"

DELOAD_SUFFIX = " (Descarga)"
DAY_NAME_TEMPLATE = "Día {number}"
MICROCYCLE_NAME_TEMPLATE = "Microciclo {number}"


class MissingSetsError(ValueError):
    """Raised when a source exercise has no sets and synthesis is disabled."""

    def __init__(self, day_number: int, exercise: Exercise):
        super().__init__(
            f"Exercise {exercise.exercise_catalog_id} (day {day_number}, "
            f"position {exercise.order}) has no sets to copy"
        )
        self.day_number = day_number
        self.exercise_catalog_id = exercise.exercise_catalog_id
        self.exercise_order = exercise.order


@dataclass(frozen=True)
class SynthesizedSets:
    """Record of default sets created for an exercise that had none."""

    day_number: int
    exercise_order: int
    exercise_catalog_id: EntityId
    count: int = DEFAULT_SET_COUNT


@dataclass
class CopyOutcome:
    """Blueprint produced by a copy, plus what had to be made up."""

    blueprint: MicrocycleBlueprint
    synthesized: List[SynthesizedSets] = field(default_factory=list)


def microcycle_display_name(
    name: Optional[str],
    *,
    is_deload: bool,
    number: int,
) -> str:
    """
    Resolve the display name for a new microcycle.

    Blank names fall back to "Microciclo N". Deload weeks get the
    " (Descarga)" suffix exactly once.
    """
    resolved = (name or "").strip() or MICROCYCLE_NAME_TEMPLATE.format(number=number)
    if is_deload and not resolved.endswith(DELOAD_SUFFIX):
        resolved = f"{resolved}{DELOAD_SUFFIX}"
    return resolved


def default_sets(count: int = DEFAULT_SET_COUNT) -> List[SetBlueprint]:
    """Default prescription used when an exercise has no recorded sets."""
    return [
        SetBlueprint(
            order=position,
            reps=DEFAULT_SET_REPS,
            expected_rir=DEFAULT_SET_RIR,
            is_amrap=False,
        )
        for position in range(1, count + 1)
    ]


def build_empty_blueprint(
    *,
    name: str,
    order: int,
    is_deload: bool,
    days_per_week: int,
) -> MicrocycleBlueprint:
    """Skeleton week: ``days_per_week`` unconfigured training days."""
    if not 1 <= days_per_week <= 7:
        raise ValueError(f"days_per_week must be between 1 and 7, got {days_per_week}")

    days = [
        DayBlueprint(
            day_number=number,
            name=DAY_NAME_TEMPLATE.format(number=number),
            is_rest_day=False,
        )
        for number in range(1, days_per_week + 1)
    ]
    return MicrocycleBlueprint(name=name, order=order, is_deload=is_deload, days=days)


def _copy_exercise(
    exercise: Exercise,
    day_number: int,
    synthesize_missing_sets: bool,
    synthesized: List[SynthesizedSets],
) -> ExerciseBlueprint:
    if exercise.sets:
        sets = [
            SetBlueprint(
                order=source_set.order,
                reps=source_set.reps,
                expected_rir=source_set.expected_rir,
                is_amrap=source_set.is_amrap,
            )
            for source_set in sorted(exercise.sets, key=lambda s: s.order)
        ]
    elif synthesize_missing_sets:
        sets = default_sets()
        synthesized.append(
            SynthesizedSets(
                day_number=day_number,
                exercise_order=exercise.order,
                exercise_catalog_id=exercise.exercise_catalog_id,
                count=len(sets),
            )
        )
    else:
        raise MissingSetsError(day_number, exercise)

    return ExerciseBlueprint(
        exercise_catalog_id=exercise.exercise_catalog_id,
        order=exercise.order,
        series=exercise.series,
        reps=exercise.reps,
        rest=exercise.rest,
        expected_rir=exercise.expected_rir,
        notes=exercise.notes,
        sets=sets,
    )


def build_copy_blueprint(
    source: Microcycle,
    *,
    name: str,
    order: int,
    is_deload: bool,
    synthesize_missing_sets: bool = True,
) -> CopyOutcome:
    """
    Copy the structure of ``source`` into a new week.

    Args:
        source: Fully loaded microcycle (days, exercises and sets populated)
        name: Display name for the new week (already resolved)
        order: Order of the new week within the mesocycle
        is_deload: Deload flag for the new week
        synthesize_missing_sets: Create default sets for exercises without
            any; when False a ``MissingSetsError`` is raised instead

    Returns:
        CopyOutcome with the blueprint and any synthesized sets

    Raises:
        MissingSetsError: Source exercise without sets and synthesis disabled
        ValueError: Source week has no days
    """
    if not source.days:
        raise ValueError(f"Microcycle {source.id} has no days to copy")

    synthesized: List[SynthesizedSets] = []
    days: List[DayBlueprint] = []

    for day in sorted(source.days, key=lambda d: d.day_number):
        exercises: List[ExerciseBlueprint] = []
        if not day.is_rest_day:
            for exercise in sorted(day.exercises, key=lambda e: e.order):
                exercises.append(
                    _copy_exercise(
                        exercise, day.day_number, synthesize_missing_sets, synthesized
                    )
                )

        days.append(
            DayBlueprint(
                day_number=day.day_number,
                name=day.name,
                is_rest_day=day.is_rest_day,
                notes=day.notes,
                exercises=exercises,
            )
        )

    blueprint = MicrocycleBlueprint(
        name=name,
        order=order,
        is_deload=is_deload,
        days=days,
    )
    return CopyOutcome(blueprint=blueprint, synthesized=synthesized)
