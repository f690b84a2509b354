"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of the engine's ports
for fast, isolated testing. No plan backend or network required.

Features:
- All fakes implement the same Protocol interfaces as the HTTP adapters
- Supports seeding with test data
- Supports reset() for test isolation
- Failure injection for persistence and catalog outages
- Factory functions for common plan shapes

Usage:
    from tests.fakes import create_plan_repos, make_microcycle, make_day

    repos = create_plan_repos()
    repos.seed_student_plan(student_id="st-1", mesocycles=[...])
"""

from dataclasses import dataclass, field
from itertools import count
from typing import List, Optional, Sequence

from domain.models import (
    CatalogExercise,
    Day,
    EntityId,
    Exercise,
    ExerciseSet,
    Macrocycle,
    Mesocycle,
    MesocycleStatus,
    Microcycle,
)
from tests.fakes.exercise_catalog import FakeExerciseCatalog
from tests.fakes.plan_repository import (
    FakeMacrocycleRepository,
    FakeMesocycleRepository,
    FakeMicrocycleRepository,
)

_ids = count(1)


# =============================================================================
# Entity Builders
# =============================================================================


def make_set(
    order: int,
    *,
    reps: str = "10",
    expected_rir: str = "2",
    is_amrap: bool = False,
    **logged,
) -> ExerciseSet:
    """Build a set; keyword extras are logged fields (actual_rir, is_completed, ...)."""
    return ExerciseSet(
        id=next(_ids),
        order=order,
        reps=reps,
        expected_rir=expected_rir,
        is_amrap=is_amrap,
        **logged,
    )


def make_exercise(
    catalog_id: EntityId,
    order: int,
    *,
    sets: Optional[List[ExerciseSet]] = None,
    set_count: int = 3,
    muscle_group: Optional[str] = None,
    **prescription,
) -> Exercise:
    """Build an exercise with ``set_count`` default sets unless ``sets`` is given."""
    if sets is None:
        sets = [make_set(i) for i in range(1, set_count + 1)]
    catalog = (
        CatalogExercise(id=catalog_id, name=f"Exercise {catalog_id}", muscle_group=muscle_group)
        if muscle_group
        else None
    )
    return Exercise(
        id=next(_ids),
        exercise_catalog_id=catalog_id,
        order=order,
        sets=sets,
        catalog=catalog,
        **prescription,
    )


def make_day(
    day_number: int,
    exercises: Optional[List[Exercise]] = None,
    *,
    name: Optional[str] = None,
    is_rest_day: bool = False,
    **extra,
) -> Day:
    return Day(
        id=next(_ids),
        day_number=day_number,
        name=name if name is not None else f"Día {day_number}",
        is_rest_day=is_rest_day,
        exercises=exercises or [],
        **extra,
    )


def make_microcycle(
    microcycle_id: EntityId,
    *,
    mesocycle_id: EntityId = 1,
    order: int = 1,
    name: Optional[str] = None,
    is_deload: bool = False,
    days: Optional[List[Day]] = None,
) -> Microcycle:
    return Microcycle(
        id=microcycle_id,
        mesocycle_id=mesocycle_id,
        name=name or f"Microciclo {order}",
        order=order,
        is_deload=is_deload,
        days=days or [],
    )


def make_mesocycle(
    mesocycle_id: EntityId,
    *,
    macrocycle_id: EntityId = 1,
    status: MesocycleStatus = MesocycleStatus.DRAFT,
    microcycles: Optional[Sequence[Microcycle]] = None,
    name: Optional[str] = None,
) -> Mesocycle:
    """Build a mesocycle; microcycles are stored as summaries (no days)."""
    summaries = [m.model_copy(update={"days": []}) for m in (microcycles or [])]
    return Mesocycle(
        id=mesocycle_id,
        macrocycle_id=macrocycle_id,
        name=name or f"Mesociclo {mesocycle_id}",
        status=status,
        microcycles=summaries,
    )


# =============================================================================
# Factory Functions
# =============================================================================


@dataclass
class PlanRepos:
    """The four fakes wired together the way the engine factory wires adapters."""

    macrocycles: FakeMacrocycleRepository
    mesocycles: FakeMesocycleRepository
    microcycles: FakeMicrocycleRepository
    catalog: FakeExerciseCatalog = field(default_factory=FakeExerciseCatalog)

    def seed_student_plan(
        self,
        *,
        student_id: EntityId,
        mesocycles: List[Mesocycle],
        macrocycle_id: EntityId = 1,
    ) -> Macrocycle:
        """Seed one macrocycle for ``student_id`` owning ``mesocycles``."""
        macrocycle = Macrocycle(id=macrocycle_id, student_id=student_id, name="Temporada")
        self.macrocycles.seed([macrocycle])
        self.mesocycles.seed(
            [m.model_copy(update={"macrocycle_id": macrocycle_id}) for m in mesocycles]
        )
        return macrocycle

    def reset(self) -> None:
        self.macrocycles.reset()
        self.mesocycles.reset()
        self.microcycles.reset()
        self.catalog.reset()


def create_plan_repos() -> PlanRepos:
    """Create empty, linked plan fakes."""
    macrocycles = FakeMacrocycleRepository()
    mesocycles = FakeMesocycleRepository(macrocycles)
    microcycles = FakeMicrocycleRepository(mesocycles)
    return PlanRepos(
        macrocycles=macrocycles,
        mesocycles=mesocycles,
        microcycles=microcycles,
    )


__all__ = [
    # Fakes
    "FakeMacrocycleRepository",
    "FakeMesocycleRepository",
    "FakeMicrocycleRepository",
    "FakeExerciseCatalog",
    "PlanRepos",
    # Factories
    "create_plan_repos",
    "make_set",
    "make_exercise",
    "make_day",
    "make_microcycle",
    "make_mesocycle",
]
