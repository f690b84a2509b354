"""
Training plan entities.

The plan is a strict hierarchy owned by a coach and logged against by a
student:

    Macrocycle ─► Mesocycle ─► Microcycle ─► Day ─► Exercise ─► ExerciseSet

These models mirror what the plan backend returns. The backend speaks
camelCase JSON, so every model accepts both ``exerciseCatalogId`` and
``exercise_catalog_id`` and serializes with the camelCase aliases.

Logged fields (``actual_*``, ``is_completed``, ``completed_at``,
``readiness_pre``, ``post_workout_effort``) are only ever written by the
student; nothing in this package sets them.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from domain.models.status import MesocycleStatus

# Backend ids are numeric for older rows and strings for newer ones.
EntityId = Union[int, str]


class PlanModel(BaseModel):
    """Base model for plan entities (camelCase aliases, snake_case access)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


def _prescription_to_str(value: Any) -> Any:
    """Prescriptions are strings ("8-12"), but older rows store plain numbers."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    return value


def ensure_unique(values: Iterable[Any], label: str) -> None:
    """Raise ValueError if an order field repeats within its parent."""
    seen = set()
    for value in values:
        if value in seen:
            raise ValueError(f"Duplicate {label} {value!r}")
        seen.add(value)


class Objective(str, Enum):
    """Training objective of a macrocycle or mesocycle."""

    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    ENDURANCE = "endurance"
    FAT_LOSS = "fat_loss"
    GENERAL = "general"


class CatalogExercise(PlanModel):
    """Entry from the external exercise catalog."""

    id: EntityId
    name: str = ""
    muscle_group: Optional[str] = None


class ExerciseSet(PlanModel):
    """
    One prescribed set and, once trained, its logged result.

    ``reps`` and ``expected_rir`` are prescriptions and may be ranges.
    """

    id: Optional[EntityId] = None
    order: int = Field(..., ge=0)
    reps: Optional[str] = None
    expected_rir: Optional[str] = None
    is_amrap: bool = False

    actual_reps: Optional[str] = None
    actual_load: Optional[float] = None
    actual_rir: Optional[float] = None
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    coerce_prescription = field_validator(
        "reps", "expected_rir", "actual_reps", mode="before"
    )(_prescription_to_str)

    @property
    def is_done(self) -> bool:
        """Completion marker: explicit flag or a completion timestamp."""
        return self.is_completed or self.completed_at is not None

    @property
    def has_logged_data(self) -> bool:
        """Whether the student has logged anything on this set."""
        return (
            self.is_done
            or self.actual_rir is not None
            or self.actual_reps is not None
            or self.actual_load is not None
        )


class Exercise(PlanModel):
    """A day's instance of a catalog movement with its prescription and sets."""

    id: Optional[EntityId] = None
    day_id: Optional[EntityId] = None
    exercise_catalog_id: EntityId
    order: int = Field(..., ge=0)

    series: Optional[str] = None
    reps: Optional[str] = None
    rest: Optional[str] = None
    expected_rir: Optional[str] = None
    notes: Optional[str] = None

    catalog: Optional[CatalogExercise] = Field(default=None, alias="exerciseCatalog")
    sets: List[ExerciseSet] = Field(default_factory=list)

    coerce_prescription = field_validator(
        "series", "reps", "rest", "expected_rir", mode="before"
    )(_prescription_to_str)

    @field_validator("sets")
    @classmethod
    def validate_set_orders(cls, v: List[ExerciseSet]) -> List[ExerciseSet]:
        ensure_unique((s.order for s in v), "set order")
        return v

    @property
    def muscle_group(self) -> Optional[str]:
        """Muscle group from the embedded catalog entry, if the backend expanded it."""
        if self.catalog is not None and self.catalog.muscle_group:
            return self.catalog.muscle_group
        return None


class Day(PlanModel):
    """
    One calendar slot of a training week.

    A rest day never has exercises. A training day with no exercises is
    "unconfigured", which is not the same thing as rest.
    """

    id: Optional[EntityId] = None
    microcycle_id: Optional[EntityId] = None
    day_number: int = Field(..., ge=1, le=7)
    name: str = ""
    is_rest_day: bool = False
    notes: Optional[str] = None

    is_completed: bool = False
    completed_at: Optional[datetime] = None
    readiness_pre: Optional[int] = Field(default=None, ge=1, le=10)
    post_workout_effort: Optional[int] = Field(default=None, ge=1, le=10)

    exercises: List[Exercise] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_structure(self) -> "Day":
        if self.is_rest_day and self.exercises:
            raise ValueError(
                f"Rest day {self.day_number} cannot have exercises "
                f"({len(self.exercises)} found)"
            )
        ensure_unique((e.order for e in self.exercises), "exercise order")
        return self

    @property
    def is_unconfigured(self) -> bool:
        """A training day the coach has not filled in yet."""
        return not self.is_rest_day and not self.exercises

    @property
    def total_sets(self) -> int:
        return sum(len(exercise.sets) for exercise in self.exercises)


class Microcycle(PlanModel):
    """
    One training week.

    When listed as part of a mesocycle only the summary fields are
    populated; ``days`` is filled when the microcycle is fetched on its own.
    """

    id: Optional[EntityId] = None
    mesocycle_id: Optional[EntityId] = None
    name: str = ""
    order: int = Field(default=1, ge=0)
    is_deload: bool = False
    days: List[Day] = Field(default_factory=list, max_length=7)

    @field_validator("days")
    @classmethod
    def validate_day_numbers(cls, v: List[Day]) -> List[Day]:
        ensure_unique((d.day_number for d in v), "day number")
        return v

    @property
    def total_exercises(self) -> int:
        return sum(len(day.exercises) for day in self.days)

    @property
    def total_sets(self) -> int:
        return sum(day.total_sets for day in self.days)

    def iter_sets(self):
        """Yield ``(day, exercise, set)`` for every set in the week."""
        for day in self.days:
            for exercise in day.exercises:
                for exercise_set in exercise.sets:
                    yield day, exercise, exercise_set


class Mesocycle(PlanModel):
    """A training phase with one objective and one lifecycle status."""

    id: EntityId
    macrocycle_id: Optional[EntityId] = None
    name: str = ""
    objective: Optional[Objective] = None
    status: MesocycleStatus = MesocycleStatus.DRAFT
    microcycles: List[Microcycle] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> MesocycleStatus:
        return MesocycleStatus.parse(v)

    @field_validator("objective", mode="before")
    @classmethod
    def normalize_objective(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @property
    def is_active(self) -> bool:
        return self.status is MesocycleStatus.ACTIVE

    @property
    def is_student_visible(self) -> bool:
        return self.status.is_student_visible


class Macrocycle(PlanModel):
    """Top-level training block for one student."""

    id: EntityId
    student_id: EntityId
    name: str = ""
    objective: Optional[Objective] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    mesocycles: List[Mesocycle] = Field(default_factory=list)

    @field_validator("objective", mode="before")
    @classmethod
    def normalize_objective(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower() or None
        return v
