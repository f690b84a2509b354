"""
Write-side payloads for creating a microcycle.

A blueprint is the tree the coach side sends to the backend to create a
new week in a single call. Blueprint sets carry prescription fields only,
so logged data (actual RIR, completion) can never be written through them.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator, model_validator

from domain.models.plan import EntityId, PlanModel, ensure_unique


class SetBlueprint(PlanModel):
    """Prescription for one set."""

    order: int = Field(..., ge=0)
    reps: Optional[str] = None
    expected_rir: Optional[str] = None
    is_amrap: bool = False

    model_config = {"frozen": True}


class ExerciseBlueprint(PlanModel):
    """Prescription for one exercise; always carries at least one set."""

    exercise_catalog_id: EntityId
    order: int = Field(..., ge=0)
    series: Optional[str] = None
    reps: Optional[str] = None
    rest: Optional[str] = None
    expected_rir: Optional[str] = None
    notes: Optional[str] = None
    sets: List[SetBlueprint] = Field(..., min_length=1)

    @field_validator("sets")
    @classmethod
    def validate_set_orders(cls, v: List[SetBlueprint]) -> List[SetBlueprint]:
        ensure_unique((s.order for s in v), "set order")
        return v


class DayBlueprint(PlanModel):
    """One day of the new week."""

    day_number: int = Field(..., ge=1, le=7)
    name: str
    is_rest_day: bool = False
    notes: Optional[str] = None
    exercises: List[ExerciseBlueprint] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_structure(self) -> "DayBlueprint":
        if self.is_rest_day and self.exercises:
            raise ValueError(f"Rest day {self.day_number} cannot have exercises")
        ensure_unique((e.order for e in self.exercises), "exercise order")
        return self


class MicrocycleBlueprint(PlanModel):
    """The full tree for a new microcycle."""

    name: str = Field(..., min_length=1)
    order: int = Field(..., ge=1)
    is_deload: bool = False
    days: List[DayBlueprint] = Field(..., min_length=1, max_length=7)

    @field_validator("days")
    @classmethod
    def validate_day_numbers(cls, v: List[DayBlueprint]) -> List[DayBlueprint]:
        ensure_unique((d.day_number for d in v), "day number")
        return v

    @property
    def total_exercises(self) -> int:
        return sum(len(day.exercises) for day in self.days)

    @property
    def total_sets(self) -> int:
        return sum(len(e.sets) for day in self.days for e in day.exercises)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for the backend (camelCase keys, no nulls)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
