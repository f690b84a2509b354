"""
Domain models for the periodization engine.

These models represent the training plan hierarchy:
- Macrocycle: multi-month block for one student
- Mesocycle: a phase of weeks with one objective and a lifecycle status
- Microcycle: one training week
- Day, Exercise, ExerciseSet: the week's content and the student's log

Write-side blueprints describe a new microcycle tree before it exists.

Usage:
    >>> from domain.models import Microcycle, MesocycleStatus

    >>> week = Microcycle.model_validate(
    ...     {"id": 7, "name": "Semana 1", "order": 1, "isDeload": False, "days": []}
    ... )
    >>> MesocycleStatus.DRAFT.transition_to(MesocycleStatus.PUBLISHED)
    <MesocycleStatus.PUBLISHED: 'published'>
"""

from domain.models.blueprint import (
    DayBlueprint,
    ExerciseBlueprint,
    MicrocycleBlueprint,
    SetBlueprint,
)
from domain.models.plan import (
    CatalogExercise,
    Day,
    EntityId,
    Exercise,
    ExerciseSet,
    Macrocycle,
    Mesocycle,
    Microcycle,
    Objective,
)
from domain.models.status import (
    STUDENT_VISIBLE_STATUSES,
    InvalidTransition,
    MesocycleStatus,
)

__all__ = [
    # Entities
    "Macrocycle",
    "Mesocycle",
    "Microcycle",
    "Day",
    "Exercise",
    "ExerciseSet",
    "CatalogExercise",
    "EntityId",
    # Blueprints
    "MicrocycleBlueprint",
    "DayBlueprint",
    "ExerciseBlueprint",
    "SetBlueprint",
    # Enums / state machine
    "Objective",
    "MesocycleStatus",
    "STUDENT_VISIBLE_STATUSES",
    "InvalidTransition",
]
