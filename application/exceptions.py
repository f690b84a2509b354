"""
Application-layer exceptions.

These exceptions are used across application and infrastructure layers.
Coach-facing operations raise them with a specific, actionable message.

Taxonomy:
- NotFound: a referenced entity id does not resolve
- InvalidArgument: malformed input (unknown status, bad days_per_week, ...)
- InvariantViolation: a write would leave two active mesocycles for a student
- DanglingReference: catalog id that no longer resolves (warning only)
- PersistenceFailure: opaque failure from the plan backend, never retried here
"""

from typing import Optional

from domain.models.plan import EntityId


class PlanEngineError(Exception):
    """Base class for periodization engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(PlanEngineError):
    """A referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: EntityId):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class InvalidArgument(PlanEngineError):
    """Input rejected before any write happened."""

    pass


class InvariantViolation(PlanEngineError):
    """A write would break a plan invariant (e.g. two active mesocycles)."""

    pass


class DanglingReference(PlanEngineError):
    """
    An exercise references a catalog id the catalog no longer knows.

    Non-fatal: the engine copies the raw id, logs the problem and reports
    it in the operation result. It is never raised out of the engine.
    """

    def __init__(self, exercise_catalog_id: EntityId, day_number: Optional[int] = None):
        location = f" on day {day_number}" if day_number is not None else ""
        super().__init__(
            f"Exercise catalog id {exercise_catalog_id}{location} does not resolve"
        )
        self.exercise_catalog_id = exercise_catalog_id
        self.day_number = day_number


class PersistenceFailure(PlanEngineError):
    """The plan backend or catalog failed; surfaced to the caller unmodified."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
