"""
Domain layer for the periodization engine.

This package contains pure domain models and services that are independent
of infrastructure concerns (plan backend, exercise catalog, caching).
"""

from domain.models import (
    Day,
    Exercise,
    ExerciseSet,
    Macrocycle,
    Mesocycle,
    MesocycleStatus,
    Microcycle,
)

__all__ = [
    "Day",
    "Exercise",
    "ExerciseSet",
    "Macrocycle",
    "Mesocycle",
    "MesocycleStatus",
    "Microcycle",
]
