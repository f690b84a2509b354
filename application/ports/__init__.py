"""
Repository Interfaces (Ports) for the periodization engine.

This package defines abstract interfaces that decouple the engine from the
plan backend and the exercise catalog. Implementations live in the
infrastructure layer; in-memory fakes live in tests/fakes.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the engine needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import MesocycleRepository

    class StatusService:
        def __init__(self, mesocycle_repo: MesocycleRepository):
            self.mesocycle_repo = mesocycle_repo
"""

from application.ports.exercise_catalog import ExerciseCatalog
from application.ports.plan_repository import (
    MacrocycleRepository,
    MesocycleRepository,
    MicrocycleRepository,
)

__all__ = [
    "MacrocycleRepository",
    "MesocycleRepository",
    "MicrocycleRepository",
    "ExerciseCatalog",
]
