"""
HTTP adapters implementing the engine's ports.
"""

from infrastructure.api.exercise_catalog_client import HttpExerciseCatalog
from infrastructure.api.plan_api_client import (
    HttpMacrocycleRepository,
    HttpMesocycleRepository,
    HttpMicrocycleRepository,
    PlanApiClient,
)

__all__ = [
    "PlanApiClient",
    "HttpMacrocycleRepository",
    "HttpMesocycleRepository",
    "HttpMicrocycleRepository",
    "HttpExerciseCatalog",
]
