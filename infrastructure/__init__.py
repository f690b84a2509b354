"""
Infrastructure Layer for the periodization engine.

This package contains concrete implementations of the application ports:
- api/: httpx clients for the plan backend and the exercise catalog
"""

from infrastructure.api import (
    HttpExerciseCatalog,
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
