"""
Application Use Cases for the periodization engine.

This package contains application-level use cases that orchestrate domain
logic and coordinate between ports/adapters:
- SetMesocycleStatus: lifecycle transitions and single-active supersession
- CreateMicrocycle: append a week, empty or copied from the last one
- GetMicrocycleMetrics: per-week volume, completion and readiness
- GetStudentMesocycles: active mesocycle and student-visible list

Use cases take their ports through the constructor and return result
dataclasses holding domain models.

Usage:
    from application.use_cases import (
        SetMesocycleStatusUseCase,
        CreateMicrocycleUseCase,
    )

    status_use_case = SetMesocycleStatusUseCase(
        mesocycle_repo=mesocycle_repo,
        macrocycle_repo=macrocycle_repo,
        cache=cache,
    )
    result = status_use_case.execute(mesocycle_id=12, new_status="active")

    create_use_case = CreateMicrocycleUseCase(
        mesocycle_repo=mesocycle_repo,
        microcycle_repo=microcycle_repo,
        catalog=catalog,
        cache=cache,
    )
    result = create_use_case.execute(mesocycle_id=12, is_deload=True)
"""

from application.use_cases.create_microcycle import (
    CreateMicrocycleResult,
    CreateMicrocycleUseCase,
)
from application.use_cases.get_microcycle_metrics import (
    GetMicrocycleMetricsUseCase,
    MicrocycleMetricsResult,
)
from application.use_cases.get_student_mesocycles import GetStudentMesocyclesUseCase
from application.use_cases.set_mesocycle_status import (
    SetMesocycleStatusUseCase,
    StatusChangeResult,
)

__all__ = [
    # SetMesocycleStatus
    "SetMesocycleStatusUseCase",
    "StatusChangeResult",
    # CreateMicrocycle
    "CreateMicrocycleUseCase",
    "CreateMicrocycleResult",
    # GetMicrocycleMetrics
    "GetMicrocycleMetricsUseCase",
    "MicrocycleMetricsResult",
    # GetStudentMesocycles
    "GetStudentMesocyclesUseCase",
]
