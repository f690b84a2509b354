"""
Pure domain services for the periodization engine.

Nothing in this package performs I/O:
- ordering: which microcycle counts as "the last one"
- microcycle_builder: blueprint trees for new weeks (empty or copied)
- metrics: per-week volume, completion and readiness indicators
- visibility: the student-facing status filter
"""

from domain.services.metrics import (
    FALLBACK_MUSCLE_GROUP,
    MicrocycleMetrics,
    compute_microcycle_metrics,
    resolve_muscle_group,
    top_muscle_groups,
)
from domain.services.microcycle_builder import (
    CopyOutcome,
    MissingSetsError,
    SynthesizedSets,
    build_copy_blueprint,
    build_empty_blueprint,
    default_sets,
    microcycle_display_name,
)
from domain.services.ordering import (
    microcycle_sort_key,
    next_microcycle_order,
    select_last_microcycle,
)
from domain.services.visibility import is_visible_to_student, visible_to_student

__all__ = [
    # Metrics
    "FALLBACK_MUSCLE_GROUP",
    "MicrocycleMetrics",
    "compute_microcycle_metrics",
    "resolve_muscle_group",
    "top_muscle_groups",
    # Builder
    "CopyOutcome",
    "MissingSetsError",
    "SynthesizedSets",
    "build_copy_blueprint",
    "build_empty_blueprint",
    "default_sets",
    "microcycle_display_name",
    # Ordering
    "microcycle_sort_key",
    "next_microcycle_order",
    "select_last_microcycle",
    # Visibility
    "is_visible_to_student",
    "visible_to_student",
]
