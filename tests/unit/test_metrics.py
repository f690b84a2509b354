"""
Unit tests for microcycle metrics aggregation.
"""

import pytest

from domain.models import CatalogExercise
from domain.services import (
    FALLBACK_MUSCLE_GROUP,
    compute_microcycle_metrics,
    resolve_muscle_group,
    top_muscle_groups,
)
from domain.services.metrics import progress_percent
from tests.fakes import make_day, make_exercise, make_microcycle, make_set


def _sets(total, completed, rir=None):
    return [
        make_set(i, is_completed=i <= completed, actual_rir=rir if i <= completed else None)
        for i in range(1, total + 1)
    ]


@pytest.mark.unit
class TestProgress:
    @pytest.mark.parametrize(
        "completed,total,expected",
        [
            (0, 0, 0),
            (6, 10, 60),
            (1, 3, 33),
            (2, 3, 67),
            (1, 8, 13),  # 12.5 rounds half up
            (10, 10, 100),
        ],
    )
    def test_progress_percent(self, completed, total, expected):
        assert progress_percent(completed, total) == expected


@pytest.mark.unit
class TestComputeMetrics:
    def test_empty_week(self):
        metrics = compute_microcycle_metrics(make_microcycle(1, days=[make_day(1), make_day(2, is_rest_day=True)]))

        assert metrics.total_series == 0
        assert metrics.completed_series == 0
        assert metrics.progress_percent == 0
        assert metrics.average_rir is None
        assert metrics.series_by_muscle_group == {}
        assert metrics.training_days == 1

    def test_six_of_ten_completed(self):
        week = make_microcycle(
            1,
            days=[
                make_day(1, [make_exercise(1, 1, sets=_sets(4, 4, rir=2.0), muscle_group="Pecho")]),
                make_day(2, [make_exercise(2, 1, sets=_sets(6, 2, rir=1.0), muscle_group="Espalda")]),
            ],
        )
        metrics = compute_microcycle_metrics(week)

        assert metrics.total_series == 10
        assert metrics.completed_series == 6
        assert metrics.progress_percent == 60
        assert metrics.average_rir == pytest.approx((4 * 2.0 + 2 * 1.0) / 6)
        assert metrics.series_by_muscle_group == {"Pecho": 4, "Espalda": 6}

    def test_no_logged_rir_gives_none(self):
        week = make_microcycle(1, days=[make_day(1, [make_exercise(1, 1, sets=_sets(3, 3))])])
        assert compute_microcycle_metrics(week).average_rir is None

    def test_completed_at_counts_as_completed(self):
        sets = [make_set(1, completed_at="2026-03-02T09:00:00Z"), make_set(2)]
        week = make_microcycle(1, days=[make_day(1, [make_exercise(1, 1, sets=sets)])])
        assert compute_microcycle_metrics(week).completed_series == 1

    def test_unresolved_muscle_group_falls_back(self):
        week = make_microcycle(1, days=[make_day(1, [make_exercise(77, 1, set_count=2)])])
        metrics = compute_microcycle_metrics(week)
        assert metrics.series_by_muscle_group == {FALLBACK_MUSCLE_GROUP: 2}
        assert FALLBACK_MUSCLE_GROUP == "Otro"

    def test_catalog_lookup_used_when_not_embedded(self):
        week = make_microcycle(1, days=[make_day(1, [make_exercise(77, 1, set_count=2)])])
        catalog = {"77": CatalogExercise(id=77, name="Remo", muscle_group="Espalda")}
        assert compute_microcycle_metrics(week, catalog).series_by_muscle_group == {"Espalda": 2}

    def test_readiness_indicators(self):
        week = make_microcycle(
            1,
            days=[
                make_day(1, [make_exercise(1, 1)], readiness_pre=8, post_workout_effort=7, is_completed=True),
                make_day(2, [make_exercise(2, 1)], readiness_pre=6),
                make_day(3, is_rest_day=True),
            ],
        )
        metrics = compute_microcycle_metrics(week)

        assert metrics.average_readiness == 7.0
        assert metrics.average_effort == 7.0
        assert metrics.training_days == 2
        assert metrics.completed_days == 1

    def test_pure_and_idempotent(self):
        week = make_microcycle(1, days=[make_day(1, [make_exercise(1, 1, sets=_sets(5, 3, rir=2.0))])])
        before = week.model_dump()

        first = compute_microcycle_metrics(week)
        second = compute_microcycle_metrics(week)

        assert first == second
        assert week.model_dump() == before
        assert first.to_dict()["progress_percent"] == 60


@pytest.mark.unit
class TestMuscleGroups:
    def test_embedded_entry_wins_over_lookup(self):
        exercise = make_exercise(5, 1, muscle_group="Hombro")
        lookup = {"5": CatalogExercise(id=5, muscle_group="Otra cosa")}
        assert resolve_muscle_group(exercise, lookup) == "Hombro"

    def test_top_groups_sorted_and_limited(self):
        mapping = {f"Grupo {i:02d}": i for i in range(1, 13)}
        mapping["Empate"] = 12

        top = top_muscle_groups(mapping)

        assert len(top) == 10
        assert top[0] == ("Empate", 12)
        assert top[1] == ("Grupo 12", 12)
        assert top[-1] == ("Grupo 04", 4)

    def test_top_groups_non_positive_limit(self):
        assert top_muscle_groups({"Pecho": 3}, limit=0) == []
