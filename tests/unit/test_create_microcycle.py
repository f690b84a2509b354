"""
Unit tests for CreateMicrocycleUseCase.

Tests for:
- Empty skeletons (explicit, and when there is nothing to copy)
- Copying the last week (structure kept, logged data dropped)
- Names, order and the deload label
- Synthesized sets and dangling catalog references
- Validation and atomic persistence
"""

import pytest

from application.cache import CacheKey, mesocycle_tag
from application.exceptions import InvalidArgument, NotFound, PersistenceFailure
from application.use_cases import CreateMicrocycleResult, CreateMicrocycleUseCase
from domain.models import CatalogExercise
from tests.fakes import make_day, make_exercise, make_mesocycle, make_microcycle, make_set


@pytest.fixture
def use_case(repos, cache):
    return CreateMicrocycleUseCase(
        mesocycle_repo=repos.mesocycles,
        microcycle_repo=repos.microcycles,
        catalog=repos.catalog,
        cache=cache,
    )


def _seed_weeks(repos, weeks, mesocycle_id=1):
    repos.seed_student_plan(
        student_id="st-1",
        mesocycles=[make_mesocycle(mesocycle_id, microcycles=weeks)],
    )
    repos.microcycles.seed(weeks)


def _logged_week(microcycle_id=20, order=1):
    """Week with 3 days, 5 exercises and logged data on some sets."""
    return make_microcycle(
        microcycle_id,
        order=order,
        days=[
            make_day(
                1,
                [
                    make_exercise(101, 1, sets=[make_set(1, actual_rir=1.0, is_completed=True), make_set(2)]),
                    make_exercise(102, 2, set_count=3),
                ],
                readiness_pre=8,
            ),
            make_day(2, is_rest_day=True),
            make_day(
                3,
                [
                    make_exercise(103, 1, set_count=4),
                    make_exercise(104, 2, set_count=2),
                    make_exercise(105, 3, set_count=1),
                ],
            ),
        ],
    )


# =============================================================================
# Skeletons
# =============================================================================


@pytest.mark.unit
class TestSkeleton:
    def test_first_microcycle_is_empty_skeleton(self, use_case, repos):
        _seed_weeks(repos, [])

        result = use_case.execute(1)

        assert isinstance(result, CreateMicrocycleResult)
        assert result.copied_from_id is None
        assert result.is_copy is False
        week = result.microcycle
        assert week.name == "Microciclo 1"
        assert week.order == 1
        assert [(d.day_number, d.name) for d in week.days] == [
            (1, "Día 1"),
            (2, "Día 2"),
            (3, "Día 3"),
            (4, "Día 4"),
        ]
        assert all(d.is_unconfigured for d in week.days)

    def test_explicit_skeleton_ignores_previous_week(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])

        result = use_case.execute(1, copy_from_last=False, days_per_week=6)

        assert result.copied_from_id is None
        assert len(result.microcycle.days) == 6
        assert result.microcycle.order == 2
        assert result.microcycle.total_sets == 0

    def test_last_week_without_days_gives_skeleton(self, use_case, repos):
        _seed_weeks(repos, [make_microcycle(20, order=1)])

        result = use_case.execute(1, days_per_week=3)

        assert result.copied_from_id is None
        assert len(result.microcycle.days) == 3

    @pytest.mark.parametrize("days", [0, 8, -3, True, "4"])
    def test_days_per_week_validated_before_any_io(self, use_case, repos, days):
        _seed_weeks(repos, [])

        with pytest.raises(InvalidArgument) as exc_info:
            use_case.execute(1, days_per_week=days)

        assert "days_per_week" in exc_info.value.message
        assert repos.microcycles.created_payloads == []

    def test_configured_default_days(self, repos):
        _seed_weeks(repos, [])
        use_case = CreateMicrocycleUseCase(
            mesocycle_repo=repos.mesocycles,
            microcycle_repo=repos.microcycles,
            default_days_per_week=5,
        )
        assert len(use_case.execute(1).microcycle.days) == 5


# =============================================================================
# Copies
# =============================================================================


@pytest.mark.unit
class TestCopy:
    def test_copy_of_last_week(self, use_case, repos):
        source = _logged_week()
        _seed_weeks(repos, [source])

        result = use_case.execute(1)

        assert result.copied_from_id == 20
        week = result.microcycle
        assert week.name == "Microciclo 2"
        assert week.order == 2
        assert len(week.days) == 3
        assert week.total_exercises == 5
        assert week.total_sets == source.total_sets
        assert week.days[1].is_rest_day and week.days[1].exercises == []

    def test_copy_drops_logged_data(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])

        week = use_case.execute(1).microcycle

        assert all(not s.has_logged_data for _, _, s in week.iter_sets())
        assert all(d.readiness_pre is None for d in week.days)

    def test_copies_highest_order_week(self, use_case, repos):
        weeks = [
            _logged_week(20, order=1),
            make_microcycle(21, order=3, days=[make_day(1, [make_exercise(900, 1)])]),
            make_microcycle(22, order=2, days=[make_day(1, [make_exercise(800, 1)])]),
        ]
        _seed_weeks(repos, weeks)

        result = use_case.execute(1)

        assert result.copied_from_id == 21
        assert result.microcycle.order == 4
        assert result.microcycle.days[0].exercises[0].exercise_catalog_id == 900

    def test_deload_copy(self, use_case, repos):
        """Three weeks, copy as deload: fourth week, same tree, labelled."""
        weeks = [_logged_week(20 + i, order=i + 1) for i in range(3)]
        _seed_weeks(repos, weeks)

        result = use_case.execute(1, is_deload=True)

        week = result.microcycle
        assert week.order == 4
        assert week.is_deload is True
        assert week.name == "Microciclo 4 (Descarga)"
        assert week.total_sets == weeks[-1].total_sets
        assert result.copied_from_id == 22

    def test_custom_name(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])
        assert use_case.execute(1, name="  Semana pesada ").microcycle.name == "Semana pesada"

    def test_source_read_fresh(self, use_case, repos, cache):
        _seed_weeks(repos, [_logged_week()])
        cache.set(CacheKey.microcycle(20), make_microcycle(20, days=[make_day(1)]))

        result = use_case.execute(1)

        assert result.microcycle.total_exercises == 5
        assert repos.microcycles.get_calls == 1

    def test_listed_source_missing(self, use_case, repos):
        repos.seed_student_plan(
            student_id="st-1",
            mesocycles=[make_mesocycle(1, microcycles=[make_microcycle(20)])],
        )

        with pytest.raises(NotFound) as exc_info:
            use_case.execute(1)
        assert exc_info.value.entity == "Microcycle"


# =============================================================================
# Warnings
# =============================================================================


@pytest.mark.unit
class TestWarnings:
    def test_exercise_without_sets_is_synthesized(self, use_case, repos, caplog):
        source = make_microcycle(20, days=[make_day(1, [make_exercise(101, 1, sets=[])])])
        _seed_weeks(repos, [source])

        result = use_case.execute(1)

        sets = result.microcycle.days[0].exercises[0].sets
        assert [(s.order, s.reps, s.expected_rir) for s in sets] == [
            (1, "8-12", "2"),
            (2, "8-12", "2"),
            (3, "8-12", "2"),
        ]
        assert len(result.synthesized) == 1
        assert "had no sets" in result.warnings[0]
        assert "synthesizing 3" in caplog.text

    def test_synthesis_disabled_rejects_copy(self, repos):
        _seed_weeks(repos, [make_microcycle(20, days=[make_day(1, [make_exercise(101, 1, sets=[])])])])
        use_case = CreateMicrocycleUseCase(
            mesocycle_repo=repos.mesocycles,
            microcycle_repo=repos.microcycles,
            synthesize_missing_sets=False,
        )

        with pytest.raises(InvalidArgument) as exc_info:
            use_case.execute(1)

        assert "101" in exc_info.value.message
        assert repos.microcycles.created_payloads == []

    def test_dangling_references_reported(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])
        repos.catalog.seed([CatalogExercise(id=i, name=f"E{i}") for i in (101, 102, 103, 105)])

        result = use_case.execute(1)

        assert [(r.exercise_catalog_id, r.day_number) for r in result.dangling_references] == [(104, 3)]
        # The raw id is copied anyway.
        assert result.microcycle.days[2].exercises[1].exercise_catalog_id == 104
        assert any("104" in w for w in result.warnings)

    def test_catalog_outage_does_not_block_copy(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])
        repos.catalog.simulate_outage()

        result = use_case.execute(1)

        assert result.dangling_references == []
        assert result.microcycle.total_exercises == 5

    def test_skeleton_skips_catalog(self, use_case, repos):
        _seed_weeks(repos, [])
        use_case.execute(1)
        assert repos.catalog.requested == []


# =============================================================================
# Persistence
# =============================================================================


@pytest.mark.unit
class TestPersistence:
    def test_missing_mesocycle(self, use_case, repos):
        with pytest.raises(NotFound) as exc_info:
            use_case.execute(404)
        assert str(exc_info.value) == "Mesocycle 404 not found"

    def test_single_atomic_create(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])

        use_case.execute(1)

        assert len(repos.microcycles.created_payloads) == 1
        payload = repos.microcycles.created_payloads[0]
        assert payload["order"] == 2
        assert len(payload["days"]) == 3

    def test_failure_leaves_nothing_behind(self, use_case, repos, cache):
        _seed_weeks(repos, [_logged_week()])
        cache.set(CacheKey.microcycle(20), "week", tags=[mesocycle_tag(1)])
        repos.microcycles.simulate_create_failure()

        with pytest.raises(PersistenceFailure):
            use_case.execute(1)

        assert repos.microcycles.count() == 1
        assert len(repos.mesocycles.get_by_id(1).microcycles) == 1
        assert cache.get(CacheKey.microcycle(20)) == "week"

    def test_success_invalidates_mesocycle_cache(self, use_case, repos, cache):
        _seed_weeks(repos, [_logged_week()])
        cache.set(CacheKey.microcycle(20), "week", tags=[mesocycle_tag(1)])
        cache.set(CacheKey.student("st-1"), ["list"], tags=[mesocycle_tag(1)])

        use_case.execute(1)

        assert cache.get(CacheKey.microcycle(20)) is None
        assert cache.get(CacheKey.student("st-1")) is None

    def test_consecutive_weeks_keep_counting(self, use_case, repos):
        _seed_weeks(repos, [_logged_week()])

        second = use_case.execute(1)
        third = use_case.execute(1)

        assert (second.microcycle.order, third.microcycle.order) == (2, 3)
        assert third.copied_from_id == second.microcycle.id
        assert third.microcycle.name == "Microciclo 3"
