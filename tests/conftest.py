"""
Shared pytest fixtures for the periodization engine tests.
"""

import pytest

from application.cache import PlanCache
from tests.fakes import PlanRepos, create_plan_repos


class FakeClock:
    """Manually advanced monotonic clock for TTL tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def repos() -> PlanRepos:
    """Fresh, linked plan fakes."""
    return create_plan_repos()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> PlanCache:
    return PlanCache(clock=clock)
