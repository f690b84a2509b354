"""
Engine factory.

Wires settings, HTTP adapters, the plan cache and the use cases into one
PlanEngine object. The host application (coach dashboard backend, student
app backend, workers) creates one engine per process and calls its use
cases.

Usage:
    from backend.engine import create_engine
    from backend.settings import Settings

    # Default engine (uses get_settings())
    engine = create_engine()
    engine.set_mesocycle_status.execute(mesocycle_id=12, new_status="active")

    # Test engine against a mocked backend
    test_settings = Settings(environment="test", _env_file=None)
    engine = create_engine(settings=test_settings, transport=httpx.MockTransport(handler))
"""

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
import sentry_sdk

from application.cache import CacheNamespace, PlanCache
from application.use_cases import (
    CreateMicrocycleUseCase,
    GetMicrocycleMetricsUseCase,
    GetStudentMesocyclesUseCase,
    SetMesocycleStatusUseCase,
)
from backend.settings import Settings, get_settings
from infrastructure.api import (
    HttpExerciseCatalog,
    HttpMacrocycleRepository,
    HttpMesocycleRepository,
    HttpMicrocycleRepository,
    PlanApiClient,
)

logger = logging.getLogger(__name__)


@dataclass
class PlanEngine:
    """Use cases of the periodization engine, ready to call."""

    settings: Settings
    cache: PlanCache
    set_mesocycle_status: SetMesocycleStatusUseCase
    create_microcycle: CreateMicrocycleUseCase
    get_microcycle_metrics: GetMicrocycleMetricsUseCase
    student_mesocycles: GetStudentMesocyclesUseCase
    plan_client: PlanApiClient
    catalog_client: PlanApiClient

    def close(self) -> None:
        self.plan_client.close()
        if self.catalog_client is not self.plan_client:
            self.catalog_client.close()


def create_engine(
    settings: Optional[Settings] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> PlanEngine:
    """
    Create and wire a PlanEngine instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        transport: Optional httpx transport shared by both HTTP clients

    Returns:
        Configured PlanEngine instance.
    """
    if settings is None:
        settings = get_settings()

    _init_sentry(settings)

    plan_client = PlanApiClient(
        base_url=settings.plan_api_url,
        token=settings.plan_api_token,
        timeout=settings.plan_api_timeout_seconds,
        transport=transport,
    )
    if settings.effective_catalog_api_url == settings.plan_api_url:
        catalog_client = plan_client
    else:
        catalog_client = PlanApiClient(
            base_url=settings.effective_catalog_api_url,
            token=settings.plan_api_token,
            timeout=settings.plan_api_timeout_seconds,
            transport=transport,
        )

    cache = PlanCache(
        ttl_seconds={
            CacheNamespace.MICROCYCLE: settings.microcycle_cache_ttl_seconds,
            CacheNamespace.CATALOG: settings.catalog_cache_ttl_seconds,
            CacheNamespace.STUDENT: settings.student_cache_ttl_seconds,
        },
        max_entries=settings.cache_max_entries,
    )

    macrocycle_repo = HttpMacrocycleRepository(plan_client)
    mesocycle_repo = HttpMesocycleRepository(plan_client)
    microcycle_repo = HttpMicrocycleRepository(plan_client)
    catalog = HttpExerciseCatalog(catalog_client)

    engine = PlanEngine(
        settings=settings,
        cache=cache,
        set_mesocycle_status=SetMesocycleStatusUseCase(
            mesocycle_repo=mesocycle_repo,
            macrocycle_repo=macrocycle_repo,
            cache=cache,
        ),
        create_microcycle=CreateMicrocycleUseCase(
            mesocycle_repo=mesocycle_repo,
            microcycle_repo=microcycle_repo,
            catalog=catalog,
            cache=cache,
            synthesize_missing_sets=settings.clone_synthesize_missing_sets,
            default_days_per_week=settings.default_days_per_week,
        ),
        get_microcycle_metrics=GetMicrocycleMetricsUseCase(
            microcycle_repo=microcycle_repo,
            catalog=catalog,
            cache=cache,
        ),
        student_mesocycles=GetStudentMesocyclesUseCase(
            mesocycle_repo=mesocycle_repo,
            cache=cache,
        ),
        plan_client=plan_client,
        catalog_client=catalog_client,
    )

    logger.info(
        f"Plan engine ready (environment={settings.environment}, "
        f"plan_api={settings.plan_api_url}, catalog_api={settings.effective_catalog_api_url})"
    )
    return engine


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,
        )
        logger.info("Sentry initialized for plan engine")
