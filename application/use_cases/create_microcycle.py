"""
CreateMicrocycle Use Case (Cloning Engine).

Appends a new training week to a mesocycle, either as an empty skeleton
or as a structural copy of the mesocycle's last week.

Workflow:
1. Validate days_per_week
2. Fetch the mesocycle (with its microcycle summaries)
3. Resolve order (max + 1) and display name
4. If copying: load the last microcycle's full tree and build a copy
   blueprint; otherwise build an empty skeleton
5. Check copied catalog ids against the exercise catalog (warnings only)
6. Create the whole tree with one atomic repository call
7. Invalidate cached data for the mesocycle
8. Return CreateMicrocycleResult

Nothing is written if any step before 6 fails, and step 6 either creates
the complete week or nothing.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from application.cache import PlanCache
from application.exceptions import (
    DanglingReference,
    InvalidArgument,
    NotFound,
    PersistenceFailure,
)
from application.ports import ExerciseCatalog, MesocycleRepository, MicrocycleRepository
from domain.models import EntityId, MicrocycleBlueprint, Microcycle
from domain.services import (
    MissingSetsError,
    SynthesizedSets,
    build_copy_blueprint,
    build_empty_blueprint,
    microcycle_display_name,
    next_microcycle_order,
    select_last_microcycle,
)

logger = logging.getLogger(__name__)

DEFAULT_DAYS_PER_WEEK = 4


@dataclass
class CreateMicrocycleResult:
    """Result of the CreateMicrocycle use case execution."""

    microcycle: Microcycle
    copied_from_id: Optional[EntityId] = None
    synthesized: List[SynthesizedSets] = field(default_factory=list)
    dangling_references: List[DanglingReference] = field(default_factory=list)

    @property
    def is_copy(self) -> bool:
        return self.copied_from_id is not None

    @property
    def warnings(self) -> List[str]:
        """Human-readable warnings for the coach UI."""
        messages = [
            f"Exercise {s.exercise_catalog_id} on day {s.day_number} had no sets; "
            f"created {s.count} default sets"
            for s in self.synthesized
        ]
        messages.extend(ref.message for ref in self.dangling_references)
        return messages


class CreateMicrocycleUseCase:
    """
    Use case for adding a microcycle to a mesocycle.

    Usage:
        >>> use_case = CreateMicrocycleUseCase(
        ...     mesocycle_repo=mesocycle_repo,
        ...     microcycle_repo=microcycle_repo,
        ...     catalog=catalog,
        ... )
        >>> result = use_case.execute(mesocycle_id=3, is_deload=True)
        >>> result.microcycle.name
        'Microciclo 4 (Descarga)'
    """

    def __init__(
        self,
        mesocycle_repo: MesocycleRepository,
        microcycle_repo: MicrocycleRepository,
        catalog: Optional[ExerciseCatalog] = None,
        cache: Optional[PlanCache] = None,
        *,
        synthesize_missing_sets: bool = True,
        default_days_per_week: int = DEFAULT_DAYS_PER_WEEK,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            mesocycle_repo: Repository for mesocycle reads
            microcycle_repo: Repository for microcycle reads and atomic creation
            catalog: Exercise catalog used to flag dangling references (optional)
            cache: Plan cache to invalidate after the write
            synthesize_missing_sets: Create default sets for source exercises
                without any; when False such a copy is rejected
            default_days_per_week: Skeleton size when the caller gives none
        """
        self._mesocycle_repo = mesocycle_repo
        self._microcycle_repo = microcycle_repo
        self._catalog = catalog
        self._cache = cache
        self._synthesize_missing_sets = synthesize_missing_sets
        self._default_days_per_week = default_days_per_week

    def execute(
        self,
        mesocycle_id: EntityId,
        *,
        name: Optional[str] = None,
        is_deload: bool = False,
        copy_from_last: bool = True,
        days_per_week: Optional[int] = None,
    ) -> CreateMicrocycleResult:
        """
        Execute the microcycle creation.

        Args:
            mesocycle_id: ID of the owning mesocycle
            name: Display name; blank falls back to "Microciclo N"
            is_deload: Label the week as deload (" (Descarga)" suffix)
            copy_from_last: Copy the structure of the last week when one exists
            days_per_week: Number of skeleton days (1-7) when not copying

        Returns:
            CreateMicrocycleResult with the created microcycle and warnings

        Raises:
            InvalidArgument: days_per_week out of range, or a source exercise
                without sets while synthesis is disabled
            NotFound: Mesocycle (or the microcycle to copy) does not exist
            PersistenceFailure: The backend failed to create the week
        """
        days = self._default_days_per_week if days_per_week is None else days_per_week
        if isinstance(days, bool) or not isinstance(days, int) or not 1 <= days <= 7:
            raise InvalidArgument(f"days_per_week must be an integer between 1 and 7, got {days!r}")

        mesocycle = self._mesocycle_repo.get_by_id(mesocycle_id)
        if mesocycle is None:
            raise NotFound("Mesocycle", mesocycle_id)

        existing = mesocycle.microcycles
        order = next_microcycle_order(existing)
        display_name = microcycle_display_name(
            name, is_deload=is_deload, number=len(existing) + 1
        )

        source = self._load_source(existing) if copy_from_last else None

        synthesized: List[SynthesizedSets] = []
        dangling: List[DanglingReference] = []
        if source is not None:
            try:
                outcome = build_copy_blueprint(
                    source,
                    name=display_name,
                    order=order,
                    is_deload=is_deload,
                    synthesize_missing_sets=self._synthesize_missing_sets,
                )
            except MissingSetsError as e:
                raise InvalidArgument(str(e)) from e
            blueprint = outcome.blueprint
            synthesized = outcome.synthesized
            for record in synthesized:
                logger.warning(
                    f"Exercise {record.exercise_catalog_id} on day {record.day_number} of "
                    f"microcycle {source.id} has no sets; synthesizing {record.count}"
                )
            dangling = self._find_dangling_references(blueprint)
        else:
            blueprint = build_empty_blueprint(
                name=display_name,
                order=order,
                is_deload=is_deload,
                days_per_week=days,
            )

        created = self._microcycle_repo.create(mesocycle.id, blueprint.to_payload())

        if self._cache is not None:
            self._cache.invalidate_mesocycle(mesocycle.id)

        copied_from_id = source.id if source is not None else None
        logger.info(
            f"Created microcycle {created.id} '{created.name or display_name}' in mesocycle "
            f"{mesocycle.id} (order {order}, "
            + (f"copied from {copied_from_id})" if copied_from_id is not None else "empty)")
        )

        return CreateMicrocycleResult(
            microcycle=created,
            copied_from_id=copied_from_id,
            synthesized=synthesized,
            dangling_references=dangling,
        )

    def _load_source(self, existing: List[Microcycle]) -> Optional[Microcycle]:
        """Full tree of the week to copy, or None when there is nothing to copy."""
        last = select_last_microcycle(existing)
        if last is None:
            return None
        if last.id is None:
            logger.warning("Last microcycle has no id; creating an empty skeleton")
            return None

        # Always read fresh: this is a write path.
        source = self._microcycle_repo.get_by_id(last.id)
        if source is None:
            raise NotFound("Microcycle", last.id)
        if not source.days:
            logger.info(f"Microcycle {source.id} has no days; creating an empty skeleton")
            return None
        return source

    def _find_dangling_references(self, blueprint: MicrocycleBlueprint) -> List[DanglingReference]:
        if self._catalog is None:
            return []

        locations: Dict[str, tuple] = {}
        for day in blueprint.days:
            for exercise in day.exercises:
                locations.setdefault(
                    str(exercise.exercise_catalog_id),
                    (exercise.exercise_catalog_id, day.day_number),
                )
        if not locations:
            return []

        try:
            found = self._catalog.get_many([raw for raw, _ in locations.values()])
        except PersistenceFailure as e:
            logger.warning(f"Exercise catalog unavailable, skipping reference check: {e}")
            return []

        dangling = []
        for key, (raw_id, day_number) in locations.items():
            if key not in found:
                reference = DanglingReference(raw_id, day_number)
                logger.warning(reference.message)
                dangling.append(reference)
        return dangling
