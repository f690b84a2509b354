"""
SetMesocycleStatus Use Case (Lifecycle Controller).

Moves a mesocycle through the draft → published → active lifecycle and
keeps at most one active mesocycle per student.

Workflow:
1. Parse the requested status
2. Fetch the mesocycle via repository
3. Validate the transition against the state machine
4. For activation: re-read the student's mesocycles, demote every other
   active one to published, re-check the invariant, then activate
5. Otherwise: patch the status
6. Invalidate the student's cached plan data
7. Return StatusChangeResult

If a write fails, mesocycles already demoted are restored to active,
unless another mesocycle of the student became active meanwhile. Two
concurrent activations for the same student resolve as last-write-wins:
when the re-check after demotion finds another active mesocycle, the
activation is aborted and nothing is restored.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from application.cache import PlanCache
from application.exceptions import (
    InvalidArgument,
    InvariantViolation,
    NotFound,
    PlanEngineError,
)
from application.ports import MacrocycleRepository, MesocycleRepository
from domain.models import EntityId, InvalidTransition, Mesocycle, MesocycleStatus

logger = logging.getLogger(__name__)


def same_id(a: Optional[EntityId], b: Optional[EntityId]) -> bool:
    """Ids come back as ints or strings depending on the row; compare as text."""
    return a is not None and b is not None and str(a) == str(b)


@dataclass
class StatusChangeResult:
    """Result of the SetMesocycleStatus use case execution."""

    mesocycle: Mesocycle
    previous_status: MesocycleStatus
    superseded_ids: List[EntityId] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.previous_status is not self.mesocycle.status or bool(self.superseded_ids)


class SetMesocycleStatusUseCase:
    """
    Use case for changing a mesocycle's lifecycle status.

    Usage:
        >>> use_case = SetMesocycleStatusUseCase(
        ...     mesocycle_repo=mesocycle_repo,
        ...     macrocycle_repo=macrocycle_repo,
        ... )
        >>> result = use_case.execute(mesocycle_id=12, new_status="active")
        >>> result.superseded_ids
        [9]
    """

    def __init__(
        self,
        mesocycle_repo: MesocycleRepository,
        macrocycle_repo: MacrocycleRepository,
        cache: Optional[PlanCache] = None,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            mesocycle_repo: Repository for mesocycle reads and status writes
            macrocycle_repo: Repository used to resolve the owning student
            cache: Plan cache to invalidate after writes
        """
        self._mesocycle_repo = mesocycle_repo
        self._macrocycle_repo = macrocycle_repo
        self._cache = cache

    def execute(
        self,
        mesocycle_id: EntityId,
        new_status: Union[str, MesocycleStatus],
    ) -> StatusChangeResult:
        """
        Execute the status change.

        Args:
            mesocycle_id: ID of the mesocycle to update
            new_status: Target status ("draft", "published" or "active")

        Returns:
            StatusChangeResult with the updated mesocycle

        Raises:
            InvalidArgument: Unknown status or transition not allowed
            NotFound: Mesocycle or its macrocycle does not exist
            InvariantViolation: Another mesocycle is still active after demotion
            PersistenceFailure: A backend write failed
        """
        try:
            target = MesocycleStatus.parse(new_status)
        except ValueError as e:
            raise InvalidArgument(str(e)) from e

        mesocycle = self._mesocycle_repo.get_by_id(mesocycle_id)
        if mesocycle is None:
            raise NotFound("Mesocycle", mesocycle_id)

        previous = mesocycle.status
        try:
            previous.transition_to(target)
        except InvalidTransition as e:
            raise InvalidArgument(str(e)) from e

        if target is MesocycleStatus.ACTIVE:
            student_id = self._require_student_id(mesocycle)
            updated, superseded = self._activate(mesocycle, student_id)
        else:
            student_id = self._find_student_id(mesocycle)
            superseded = []
            if previous is target:
                logger.debug(f"Mesocycle {mesocycle.id} already {target.value}")
                updated = mesocycle
            else:
                updated = self._mesocycle_repo.patch_status(mesocycle.id, target)

        logger.info(
            f"Mesocycle {mesocycle.id} status {previous.value} -> {updated.status.value}"
            + (f" (superseded {superseded})" if superseded else "")
        )
        self._invalidate(student_id, [mesocycle.id, *superseded])

        return StatusChangeResult(
            mesocycle=updated,
            previous_status=previous,
            superseded_ids=superseded,
        )

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    def _activate(self, mesocycle: Mesocycle, student_id: EntityId):
        # Re-read immediately before writing; the cached view may be stale.
        current = self._mesocycle_repo.list_by_student(student_id)
        others = [m for m in current if m.is_active and not same_id(m.id, mesocycle.id)]

        demoted: List[EntityId] = []
        try:
            for other in others:
                self._mesocycle_repo.patch_status(
                    other.id, other.status.supersession_status
                )
                demoted.append(other.id)
                logger.info(
                    f"Superseding mesocycle {other.id} for student {student_id} "
                    f"in favour of {mesocycle.id}"
                )

            self._ensure_single_active(student_id, mesocycle.id)
            updated = self._mesocycle_repo.patch_status(
                mesocycle.id, MesocycleStatus.ACTIVE
            )
        except InvariantViolation:
            # A concurrent activation landed after the demotions; it wins.
            raise
        except PlanEngineError:
            self._restore(student_id, demoted)
            raise

        return updated, demoted

    def _ensure_single_active(self, student_id: EntityId, activating_id: EntityId) -> None:
        still_active = [
            m.id
            for m in self._mesocycle_repo.list_by_student(student_id)
            if m.is_active and not same_id(m.id, activating_id)
        ]
        if still_active:
            logger.warning(
                f"Aborting activation of mesocycle {activating_id}: student {student_id} "
                f"has active mesocycle(s) {still_active} written concurrently"
            )
            raise InvariantViolation(
                f"Cannot activate mesocycle {activating_id}: student {student_id} "
                f"still has active mesocycle(s) {still_active}"
            )

    def _restore(self, student_id: EntityId, demoted: List[EntityId]) -> None:
        """
        Put demoted mesocycles back to active after a failed activation.

        The student's list is re-read before each restore, and a mesocycle is
        only restored while no other mesocycle of the student is active.
        """
        for mesocycle_id in demoted:
            try:
                active = [
                    m.id
                    for m in self._mesocycle_repo.list_by_student(student_id)
                    if m.is_active and not same_id(m.id, mesocycle_id)
                ]
                if active:
                    logger.warning(
                        f"Not restoring mesocycle {mesocycle_id}: student {student_id} "
                        f"already has active mesocycle(s) {active}"
                    )
                    continue
                self._mesocycle_repo.patch_status(mesocycle_id, MesocycleStatus.ACTIVE)
                logger.warning(f"Restored mesocycle {mesocycle_id} to active after failed activation")
            except PlanEngineError as e:
                logger.error(
                    f"Could not restore mesocycle {mesocycle_id} to active: {e}"
                )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find_student_id(self, mesocycle: Mesocycle) -> Optional[EntityId]:
        if mesocycle.macrocycle_id is None:
            return None
        macrocycle = self._macrocycle_repo.get_by_id(mesocycle.macrocycle_id)
        return macrocycle.student_id if macrocycle is not None else None

    def _require_student_id(self, mesocycle: Mesocycle) -> EntityId:
        if mesocycle.macrocycle_id is None:
            raise InvalidArgument(
                f"Mesocycle {mesocycle.id} has no macrocycle; cannot resolve its student"
            )
        macrocycle = self._macrocycle_repo.get_by_id(mesocycle.macrocycle_id)
        if macrocycle is None:
            raise NotFound("Macrocycle", mesocycle.macrocycle_id)
        return macrocycle.student_id

    def _invalidate(self, student_id: Optional[EntityId], mesocycle_ids: List[EntityId]) -> None:
        if self._cache is None:
            return
        if student_id is not None:
            self._cache.invalidate_student(student_id)
        for mesocycle_id in mesocycle_ids:
            self._cache.invalidate_mesocycle(mesocycle_id)
