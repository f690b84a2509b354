"""
Plan repository interfaces (Ports).

These Protocols define the contract for the plan backend. The backend is
transactional per call; the engine composes calls and never manages
transactions itself.

Implementations raise ``PersistenceFailure`` for transport or server
errors. Getters return ``None`` for ids that do not resolve; writes raise
``NotFound``.
"""

from typing import Any, Dict, List, Optional, Protocol

from domain.models import EntityId, Macrocycle, Mesocycle, MesocycleStatus, Microcycle


class MacrocycleRepository(Protocol):
    """Read access to macrocycles (used to resolve a mesocycle's student)."""

    def get_by_id(self, macrocycle_id: EntityId) -> Optional[Macrocycle]:
        """
        Get a macrocycle by its ID.

        Args:
            macrocycle_id: Macrocycle ID

        Returns:
            Macrocycle if found, None otherwise
        """
        ...


class MesocycleRepository(Protocol):
    """Mesocycle reads and status writes."""

    def get_by_id(self, mesocycle_id: EntityId) -> Optional[Mesocycle]:
        """
        Get a mesocycle with its microcycle summaries.

        Args:
            mesocycle_id: Mesocycle ID

        Returns:
            Mesocycle if found, None otherwise
        """
        ...

    def list_by_student(self, student_id: EntityId) -> List[Mesocycle]:
        """
        Get every mesocycle of a student, across all macrocycles.

        Always reads from the backend; used right before supersession writes.

        Args:
            student_id: Student ID

        Returns:
            List of mesocycles (any status)
        """
        ...

    def patch_status(self, mesocycle_id: EntityId, status: MesocycleStatus) -> Mesocycle:
        """
        Set the status of a mesocycle.

        Args:
            mesocycle_id: Mesocycle ID
            status: New status

        Returns:
            The updated mesocycle

        Raises:
            NotFound: If the mesocycle does not exist
            PersistenceFailure: If the write fails
        """
        ...


class MicrocycleRepository(Protocol):
    """Microcycle reads and atomic creation."""

    def get_by_id(self, microcycle_id: EntityId) -> Optional[Microcycle]:
        """
        Get a microcycle with its full Day/Exercise/Set tree.

        Args:
            microcycle_id: Microcycle ID

        Returns:
            Microcycle if found, None otherwise
        """
        ...

    def create(self, mesocycle_id: EntityId, payload: Dict[str, Any]) -> Microcycle:
        """
        Create a microcycle with all its days, exercises and sets.

        The whole tree is created in one backend transaction: either the
        week exists completely afterwards or not at all.

        Args:
            mesocycle_id: Owning mesocycle ID
            payload: Serialized ``MicrocycleBlueprint``

        Returns:
            The created microcycle

        Raises:
            NotFound: If the mesocycle does not exist
            PersistenceFailure: If the creation fails
        """
        ...
