"""
Exercise catalog interface (Port).

The catalog is an external, read-only service. The engine uses it to
resolve muscle groups for metrics and to flag dangling references when
copying a week; it never validates writes against it.
"""

from typing import Dict, Iterable, Protocol

from domain.models import CatalogExercise, EntityId


class ExerciseCatalog(Protocol):
    """Read-only lookup of catalog exercises."""

    def get_many(self, exercise_ids: Iterable[EntityId]) -> Dict[str, CatalogExercise]:
        """
        Look up several catalog exercises at once.

        Args:
            exercise_ids: Catalog IDs to resolve

        Returns:
            Dict keyed by ``str(id)``; ids that do not resolve are absent

        Raises:
            PersistenceFailure: If the catalog service is unavailable
        """
        ...
