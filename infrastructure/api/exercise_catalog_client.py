"""
HTTP adapter for the exercise catalog.

The catalog is read-only from the engine's point of view:
    GET /exercises?ids=1,2,3  ->  [{"id": 1, "name": ..., "muscleGroup": ...}, ...]
"""

import logging
from typing import Dict, Iterable

from pydantic import ValidationError

from application.exceptions import PersistenceFailure
from domain.models import CatalogExercise, EntityId
from infrastructure.api.plan_api_client import PlanApiClient

logger = logging.getLogger(__name__)

# Keeps the query string well under common URL length limits.
MAX_IDS_PER_REQUEST = 100


class HttpExerciseCatalog:
    """ExerciseCatalog backed by the catalog service."""

    def __init__(self, client: PlanApiClient, batch_size: int = MAX_IDS_PER_REQUEST):
        self._client = client
        self._batch_size = batch_size

    def get_many(self, exercise_ids: Iterable[EntityId]) -> Dict[str, CatalogExercise]:
        ids = list(dict.fromkeys(str(i) for i in exercise_ids))
        found: Dict[str, CatalogExercise] = {}

        for start in range(0, len(ids), self._batch_size):
            batch = ids[start : start + self._batch_size]
            data = self._client.request("GET", "/exercises", params={"ids": ",".join(batch)})
            for item in data or []:
                try:
                    entry = CatalogExercise.model_validate(item)
                except ValidationError as e:
                    raise PersistenceFailure(f"Exercise catalog returned an invalid entry: {e}") from e
                found[str(entry.id)] = entry

        logger.debug(f"Resolved {len(found)}/{len(ids)} catalog exercises")
        return found
