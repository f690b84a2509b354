"""
HTTP adapters for the plan backend.

The plan backend is a REST service that owns persistence for the whole
Macrocycle → Mesocycle → Microcycle tree. Each call is transactional on
the backend side; this module adds no retries and no transactions.

Endpoints used:
    GET   /macrocycle/{id}
    GET   /mesocycle/{id}
    GET   /mesocycle/student/{studentId}
    PATCH /mesocycle/{id}/status
    GET   /microcycle/{id}
    POST  /microcycle/{mesocycleId}

Error mapping:
    404 on a read      -> None
    404 on a write     -> NotFound
    other 4xx/5xx      -> PersistenceFailure(status_code=...)
    connect / timeout  -> PersistenceFailure
"""

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from application.exceptions import NotFound, PersistenceFailure
from domain.models import EntityId, Macrocycle, Mesocycle, MesocycleStatus, Microcycle

logger = logging.getLogger(__name__)


def unwrap(payload: Any) -> Any:
    """Some endpoints wrap their body in ``{"data": ...}``; strip it."""
    if isinstance(payload, dict) and set(payload) == {"data"}:
        return payload["data"]
    return payload


class PlanApiClient:
    """
    Thin synchronous HTTP client for the plan backend.

    Shared by the three repository adapters below so they reuse one
    connection pool and one set of credentials.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the plan API client.

        Args:
            base_url: Base URL of the plan backend (e.g., "http://plan-api:3000")
            token: Bearer token sent on every request
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PlanApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Optional[Any]:
        """
        Send a request and return the decoded JSON body.

        Returns:
            Decoded body, or None when the backend answers 404

        Raises:
            PersistenceFailure: On any other error status, timeout or
                connection failure
        """
        try:
            response = self._client.request(method, path, json=json, params=params)
        except httpx.ConnectError as e:
            logger.error(f"Plan API unavailable: {e}")
            raise PersistenceFailure(
                f"Plan API is not available at {self._base_url}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error(f"Plan API timeout on {method} {path}: {e}")
            raise PersistenceFailure(f"Plan API request timed out ({method} {path})") from e
        except httpx.HTTPError as e:
            logger.error(f"Plan API transport error on {method} {path}: {e}")
            raise PersistenceFailure(f"Plan API request failed ({method} {path}): {e}") from e

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.error(
                f"Plan API error: {method} {path} -> {response.status_code} - {response.text}"
            )
            raise PersistenceFailure(
                f"Plan API {method} {path} failed with {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return unwrap(response.json())
        except ValueError as e:
            raise PersistenceFailure(
                f"Plan API {method} {path} returned invalid JSON",
                status_code=response.status_code,
            ) from e


def _parse(model, payload: Any, what: str):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Plan API returned an invalid {what}: {e}")
        raise PersistenceFailure(f"Plan API returned an invalid {what}: {e}") from e


class HttpMacrocycleRepository:
    """MacrocycleRepository backed by the plan API."""

    def __init__(self, client: PlanApiClient):
        self._client = client

    def get_by_id(self, macrocycle_id: EntityId) -> Optional[Macrocycle]:
        data = self._client.request("GET", f"/macrocycle/{macrocycle_id}")
        if data is None:
            return None
        return _parse(Macrocycle, data, "macrocycle")


class HttpMesocycleRepository:
    """MesocycleRepository backed by the plan API."""

    def __init__(self, client: PlanApiClient):
        self._client = client

    def get_by_id(self, mesocycle_id: EntityId) -> Optional[Mesocycle]:
        data = self._client.request("GET", f"/mesocycle/{mesocycle_id}")
        if data is None:
            return None
        return _parse(Mesocycle, data, "mesocycle")

    def list_by_student(self, student_id: EntityId) -> List[Mesocycle]:
        data = self._client.request("GET", f"/mesocycle/student/{student_id}")
        if not data:
            return []
        return [_parse(Mesocycle, item, "mesocycle") for item in data]

    def patch_status(self, mesocycle_id: EntityId, status: MesocycleStatus) -> Mesocycle:
        path = f"/mesocycle/{mesocycle_id}/status"
        data = self._client.request("PATCH", path, json={"status": status.value})
        if data is None:
            # 404, or a backend that answers 204: distinguish with a read.
            current = self.get_by_id(mesocycle_id)
            if current is None:
                raise NotFound("Mesocycle", mesocycle_id)
            return current
        return _parse(Mesocycle, data, "mesocycle")


class HttpMicrocycleRepository:
    """MicrocycleRepository backed by the plan API."""

    def __init__(self, client: PlanApiClient):
        self._client = client

    def get_by_id(self, microcycle_id: EntityId) -> Optional[Microcycle]:
        data = self._client.request("GET", f"/microcycle/{microcycle_id}")
        if data is None:
            return None
        return _parse(Microcycle, data, "microcycle")

    def create(self, mesocycle_id: EntityId, payload: Dict[str, Any]) -> Microcycle:
        data = self._client.request("POST", f"/microcycle/{mesocycle_id}", json=payload)
        if data is None:
            raise NotFound("Mesocycle", mesocycle_id)
        return _parse(Microcycle, data, "microcycle")
