"""HTTP sync backend speaking the project service's JSON API."""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from ..workflow.exceptions import NotFound, ServerError, SyncError, TransportFailure
from ..workflow.models import Sprint, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def map_http_error(
    error: httpx.HTTPError, task_id: int | None = None, operation: str = "request"
) -> SyncError:
    """Map an httpx error onto the placement error taxonomy."""
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 404:
            return NotFound(
                f"{operation} returned 404", task_id=task_id, status_code=status,
                original_error=error,
            )
        if status >= 500:
            return ServerError(
                f"{operation} returned {status}", task_id=task_id, status_code=status,
                original_error=error,
            )
        return TransportFailure(
            f"{operation} returned {status}", task_id=task_id, status_code=status,
            original_error=error,
        )
    if isinstance(error, httpx.TimeoutException):
        return TransportFailure(
            f"{operation} timed out", task_id=task_id, original_error=error
        )
    if isinstance(error, httpx.ConnectError):
        return TransportFailure(
            f"could not connect during {operation}", task_id=task_id, original_error=error
        )
    return TransportFailure(
        f"network error during {operation}: {error}", task_id=task_id, original_error=error
    )


class HttpSyncClient:
    """SyncBackend over httpx.

    ``token`` may be a string or a zero-argument callable returning the
    current bearer token; refreshing it is the caller's business.
    """

    def __init__(
        self,
        base_url: str,
        token: str | Callable[[], str | None] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> HttpSyncClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        token = self._token() if callable(self._token) else self._token
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        task_id: int | None = None,
        params: dict | None = None,
        json: dict | None = None,
    ):
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=self._headers()
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            error = map_http_error(exc, task_id=task_id, operation=operation)
            logger.warning("%s %s failed: %s", method, path, error)
            raise error from exc

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportFailure(
                f"{operation} returned a body that is not JSON",
                task_id=task_id,
                status_code=response.status_code,
                original_error=exc,
            ) from exc

    @staticmethod
    def _decode(build, data, operation: str, task_id: int | None = None):
        try:
            return build(data)
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportFailure(
                f"{operation} returned a record that could not be read: {exc!r}",
                task_id=task_id,
                original_error=exc,
            ) from exc

    @staticmethod
    def _task_or_none(data, operation: str, task_id: int) -> Task | None:
        # The change is applied server-side; an unreadable echo counts as a bare ack.
        if not isinstance(data, dict) or "id" not in data:
            return None
        try:
            return Task.from_dict(data)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("%s for task %s returned an unreadable record: %r", operation, task_id, exc)
            return None

    async def update_status(
        self,
        project_id: int,
        task_id: int,
        status: TaskStatus,
        template_type: str = "scrum",
    ) -> Task | None:
        data = await self._request(
            "PATCH",
            f"/projects/{project_id}/tasks/{task_id}/status",
            "update status",
            task_id=task_id,
            params={"templateType": template_type},
            json={"status": status.value},
        )
        return self._task_or_none(data, "update status", task_id)

    async def update_sprint_assignment(
        self,
        project_id: int,
        task_id: int,
        sprint_id: int | None,
        template_type: str = "scrum",
    ) -> Task | None:
        data = await self._request(
            "PATCH",
            f"/projects/{project_id}/tasks/{task_id}/sprint",
            "update sprint",
            task_id=task_id,
            params={"templateType": template_type},
            json={"sprintId": sprint_id},
        )
        return self._task_or_none(data, "update sprint", task_id)

    async def list_tasks(self, project_id: int, template_type: str = "scrum") -> list[Task]:
        data = await self._request(
            "GET",
            f"/projects/{project_id}/tasks",
            "list tasks",
            params={"templateType": template_type},
        )
        if data is not None and not isinstance(data, list):
            raise TransportFailure("list tasks returned a body that is not a list")
        return [self._decode(Task.from_dict, item, "list tasks") for item in data or []]

    async def get_latest_sprint(
        self, project_id: int, template_type: str = "scrum"
    ) -> Sprint | None:
        try:
            data = await self._request(
                "GET",
                f"/projects/{project_id}/sprints/latest",
                "latest sprint",
                params={"template": template_type},
            )
        except NotFound:
            return None
        if not isinstance(data, dict) or data.get("id") is None:
            return None
        return self._decode(Sprint.from_dict, data, "latest sprint")
