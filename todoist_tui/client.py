"""
Todoist REST client.

Implements TaskService over httpx. Every failure, whether transport,
timeout, status code or payload shape, surfaces as a ServiceError.
"""

from __future__ import annotations

import logging

import httpx

from todoist_tui.errors import ResponseShapeError, ServiceError
from todoist_tui.providers import NewTask, Project, Task
from todoist_tui.validate import validate_json

logger = logging.getLogger(__name__)

TODOIST_API_BASE = "https://api.todoist.com/rest/v2"
DEFAULT_TIMEOUT_SECONDS = 30.0


class TodoistClient:
    """TaskService implementation for the Todoist REST API."""

    def __init__(
        self,
        token: str,
        base_url: str = TODOIST_API_BASE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> TodoistClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, ok: tuple[int, ...], **kwargs) -> httpx.Response:
        try:
            resp = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise ServiceError(f"Request to {path} timed out") from e
        except httpx.HTTPError as e:
            raise ServiceError(f"Failed to make request: {e}") from e

        logger.debug("%s %s -> %s", method, path, resp.status_code)
        if resp.status_code not in ok:
            raise ServiceError(
                f"API request failed with status {resp.status_code}",
                status_code=resp.status_code,
            )
        return resp

    def _json(self, resp: httpx.Response, schema_name: str):
        try:
            data = resp.json()
        except ValueError as e:
            raise ResponseShapeError(f"Failed to decode response: {e}") from e
        valid, msg = validate_json(data, schema_name)
        if not valid:
            raise ResponseShapeError(f"Unexpected response shape: {msg}")
        return data

    def get_tasks(self) -> list[Task]:
        resp = self._request("GET", "/tasks", ok=(200,))
        return [Task.from_dict(item) for item in self._json(resp, "task-list")]

    def get_projects(self) -> list[Project]:
        resp = self._request("GET", "/projects", ok=(200,))
        return [Project.from_dict(item) for item in self._json(resp, "project-list")]

    def create_task(self, task: NewTask) -> Task:
        resp = self._request("POST", "/tasks", ok=(200, 201), json=task.to_payload())
        return Task.from_dict(self._json(resp, "task"))

    def complete_task(self, task_id: str) -> None:
        self._request("POST", f"/tasks/{task_id}/close", ok=(200, 204))

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}", ok=(200, 204))
