"""Tests for client.py - Todoist REST client over httpx.MockTransport."""

import json

import httpx
import pytest

from todoist_tui.client import TodoistClient
from todoist_tui.errors import ResponseShapeError, ServiceError
from todoist_tui.providers import NewTask

BASE = "https://api.test/rest/v2"

TASK_JSON = {
    "id": "123",
    "content": "Buy milk",
    "project_id": "p1",
    "priority": 4,
    "description": "",
    "due": {"date": "2024-05-15", "string": "today", "is_recurring": False},
    "labels": ["errand"],
    "is_completed": False,
    "url": "https://todoist.com/showTask?id=123",
    "created_at": "2024-05-01T10:00:00Z",
}


def client_for(handler) -> TodoistClient:
    return TodoistClient("secret", base_url=BASE, transport=httpx.MockTransport(handler))


class Recorder:
    """Handler that records requests and replays a canned response."""

    def __init__(self, status: int = 200, body: object = None, content: bytes | None = None):
        self.status = status
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status, content=self.content)
        if self.body is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.body)


class TestReads:
    """Tests for get_tasks / get_projects."""

    def test_get_tasks(self) -> None:
        handler = Recorder(body=[TASK_JSON, {"id": 7, "content": "x", "due": None}])
        with client_for(handler) as client:
            tasks = client.get_tasks()

        request = handler.requests[0]
        assert request.method == "GET"
        assert request.url == f"{BASE}/tasks"
        assert request.headers["Authorization"] == "Bearer secret"

        assert tasks[0].id == "123"
        assert tasks[0].priority == 4
        assert tasks[0].due.string == "today"
        assert tasks[0].labels == ("errand",)
        assert tasks[1].id == "7"
        assert tasks[1].due is None

    def test_get_projects(self) -> None:
        handler = Recorder(body=[{"id": "p1", "name": "Inbox", "color": "grey"}])
        with client_for(handler) as client:
            projects = client.get_projects()
        assert handler.requests[0].url == f"{BASE}/projects"
        assert projects[0].name == "Inbox"

    def test_status_error(self) -> None:
        with client_for(Recorder(status=401, body={"error": "nope"})) as client:
            with pytest.raises(ServiceError) as exc_info:
                client.get_tasks()
        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    def test_bad_json(self) -> None:
        with client_for(Recorder(content=b"<html>")) as client:
            with pytest.raises(ResponseShapeError):
                client.get_tasks()

    def test_wrong_shape(self) -> None:
        with client_for(Recorder(body={"tasks": []})) as client:
            with pytest.raises(ResponseShapeError):
                client.get_tasks()

    def test_shape_error_is_service_error(self) -> None:
        with client_for(Recorder(body=[{"name": "no id"}])) as client:
            with pytest.raises(ServiceError):
                client.get_projects()

    def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with client_for(handler) as client:
            with pytest.raises(ServiceError, match="timed out"):
                client.get_tasks()

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with client_for(handler) as client:
            with pytest.raises(ServiceError, match="Failed to make request"):
                client.get_projects()


class TestWrites:
    """Tests for create / complete / delete."""

    def test_create_task_payload(self) -> None:
        handler = Recorder(body=TASK_JSON)
        new_task = NewTask(content="Buy milk", priority=4, project_id="p1", due_string="today")
        with client_for(handler) as client:
            task = client.create_task(new_task)

        request = handler.requests[0]
        assert request.method == "POST"
        assert request.url == f"{BASE}/tasks"
        assert json.loads(request.content) == {
            "content": "Buy milk",
            "priority": 4,
            "project_id": "p1",
            "due_string": "today",
        }
        assert task.id == "123"

    def test_create_omits_empty_fields(self) -> None:
        handler = Recorder(status=201, body=TASK_JSON)
        with client_for(handler) as client:
            client.create_task(NewTask(content="x", priority=1))
        assert json.loads(handler.requests[0].content) == {"content": "x", "priority": 1}

    def test_create_rejected(self) -> None:
        with client_for(Recorder(status=400)) as client:
            with pytest.raises(ServiceError):
                client.create_task(NewTask(content="x"))

    @pytest.mark.parametrize("status", [200, 204])
    def test_complete(self, status: int) -> None:
        handler = Recorder(status=status)
        with client_for(handler) as client:
            client.complete_task("123")
        assert handler.requests[0].method == "POST"
        assert handler.requests[0].url == f"{BASE}/tasks/123/close"

    def test_delete(self) -> None:
        handler = Recorder(status=204)
        with client_for(handler) as client:
            client.delete_task("123")
        assert handler.requests[0].method == "DELETE"
        assert handler.requests[0].url == f"{BASE}/tasks/123"

    def test_delete_not_found(self) -> None:
        with client_for(Recorder(status=404)) as client:
            with pytest.raises(ServiceError) as exc_info:
                client.delete_task("missing")
        assert exc_info.value.status_code == 404
