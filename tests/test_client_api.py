# tests/test_client_api.py

from __future__ import annotations

from typing import Any

import pytest

from taskhub.client import TaskHubClient, TaskHubClientError


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None, reason: str = "") -> None:
        self.status_code = status_code
        self._body = body
        self.reason = reason

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeSession:
    """Queue of canned responses; records (method, url, kwargs) per request."""

    def __init__(self, *responses: FakeResponse) -> None:
        self.responses = list(responses)
        self.requests: list[tuple[str, str, dict[str, Any]]] = []
        self.headers: dict[str, str] = {}

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.requests.append((method, url, kwargs))
        return self.responses.pop(0)


def test_login_keeps_bearer_token() -> None:
    session = FakeSession(FakeResponse(200, {"item": {"id": 1}, "access_token": "tok"}))
    client = TaskHubClient("http://taskhub.local/", session=session)

    assert client.login("a@example.com", "secret123") == {"id": 1}
    method, url, kwargs = session.requests[0]
    assert (method, url) == ("POST", "http://taskhub.local/api/auth/login")
    assert kwargs["timeout"] == 10
    assert session.headers["Authorization"] == "Bearer tok"


def test_errors_carry_message_and_field_errors() -> None:
    session = FakeSession(
        FakeResponse(400, {"error": "Title is required", "field_errors": {"title": "Title is required"}})
    )
    client = TaskHubClient("http://taskhub.local", session=session)

    with pytest.raises(TaskHubClientError) as excinfo:
        client.create_task(title="")
    assert excinfo.value.status_code == 400
    assert excinfo.value.field_errors == {"title": "Title is required"}


def test_non_json_error_falls_back_to_reason() -> None:
    session = FakeSession(FakeResponse(502, reason="Bad Gateway"))
    client = TaskHubClient("http://taskhub.local", session=session)

    with pytest.raises(TaskHubClientError) as excinfo:
        client.list_tasks()
    assert excinfo.value.message == "Bad Gateway"


def test_list_tasks_sends_only_given_filters() -> None:
    session = FakeSession(FakeResponse(200, {"items": []}))
    client = TaskHubClient("http://taskhub.local", session=session)

    assert client.list_tasks(status="DONE") == []
    assert session.requests[0][2]["params"] == {"status": "DONE"}
