# tests/test_client_board.py

from __future__ import annotations

import pytest

from taskhub.client import TaskBoard, TaskHubClientError

from .fakes import FakeTaskHubClient, task


@pytest.fixture()
def api() -> FakeTaskHubClient:
    return FakeTaskHubClient([task(1), task(2, "IN_PROGRESS"), task(3, "DONE")])


@pytest.fixture()
def board(api: FakeTaskHubClient) -> TaskBoard:
    board = TaskBoard(api)
    board.refresh()
    return board


def test_columns_follow_status_order_with_labels(board: TaskBoard) -> None:
    columns = board.columns()
    assert list(columns) == ["TODO", "IN_PROGRESS", "DONE"]
    assert [column["label"] for column in columns.values()] == ["To Do", "In Progress", "Done"]
    assert [t["id"] for t in columns["IN_PROGRESS"]["tasks"]] == [2]


def test_move_stores_server_copy(board: TaskBoard, api: FakeTaskHubClient) -> None:
    assert board.move(1, "DONE") is True
    assert board.get(1)["status"] == "DONE"
    assert board.get(1)["updated"] is True
    assert ("update_task_status", (1, "DONE")) in api.calls


def test_move_to_same_status_skips_request(board: TaskBoard, api: FakeTaskHubClient) -> None:
    assert board.move(2, "IN_PROGRESS") is True
    assert all(name != "update_task_status" for name, _ in api.calls)


def test_failed_move_is_rolled_back_and_reconciled(board: TaskBoard, api: FakeTaskHubClient) -> None:
    api.fail_next = TaskHubClientError(403, "Not allowed")
    api.tasks[3]["title"] = "renamed elsewhere"

    assert board.move(1, "DONE") is False
    assert board.get(1)["status"] == "TODO"
    # The re-fetch picked up the server's current view
    assert board.get(3)["title"] == "renamed elsewhere"
    assert [name for name, _ in api.calls].count("list_tasks") == 2


def test_failed_move_keeps_cache_when_refetch_fails(board: TaskBoard, api: FakeTaskHubClient) -> None:
    api.fail_next = TaskHubClientError(500, "boom")
    api.fail_reads = True

    assert board.move(2, "TODO") is False
    assert board.get(2)["status"] == "IN_PROGRESS"
    assert len(board.tasks()) == 3


def test_move_rejects_unknown_task_and_status(board: TaskBoard) -> None:
    with pytest.raises(KeyError):
        board.move(99, "DONE")
    with pytest.raises(ValueError):
        board.move(1, "BLOCKED")
