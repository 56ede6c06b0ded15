# tests/test_time_entries.py

from __future__ import annotations

import pytest

from taskhub.models import Project, TimeEntry


def _log(client, user, task_id, **payload):
    payload.setdefault("hours", 1.5)
    return client.post(f"/api/tasks/{task_id}/time-entries", json=payload, headers=user.headers)


@pytest.mark.parametrize("hours", [0, -2, "abc", True, None, 25, "nan", "inf", "-inf", 10**400])
def test_hours_must_be_a_positive_number(client, alice, make_task, hours) -> None:
    task = make_task(alice)
    resp = _log(client, alice, task["id"], hours=hours)
    assert resp.status_code == 400
    assert "hours" in resp.get_json()["field_errors"]


def test_bare_nan_literal_in_body_is_rejected(client, alice, make_task) -> None:
    task = make_task(alice)
    resp = client.post(
        f"/api/tasks/{task['id']}/time-entries",
        data='{"hours": NaN}',
        content_type="application/json",
        headers=alice.headers,
    )
    assert resp.status_code == 400
    assert resp.get_json()["field_errors"]["hours"] == "Hours must be a number"


def test_task_without_project_reuses_single_default_project(client, alice, make_task, count) -> None:
    first = make_task(alice, title="one")
    second = make_task(alice, title="two")

    entry_a = _log(client, alice, first["id"]).get_json()["item"]
    entry_b = _log(client, alice, first["id"], hours=2).get_json()["item"]
    entry_c = _log(client, alice, second["id"], hours=0.5).get_json()["item"]

    assert count(Project, user_id=alice.id, name="默认项目") == 1
    assert entry_a["project_id"] == entry_b["project_id"] == entry_c["project_id"]
    assert entry_a["project"]["name"] == "默认项目"


def test_default_project_is_per_acting_user(client, alice, bob, make_task, count) -> None:
    task = make_task(alice, assigned_user_id=bob.id)
    _log(client, alice, task["id"])
    _log(client, bob, task["id"])
    assert count(Project, name="默认项目") == 2
    assert count(Project, user_id=bob.id, name="默认项目") == 1


def test_task_with_project_logs_against_it(client, alice, make_task, count) -> None:
    project = client.post("/api/projects/", json={"name": "Website"}, headers=alice.headers).get_json()["item"]
    task = make_task(alice, project_id=project["id"])

    entry = _log(client, alice, task["id"], description="layout", date="2026-10-01").get_json()["item"]
    assert entry["project_id"] == project["id"]
    assert entry["date"] == "2026-10-01T00:00:00"
    assert entry["description"] == "layout"
    assert count(Project, user_id=alice.id) == 1


def test_list_task_entries_newest_date_first(client, alice, make_task) -> None:
    task = make_task(alice)
    _log(client, alice, task["id"], date="2026-01-01")
    _log(client, alice, task["id"], date="2026-03-01")
    items = client.get(f"/api/tasks/{task['id']}/time-entries", headers=alice.headers).get_json()["items"]
    assert [item["date"][:10] for item in items] == ["2026-03-01", "2026-01-01"]


def test_only_creator_can_delete_entry(client, alice, bob, make_task, count) -> None:
    task = make_task(alice, assigned_user_id=bob.id)
    entry = _log(client, bob, task["id"]).get_json()["item"]
    url = f"/api/tasks/{task['id']}/time-entries/{entry['id']}"

    assert client.delete(url, headers=alice.headers).status_code == 403
    assert client.delete(url, headers=bob.headers).status_code == 200
    assert count(TimeEntry) == 0
    assert client.delete(url, headers=bob.headers).status_code == 404


def test_time_entries_overview_and_filters(client, alice, bob, make_task) -> None:
    project = client.post("/api/projects/", json={"name": "Ops"}, headers=alice.headers).get_json()["item"]
    task = make_task(alice, project_id=project["id"], assigned_user_id=bob.id)
    other = make_task(alice, title="other")

    _log(client, alice, task["id"], date="2026-02-01")
    _log(client, bob, task["id"], date="2026-02-10")  # on alice's project
    _log(client, alice, other["id"], date="2026-05-01")
    _log(client, bob, make_task(bob, title="bob only")["id"])

    items = client.get("/api/time-entries/", headers=alice.headers).get_json()["items"]
    assert len(items) == 3

    items = client.get(
        f"/api/time-entries/?project_id={project['id']}&start_date=2026-02-05", headers=alice.headers
    ).get_json()["items"]
    assert len(items) == 1
    assert items[0]["user"]["name"] == "Bob"

    items = client.get(f"/api/time-entries/?task_id={other['id']}", headers=alice.headers).get_json()["items"]
    assert len(items) == 1

    assert client.get("/api/time-entries/?end_date=someday", headers=alice.headers).status_code == 400


def test_create_entry_with_explicit_project(client, alice, bob, make_task) -> None:
    project = client.post("/api/projects/", json={"name": "Ops"}, headers=alice.headers).get_json()["item"]
    task = make_task(alice)

    resp = client.post(
        "/api/time-entries/",
        json={"hours": 3, "task_id": task["id"], "project_id": project["id"], "date": "2026-04-04"},
        headers=alice.headers,
    )
    assert resp.status_code == 201
    assert resp.get_json()["item"]["project_id"] == project["id"]

    resp = client.post(
        "/api/time-entries/",
        json={"hours": 3, "task_id": task["id"], "project_id": project["id"]},
        headers=bob.headers,
    )
    assert resp.status_code == 404

    resp = client.post("/api/time-entries/", json={"hours": 3}, headers=alice.headers)
    assert resp.status_code == 400
    assert set(resp.get_json()["field_errors"]) == {"task_id", "project_id"}
