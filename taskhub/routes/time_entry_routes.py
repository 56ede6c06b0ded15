from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy import or_

from taskhub.errors import AuthorizationDenied, NotFound
from taskhub.models import Project, TimeEntry
from taskhub.services.project_service import ensure_default_project
from taskhub.services.task_service import get_task_or_404
from taskhub.utils.db import db
from taskhub.utils.validation import (
    FieldErrors,
    clean_datetime,
    clean_id,
    clean_number,
    clean_string,
    get_payload,
    given,
)

time_entries_bp = Blueprint("time_entries", __name__)


def _read_entry_fields(payload, errors):
    fields = {
        "hours": clean_number(payload, "hours", errors, required=True, positive=True, maximum=24),
        "description": clean_string(payload, "description", errors, max_length=200),
        "date": clean_datetime(payload, "date", errors),
    }
    # Absent or null date means "now" (column default)
    return {key: value for key, value in fields.items() if given(value)}


@time_entries_bp.get("/tasks/<int:task_id>/time-entries")
@jwt_required()
def list_task_time_entries(task_id):
    get_task_or_404(task_id)
    entries = db.session.execute(
        db.select(TimeEntry)
        .filter_by(task_id=task_id)
        .order_by(TimeEntry.date.desc(), TimeEntry.id.desc())
    ).scalars().all()
    return jsonify(items=[entry.to_dict() for entry in entries]), 200


@time_entries_bp.post("/tasks/<int:task_id>/time-entries")
@jwt_required()
def create_task_time_entry(task_id):
    actor = current_user
    errors = FieldErrors()
    fields = _read_entry_fields(get_payload(), errors)
    errors.raise_if_any()

    task = get_task_or_404(task_id)
    project_id = task.project_id
    if project_id is None:
        project_id = ensure_default_project(actor.id).id

    entry = TimeEntry(task_id=task.id, project_id=project_id, user_id=actor.id, **fields)
    db.session.add(entry)
    db.session.commit()
    return jsonify(item=entry.to_dict()), 201


@time_entries_bp.delete("/tasks/<int:task_id>/time-entries/<int:entry_id>")
@jwt_required()
def delete_task_time_entry(task_id, entry_id):
    entry = db.session.get(TimeEntry, entry_id)
    if entry is None or entry.task_id != task_id:
        raise NotFound("Time entry not found")
    if entry.user_id != current_user.id:
        raise AuthorizationDenied("Only the author can delete this time entry")

    db.session.delete(entry)
    db.session.commit()
    return jsonify(status="deleted", id=entry_id), 200


@time_entries_bp.get("/time-entries/")
@jwt_required()
def list_time_entries():
    user_id = current_user.id
    errors = FieldErrors()
    task_id = clean_id(request.args, "task_id", errors)
    project_id = clean_id(request.args, "project_id", errors)
    start_date = clean_datetime(request.args, "start_date", errors)
    end_date = clean_datetime(request.args, "end_date", errors)
    errors.raise_if_any()

    own_projects = db.select(Project.id).where(Project.user_id == user_id)
    query = db.select(TimeEntry).where(
        or_(TimeEntry.user_id == user_id, TimeEntry.project_id.in_(own_projects))
    )
    if given(task_id):
        query = query.where(TimeEntry.task_id == task_id)
    if given(project_id):
        query = query.where(TimeEntry.project_id == project_id)
    if given(start_date):
        query = query.where(TimeEntry.date >= start_date)
    if given(end_date):
        query = query.where(TimeEntry.date <= end_date)

    entries = db.session.execute(
        query.order_by(TimeEntry.date.desc(), TimeEntry.id.desc())
    ).scalars().all()
    return jsonify(items=[entry.to_dict() for entry in entries]), 200


@time_entries_bp.post("/time-entries/")
@jwt_required()
def create_time_entry():
    actor = current_user
    payload = get_payload()
    errors = FieldErrors()
    fields = _read_entry_fields(payload, errors)
    task_id = clean_id(payload, "task_id", errors, required=True)
    project_id = clean_id(payload, "project_id", errors, required=True)
    errors.raise_if_any()

    task = get_task_or_404(task_id)
    project = db.session.get(Project, project_id)
    if project is None or (project.user_id != actor.id and project.id != task.project_id):
        raise NotFound("Project not found")

    entry = TimeEntry(task_id=task.id, project_id=project.id, user_id=actor.id, **fields)
    db.session.add(entry)
    db.session.commit()
    return jsonify(item=entry.to_dict()), 201
