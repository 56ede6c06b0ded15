from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy import or_

from taskhub.models import Project, Task, TaskPriority, TaskStatus, User
from taskhub.services.notification_service import notify_assignment
from taskhub.services.task_service import (
    change_status,
    get_owned_task,
    get_visible_task,
)
from taskhub.utils.db import db
from taskhub.utils.validation import (
    FieldErrors,
    clean_choice,
    clean_datetime,
    clean_id,
    clean_number,
    clean_string,
    get_payload,
    provided,
)

tasks_bp = Blueprint("tasks", __name__)


def _read_task_fields(payload, errors, partial):
    fields = {
        "title": clean_string(payload, "title", errors, required=not partial, max_length=200),
        "description": clean_string(payload, "description", errors, max_length=2000),
        "priority": clean_choice(payload, "priority", errors, TaskPriority),
        "status": clean_choice(payload, "status", errors, TaskStatus),
        "due_date": clean_datetime(payload, "due_date", errors),
        "start_date": clean_datetime(payload, "start_date", errors),
        "estimated_hours": clean_number(payload, "estimated_hours", errors, minimum=0),
        "assigned_user_id": clean_id(payload, "assigned_user_id", errors),
        "project_id": clean_id(payload, "project_id", errors),
    }
    if partial and "title" in payload and not fields["title"]:
        errors["title"] = "Title is required"
    return {key: value for key, value in fields.items() if provided(value)}


def _check_references(fields, owner_id, errors):
    assignee_id = fields.get("assigned_user_id")
    if assignee_id is not None and db.session.get(User, assignee_id) is None:
        errors["assigned_user_id"] = "Assigned user not found"
    project_id = fields.get("project_id")
    if project_id is not None:
        project = db.session.get(Project, project_id)
        if project is None or project.user_id != owner_id:
            errors["project_id"] = "Project not found"
    errors.raise_if_any()


@tasks_bp.get("/")
@jwt_required()
def list_tasks():
    user_id = current_user.id
    errors = FieldErrors()
    status = clean_choice(request.args, "status", errors, TaskStatus)
    priority = clean_choice(request.args, "priority", errors, TaskPriority)
    errors.raise_if_any()

    query = db.select(Task).where(or_(Task.user_id == user_id, Task.assigned_user_id == user_id))
    if provided(status):
        query = query.where(Task.status == status)
    if provided(priority):
        query = query.where(Task.priority == priority)
    query = query.order_by(Task.created_at.desc(), Task.id.desc())

    tasks = db.session.execute(query).scalars().all()
    return jsonify(items=[task.to_dict() for task in tasks]), 200


@tasks_bp.post("/")
@jwt_required()
def create_task():
    actor = current_user
    errors = FieldErrors()
    fields = _read_task_fields(get_payload(), errors, partial=False)
    errors.raise_if_any()
    _check_references(fields, actor.id, errors)

    # Owner is always the actor, whatever the payload says
    task = Task(user_id=actor.id, **fields)
    db.session.add(task)
    db.session.flush()
    notify_assignment(task, actor)
    db.session.commit()

    current_app.logger.info("Task %s created by user %s", task.id, actor.id)
    return jsonify(item=task.to_dict()), 201


@tasks_bp.get("/<int:task_id>")
@jwt_required()
def get_task(task_id):
    task = get_visible_task(task_id, current_user.id)
    return jsonify(item=task.to_dict()), 200


@tasks_bp.put("/<int:task_id>")
@jwt_required()
def update_task(task_id):
    actor = current_user
    task = get_visible_task(task_id, actor.id)

    errors = FieldErrors()
    fields = _read_task_fields(get_payload(), errors, partial=True)
    errors.raise_if_any()
    if not fields:
        return jsonify(error="No valid fields to update"), 400
    _check_references(fields, task.user_id, errors)

    previous_assignee_id = task.assigned_user_id
    new_status = fields.pop("status", None)
    for key, value in fields.items():
        setattr(task, key, value)
    if new_status is not None:
        change_status(task, new_status, actor)
    if "assigned_user_id" in fields:
        notify_assignment(task, actor, previous_assignee_id)
    db.session.commit()

    return jsonify(item=task.to_dict()), 200


@tasks_bp.delete("/<int:task_id>")
@jwt_required()
def delete_task(task_id):
    task = get_owned_task(task_id, current_user.id)
    db.session.delete(task)
    db.session.commit()
    return jsonify(status="deleted", id=task_id), 200


@tasks_bp.patch("/<int:task_id>/status")
@jwt_required()
def update_task_status(task_id):
    actor = current_user
    task = get_visible_task(task_id, actor.id)

    errors = FieldErrors()
    status = clean_choice(get_payload(), "status", errors, TaskStatus, required=True)
    errors.raise_if_any()

    notifications = change_status(task, status, actor)
    db.session.commit()

    current_app.logger.info(
        "Task %s status set to %s by user %s (%d notification(s))",
        task.id, task.status, actor.id, len(notifications),
    )
    return jsonify(item=task.to_dict()), 200
