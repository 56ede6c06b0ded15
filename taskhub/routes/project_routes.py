from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required

from taskhub.models import Project, ProjectStatus
from taskhub.services.project_service import get_owned_project
from taskhub.utils.db import db
from taskhub.utils.validation import (
    FieldErrors,
    clean_choice,
    clean_number,
    clean_string,
    get_payload,
    provided,
)

projects_bp = Blueprint("projects", __name__)


def _read_project_fields(payload, errors, partial):
    fields = {
        "name": clean_string(payload, "name", errors, required=not partial, max_length=100),
        "description": clean_string(payload, "description", errors, max_length=500),
        "planned_hours": clean_number(payload, "planned_hours", errors, minimum=0),
        "status": clean_choice(payload, "status", errors, ProjectStatus),
    }
    if partial and "name" in payload and not fields["name"]:
        errors["name"] = "Name is required"
    return {key: value for key, value in fields.items() if provided(value)}


@projects_bp.get("/")
@jwt_required()
def list_projects():
    errors = FieldErrors()
    status = clean_choice(request.args, "status", errors, ProjectStatus)
    errors.raise_if_any()

    query = db.select(Project).filter_by(user_id=current_user.id)
    if provided(status):
        query = query.filter_by(status=status)
    projects = db.session.execute(
        query.order_by(Project.created_at.desc(), Project.id.desc())
    ).scalars().all()
    return jsonify(items=[project.to_dict(summary=True) for project in projects]), 200


@projects_bp.post("/")
@jwt_required()
def create_project():
    errors = FieldErrors()
    fields = _read_project_fields(get_payload(), errors, partial=False)
    errors.raise_if_any()

    project = Project(user_id=current_user.id, **fields)
    db.session.add(project)
    db.session.commit()
    return jsonify(item=project.to_dict(summary=True)), 201


@projects_bp.get("/<int:project_id>")
@jwt_required()
def get_project(project_id):
    project = get_owned_project(project_id, current_user.id)
    item = project.to_dict(summary=True)
    tasks = sorted(project.tasks, key=lambda task: (task.created_at, task.id), reverse=True)
    entries = sorted(project.time_entries, key=lambda entry: (entry.date, entry.id), reverse=True)
    item["tasks"] = [task.to_dict() for task in tasks]
    item["time_entries"] = [entry.to_dict() for entry in entries]
    return jsonify(item=item), 200


@projects_bp.put("/<int:project_id>")
@jwt_required()
def update_project(project_id):
    project = get_owned_project(project_id, current_user.id)

    errors = FieldErrors()
    fields = _read_project_fields(get_payload(), errors, partial=True)
    errors.raise_if_any()
    if not fields:
        return jsonify(error="No valid fields to update"), 400

    for key, value in fields.items():
        setattr(project, key, value)
    db.session.commit()
    return jsonify(item=project.to_dict(summary=True)), 200


@projects_bp.delete("/<int:project_id>")
@jwt_required()
def delete_project(project_id):
    project = get_owned_project(project_id, current_user.id)
    db.session.delete(project)
    db.session.commit()
    return jsonify(status="deleted", id=project_id), 200
