from flask import Blueprint, jsonify, request
from flask_jwt_extended import current_user, jwt_required
from sqlalchemy import or_

from taskhub.models import User
from taskhub.services.user_service import (
    create_user,
    get_user_or_404,
    read_user_fields,
    update_user,
)
from taskhub.utils.db import db
from taskhub.utils.validation import FieldErrors, get_payload

users_bp = Blueprint("users", __name__)

MENTION_SEARCH_LIMIT = 10
# Password given to users created by someone else when none is supplied
DEFAULT_PASSWORD = "123456"


@users_bp.get("/")
@jwt_required()
def list_users():
    if request.args.get("all") == "true":
        users = db.session.execute(
            db.select(User).order_by(User.created_at.desc(), User.id.desc())
        ).scalars().all()
        return jsonify(items=[user.to_dict() for user in users]), 200

    # Mention autocomplete: match name or email, never suggest yourself
    query = (request.args.get("q") or "").strip()
    if not query:
        return jsonify(items=[]), 200
    users = db.session.execute(
        db.select(User)
        .where(
            or_(
                User.name.contains(query, autoescape=True),
                User.email.contains(query, autoescape=True),
            ),
            User.id != current_user.id,
        )
        .order_by(User.name)
        .limit(MENTION_SEARCH_LIMIT)
    ).scalars().all()
    return jsonify(items=[user.to_brief() for user in users]), 200


@users_bp.post("/")
@jwt_required()
def create_user_route():
    errors = FieldErrors()
    fields = read_user_fields(get_payload(), errors, password_required=False)
    errors.raise_if_any()

    user = create_user(fields["name"], fields["email"], fields.get("password") or DEFAULT_PASSWORD)
    return jsonify(item=user.to_dict()), 201


@users_bp.get("/<int:user_id>")
@jwt_required()
def get_user(user_id):
    return jsonify(item=get_user_or_404(user_id).to_dict()), 200


@users_bp.put("/<int:user_id>")
@jwt_required()
def update_user_route(user_id):
    user = get_user_or_404(user_id)

    errors = FieldErrors()
    fields = read_user_fields(get_payload(), errors, partial=True)
    errors.raise_if_any()
    if not fields:
        return jsonify(error="No valid fields to update"), 400

    update_user(user, fields)
    return jsonify(item=user.to_dict()), 200


@users_bp.delete("/<int:user_id>")
@jwt_required()
def delete_user(user_id):
    if user_id == current_user.id:
        return jsonify(error="You cannot delete your own account"), 400
    user = get_user_or_404(user_id)

    # Owned records cascade; tasks assigned to this user become unassigned
    db.session.delete(user)
    db.session.commit()
    return jsonify(status="deleted", id=user_id), 200
