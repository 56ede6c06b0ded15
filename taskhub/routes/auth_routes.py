from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import (
    create_access_token,
    current_user,
    jwt_required,
    set_access_cookies,
    unset_jwt_cookies,
)

from taskhub.models import User
from taskhub.services.user_service import create_user, read_user_fields
from taskhub.utils.auth import check_password
from taskhub.utils.db import db
from taskhub.utils.validation import FieldErrors, clean_email, clean_string, get_payload

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register():
    errors = FieldErrors()
    fields = read_user_fields(get_payload(), errors)
    errors.raise_if_any()

    user = create_user(fields["name"], fields["email"], fields["password"])
    current_app.logger.info("Registered user %s", user.id)
    return jsonify(message="Registration successful", item=user.to_dict()), 201


@auth_bp.post("/login")
def login():
    payload = get_payload()
    errors = FieldErrors()
    email = clean_email(payload, "email", errors)
    password = clean_string(payload, "password", errors, required=True)
    errors.raise_if_any()

    user = db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none()
    if user is None or not check_password(user.password, password):
        return jsonify(error="Invalid email or password"), 401

    access_token = create_access_token(identity=user)
    response = jsonify(item=user.to_dict(), access_token=access_token)
    set_access_cookies(response, access_token)
    return response, 200


@auth_bp.post("/logout")
def logout():
    response = jsonify(status="logged_out")
    unset_jwt_cookies(response)
    return response, 200


@auth_bp.get("/me")
@jwt_required()
def me():
    return jsonify(item=current_user.to_dict()), 200
