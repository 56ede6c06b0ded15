from flask import jsonify
from flask_bcrypt import Bcrypt
from flask_jwt_extended import JWTManager

from taskhub.errors import AuthenticationRequired
from taskhub.utils.db import db

jwt = JWTManager()
bcrypt = Bcrypt()


def init_app(app):
    jwt.init_app(app)
    bcrypt.init_app(app)


def hash_password(password):
    return bcrypt.generate_password_hash(password).decode("utf-8")


def check_password(password_hash, password):
    return bcrypt.check_password_hash(password_hash, password)


@jwt.user_identity_loader
def _user_identity(user):
    # Tokens carry the user id as a string subject
    return str(user.id if hasattr(user, "id") else user)


@jwt.user_lookup_loader
def _load_user(_jwt_header, jwt_data):
    from taskhub.models import User

    try:
        user_id = int(jwt_data["sub"])
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def _unauthenticated(message=None):
    exc = AuthenticationRequired(message)
    return jsonify(exc.to_dict()), exc.status_code


@jwt.user_lookup_error_loader
def _user_gone(_jwt_header, _jwt_data):
    return _unauthenticated()


@jwt.unauthorized_loader
def _missing_token(_reason):
    return _unauthenticated()


@jwt.invalid_token_loader
def _invalid_token(_reason):
    return _unauthenticated("Invalid session")


@jwt.expired_token_loader
def _expired_token(_jwt_header, _jwt_data):
    return _unauthenticated("Session expired")
