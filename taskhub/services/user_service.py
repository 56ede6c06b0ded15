from sqlalchemy.exc import IntegrityError

from taskhub.errors import Conflict, NotFound
from taskhub.models import User
from taskhub.utils.auth import hash_password
from taskhub.utils.db import db
from taskhub.utils.validation import clean_email, clean_string, provided

EMAIL_TAKEN = "This email is already registered"


def read_user_fields(payload, errors, partial=False, password_required=True):
    fields = {
        "name": clean_string(payload, "name", errors, required=not partial, max_length=100),
        "email": clean_email(payload, "email", errors, required=not partial),
        "password": clean_string(
            payload, "password", errors, required=password_required and not partial, min_length=6
        ),
    }
    if partial and "name" in payload and not fields["name"]:
        errors["name"] = "Name is required"
    return {key: value for key, value in fields.items() if provided(value) and value is not None}


def get_user_or_404(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def email_taken(email, exclude_id=None):
    query = db.select(User.id).filter_by(email=email)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    return db.session.execute(query.limit(1)).first() is not None


def create_user(name, email, password):
    if email_taken(email):
        raise Conflict(EMAIL_TAKEN, {"email": EMAIL_TAKEN})

    user = User(name=name, email=email, password=hash_password(password))
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race against another registration with the same email
        db.session.rollback()
        raise Conflict(EMAIL_TAKEN, {"email": EMAIL_TAKEN})
    return user


def update_user(user, fields):
    email = fields.get("email")
    if email and email != user.email and email_taken(email, exclude_id=user.id):
        raise Conflict(EMAIL_TAKEN, {"email": EMAIL_TAKEN})

    if "name" in fields:
        user.name = fields["name"]
    if email:
        user.email = email
    if fields.get("password"):
        user.password = hash_password(fields["password"])
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(EMAIL_TAKEN, {"email": EMAIL_TAKEN})
    return user
