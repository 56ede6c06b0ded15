# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token
from sqlalchemy import func

from taskhub.app import create_app
from taskhub.models import User
from taskhub.utils.auth import hash_password
from taskhub.utils.db import db


@pytest.fixture()
def app(tmp_path: Path):
    """
    Application bound to a throwaway SQLite file.

    A file (not ":memory:") keeps every request's connection on the same
    database, and foreign keys are enforced on each connection.
    """
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'taskhub-test.db'}",
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
            "BCRYPT_LOG_ROUNDS": 4,
        }
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Create a user directly in the database and hand back auth headers for it."""

    def _make(name: str, email: str | None = None, password: str = "secret123"):
        with app.app_context():
            user = User(
                name=name,
                email=email or f"{name.lower()}@example.com",
                password=hash_password(password),
            )
            db.session.add(user)
            db.session.commit()
            token = create_access_token(identity=user)
            return SimpleNamespace(
                id=user.id,
                name=user.name,
                email=user.email,
                password=password,
                headers={"Authorization": f"Bearer {token}"},
            )

    return _make


@pytest.fixture()
def alice(make_user):
    return make_user("Alice")


@pytest.fixture()
def bob(make_user):
    return make_user("Bob")


@pytest.fixture()
def carol(make_user):
    return make_user("Carol")


@pytest.fixture()
def make_task(client):
    def _make(owner, **fields):
        payload = {"title": "Write report", **fields}
        resp = client.post("/api/tasks/", json=payload, headers=owner.headers)
        assert resp.status_code == 201, resp.get_json()
        return resp.get_json()["item"]

    return _make


@pytest.fixture()
def count(app):
    """Count rows of a model matching simple equality filters."""

    def _count(model, **filters) -> int:
        with app.app_context():
            query = db.select(func.count()).select_from(model).filter_by(**filters)
            return db.session.execute(query).scalar_one()

    return _count


@pytest.fixture()
def fetch(app):
    """Load one row by primary key as a detached dict snapshot."""

    def _fetch(model, pk):
        with app.app_context():
            obj = db.session.get(model, pk)
            if obj is None:
                return None
            return {column.name: getattr(obj, column.name) for column in model.__table__.columns}

    return _fetch
