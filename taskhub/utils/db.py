import sqlite3

import click
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event, text
from sqlalchemy.engine import Engine

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    # SQLite ignores ON DELETE rules and FK checks unless asked per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_app(app):
    db.init_app(app)

    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        # Models must be imported so their tables are registered on the metadata
        import taskhub.models  # noqa: F401

        db.create_all()
        click.echo("Initialized the database.")


def ping():
    """Round-trip a trivial query; raises if the database is unreachable."""
    db.session.execute(text("SELECT 1"))


def isoformat(value):
    return value.isoformat() if value is not None else None
