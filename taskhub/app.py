import os
import time
from datetime import datetime

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

try:
    import resource
except ImportError:  # Windows
    resource = None

_STARTED_AT = time.monotonic()


def create_app(overrides=None):
    load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env"), override=False)

    app = Flask(__name__)
    app.config.from_object("taskhub.config.Config")
    if overrides:
        app.config.update(overrides)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Collections are served at "/api/tasks" and "/api/tasks/" alike
    app.url_map.strict_slashes = False

    # Core extensions
    origins = app.config.get("AUTH_URL") or "*"
    CORS(app, resources={r"/api/*": {"origins": origins}}, supports_credentials=True)

    from taskhub.utils import auth
    from taskhub.utils import db as db_utils

    db_utils.init_app(app)
    auth.init_app(app)

    # Importing the models registers every table on the shared metadata
    import taskhub.models  # noqa: F401

    if not app.debug and not app.testing:
        if app.config["JWT_SECRET_KEY"] == "change-this-auth-secret":
            app.logger.warning("AUTH_SECRET is not set; sessions are signed with a default key.")
        if app.config["SECRET_KEY"] == "dev-secret-key-change-me":
            app.logger.warning("SECRET_KEY is not set; using the development default.")

    # Register blueprints
    from taskhub.errors import register_error_handlers
    from taskhub.routes.auth_routes import auth_bp
    from taskhub.routes.comment_routes import comments_bp
    from taskhub.routes.notification_routes import notifications_bp
    from taskhub.routes.project_routes import projects_bp
    from taskhub.routes.task_routes import tasks_bp
    from taskhub.routes.time_entry_routes import time_entries_bp
    from taskhub.routes.user_routes import users_bp

    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")
    app.register_blueprint(comments_bp, url_prefix="/api/tasks")
    app.register_blueprint(time_entries_bp, url_prefix="/api")
    app.register_blueprint(projects_bp, url_prefix="/api/projects")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(notifications_bp, url_prefix="/api/notifications")

    register_error_handlers(app)

    @app.get("/api/health")
    def health():
        started = time.perf_counter()
        timestamp = datetime.utcnow().isoformat() + "Z"
        try:
            db_utils.ping()
        except Exception as exc:  # noqa: BLE001
            app.logger.exception("Health check failed: %s", exc)
            return jsonify(
                status="error",
                timestamp=timestamp,
                database="disconnected",
                error=str(exc),
            ), 503

        memory = None
        if resource is not None:
            # ru_maxrss is reported in kilobytes on Linux
            max_rss_kb = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
            memory = {"max_rss_mb": round(max_rss_kb / 1024, 2)}
        return jsonify(
            status="ok",
            timestamp=timestamp,
            database="connected",
            response_time_ms=round((time.perf_counter() - started) * 1000, 2),
            uptime_seconds=round(time.monotonic() - _STARTED_AT, 2),
            memory=memory,
        ), 200

    return app
