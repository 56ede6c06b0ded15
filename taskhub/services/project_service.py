from flask import current_app

from taskhub.errors import NotFound
from taskhub.models import Project
from taskhub.utils.db import db


def get_owned_project(project_id, user_id):
    project = db.session.execute(
        db.select(Project).filter_by(id=project_id, user_id=user_id)
    ).scalar_one_or_none()
    if project is None:
        raise NotFound("Project not found")
    return project


def ensure_default_project(user_id):
    """Return the user's default project, creating it on first use.

    The new row is added to the session but not committed; the caller's
    commit persists it together with whatever needed it.
    """
    name = current_app.config["DEFAULT_PROJECT_NAME"]
    project = db.session.execute(
        db.select(Project).filter_by(user_id=user_id, name=name).order_by(Project.id).limit(1)
    ).scalar_one_or_none()
    if project is not None:
        return project

    project = Project(name=name, user_id=user_id)
    db.session.add(project)
    db.session.flush()
    current_app.logger.info("Provisioned default project %s for user %s", project.id, user_id)
    return project
