from taskhub.errors import AuthorizationDenied, NotFound
from taskhub.models import Task, TaskStatus
from taskhub.services.notification_service import notify_status_change
from taskhub.utils.db import db


def get_task_or_404(task_id):
    task = db.session.get(Task, task_id)
    if task is None:
        raise NotFound("Task not found")
    return task


def get_visible_task(task_id, user_id):
    """Load a task the user owns or is assigned to."""
    task = get_task_or_404(task_id)
    if not task.is_visible_to(user_id):
        raise AuthorizationDenied("You do not have access to this task")
    return task


def get_owned_task(task_id, user_id):
    task = get_task_or_404(task_id)
    if task.user_id != user_id:
        raise AuthorizationDenied("Only the task owner can do this")
    return task


def change_status(task, new_status, actor):
    """Overwrite the status (any transition is allowed) and queue notifications.

    Concurrent writers get last-write-wins; there is no version check.
    """
    old_status = task.status
    task.status = TaskStatus(new_status).value
    return notify_status_change(task, old_status, actor)
