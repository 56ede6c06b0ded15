"""Notification fan-out for task and comment events.

Functions here only add rows to the current session. The calling
handler commits once, so a mutation and the notifications it triggers
are persisted together or not at all.
"""

from taskhub.models import Notification, NotificationType, TaskStatus, status_label
from taskhub.utils.db import db

RELATED_TASK = "TASK"
RELATED_COMMENT = "COMMENT"


def notify(user_id, type_, content, related_id=None, related_type=None):
    notification = Notification(
        type=NotificationType(type_).value,
        content=content,
        user_id=user_id,
        related_id=related_id,
        related_type=related_type,
    )
    db.session.add(notification)
    return notification


def status_change_recipients(task, actor_id):
    """Assignee first, then owner; never the actor, never the same user twice."""
    recipients = []
    if task.assigned_user_id is not None and task.assigned_user_id != actor_id:
        recipients.append(task.assigned_user_id)
    if task.user_id != actor_id and task.user_id != task.assigned_user_id:
        recipients.append(task.user_id)
    return recipients


def notify_status_change(task, old_status, actor):
    if TaskStatus(task.status) == TaskStatus(old_status):
        return []
    content = f'{actor.name} changed the status of "{task.title}" to "{status_label(task.status)}"'
    return [
        notify(user_id, NotificationType.TASK_UPDATE, content, task.id, RELATED_TASK)
        for user_id in status_change_recipients(task, actor.id)
    ]


def notify_assignment(task, actor, previous_assignee_id=None):
    assignee_id = task.assigned_user_id
    if assignee_id is None or assignee_id == previous_assignee_id or assignee_id == actor.id:
        return None
    content = f'{actor.name} assigned the task "{task.title}" to you'
    return notify(assignee_id, NotificationType.TASK_ASSIGNED, content, task.id, RELATED_TASK)


def notify_comment(task, comment, actor, mentioned_user_ids):
    # One notification per mention as submitted, duplicates included
    notifications = [
        notify(
            user_id,
            NotificationType.MENTION,
            f"{actor.name} mentioned you in a comment on \"{task.title}\"",
            comment.id,
            RELATED_COMMENT,
        )
        for user_id in mentioned_user_ids
    ]
    if task.user_id != actor.id:
        notifications.append(
            notify(
                task.user_id,
                NotificationType.COMMENT,
                f"{actor.name} commented on your task: {task.title}",
                task.id,
                RELATED_TASK,
            )
        )
    return notifications
