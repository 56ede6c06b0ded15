from taskhub.models.comment_model import Comment, Mention
from taskhub.models.notification_model import Notification, NotificationType
from taskhub.models.project_model import Project, ProjectStatus
from taskhub.models.task_model import STATUS_LABELS, Task, TaskPriority, TaskStatus, status_label
from taskhub.models.time_entry_model import TimeEntry
from taskhub.models.user_model import User

__all__ = [
    "Comment",
    "Mention",
    "Notification",
    "NotificationType",
    "Project",
    "ProjectStatus",
    "STATUS_LABELS",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "status_label",
    "TimeEntry",
    "User",
]
