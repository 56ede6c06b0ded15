from datetime import datetime
from enum import Enum

from taskhub.utils.db import db, isoformat


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# Single source for human readable status names (notifications, kanban columns)
STATUS_LABELS = {
    TaskStatus.TODO: "To Do",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}


def status_label(status):
    try:
        return STATUS_LABELS[TaskStatus(status)]
    except ValueError:
        return str(status)


class Task(db.Model):
    __tablename__ = "tasks"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    priority = db.Column(db.String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    status = db.Column(db.String(20), nullable=False, default=TaskStatus.TODO.value, index=True)
    due_date = db.Column(db.DateTime)
    start_date = db.Column(db.DateTime)
    estimated_hours = db.Column(db.Float)

    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assigned_user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), index=True
    )
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="SET NULL"), index=True
    )

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", foreign_keys=[user_id], back_populates="tasks")
    assigned_user = db.relationship("User", foreign_keys=[assigned_user_id])
    project = db.relationship("Project", back_populates="tasks")
    comments = db.relationship(
        "Comment", back_populates="task", cascade="all, delete-orphan", passive_deletes=True
    )
    time_entries = db.relationship(
        "TimeEntry", back_populates="task", cascade="all, delete-orphan", passive_deletes=True
    )

    def is_visible_to(self, user_id):
        return user_id in (self.user_id, self.assigned_user_id)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "status": self.status,
            "status_label": status_label(self.status),
            "due_date": isoformat(self.due_date),
            "start_date": isoformat(self.start_date),
            "estimated_hours": self.estimated_hours,
            "user_id": self.user_id,
            "assigned_user_id": self.assigned_user_id,
            "project_id": self.project_id,
            "user": self.user.to_brief() if self.user else None,
            "assigned_user": self.assigned_user.to_brief() if self.assigned_user else None,
            "project": self.project.to_brief() if self.project else None,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Task {self.id} {self.title!r} {self.status}>"
