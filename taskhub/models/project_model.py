from datetime import datetime
from enum import Enum

from taskhub.models.task_model import TaskStatus
from taskhub.utils.db import db, isoformat


class ProjectStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500))
    status = db.Column(db.String(20), nullable=False, default=ProjectStatus.ACTIVE.value)
    planned_hours = db.Column(db.Float)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    user = db.relationship("User", back_populates="projects")
    # Deleting a project detaches its tasks (SET NULL) but drops its time entries
    tasks = db.relationship("Task", back_populates="project", passive_deletes=True)
    time_entries = db.relationship(
        "TimeEntry", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def actual_hours(self):
        return sum(entry.hours for entry in self.time_entries)

    def to_brief(self):
        return {"id": self.id, "name": self.name}

    def to_dict(self, summary=False):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "planned_hours": self.planned_hours,
            "user_id": self.user_id,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }
        if summary:
            data["actual_hours"] = self.actual_hours
            data["task_count"] = len(self.tasks)
            data["completed_tasks"] = sum(
                1 for task in self.tasks if task.status == TaskStatus.DONE.value
            )
        return data
