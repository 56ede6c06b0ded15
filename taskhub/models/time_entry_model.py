from datetime import datetime

from taskhub.utils.db import db, isoformat


class TimeEntry(db.Model):
    __tablename__ = "time_entries"

    id = db.Column(db.Integer, primary_key=True)
    hours = db.Column(db.Float, nullable=False)
    description = db.Column(db.String(200))
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    task_id = db.Column(
        db.Integer, db.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    task = db.relationship("Task", back_populates="time_entries")
    project = db.relationship("Project", back_populates="time_entries")
    user = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "hours": self.hours,
            "description": self.description,
            "date": isoformat(self.date),
            "task_id": self.task_id,
            "project_id": self.project_id,
            "user_id": self.user_id,
            "task": {"id": self.task.id, "title": self.task.title} if self.task else None,
            "project": self.project.to_brief() if self.project else None,
            "user": self.user.to_brief() if self.user else None,
            "created_at": isoformat(self.created_at),
        }
