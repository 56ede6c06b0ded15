from datetime import datetime
from enum import Enum

from taskhub.utils.db import db, isoformat


class NotificationType(str, Enum):
    MENTION = "MENTION"
    COMMENT = "COMMENT"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_UPDATE = "TASK_UPDATE"


class Notification(db.Model):
    """A per-user message about an event. Only ``is_read`` changes after creation."""

    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(20), nullable=False)
    content = db.Column(db.String(500), nullable=False)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    # Loose pointer to the triggering entity ("TASK" or "COMMENT"); may outlive it
    related_id = db.Column(db.Integer)
    related_type = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    user = db.relationship("User", back_populates="notifications")

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "content": self.content,
            "user_id": self.user_id,
            "is_read": self.is_read,
            "related_id": self.related_id,
            "related_type": self.related_type,
            "created_at": isoformat(self.created_at),
        }
