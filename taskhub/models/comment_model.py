from datetime import datetime

from taskhub.utils.db import db, isoformat


class Comment(db.Model):
    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False)
    task_id = db.Column(
        db.Integer, db.ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    task = db.relationship("Task", back_populates="comments")
    user = db.relationship("User")
    mentions = db.relationship(
        "Mention", back_populates="comment", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_dict(self):
        return {
            "id": self.id,
            "content": self.content,
            "task_id": self.task_id,
            "user_id": self.user_id,
            "user": self.user.to_brief() if self.user else None,
            "mentions": [mention.to_dict() for mention in self.mentions],
            "created_at": isoformat(self.created_at),
        }


class Mention(db.Model):
    __tablename__ = "mentions"

    id = db.Column(db.Integer, primary_key=True)
    comment_id = db.Column(
        db.Integer, db.ForeignKey("comments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    mentioned_user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    comment = db.relationship("Comment", back_populates="mentions")
    mentioned_user = db.relationship("User")

    def to_dict(self):
        return {
            "id": self.id,
            "comment_id": self.comment_id,
            "mentioned_user_id": self.mentioned_user_id,
            "mentioned_user": self.mentioned_user.to_brief() if self.mentioned_user else None,
        }
