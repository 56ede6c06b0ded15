from datetime import datetime

from taskhub.utils.db import db, isoformat


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    # bcrypt hash; never serialized
    password = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    tasks = db.relationship(
        "Task",
        foreign_keys="Task.user_id",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    projects = db.relationship(
        "Project", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    notifications = db.relationship(
        "Notification", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    def to_brief(self):
        return {"id": self.id, "name": self.name, "email": self.email}

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
