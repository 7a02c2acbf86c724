from __future__ import annotations

from ..extensions import db
from rta.time_utils import to_utc_z


class Notification(db.Model):
    """
    Message shown in the user's notification panel.

    Created only as a side effect of other actions. is_read only ever moves
    from False to True.
    """
    __tablename__ = "notifications"
    __table_args__ = (
        db.Index("ix_notifications_user_read", "user_id", "is_read"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    title = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    type = db.Column(db.String(16), nullable=False, default="info")  # info, success, warning, error
    is_read = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "isRead": self.is_read,
            "createdAt": to_utc_z(self.created_at),
        }


class Activity(db.Model):
    """
    User activity audit log.

    IMMUTABLE: Never update or delete. Append-only.
    """
    __tablename__ = "activities"
    __table_args__ = (
        db.Index("ix_activities_user_created", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    action = db.Column(db.String(128), nullable=False)
    details = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "action": self.action,
            "details": self.details,
            "createdAt": to_utc_z(self.created_at),
        }
