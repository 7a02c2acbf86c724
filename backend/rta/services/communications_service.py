"""
Notification and activity fan-out.

notify() and record() are best-effort secondary writes performed inline
after a primary mutation. They never raise: a failure is logged and the
caller's primary result stands (no rollback, no retry).
"""

from __future__ import annotations

from flask import current_app

from ..errors import NotFoundError, ValidationError
from ..models import Activity, Notification
from ..storage import get_repository


NOTIFICATION_TYPES = {"info", "success", "warning", "error"}


def notify(user_id: int, title: str, message: str, type: str = "info") -> Notification | None:
    """Create an unread notification for user_id. Returns None if the write failed."""
    try:
        if type not in NOTIFICATION_TYPES:
            raise ValidationError(f"Invalid notification type '{type}'")
        return get_repository().create_notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
        )
    except Exception:
        current_app.logger.exception("Failed to create notification '%s' for user %s", title, user_id)
        return None


def record(user_id: int, action: str, details: str | None = None) -> Activity | None:
    """Append an activity row for user_id. Returns None if the write failed."""
    try:
        return get_repository().create_activity(user_id=user_id, action=action, details=details)
    except Exception:
        current_app.logger.exception("Failed to record activity '%s' for user %s", action, user_id)
        return None


def list_notifications(ctx) -> list[Notification]:
    return get_repository().list_notifications_by_user(ctx.user.id)


def list_activities(ctx) -> list[Activity]:
    return get_repository().list_activities_by_user(ctx.user.id)


def mark_read(ctx, notification_id: int) -> Notification:
    """
    Mark one of the caller's notifications as read.

    Notifications of other users are reported as not found.
    """
    repo = get_repository()
    notification = repo.get_notification(notification_id)
    if notification is None or notification.user_id != ctx.user.id:
        raise NotFoundError("Notification not found")

    if not notification.is_read and not repo.mark_notification_read(notification_id):
        raise NotFoundError("Notification not found")
    return notification


def mark_all_read(ctx) -> int:
    """
    Mark every unread notification of the caller as read, one at a time.

    Returns the number of notifications flipped.
    """
    repo = get_repository()
    count = 0
    for notification in repo.list_notifications_by_user(ctx.user.id):
        if notification.is_read:
            continue
        if repo.mark_notification_read(notification.id):
            count += 1
    return count
