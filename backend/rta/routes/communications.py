# Overview: Flask API routes for notifications and the activity feed.

from flask import Blueprint, jsonify, g

from ..decorators import require_auth
from ..services import communications_service


communications_bp = Blueprint("communications", __name__, url_prefix="/api")


@communications_bp.get("/notifications")
@require_auth
def list_notifications_route():
    notifications = communications_service.list_notifications(g.session_context)
    return jsonify([n.to_dict() for n in notifications])


@communications_bp.patch("/notifications/read-all")
@require_auth
def mark_all_notifications_read_route():
    updated = communications_service.mark_all_read(g.session_context)
    return jsonify({"success": True, "updated": updated})


@communications_bp.patch("/notifications/<int:notification_id>/read")
@require_auth
def mark_notification_read_route(notification_id: int):
    communications_service.mark_read(g.session_context, notification_id)
    return jsonify({"success": True})


@communications_bp.get("/activities")
@require_auth
def list_activities_route():
    """Newest first."""
    activities = communications_service.list_activities(g.session_context)
    return jsonify([a.to_dict() for a in activities])
