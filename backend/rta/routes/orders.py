# Overview: Flask API routes for orders; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, g

from ..decorators import require_auth
from ..errors import ValidationError
from ..services import order_service


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.post("")
@require_auth
def create_order_route():
    """
    Body: {orderId, status, totalDocuments, documentType, price?}
    """
    data = request.get_json(silent=True) or {}
    order = order_service.create_order(g.session_context, data)
    return jsonify(order.to_dict()), 201


@orders_bp.get("")
@require_auth
def list_orders_route():
    orders = order_service.list_orders(g.session_context)
    return jsonify([o.to_dict() for o in orders])


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    order = order_service.get_order(g.session_context, order_id)
    return jsonify(order.to_dict())


@orders_bp.patch("/<int:order_id>/status")
@require_auth
def update_order_status_route(order_id: int):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    order = order_service.set_status(g.session_context, order_id, data.get("status"))
    return jsonify(order.to_dict())
