# Overview: Service-layer operations for orders; creation, ownership checks and the status state machine.

"""
Order Lifecycle Service

================================================================================
STATE MACHINE:
    pending --------> pending payment --> processing --> completed
       |                    |                 |
       +--> processing      +--> rejected     +--> rejected
       +--> rejected

    completed, rejected: terminal
================================================================================

RULES:
1. Status must always be one of VALID_STATUSES.
2. With ORDER_STRICT_TRANSITIONS on (default), only the moves in
   ALLOWED_TRANSITIONS are accepted. Re-asserting the current status is an
   accepted no-op move.
3. With ORDER_STRICT_TRANSITIONS off, any known status may follow any other
   (the permissive behaviour older clients relied on).
4. Every create and every status change emits one activity and one
   notification for the owner (best-effort, see communications_service).
"""

from __future__ import annotations

from flask import current_app

from ..errors import ForbiddenError, NotFoundError, ValidationError
from ..models import Order
from ..storage import get_repository
from . import communications_service


STATUS_PENDING = "pending"
STATUS_PENDING_PAYMENT = "pending payment"
STATUS_PROCESSING = "processing"
STATUS_COMPLETED = "completed"
STATUS_REJECTED = "rejected"

VALID_STATUSES = {
    STATUS_PENDING,
    STATUS_PENDING_PAYMENT,
    STATUS_PROCESSING,
    STATUS_COMPLETED,
    STATUS_REJECTED,
}

ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_PENDING_PAYMENT, STATUS_PROCESSING, STATUS_REJECTED},
    STATUS_PENDING_PAYMENT: {STATUS_PROCESSING, STATUS_REJECTED},
    STATUS_PROCESSING: {STATUS_COMPLETED, STATUS_REJECTED},
    STATUS_COMPLETED: set(),
    STATUS_REJECTED: set(),
}


class OrderTransitionError(ValidationError):
    """Raised when a status move is not in the transition table."""
    pass


def validate_status(status) -> str:
    if not isinstance(status, str) or status not in VALID_STATUSES:
        raise ValidationError(
            f"Invalid status '{status}'. Must be one of: {', '.join(sorted(VALID_STATUSES))}"
        )
    return status


def can_transition(from_status: str, to_status: str) -> bool:
    """
    Check a move against the transition table.

    Unknown current statuses (legacy rows) may move to any valid status.
    """
    validate_status(to_status)
    if from_status == to_status:
        return True
    if from_status not in ALLOWED_TRANSITIONS:
        return True
    return to_status in ALLOWED_TRANSITIONS[from_status]


def _strict_transitions() -> bool:
    return bool(current_app.config.get("ORDER_STRICT_TRANSITIONS", True))


def _require_int(data: dict, key: str, *, required: bool) -> int | None:
    value = data.get(key)
    if value is None:
        if required:
            raise ValidationError(f"{key} is required")
        return None
    # bool is an int subclass; floats are rejected rather than truncated
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{key} must be an integer")
    if value < 0:
        raise ValidationError(f"{key} must not be negative")
    return value


def _require_str(data: dict, key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()


def validate_order_payload(data: dict) -> dict:
    """
    Validate a create-order payload.

    Returns normalized repository fields.
    Raises ValidationError on bad input.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    return {
        "order_id": _require_str(data, "orderId"),
        "status": validate_status(data.get("status", STATUS_PENDING)),
        "total_documents": _require_int(data, "totalDocuments", required=True),
        "document_type": _require_str(data, "documentType"),
        "price": _require_int(data, "price", required=False),
    }


def create_order(ctx, data: dict) -> Order:
    """
    Create an order owned by the caller.

    Raises:
        ValidationError: bad payload
        ConflictError: orderId already used
    """
    fields = validate_order_payload(data)
    order = get_repository().create_order(user_id=ctx.user.id, **fields)

    communications_service.record(ctx.user.id, "Order Created", f"Created order: {order.order_id}")
    communications_service.notify(
        ctx.user.id,
        "New Order Created",
        f"Your order {order.order_id} has been created successfully with status: {order.status}",
        "info",
    )
    return order


def list_orders(ctx) -> list[Order]:
    return get_repository().list_orders_by_user(ctx.user.id)


def get_order(ctx, order_pk: int) -> Order:
    """
    Fetch an order the caller owns.

    NotFoundError wins over ForbiddenError: existence is checked first.
    """
    order = get_repository().get_order(order_pk)
    if order is None:
        raise NotFoundError("Order not found")
    if order.user_id != ctx.user.id:
        raise ForbiddenError("Forbidden: You don't have permission to access this order")
    return order


def set_status(ctx, order_pk: int, new_status) -> Order:
    """
    Move an order to new_status.

    Raises:
        ValidationError: status missing or unknown
        NotFoundError: unknown order
        ForbiddenError: caller does not own the order
        OrderTransitionError: move not allowed by the transition table
    """
    if new_status is None or new_status == "":
        raise ValidationError("Status is required")

    order = get_order(ctx, order_pk)
    validate_status(new_status)

    if _strict_transitions() and not can_transition(order.status, new_status):
        raise OrderTransitionError(
            f"Cannot change order {order.order_id} from '{order.status}' to '{new_status}'"
        )

    updated = get_repository().update_order_status(order_pk, new_status)
    if updated is None:
        raise NotFoundError("Order not found")

    communications_service.record(
        ctx.user.id,
        "Order Status Updated",
        f"Updated order {updated.order_id} status to: {new_status}",
    )
    communications_service.notify(
        ctx.user.id,
        "Order Status Updated",
        f"Your order {updated.order_id} status has been updated to: {new_status}",
        "info",
    )
    return updated
