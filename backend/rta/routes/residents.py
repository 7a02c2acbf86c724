# Overview: Flask API routes for the resident registry (read-only).

from flask import Blueprint, request, jsonify

from ..decorators import require_auth
from ..services import resident_service


residents_bp = Blueprint("residents", __name__, url_prefix="/api/residents")


@residents_bp.get("")
@require_auth
def list_residents_route():
    """Optional ?source=internal|external filter."""
    residents = resident_service.list_residents(request.args.get("source") or None)
    return jsonify([r.to_dict() for r in residents])


@residents_bp.get("/<int:resident_id>")
@require_auth
def get_resident_route(resident_id: int):
    resident = resident_service.get_resident(resident_id)
    return jsonify(resident.to_dict())
