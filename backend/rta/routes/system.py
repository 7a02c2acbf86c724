# backend/rta/routes/system.py
"""
System health endpoint.
"""

import time
from flask import Blueprint, current_app, jsonify

from ..storage import get_repository

system_bp = Blueprint("system", __name__, url_prefix="/api")


@system_bp.get("/health")
def health_route():
    """Storage round-trip check. 503 when the repository cannot be read."""
    start_time = time.time()
    repo = get_repository()
    try:
        residents = repo.count_residents()
    except Exception:
        current_app.logger.exception("Storage health check failed")
        return jsonify({
            "status": "unhealthy",
            "storage": repo.backend_name,
            "error": "Storage error",
        }), 503

    elapsed_ms = (time.time() - start_time) * 1000
    return jsonify({
        "status": "ok",
        "storage": repo.backend_name,
        "latency_ms": round(elapsed_ms, 2),
        "residents": residents,
    })
