# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .services import session_service


def session_token_from_request() -> str | None:
    """Opaque session token carried by the auth cookie."""
    return request.cookies.get(current_app.config["AUTH_COOKIE_NAME"])


def require_auth(f):
    """
    Require an active session.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.session_context: The full SessionContext, passed on to services

    Returns 401 if the cookie is missing, unknown, revoked or expired.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = session_token_from_request()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        context = session_service.validate_session(token)
        if not context:
            return jsonify({"error": "Invalid or expired session"}), 401

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function
