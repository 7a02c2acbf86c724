# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

- Registration creates the account and logs it in
- Login issues a session cookie (HttpOnly, SameSite=Lax)
- Logout revokes the server-side session and clears the cookie
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..errors import ValidationError
from ..services import auth_service
from ..services import session_service
from ..services import communications_service
from ..decorators import require_auth, session_token_from_request


auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _start_session(user, response):
    """Create a session for user and attach its cookie to response."""
    _session, token = session_service.create_session(
        user_id=user.id,
        user_agent=request.headers.get("User-Agent"),
        ip_address=request.remote_addr,
    )
    response.set_cookie(
        current_app.config["AUTH_COOKIE_NAME"],
        token,
        max_age=int(current_app.config["SESSION_IDLE_TIMEOUT"].total_seconds()),
        httponly=True,
        secure=current_app.config["SESSION_COOKIE_SECURE"],
        samesite="Lax",
    )
    return response


@auth_bp.post("/register")
def register_route():
    """
    Create an account and log it in.

    Body: {username, password, fullName?, company?}
    Returns 201 with the user (no password hash).
    """
    data = request.get_json(silent=True) or {}
    user = auth_service.register_user(data)

    response = jsonify(user.to_dict())
    response.status_code = 201
    return _start_session(user, response)


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue the session cookie.

    Returns the user on success, 401 on bad credentials.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not isinstance(password, str) or not username or not password:
        return jsonify({"error": "username and password required"}), 400

    user = auth_service.authenticate(username, password)
    if not user:
        current_app.logger.info("Failed login for username %r from %s", username, request.remote_addr)
        return jsonify({"error": "Invalid credentials"}), 401

    communications_service.record(user.id, "User Login", "User logged in successfully")

    response = jsonify(user.to_dict())
    return _start_session(user, response)


@auth_bp.post("/logout")
def logout_route():
    """
    Revoke the session (if any) and clear the cookie.

    Always 200: logging out without a session is a no-op.
    """
    token = session_token_from_request()
    context = session_service.validate_session(token)
    if context:
        session_service.revoke_session(token, reason="User logout")
        communications_service.record(context.user.id, "User Logout", "User logged out successfully")

    response = jsonify({"message": "Logout successful"})
    response.delete_cookie(current_app.config["AUTH_COOKIE_NAME"])
    return response


@auth_bp.get("/user")
@require_auth
def current_user_route():
    return jsonify(g.current_user.to_dict())
