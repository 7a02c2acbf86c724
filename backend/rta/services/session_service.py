# Overview: Service-layer operations for session; issues, validates and revokes session tokens.

"""
Session Token Management Service

Tokens are cryptographically secure, hashed before storage and expire
after an inactivity window (SESSION_IDLE_TIMEOUT, 24 hours by default).
Every successful validation slides the window forward.

The plaintext token only ever lives in the client's cookie.
Concurrent sessions per user are allowed.
"""

import hashlib
import secrets
from dataclasses import dataclass
from datetime import timedelta

from flask import current_app

from ..models import SessionToken, User
from ..storage import get_repository
from rta.time_utils import utcnow


DEFAULT_IDLE_TIMEOUT = timedelta(hours=24)


@dataclass
class SessionContext:
    """
    Authenticated caller, passed explicitly to every protected service operation.
    """
    user: User
    session: SessionToken


def generate_token() -> str:
    """64-character hex string (32 bytes of entropy)."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    SHA-256 of the token. Tokens are already high-entropy, so a fast
    one-way hash is enough here.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def _idle_timeout() -> timedelta:
    return current_app.config.get("SESSION_IDLE_TIMEOUT", DEFAULT_IDLE_TIMEOUT)


def create_session(
    user_id: int,
    user_agent: str | None = None,
    ip_address: str | None = None
) -> tuple[SessionToken, str]:
    """
    Create a session for user.

    Returns (session_record, plaintext_token).
    Raises ValueError if the user does not exist.
    """
    repo = get_repository()
    if repo.get_user(user_id) is None:
        raise ValueError("User not found")

    plaintext_token = generate_token()
    session = repo.create_session(
        user_id=user_id,
        token_hash=hash_token(plaintext_token),
        expires_at=utcnow() + _idle_timeout(),
        user_agent=user_agent,
        ip_address=ip_address,
    )
    return session, plaintext_token


def validate_session(token: str | None) -> SessionContext | None:
    """
    Resolve a token to its SessionContext.

    Returns None if the token is missing, unknown, revoked or idle past the
    timeout, or if its user no longer exists. Expired sessions are revoked.
    """
    if not token:
        return None

    repo = get_repository()
    session = repo.get_session_by_token_hash(hash_token(token))
    if session is None or session.is_revoked:
        return None

    now = utcnow()
    if session.expires_at < now:
        repo.revoke_session(session, now=now, reason="Idle timeout")
        return None

    user = repo.get_user(session.user_id)
    if user is None:
        repo.revoke_session(session, now=now, reason="User not found")
        return None

    session = repo.touch_session(session, now=now, expires_at=now + _idle_timeout())
    return SessionContext(user=user, session=session)


def revoke_session(token: str | None, reason: str = "User logout") -> bool:
    """
    Revoke session token.

    Returns True if a live session was revoked, False otherwise.
    """
    if not token:
        return False

    repo = get_repository()
    session = repo.get_session_by_token_hash(hash_token(token))
    if session is None or session.is_revoked:
        return False

    repo.revoke_session(session, now=utcnow(), reason=reason)
    return True


def cleanup_expired_sessions() -> int:
    """
    Delete expired and revoked sessions.

    Returns count of sessions deleted.
    """
    return get_repository().delete_expired_sessions(utcnow())
