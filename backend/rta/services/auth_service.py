# Overview: Service-layer operations for auth; password hashing, registration and credential checks.

"""
Authentication Service

Passwords are hashed with scrypt (memory-hard KDF) and a random 16-byte
salt. Stored format: "<derivedKeyHex>.<saltHex>".

Sessions are managed separately (see session_service.py).
"""

import hashlib
import hmac
import secrets

from flask import current_app

from ..errors import ValidationError
from ..models import User
from ..storage import get_repository
from . import communications_service


SALT_BYTES = 16
KEY_LENGTH = 64
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1

MIN_PASSWORD_LENGTH = 6
MAX_USERNAME_LENGTH = 64

WELCOME_TITLE = "Welcome to RTA"
WELCOME_MESSAGE = (
    "Welcome to the Report Transfer Application. "
    "Start by exploring your dashboard or uploading your first document."
)


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=KEY_LENGTH,
    )


def hash_password(password: str) -> str:
    """Hash password with a fresh random salt."""
    salt = secrets.token_bytes(SALT_BYTES)
    derived = _derive(password, salt)
    return f"{derived.hex()}.{salt.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against a stored "<keyHex>.<saltHex>" value.

    Returns False for a mismatch or for any malformed stored value.
    """
    if not isinstance(password, str) or not isinstance(password_hash, str):
        return False

    key_hex, sep, salt_hex = password_hash.partition(".")
    if not sep or not key_hex or not salt_hex:
        return False

    try:
        expected = bytes.fromhex(key_hex)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False

    if len(expected) != KEY_LENGTH:
        return False

    return hmac.compare_digest(_derive(password, salt), expected)


def _optional_str(data: dict, key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    value = value.strip()
    return value or None


def validate_registration(data: dict) -> dict:
    """
    Validate and normalize a registration payload.

    Returns dict with username, password, full_name, company.
    Raises ValidationError on bad input.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    username = data.get("username")
    password = data.get("password")

    if not isinstance(username, str) or not username.strip():
        raise ValidationError("username is required")
    if not isinstance(password, str) or not password:
        raise ValidationError("password is required")

    username = username.strip()
    if len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(f"username must be at most {MAX_USERNAME_LENGTH} characters")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters long")

    return {
        "username": username,
        "password": password,
        "full_name": _optional_str(data, "fullName"),
        "company": _optional_str(data, "company"),
    }


def register_user(data: dict) -> User:
    """
    Create a new account and greet it.

    Raises:
        ValidationError: bad payload
        ConflictError: username already taken
    """
    fields = validate_registration(data)
    repo = get_repository()

    user = repo.create_user(
        username=fields["username"],
        password_hash=hash_password(fields["password"]),
        full_name=fields["full_name"],
        company=fields["company"],
        role="user",
    )
    current_app.logger.info("Registered user %s (id=%s)", user.username, user.id)

    communications_service.notify(user.id, WELCOME_TITLE, WELCOME_MESSAGE, "info")
    communications_service.record(user.id, "User Registration", "New user account created")
    return user


def authenticate(username: str, password: str) -> User | None:
    """
    Exact, case-sensitive username lookup plus password check.

    Returns the User on success, None otherwise.
    """
    user = get_repository().get_user_by_username(username)
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
