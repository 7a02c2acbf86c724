# backend/rta/config.py
from __future__ import annotations
import os
from datetime import timedelta


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # "memory" keeps everything in process maps; "sql" uses SQLALCHEMY_DATABASE_URI
    STORAGE_BACKEND = os.environ.get("RTA_STORAGE_BACKEND", "memory")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///rta.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Uploaded documents land here under generated names
    UPLOAD_FOLDER = os.environ.get("RTA_UPLOAD_FOLDER", os.path.join(os.getcwd(), "uploads"))
    MAX_UPLOAD_BYTES = int(os.environ.get("RTA_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

    AUTH_COOKIE_NAME = os.environ.get("RTA_AUTH_COOKIE", "rta_session")
    SESSION_IDLE_TIMEOUT = timedelta(hours=int(os.environ.get("RTA_SESSION_IDLE_HOURS", "24")))
    SESSION_COOKIE_SECURE = _env_bool("RTA_COOKIE_SECURE", False)

    ORDER_STRICT_TRANSITIONS = _env_bool("RTA_ORDER_STRICT_TRANSITIONS", True)
    SEED_RESIDENTS = _env_bool("RTA_SEED_RESIDENTS", True)

    CORS_ALLOWED_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "RTA_CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test"
    STORAGE_BACKEND = "memory"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SEED_RESIDENTS = True
    LOG_LEVEL = "DEBUG"
