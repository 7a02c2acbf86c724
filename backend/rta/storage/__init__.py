# Overview: Repository selection and lookup for the current Flask app.

from flask import Flask, current_app

from .base import Repository
from .memory import MemoryRepository
from .sql import SqlRepository

EXTENSION_KEY = "rta.repository"

BACKENDS = {
    "memory": MemoryRepository,
    "sql": SqlRepository,
}


def init_repository(app: Flask) -> Repository:
    """Build the repository named by STORAGE_BACKEND and bind it to the app."""
    backend = (app.config.get("STORAGE_BACKEND") or "memory").lower()
    if backend not in BACKENDS:
        raise ValueError(f"Unknown STORAGE_BACKEND '{backend}'. Must be one of: {', '.join(BACKENDS)}")
    repository = BACKENDS[backend]()
    app.extensions[EXTENSION_KEY] = repository
    return repository


def get_repository() -> Repository:
    return current_app.extensions[EXTENSION_KEY]


__all__ = ["Repository", "MemoryRepository", "SqlRepository", "init_repository", "get_repository"]
