# Overview: Domain error taxonomy shared by services and translated to HTTP by the app factory.

from __future__ import annotations


class ServiceError(Exception):
    """Base class for expected, client-facing failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError, ValueError):
    """400-level input problem."""

    status_code = 400


class ConflictError(ValidationError):
    """Duplicate username or order code. Reported as 400, like other input problems."""


class UnauthenticatedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    """Valid session, but the resource belongs to someone else."""

    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404
