from __future__ import annotations

from ..errors import NotFoundError, ValidationError
from ..models import Resident
from ..storage import get_repository


RESIDENT_SOURCES = {"internal", "external"}


def list_residents(source: str | None = None) -> list[Resident]:
    """All residents, or only those from one registry source."""
    if source is not None and source not in RESIDENT_SOURCES:
        raise ValidationError("source must be internal or external")
    return get_repository().list_residents(source or None)


def get_resident(resident_pk: int) -> Resident:
    resident = get_repository().get_resident(resident_pk)
    if resident is None:
        raise NotFoundError("Resident not found")
    return resident
