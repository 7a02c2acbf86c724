# Overview: Reference resident registry loaded at startup.

from __future__ import annotations

from datetime import datetime

from .storage import Repository


RESIDENTS = [
    {
        "name": "Ion Popescu",
        "resident_id": "MD2304981",
        "address": "Str. Ștefan cel Mare 42, Chișinău",
        "registration_date": datetime(2022, 6, 15),
        "source": "internal",
        "data": {"phone": "+373 69 123 456", "email": "ipopescu@mail.md"},
    },
    {
        "name": "Maria Ionescu",
        "resident_id": "MD2309875",
        "address": "Str. București 23, Chișinău",
        "registration_date": datetime(2022, 9, 20),
        "source": "internal",
        "data": {"phone": "+373 69 987 654", "email": "mionescu@mail.md"},
    },
    {
        "name": "Vasile Rusu",
        "resident_id": "MD2303451",
        "address": "Str. Alba Iulia 102, Chișinău",
        "registration_date": datetime(2022, 3, 10),
        "source": "internal",
        "data": {"phone": "+373 69 567 890", "email": "vrusu@mail.md"},
    },
    {
        "name": "Ana Codreanu",
        "resident_id": "MD2308532",
        "address": "Str. Mihai Eminescu 18, Bălți",
        "registration_date": datetime(2022, 2, 5),
        "source": "external",
        "data": {"phone": "+373 69 111 222", "email": "acodreanu@mail.md"},
    },
    {
        "name": "Dumitru Moraru",
        "resident_id": "MD2307764",
        "address": "Str. Decebal 45, Cahul",
        "registration_date": datetime(2022, 4, 25),
        "source": "external",
        "data": {"phone": "+373 69 333 444", "email": "dmoraru@mail.md"},
    },
    {
        "name": "Elena Lungu",
        "resident_id": "MD2301298",
        "address": "Str. Independenței 78, Ungheni",
        "registration_date": datetime(2022, 8, 8),
        "source": "external",
        "data": {"phone": "+373 69 555 666", "email": "elungu@mail.md"},
    },
]


def seed_residents(repository: Repository) -> int:
    """Load the reference residents into an empty registry. Returns how many were created."""
    if repository.count_residents():
        return 0
    for resident in RESIDENTS:
        repository.create_resident(**resident)
    return len(RESIDENTS)
