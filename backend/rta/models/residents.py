from __future__ import annotations

from ..extensions import db
from rta.time_utils import to_utc_z


class Resident(db.Model):
    """
    Registry entry browsed when selecting report fields.

    Reference data: seeded at startup and read-only afterwards.
    """
    __tablename__ = "residents"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    resident_id = db.Column(db.String(64), nullable=False, index=True)
    address = db.Column(db.String(512), nullable=False)
    registration_date = db.Column(db.DateTime(timezone=True), nullable=False)
    source = db.Column(db.String(16), nullable=False, default="internal", index=True)  # internal, external
    data = db.Column(db.JSON, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "residentId": self.resident_id,
            "address": self.address,
            "registrationDate": to_utc_z(self.registration_date),
            "source": self.source,
            "data": self.data,
        }
