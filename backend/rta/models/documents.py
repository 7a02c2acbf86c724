from __future__ import annotations

from ..extensions import db
from rta.time_utils import to_utc_z


class Document(db.Model):
    """
    Uploaded .xlsx/.docx file owned by exactly one user.

    `name` is the original client filename (used on download); `path` is the
    generated location on server disk and is never serialized.
    """
    __tablename__ = "documents"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(8), nullable=False)  # xlsx, docx
    path = db.Column(db.String(1024), nullable=False)
    size = db.Column(db.Integer, nullable=False)

    uploaded_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "size": self.size,
            "uploadedAt": to_utc_z(self.uploaded_at),
        }
