from __future__ import annotations

from ..extensions import db
from rta.time_utils import to_utc_z


class Order(db.Model):
    """
    Report order placed by a user.

    order_id is the human-readable code shown to the user (e.g. "ORD-1");
    it is globally unique and never changes. Status moves are governed by
    order_service.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.UniqueConstraint("order_id", name="uq_orders_order_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    order_id = db.Column(db.String(64), nullable=False, index=True)
    status = db.Column(db.String(32), nullable=False, default="pending", index=True)
    total_documents = db.Column(db.Integer, nullable=False)
    document_type = db.Column(db.String(32), nullable=False)
    price = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "orderId": self.order_id,
            "status": self.status,
            "totalDocuments": self.total_documents,
            "documentType": self.document_type,
            "price": self.price,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
