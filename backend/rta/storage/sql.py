"""Relational repository on Flask-SQLAlchemy."""

from __future__ import annotations

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConflictError
from ..extensions import db
from ..models import Activity, Document, Notification, Order, Resident, SessionToken, User
from ..time_utils import utcnow
from .base import Repository


class SqlRepository(Repository):
    """
    Stores records through db.session.

    Ids come from autoincrement columns (sqlite_autoincrement on SQLite), so
    they are never reused after a delete. Uniqueness is backed by the
    database constraints; a lost race surfaces as ConflictError.
    """

    backend_name = "sql"

    def _add(self, row, conflict_message: str | None = None):
        db.session.add(row)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            if conflict_message is None:
                raise
            raise ConflictError(conflict_message)
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return row

    # -- users -------------------------------------------------------------

    def create_user(self, *, username, password_hash, full_name=None, company=None, role="user") -> User:
        if self.get_user_by_username(username):
            raise ConflictError("Username already exists")
        user = User(
            username=username,
            password_hash=password_hash,
            full_name=full_name,
            company=company,
            role=role,
            created_at=utcnow(),
        )
        return self._add(user, "Username already exists")

    def get_user(self, user_id):
        return db.session.get(User, user_id)

    def get_user_by_username(self, username):
        return db.session.query(User).filter(User.username == username).first()

    def list_users(self):
        return db.session.query(User).order_by(User.id).all()

    # -- sessions ----------------------------------------------------------

    def create_session(self, *, user_id, token_hash, expires_at, user_agent=None, ip_address=None) -> SessionToken:
        now = utcnow()
        session = SessionToken(
            user_id=user_id,
            token_hash=token_hash,
            created_at=now,
            last_used_at=now,
            expires_at=expires_at,
            user_agent=user_agent,
            ip_address=ip_address,
            is_revoked=False,
        )
        return self._add(session)

    def get_session_by_token_hash(self, token_hash):
        return db.session.query(SessionToken).filter_by(token_hash=token_hash).first()

    def touch_session(self, session, *, now, expires_at):
        session.last_used_at = now
        session.expires_at = expires_at
        db.session.commit()
        return session

    def revoke_session(self, session, *, now, reason):
        session.is_revoked = True
        session.revoked_at = now
        session.revoked_reason = reason
        db.session.commit()
        return session

    def delete_expired_sessions(self, now):
        deleted = db.session.query(SessionToken).filter(
            or_(
                SessionToken.expires_at < now,
                SessionToken.is_revoked.is_(True),
            )
        ).delete(synchronize_session=False)
        db.session.commit()
        return deleted

    # -- documents ---------------------------------------------------------

    def create_document(self, *, user_id, name, type, path, size) -> Document:
        document = Document(
            user_id=user_id,
            name=name,
            type=type,
            path=path,
            size=size,
            uploaded_at=utcnow(),
        )
        return self._add(document)

    def get_document(self, document_id):
        return db.session.get(Document, document_id)

    def list_documents_by_user(self, user_id):
        return db.session.query(Document).filter_by(user_id=user_id).order_by(Document.id).all()

    def delete_document(self, document_id):
        document = db.session.get(Document, document_id)
        if document is None:
            return False
        db.session.delete(document)
        db.session.commit()
        return True

    # -- orders ------------------------------------------------------------

    def create_order(self, *, user_id, order_id, status, total_documents, document_type, price=None) -> Order:
        if self.get_order_by_order_id(order_id):
            raise ConflictError(f"Order {order_id} already exists")
        now = utcnow()
        order = Order(
            user_id=user_id,
            order_id=order_id,
            status=status,
            total_documents=total_documents,
            document_type=document_type,
            price=price,
            created_at=now,
            updated_at=now,
        )
        return self._add(order, f"Order {order_id} already exists")

    def get_order(self, order_pk):
        return db.session.get(Order, order_pk)

    def get_order_by_order_id(self, order_id):
        return db.session.query(Order).filter_by(order_id=order_id).first()

    def list_orders_by_user(self, user_id):
        return db.session.query(Order).filter_by(user_id=user_id).order_by(Order.id).all()

    def update_order_status(self, order_pk, status):
        order = db.session.get(Order, order_pk)
        if order is None:
            return None
        order.status = status
        order.updated_at = utcnow()
        db.session.commit()
        return order

    # -- residents ---------------------------------------------------------

    def create_resident(self, *, name, resident_id, address, registration_date, source="internal", data=None) -> Resident:
        resident = Resident(
            name=name,
            resident_id=resident_id,
            address=address,
            registration_date=registration_date,
            source=source,
            data=data,
        )
        return self._add(resident)

    def get_resident(self, resident_pk):
        return db.session.get(Resident, resident_pk)

    def list_residents(self, source=None):
        q = db.session.query(Resident)
        if source:
            q = q.filter_by(source=source)
        return q.order_by(Resident.id).all()

    def count_residents(self):
        return db.session.query(Resident).count()

    # -- notifications -----------------------------------------------------

    def create_notification(self, *, user_id, title, message, type="info") -> Notification:
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            is_read=False,
            created_at=utcnow(),
        )
        return self._add(notification)

    def get_notification(self, notification_id):
        return db.session.get(Notification, notification_id)

    def list_notifications_by_user(self, user_id):
        return db.session.query(Notification).filter_by(user_id=user_id).order_by(Notification.id).all()

    def mark_notification_read(self, notification_id):
        notification = db.session.get(Notification, notification_id)
        if notification is None:
            return False
        notification.is_read = True
        db.session.commit()
        return True

    # -- activities --------------------------------------------------------

    def create_activity(self, *, user_id, action, details=None) -> Activity:
        activity = Activity(
            user_id=user_id,
            action=action,
            details=details,
            created_at=utcnow(),
        )
        return self._add(activity)

    def list_activities_by_user(self, user_id):
        return (
            db.session.query(Activity)
            .filter_by(user_id=user_id)
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .all()
        )
