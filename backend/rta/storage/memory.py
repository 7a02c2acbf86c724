"""In-memory repository: one map + counter per entity kind."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from ..errors import ConflictError
from ..models import Activity, Document, Notification, Order, Resident, SessionToken, User
from ..time_utils import utcnow
from .base import Repository

T = TypeVar("T")


class _Table(Generic[T]):
    """Rows of one entity kind. The lock covers both the counter and the map."""

    def __init__(self):
        self.lock = threading.Lock()
        self._next_id = 1
        self._rows: Dict[int, T] = {}

    def insert(self, factory: Callable[[int], T]) -> T:
        """Caller must hold self.lock."""
        row_id = self._next_id
        self._next_id += 1
        row = factory(row_id)
        self._rows[row_id] = row
        return row

    def get(self, row_id: int) -> Optional[T]:
        return self._rows.get(row_id)

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for row in list(self._rows.values()):
            if predicate(row):
                return row
        return None

    def filter(self, predicate: Callable[[T], bool] | None = None) -> List[T]:
        rows = list(self._rows.values())
        if predicate is None:
            return rows
        return [row for row in rows if predicate(row)]

    def delete(self, row_id: int) -> bool:
        return self._rows.pop(row_id, None) is not None

    def __len__(self) -> int:
        return len(self._rows)


class MemoryRepository(Repository):
    """
    Process-local store. Records are transient model instances.

    Ids come from per-kind counters that never rewind, so ids are not reused
    after a delete. Nothing survives a restart, so stale sessions are purged
    here rather than by an external cleanup job.
    """

    backend_name = "memory"

    def __init__(self):
        self._users: _Table[User] = _Table()
        self._sessions: _Table[SessionToken] = _Table()
        self._session_ids: Dict[str, int] = {}
        self._documents: _Table[Document] = _Table()
        self._orders: _Table[Order] = _Table()
        self._residents: _Table[Resident] = _Table()
        self._notifications: _Table[Notification] = _Table()
        self._activities: _Table[Activity] = _Table()

    # -- users -------------------------------------------------------------

    def create_user(self, *, username, password_hash, full_name=None, company=None, role="user") -> User:
        with self._users.lock:
            if self._users.find(lambda u: u.username == username):
                raise ConflictError("Username already exists")
            return self._users.insert(lambda row_id: User(
                id=row_id,
                username=username,
                password_hash=password_hash,
                full_name=full_name,
                company=company,
                role=role,
                created_at=utcnow(),
            ))

    def get_user(self, user_id):
        return self._users.get(user_id)

    def get_user_by_username(self, username):
        return self._users.find(lambda u: u.username == username)

    def list_users(self):
        return self._users.filter()

    # -- sessions ----------------------------------------------------------

    def create_session(self, *, user_id, token_hash, expires_at, user_agent=None, ip_address=None) -> SessionToken:
        now = utcnow()
        with self._sessions.lock:
            # revoked and idle sessions are dropped whenever a new one starts
            self._purge_sessions(now)
            session = self._sessions.insert(lambda row_id: SessionToken(
                id=row_id,
                user_id=user_id,
                token_hash=token_hash,
                created_at=now,
                last_used_at=now,
                expires_at=expires_at,
                user_agent=user_agent,
                ip_address=ip_address,
                is_revoked=False,
            ))
            self._session_ids[token_hash] = session.id
            return session

    def get_session_by_token_hash(self, token_hash):
        row_id = self._session_ids.get(token_hash)
        if row_id is None:
            return None
        return self._sessions.get(row_id)

    def touch_session(self, session, *, now, expires_at):
        with self._sessions.lock:
            session.last_used_at = now
            session.expires_at = expires_at
        return session

    def revoke_session(self, session, *, now, reason):
        with self._sessions.lock:
            session.is_revoked = True
            session.revoked_at = now
            session.revoked_reason = reason
        return session

    def _purge_sessions(self, now: datetime) -> int:
        """Caller must hold self._sessions.lock."""
        stale = self._sessions.filter(lambda s: s.is_revoked or s.expires_at < now)
        for session in stale:
            self._sessions.delete(session.id)
            self._session_ids.pop(session.token_hash, None)
        return len(stale)

    def delete_expired_sessions(self, now: datetime) -> int:
        with self._sessions.lock:
            return self._purge_sessions(now)

    # -- documents ---------------------------------------------------------

    def create_document(self, *, user_id, name, type, path, size) -> Document:
        with self._documents.lock:
            return self._documents.insert(lambda row_id: Document(
                id=row_id,
                user_id=user_id,
                name=name,
                type=type,
                path=path,
                size=size,
                uploaded_at=utcnow(),
            ))

    def get_document(self, document_id):
        return self._documents.get(document_id)

    def list_documents_by_user(self, user_id):
        return self._documents.filter(lambda d: d.user_id == user_id)

    def delete_document(self, document_id):
        with self._documents.lock:
            return self._documents.delete(document_id)

    # -- orders ------------------------------------------------------------

    def create_order(self, *, user_id, order_id, status, total_documents, document_type, price=None) -> Order:
        with self._orders.lock:
            if self._orders.find(lambda o: o.order_id == order_id):
                raise ConflictError(f"Order {order_id} already exists")
            now = utcnow()
            return self._orders.insert(lambda row_id: Order(
                id=row_id,
                user_id=user_id,
                order_id=order_id,
                status=status,
                total_documents=total_documents,
                document_type=document_type,
                price=price,
                created_at=now,
                updated_at=now,
            ))

    def get_order(self, order_pk):
        return self._orders.get(order_pk)

    def get_order_by_order_id(self, order_id):
        return self._orders.find(lambda o: o.order_id == order_id)

    def list_orders_by_user(self, user_id):
        return self._orders.filter(lambda o: o.user_id == user_id)

    def update_order_status(self, order_pk, status):
        with self._orders.lock:
            order = self._orders.get(order_pk)
            if order is None:
                return None
            order.status = status
            order.updated_at = utcnow()
            return order

    # -- residents ---------------------------------------------------------

    def create_resident(self, *, name, resident_id, address, registration_date, source="internal", data=None) -> Resident:
        with self._residents.lock:
            return self._residents.insert(lambda row_id: Resident(
                id=row_id,
                name=name,
                resident_id=resident_id,
                address=address,
                registration_date=registration_date,
                source=source,
                data=data,
            ))

    def get_resident(self, resident_pk):
        return self._residents.get(resident_pk)

    def list_residents(self, source=None):
        if source:
            return self._residents.filter(lambda r: r.source == source)
        return self._residents.filter()

    def count_residents(self):
        return len(self._residents)

    # -- notifications -----------------------------------------------------

    def create_notification(self, *, user_id, title, message, type="info") -> Notification:
        with self._notifications.lock:
            return self._notifications.insert(lambda row_id: Notification(
                id=row_id,
                user_id=user_id,
                title=title,
                message=message,
                type=type,
                is_read=False,
                created_at=utcnow(),
            ))

    def get_notification(self, notification_id):
        return self._notifications.get(notification_id)

    def list_notifications_by_user(self, user_id):
        return self._notifications.filter(lambda n: n.user_id == user_id)

    def mark_notification_read(self, notification_id):
        with self._notifications.lock:
            notification = self._notifications.get(notification_id)
            if notification is None:
                return False
            notification.is_read = True
            return True

    # -- activities --------------------------------------------------------

    def create_activity(self, *, user_id, action, details=None) -> Activity:
        with self._activities.lock:
            return self._activities.insert(lambda row_id: Activity(
                id=row_id,
                user_id=user_id,
                action=action,
                details=details,
                created_at=utcnow(),
            ))

    def list_activities_by_user(self, user_id):
        rows = self._activities.filter(lambda a: a.user_id == user_id)
        rows.sort(key=lambda a: (a.created_at, a.id), reverse=True)
        return rows
