"""Repository interface shared by the in-memory and SQL stores."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..models import Activity, Document, Notification, Order, Resident, SessionToken, User


class Repository:
    """
    Abstract storage contract.

    create_* stamps the id and creation timestamp(s) and returns the full
    record. Ids are monotonic per entity kind and never reused. Updates are
    narrow and explicit; only documents (and expired sessions) are deleted.
    """

    backend_name = "base"

    # -- users -------------------------------------------------------------

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        full_name: str | None = None,
        company: str | None = None,
        role: str = "user",
    ) -> User:
        """Raises ConflictError if the username is taken."""
        raise NotImplementedError

    def get_user(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_users(self) -> List[User]:
        raise NotImplementedError

    # -- sessions ----------------------------------------------------------

    def create_session(
        self,
        *,
        user_id: int,
        token_hash: str,
        expires_at: datetime,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> SessionToken:
        raise NotImplementedError

    def get_session_by_token_hash(self, token_hash: str) -> Optional[SessionToken]:
        raise NotImplementedError

    def touch_session(self, session: SessionToken, *, now: datetime, expires_at: datetime) -> SessionToken:
        raise NotImplementedError

    def revoke_session(self, session: SessionToken, *, now: datetime, reason: str) -> SessionToken:
        raise NotImplementedError

    def delete_expired_sessions(self, now: datetime) -> int:
        """Remove sessions that are revoked or past expires_at. Returns count removed."""
        raise NotImplementedError

    # -- documents ---------------------------------------------------------

    def create_document(self, *, user_id: int, name: str, type: str, path: str, size: int) -> Document:
        raise NotImplementedError

    def get_document(self, document_id: int) -> Optional[Document]:
        raise NotImplementedError

    def list_documents_by_user(self, user_id: int) -> List[Document]:
        raise NotImplementedError

    def delete_document(self, document_id: int) -> bool:
        raise NotImplementedError

    # -- orders ------------------------------------------------------------

    def create_order(
        self,
        *,
        user_id: int,
        order_id: str,
        status: str,
        total_documents: int,
        document_type: str,
        price: int | None = None,
    ) -> Order:
        """Raises ConflictError if order_id is taken."""
        raise NotImplementedError

    def get_order(self, order_pk: int) -> Optional[Order]:
        raise NotImplementedError

    def get_order_by_order_id(self, order_id: str) -> Optional[Order]:
        raise NotImplementedError

    def list_orders_by_user(self, user_id: int) -> List[Order]:
        raise NotImplementedError

    def update_order_status(self, order_pk: int, status: str) -> Optional[Order]:
        """Rewrite status and updated_at. Returns None if the order is unknown."""
        raise NotImplementedError

    # -- residents ---------------------------------------------------------

    def create_resident(
        self,
        *,
        name: str,
        resident_id: str,
        address: str,
        registration_date: datetime,
        source: str = "internal",
        data: dict | None = None,
    ) -> Resident:
        raise NotImplementedError

    def get_resident(self, resident_pk: int) -> Optional[Resident]:
        raise NotImplementedError

    def list_residents(self, source: str | None = None) -> List[Resident]:
        raise NotImplementedError

    def count_residents(self) -> int:
        return len(self.list_residents())

    # -- notifications -----------------------------------------------------

    def create_notification(self, *, user_id: int, title: str, message: str, type: str = "info") -> Notification:
        raise NotImplementedError

    def get_notification(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_notifications_by_user(self, user_id: int) -> List[Notification]:
        raise NotImplementedError

    def mark_notification_read(self, notification_id: int) -> bool:
        """Flip is_read to True. Returns False if the notification is unknown."""
        raise NotImplementedError

    # -- activities --------------------------------------------------------

    def create_activity(self, *, user_id: int, action: str, details: str | None = None) -> Activity:
        raise NotImplementedError

    def list_activities_by_user(self, user_id: int) -> List[Activity]:
        """Newest first."""
        raise NotImplementedError
