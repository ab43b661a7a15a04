"""Lifecycle of group ordering sessions: create, join, settle, clear."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from group_ordering.domain.errors import (
    ConflictError,
    InvalidCredentialError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from group_ordering.domain.orders import OrderRecord, TableRecord
from group_ordering.domain.sessions import (
    STATUS_ACTIVE,
    STATUS_BILLED,
    JoinResult,
    SessionCustomer,
    SessionRecord,
)
from group_ordering.services.codes import (
    generate_otp,
    generate_session_id,
    is_valid_otp,
    otp_expiry,
    otp_matches,
)
from group_ordering.services.orders import OrderRepository, sum_orders

_logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for table sessions.

    Reads never return soft-deleted rows. Conditional updates return the
    updated row, or ``None`` when no row matched the condition.
    """

    def create_session(  # noqa: PLR0913
        self,
        session_id: UUID,
        table_id: UUID,
        restaurant_id: UUID,
        otp: str,
        otp_expires_at: datetime,
    ) -> SessionRecord:
        """Insert an active session; raise ConflictError if the table has one."""

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""

    def get_active_session(self, table_id: UUID) -> SessionRecord | None:
        """Return the latest active session for a table, if present."""

    def list_active_sessions(self) -> list[SessionRecord]:
        """Return every active session."""

    def list_restaurant_sessions(self, restaurant_id: UUID) -> list[SessionRecord]:
        """Return sessions owned by a restaurant, newest first."""

    def update_otp(
        self, session_id: UUID, otp: str, otp_expires_at: datetime
    ) -> SessionRecord | None:
        """Replace the OTP of an active session."""

    def update_total(
        self, session_id: UUID, total_amount: int, expected_version: int
    ) -> SessionRecord | None:
        """Write the total only if the row is still at ``expected_version``."""

    def update_status(
        self, session_id: UUID, from_status: str, to_status: str
    ) -> SessionRecord | None:
        """Move a session between statuses only if it is in ``from_status``."""

    def clear_session(self, session_id: UUID) -> bool:
        """Mark a session cleared and soft-deleted."""


class CustomerRepository(Protocol):
    """Persistence interface for session rosters."""

    def add_customer(self, session_id: UUID, name: str, phone: str) -> SessionCustomer:
        """Insert a roster entry and return it."""

    def list_customers(self, session_id: UUID) -> list[SessionCustomer]:
        """Return a session's roster in join order."""

    def list_all_customers(self) -> list[SessionCustomer]:
        """Return every roster entry."""

    def remove_customer(self, customer_id: UUID) -> bool:
        """Soft-delete a roster entry."""


class TableRepository(Protocol):
    """Read access to restaurant tables."""

    def get_table(self, table_id: UUID) -> TableRecord | None:
        """Return a table by id, if present."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SessionService:
    """Application service for the session lifecycle."""

    session_repository: SessionRepository
    customer_repository: CustomerRepository
    table_repository: TableRepository
    order_repository: OrderRepository
    otp_ttl_hours: int = 24
    total_update_attempts: int = 5
    clock: Callable[[], datetime] = field(default=_utcnow)

    def create_session(self, table_id: UUID, restaurant_id: UUID) -> SessionRecord:
        """Open a new session for a table."""
        table = self.table_repository.get_table(table_id)
        if table is None or not table.is_available:
            raise NotFoundError(f"Table {table_id} not found or inactive")
        if table.restaurant_id != restaurant_id:
            raise NotFoundError(
                f"Table {table_id} does not belong to restaurant {restaurant_id}"
            )
        if self.session_repository.get_active_session(table_id) is not None:
            raise ConflictError(f"Table {table_id} already has an active session")

        session = self.session_repository.create_session(
            session_id=generate_session_id(),
            table_id=table_id,
            restaurant_id=restaurant_id,
            otp=generate_otp(),
            otp_expires_at=otp_expiry(self.clock(), self.otp_ttl_hours),
        )
        _logger.info(
            "Session created: session_id=%s table_id=%s", session.id, table_id
        )
        return session

    def get_active_session(self, table_id: UUID) -> SessionRecord | None:
        """Return the active session for a table, if any."""
        return self.session_repository.get_active_session(table_id)

    def get_session_by_id(self, session_id: UUID) -> SessionRecord:
        """Return a session or raise NotFoundError."""
        session = self.session_repository.get_session(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def join_session(
        self, otp: str, table_id: UUID, name: str, phone: str
    ) -> JoinResult:
        """Add a customer to the table's active session when the OTP matches."""
        if not is_valid_otp(otp):
            raise ValidationError("OTP must be exactly 6 digits")
        session = self.session_repository.get_active_session(table_id)
        if session is None:
            raise NotFoundError(f"No active session for table {table_id}")
        if not otp_matches(session.otp, otp):
            raise InvalidCredentialError("Invalid OTP")
        expires_at = session.otp_expires_at
        if expires_at is not None and self.clock() >= expires_at:
            raise InvalidCredentialError("OTP expired")

        customer = self.customer_repository.add_customer(
            session_id=session.id, name=name, phone=phone
        )
        self._confirm_join(session, customer)
        _logger.info(
            "Customer joined: session_id=%s customer_id=%s", session.id, customer.id
        )
        return JoinResult(session=session, customer=customer)

    def _confirm_join(self, joined: SessionRecord, customer: SessionCustomer) -> None:
        """Roll back a join whose session was regenerated or closed mid-insert."""
        current = self.session_repository.get_session(joined.id)
        if current is not None and current.is_active and current.otp == joined.otp:
            return
        self.customer_repository.remove_customer(customer.id)
        _logger.info(
            "Join rolled back: session_id=%s customer_id=%s",
            joined.id,
            customer.id,
        )
        if current is None or not current.is_active:
            raise InvalidStateError(f"Session {joined.id} is no longer active")
        raise InvalidCredentialError("OTP was regenerated")

    def regenerate_otp(self, session_id: UUID) -> str:
        """Issue a fresh OTP; the previous one stops working immediately."""
        session = self.get_session_by_id(session_id)
        if session.status != STATUS_ACTIVE:
            raise InvalidStateError(f"Session {session_id} is {session.status}")

        otp = generate_otp()
        while otp == session.otp:
            otp = generate_otp()
        updated = self.session_repository.update_otp(
            session_id, otp, otp_expiry(self.clock(), self.otp_ttl_hours)
        )
        if updated is None:
            raise InvalidStateError(f"Session {session_id} is no longer active")
        _logger.info("OTP regenerated: session_id=%s", session_id)
        return updated.otp

    def get_session_customers(self, session_id: UUID) -> list[SessionCustomer]:
        """Return the session roster."""
        return self.customer_repository.list_customers(session_id)

    def get_session_orders(self, session_id: UUID) -> list[OrderRecord]:
        """Return orders placed against the session."""
        return self.order_repository.list_session_orders(session_id)

    def update_session_total(self, session_id: UUID) -> int:
        """Recompute and persist the session total from its orders.

        The write is a compare-and-swap on the row version; a concurrent
        writer forces a re-read of both the session and its orders.
        """
        for attempt in range(1, self.total_update_attempts + 1):
            session = self.get_session_by_id(session_id)
            total = sum_orders(self.get_session_orders(session_id))
            updated = self.session_repository.update_total(
                session_id, total, expected_version=session.version
            )
            if updated is not None:
                return updated.total_amount
            _logger.warning(
                "Session total update lost a race: session_id=%s attempt=%s",
                session_id,
                attempt,
            )
        raise ConflictError(f"Could not update total for session {session_id}")

    def close_session(self, session_id: UUID) -> SessionRecord:
        """Move an active session to billed."""
        updated = self.session_repository.update_status(
            session_id, from_status=STATUS_ACTIVE, to_status=STATUS_BILLED
        )
        if updated is None:
            session = self.get_session_by_id(session_id)
            raise InvalidStateError(f"Session {session_id} is {session.status}")
        _logger.info("Session closed: session_id=%s", session_id)
        return updated

    def clear_session(self, session_id: UUID) -> None:
        """Soft-delete a session whatever its status."""
        if not self.session_repository.clear_session(session_id):
            raise NotFoundError(f"Session {session_id} not found")
        _logger.info("Session cleared: session_id=%s", session_id)

    def remove_customer(self, customer_id: UUID) -> None:
        """Soft-delete a roster entry."""
        if not self.customer_repository.remove_customer(customer_id):
            raise NotFoundError(f"Customer {customer_id} not found")
        _logger.info("Customer removed: customer_id=%s", customer_id)

    def get_all_active_sessions(self) -> list[SessionRecord]:
        """Return active sessions across all restaurants."""
        return self.session_repository.list_active_sessions()

    def get_restaurant_sessions(self, restaurant_id: UUID) -> list[SessionRecord]:
        """Return sessions belonging to a restaurant."""
        return self.session_repository.list_restaurant_sessions(restaurant_id)

    def get_all_session_customers(self) -> list[SessionCustomer]:
        """Return roster entries across all sessions."""
        return self.customer_repository.list_all_customers()

