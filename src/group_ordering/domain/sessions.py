"""Domain models for group ordering sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

STATUS_ACTIVE = "active"
STATUS_BILLED = "billed"
STATUS_CLEARED = "cleared"


@dataclass(frozen=True)
class SessionRecord:
    """Represents a persisted table session."""

    id: UUID
    table_id: UUID
    restaurant_id: UUID
    otp: str
    otp_expires_at: datetime | None
    status: str
    total_amount: int
    version: int
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == STATUS_ACTIVE and self.deleted_at is None


@dataclass(frozen=True)
class SessionCustomer:
    """A person who joined a session with its OTP."""

    id: UUID
    session_id: UUID
    name: str
    phone: str
    joined_at: datetime


@dataclass(frozen=True)
class JoinResult:
    """Session and roster entry returned by a successful join."""

    session: SessionRecord
    customer: SessionCustomer
