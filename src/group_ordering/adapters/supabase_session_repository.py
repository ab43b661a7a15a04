"""Supabase-backed session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from group_ordering.adapters.supabase_errors import parse_timestamp, store_errors
from group_ordering.domain.errors import StoreUnavailableError
from group_ordering.domain.sessions import (
    STATUS_ACTIVE,
    STATUS_CLEARED,
    SessionRecord,
)
from group_ordering.services.sessions import SessionRepository

_TABLE = "table_sessions"
_COLUMNS = (
    "id, table_id, restaurant_id, session_otp, otp_expires_at, status, "
    "total_amount, version, created_at, updated_at, deleted_at"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for table sessions.

    Conditional writes rely on PostgREST returning the updated rows, so an
    empty response means the filter matched nothing.
    """

    client: Client

    def create_session(  # noqa: PLR0913
        self,
        session_id: UUID,
        table_id: UUID,
        restaurant_id: UUID,
        otp: str,
        otp_expires_at: datetime,
    ) -> SessionRecord:
        """Insert a session row and return it."""
        with store_errors("create session"):
            response = (
                self.client.table(_TABLE)
                .insert(
                    {
                        "id": str(session_id),
                        "table_id": str(table_id),
                        "restaurant_id": str(restaurant_id),
                        "session_otp": otp,
                        "otp_expires_at": otp_expires_at.isoformat(),
                        "status": STATUS_ACTIVE,
                        "total_amount": 0,
                        "version": 0,
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreUnavailableError("Failed to create session")
        return _parse_session(response.data[0])

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        """Return a session by id, if present."""
        with store_errors("get session"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("id", str(session_id))
                .is_("deleted_at", "null")
                .limit(1)
                .execute()
            )
        return _first(response.data)

    def get_active_session(self, table_id: UUID) -> SessionRecord | None:
        """Return the most recent active session for a table."""
        with store_errors("get active session"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("table_id", str(table_id))
                .eq("status", STATUS_ACTIVE)
                .is_("deleted_at", "null")
                .order("created_at", desc=True)
                .limit(1)
                .execute()
            )
        return _first(response.data)

    def list_active_sessions(self) -> list[SessionRecord]:
        """Return all active sessions, newest first."""
        with store_errors("list active sessions"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("status", STATUS_ACTIVE)
                .is_("deleted_at", "null")
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_session(row) for row in response.data or []]

    def list_restaurant_sessions(self, restaurant_id: UUID) -> list[SessionRecord]:
        """Return a restaurant's sessions, newest first."""
        with store_errors("list restaurant sessions"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("restaurant_id", str(restaurant_id))
                .is_("deleted_at", "null")
                .order("created_at", desc=True)
                .execute()
            )
        return [_parse_session(row) for row in response.data or []]

    def update_otp(
        self, session_id: UUID, otp: str, otp_expires_at: datetime
    ) -> SessionRecord | None:
        """Replace the OTP if the session is still active."""
        with store_errors("update otp"):
            response = (
                self.client.table(_TABLE)
                .update(
                    {
                        "session_otp": otp,
                        "otp_expires_at": otp_expires_at.isoformat(),
                        "updated_at": _now(),
                    }
                )
                .eq("id", str(session_id))
                .eq("status", STATUS_ACTIVE)
                .is_("deleted_at", "null")
                .execute()
            )
        return _first(response.data)

    def update_total(
        self, session_id: UUID, total_amount: int, expected_version: int
    ) -> SessionRecord | None:
        """Compare-and-swap the total on the row version."""
        with store_errors("update total"):
            response = (
                self.client.table(_TABLE)
                .update(
                    {
                        "total_amount": total_amount,
                        "version": expected_version + 1,
                        "updated_at": _now(),
                    }
                )
                .eq("id", str(session_id))
                .eq("version", expected_version)
                .is_("deleted_at", "null")
                .execute()
            )
        return _first(response.data)

    def update_status(
        self, session_id: UUID, from_status: str, to_status: str
    ) -> SessionRecord | None:
        """Change status if the session is currently in ``from_status``."""
        with store_errors("update status"):
            response = (
                self.client.table(_TABLE)
                .update({"status": to_status, "updated_at": _now()})
                .eq("id", str(session_id))
                .eq("status", from_status)
                .is_("deleted_at", "null")
                .execute()
            )
        return _first(response.data)

    def clear_session(self, session_id: UUID) -> bool:
        """Mark the session cleared and set deleted_at."""
        now = _now()
        with store_errors("clear session"):
            response = (
                self.client.table(_TABLE)
                .update(
                    {"status": STATUS_CLEARED, "deleted_at": now, "updated_at": now}
                )
                .eq("id", str(session_id))
                .is_("deleted_at", "null")
                .execute()
            )
        return bool(response.data)


def _now() -> str:
    return datetime.now(tz=UTC).isoformat()


def _first(rows: list[dict[str, object]] | None) -> SessionRecord | None:
    if not rows:
        return None
    return _parse_session(rows[0])


def _parse_session(row: dict[str, object]) -> SessionRecord:
    return SessionRecord(
        id=UUID(str(row["id"])),
        table_id=UUID(str(row["table_id"])),
        restaurant_id=UUID(str(row["restaurant_id"])),
        otp=str(row["session_otp"]),
        otp_expires_at=parse_timestamp(row.get("otp_expires_at")),
        status=str(row["status"]),
        total_amount=int(row.get("total_amount") or 0),
        version=int(row.get("version") or 0),
        created_at=parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
        updated_at=parse_timestamp(row.get("updated_at")) or datetime.now(tz=UTC),
        deleted_at=parse_timestamp(row.get("deleted_at")),
    )
