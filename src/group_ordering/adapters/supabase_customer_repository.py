"""Supabase-backed session roster repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from group_ordering.adapters.supabase_errors import parse_timestamp, store_errors
from group_ordering.domain.errors import StoreUnavailableError
from group_ordering.domain.sessions import SessionCustomer
from group_ordering.services.sessions import CustomerRepository

_TABLE = "session_customers"
_COLUMNS = "id, session_id, name, phone, joined_at"


@dataclass
class SupabaseCustomerRepository(CustomerRepository):
    """Supabase implementation for session customers."""

    client: Client

    def add_customer(self, session_id: UUID, name: str, phone: str) -> SessionCustomer:
        """Insert a roster entry and return it."""
        with store_errors("add customer"):
            response = (
                self.client.table(_TABLE)
                .insert(
                    {
                        "session_id": str(session_id),
                        "name": name,
                        "phone": phone,
                        "joined_at": datetime.now(tz=UTC).isoformat(),
                    }
                )
                .execute()
            )
        if not response.data:
            raise StoreUnavailableError("Failed to add session customer")
        return _parse_customer(response.data[0])

    def list_customers(self, session_id: UUID) -> list[SessionCustomer]:
        """Return a session's roster in join order."""
        with store_errors("list customers"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .eq("session_id", str(session_id))
                .is_("deleted_at", "null")
                .order("joined_at", desc=False)
                .execute()
            )
        return [_parse_customer(row) for row in response.data or []]

    def list_all_customers(self) -> list[SessionCustomer]:
        """Return every roster entry, newest first."""
        with store_errors("list all customers"):
            response = (
                self.client.table(_TABLE)
                .select(_COLUMNS)
                .is_("deleted_at", "null")
                .order("joined_at", desc=True)
                .execute()
            )
        return [_parse_customer(row) for row in response.data or []]

    def remove_customer(self, customer_id: UUID) -> bool:
        """Soft-delete a roster entry."""
        with store_errors("remove customer"):
            response = (
                self.client.table(_TABLE)
                .update({"deleted_at": datetime.now(tz=UTC).isoformat()})
                .eq("id", str(customer_id))
                .is_("deleted_at", "null")
                .execute()
            )
        return bool(response.data)


def _parse_customer(row: dict[str, object]) -> SessionCustomer:
    return SessionCustomer(
        id=UUID(str(row["id"])),
        session_id=UUID(str(row["session_id"])),
        name=str(row.get("name") or ""),
        phone=str(row.get("phone") or ""),
        joined_at=parse_timestamp(row.get("joined_at")) or datetime.now(tz=UTC),
    )
