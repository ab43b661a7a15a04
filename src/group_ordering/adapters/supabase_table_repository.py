"""Supabase lookups for restaurant tables."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from group_ordering.adapters.supabase_errors import parse_timestamp, store_errors
from group_ordering.domain.orders import TableRecord
from group_ordering.services.sessions import TableRepository


@dataclass
class SupabaseTableRepository(TableRepository):
    """Supabase implementation for table lookups."""

    client: Client

    def get_table(self, table_id: UUID) -> TableRecord | None:
        """Return a table by id, if present."""
        with store_errors("get table"):
            response = (
                self.client.table("restaurant_tables")
                .select("id, restaurant_id, table_number, is_active, deleted_at")
                .eq("id", str(table_id))
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        table_number = row.get("table_number")
        return TableRecord(
            id=UUID(str(row["id"])),
            restaurant_id=UUID(str(row["restaurant_id"])),
            table_number=int(table_number) if table_number is not None else None,
            is_active=bool(row.get("is_active", True)),
            deleted_at=parse_timestamp(row.get("deleted_at")),
        )
