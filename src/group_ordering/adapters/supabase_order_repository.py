"""Supabase read access to session orders."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from group_ordering.adapters.supabase_errors import parse_timestamp, store_errors
from group_ordering.domain.orders import OrderItem, OrderRecord
from group_ordering.services.orders import OrderRepository

_COLUMNS = (
    "id, session_id, customer_id, total, status, created_at, "
    "order_items(menu_item_id, quantity, price_at_time, menu_items(name))"
)


@dataclass
class SupabaseOrderRepository(OrderRepository):
    """Supabase implementation for order reads."""

    client: Client

    def list_session_orders(self, session_id: UUID) -> list[OrderRecord]:
        """Return non-deleted orders for a session, oldest first."""
        with store_errors("list session orders"):
            response = (
                self.client.table("orders")
                .select(_COLUMNS)
                .eq("session_id", str(session_id))
                .is_("deleted_at", "null")
                .order("created_at", desc=False)
                .execute()
            )
        return [_parse_order(row) for row in response.data or []]


def _optional_uuid(value: object) -> UUID | None:
    return UUID(str(value)) if value else None


def _parse_item(row: dict[str, object]) -> OrderItem:
    menu_item = row.get("menu_items")
    name = menu_item.get("name") if isinstance(menu_item, dict) else None
    return OrderItem(
        menu_item_id=_optional_uuid(row.get("menu_item_id")),
        name=str(name or "Unknown Item"),
        quantity=int(row.get("quantity") or 0),
        price_at_time=int(row.get("price_at_time") or 0),
    )


def _parse_order(row: dict[str, object]) -> OrderRecord:
    items = row.get("order_items")
    return OrderRecord(
        id=UUID(str(row["id"])),
        session_id=_optional_uuid(row.get("session_id")),
        customer_id=_optional_uuid(row.get("customer_id")),
        total=int(row.get("total") or 0),
        status=str(row.get("status") or ""),
        created_at=parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
        items=[_parse_item(item) for item in items] if isinstance(items, list) else [],
    )
