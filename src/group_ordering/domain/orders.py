"""Domain models for orders and tables read by the session service."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class OrderItem:
    """Line item on an order, priced at order time."""

    menu_item_id: UUID | None
    name: str
    quantity: int
    price_at_time: int


@dataclass(frozen=True)
class OrderRecord:
    """Order row tagged with an optional session."""

    id: UUID
    session_id: UUID | None
    customer_id: UUID | None
    total: int
    status: str
    created_at: datetime
    items: list[OrderItem] = field(default_factory=list)


@dataclass(frozen=True)
class TableRecord:
    """Physical restaurant table."""

    id: UUID
    restaurant_id: UUID
    table_number: int | None
    is_active: bool
    deleted_at: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.is_active and self.deleted_at is None


@dataclass(frozen=True)
class CustomerSpend:
    """Per-customer order summary within a session."""

    customer_id: UUID
    name: str
    phone: str
    joined_at: datetime
    order_count: int
    total_spent: int
    orders: list[OrderRecord]
