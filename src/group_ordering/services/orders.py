"""Order aggregation for group sessions."""

from collections import defaultdict
from typing import Protocol
from uuid import UUID

from group_ordering.domain.orders import CustomerSpend, OrderRecord
from group_ordering.domain.sessions import SessionCustomer


class OrderRepository(Protocol):
    """Read access to orders placed against a session."""

    def list_session_orders(self, session_id: UUID) -> list[OrderRecord]:
        """Return non-deleted orders tagged with the session id."""


def sum_orders(orders: list[OrderRecord]) -> int:
    """Return the total of all order totals in minor units."""
    return sum(order.total for order in orders)


def average_order_value(orders: list[OrderRecord]) -> float:
    """Return the mean order total, or zero when there are no orders."""
    if not orders:
        return 0.0
    return sum_orders(orders) / len(orders)


def per_customer_breakdown(
    orders: list[OrderRecord], customers: list[SessionCustomer]
) -> list[CustomerSpend]:
    """Group orders by roster entry, biggest spenders first.

    Orders whose ``customer_id`` does not match a roster entry are left out.
    Ties on spend keep the earlier joiner first.
    """
    by_customer: dict[UUID, list[OrderRecord]] = defaultdict(list)
    for order in orders:
        if order.customer_id is not None:
            by_customer[order.customer_id].append(order)

    summaries = [
        CustomerSpend(
            customer_id=customer.id,
            name=customer.name,
            phone=customer.phone,
            joined_at=customer.joined_at,
            order_count=len(by_customer.get(customer.id, [])),
            total_spent=sum_orders(by_customer.get(customer.id, [])),
            orders=list(by_customer.get(customer.id, [])),
        )
        for customer in customers
    ]
    return sorted(summaries, key=lambda item: (-item.total_spent, item.joined_at))
