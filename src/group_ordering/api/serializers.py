"""JSON payloads for session responses."""

from group_ordering.domain.orders import CustomerSpend, OrderItem, OrderRecord
from group_ordering.domain.sessions import SessionCustomer, SessionRecord


def envelope(message: str, data: object = None) -> dict[str, object]:
    """Wrap a successful payload in the standard response envelope."""
    body: dict[str, object] = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body


def serialize_session(session: SessionRecord) -> dict[str, object]:
    return {
        "sessionId": str(session.id),
        "tableId": str(session.table_id),
        "restaurantId": str(session.restaurant_id),
        "otp": session.otp,
        "status": session.status,
        "totalAmount": session.total_amount,
        "createdAt": session.created_at.isoformat(),
        "updatedAt": session.updated_at.isoformat(),
        "expiresAt": session.otp_expires_at.isoformat()
        if session.otp_expires_at
        else None,
    }


def serialize_customer(customer: SessionCustomer) -> dict[str, object]:
    return {
        "id": str(customer.id),
        "sessionId": str(customer.session_id),
        "name": customer.name,
        "phone": customer.phone,
        "joinedAt": customer.joined_at.isoformat(),
    }


def _serialize_item(item: OrderItem) -> dict[str, object]:
    return {
        "menuItemId": str(item.menu_item_id) if item.menu_item_id else None,
        "name": item.name,
        "quantity": item.quantity,
        "priceAtTime": item.price_at_time,
    }


def serialize_order(order: OrderRecord) -> dict[str, object]:
    return {
        "id": str(order.id),
        "sessionId": str(order.session_id) if order.session_id else None,
        "customerId": str(order.customer_id) if order.customer_id else None,
        "total": order.total,
        "status": order.status,
        "timestamp": order.created_at.isoformat(),
        "items": [_serialize_item(item) for item in order.items],
    }


def serialize_spend(spend: CustomerSpend) -> dict[str, object]:
    return {
        "customerId": str(spend.customer_id),
        "name": spend.name,
        "phone": spend.phone,
        "joinedAt": spend.joined_at.isoformat(),
        "orderCount": spend.order_count,
        "totalSpent": spend.total_spent,
        "orderIds": [str(order.id) for order in spend.orders],
    }
