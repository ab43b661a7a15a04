"""Session endpoints for table clients and staff."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request, status

from group_ordering.api.auth import SESSION_MANAGERS, require_role
from group_ordering.api.schemas import (
    CreateSessionRequest,
    JoinSessionRequest,
)
from group_ordering.api.serializers import (
    envelope,
    serialize_customer,
    serialize_order,
    serialize_session,
    serialize_spend,
)
from group_ordering.domain.errors import NotFoundError
from group_ordering.services.orders import per_customer_breakdown, sum_orders

if TYPE_CHECKING:
    from group_ordering.services.sessions import SessionService

router = APIRouter(prefix="/sessions", tags=["sessions"])

_require_manager = require_role(*SESSION_MANAGERS)


def _service(request: Request) -> SessionService:
    return request.app.state.container.session_service


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: CreateSessionRequest, request: Request
) -> dict[str, object]:
    """Open a session for a table."""
    session = _service(request).create_session(
        payload.table_id, payload.restaurant_id
    )
    return envelope("Session created successfully", serialize_session(session))


@router.get("/active")
async def active_session(
    request: Request, table_id: UUID = Query(alias="tableId")
) -> dict[str, object]:
    """Return the active session for the table in ``?tableId=``."""
    session = _service(request).get_active_session(table_id)
    if session is None:
        raise NotFoundError("No active session found for this table")
    return envelope("Active session found", serialize_session(session))


@router.get("/active-all")
async def all_active_sessions(request: Request) -> dict[str, object]:
    """Return active sessions across all restaurants."""
    sessions = _service(request).get_all_active_sessions()
    return envelope(
        "Active sessions retrieved successfully",
        [serialize_session(session) for session in sessions],
    )


@router.get("/customers")
async def all_session_customers(request: Request) -> dict[str, object]:
    """Return roster entries across all sessions."""
    customers = _service(request).get_all_session_customers()
    return envelope(
        "Session customers retrieved successfully",
        [serialize_customer(customer) for customer in customers],
    )


@router.delete("/customers/{customer_id}")
async def remove_customer(
    customer_id: UUID, request: Request, _role: str = Depends(_require_manager)
) -> dict[str, object]:
    """Remove a customer from its session roster."""
    _service(request).remove_customer(customer_id)
    return envelope("Customer removed successfully")


@router.post("/join")
async def join_session(
    payload: JoinSessionRequest, request: Request
) -> dict[str, object]:
    """Join the table's active session with its OTP."""
    result = _service(request).join_session(
        payload.otp,
        payload.table_id,
        name=payload.customer_name,
        phone=payload.customer_phone,
    )
    data = serialize_session(result.session)
    data.pop("otp")
    data["customer"] = serialize_customer(result.customer)
    return envelope("Successfully joined session", data)


@router.get("/{session_id}")
async def session_details(session_id: UUID, request: Request) -> dict[str, object]:
    """Return a session by id."""
    session = _service(request).get_session_by_id(session_id)
    return envelope(
        "Session details retrieved successfully", serialize_session(session)
    )


@router.delete("/{session_id}")
async def clear_session(
    session_id: UUID, request: Request, _role: str = Depends(_require_manager)
) -> dict[str, object]:
    """Clear a session so it no longer shows up anywhere."""
    _service(request).clear_session(session_id)
    return envelope("Session cleared successfully")


@router.put("/{session_id}/close")
async def close_session(
    session_id: UUID, request: Request, role: str = Depends(_require_manager)
) -> dict[str, object]:
    """Bill an active session."""
    session = _service(request).close_session(session_id)
    return envelope(
        "Session closed successfully",
        {
            "sessionId": str(session.id),
            "status": session.status,
            "closedBy": role,
            "closedAt": datetime.now(tz=UTC).isoformat(),
        },
    )


@router.post("/{session_id}/regenerate-otp")
async def regenerate_otp(
    session_id: UUID, request: Request, role: str = Depends(_require_manager)
) -> dict[str, object]:
    """Replace the session OTP."""
    otp = _service(request).regenerate_otp(session_id)
    return envelope(
        "OTP regenerated successfully",
        {
            "sessionId": str(session_id),
            "newOtp": otp,
            "regeneratedBy": role,
            "regeneratedAt": datetime.now(tz=UTC).isoformat(),
        },
    )


@router.post("/{session_id}/total")
async def recompute_total(
    session_id: UUID, request: Request, _role: str = Depends(_require_manager)
) -> dict[str, object]:
    """Recompute the session total after an order change."""
    total = _service(request).update_session_total(session_id)
    return envelope(
        "Session total updated",
        {"sessionId": str(session_id), "totalAmount": total},
    )


@router.get("/{session_id}/customers")
async def session_customers(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the roster of a session."""
    customers = _service(request).get_session_customers(session_id)
    return envelope(
        "Session customers retrieved successfully",
        {
            "sessionId": str(session_id),
            "customers": [serialize_customer(customer) for customer in customers],
            "totalCustomers": len(customers),
        },
    )


@router.get("/{session_id}/orders")
async def session_orders(session_id: UUID, request: Request) -> dict[str, object]:
    """Return the orders of a session with per-customer totals."""
    service = _service(request)
    orders = service.get_session_orders(session_id)
    customers = service.get_session_customers(session_id)
    return envelope(
        "Session orders retrieved successfully",
        {
            "sessionId": str(session_id),
            "orders": [serialize_order(order) for order in orders],
            "totalOrders": len(orders),
            "totalAmount": sum_orders(orders),
            "customers": [
                serialize_spend(spend)
                for spend in per_customer_breakdown(orders, customers)
            ],
        },
    )
