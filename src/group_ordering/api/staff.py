"""Staff dashboard endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Query, Request

from group_ordering.api.auth import SESSION_AUDITORS, SESSION_MANAGERS, require_role
from group_ordering.api.serializers import (
    envelope,
    serialize_customer,
    serialize_order,
    serialize_session,
    serialize_spend,
)
from group_ordering.services.dashboard import day_start

if TYPE_CHECKING:
    from group_ordering.containers import AppContainer

router = APIRouter(prefix="/staff", tags=["staff"])


@router.get(
    "/sessions/{session_id}",
    dependencies=[Depends(require_role(*SESSION_AUDITORS))],
)
async def session_detail(session_id: UUID, request: Request) -> dict[str, object]:
    """Return a session with its roster, orders and spend breakdown."""
    container: AppContainer = request.app.state.container
    detail = container.dashboard_service.session_detail(session_id)
    return envelope(
        "Session details retrieved successfully",
        {
            "session": serialize_session(detail.session),
            "customers": [serialize_customer(item) for item in detail.customers],
            "orders": [serialize_order(order) for order in detail.orders],
            "breakdown": [serialize_spend(spend) for spend in detail.breakdown],
            "totalCustomers": len(detail.customers),
            "totalOrders": len(detail.orders),
            "averageOrderValue": detail.average_order_value,
            "sessionDuration": detail.duration,
        },
    )


@router.get(
    "/restaurants/{restaurant_id}/sessions",
    dependencies=[Depends(require_role(*SESSION_MANAGERS))],
)
async def restaurant_sessions(
    restaurant_id: UUID, request: Request, today: bool = Query(default=True)
) -> dict[str, object]:
    """Return a restaurant's sessions with orders and customers.

    Only sessions opened today are listed unless ``?today=false``.
    """
    container: AppContainer = request.app.state.container
    since = day_start(container.session_service.clock()) if today else None
    overview = container.dashboard_service.restaurant_overview(
        restaurant_id, since=since
    )
    return envelope(
        "Sessions retrieved successfully",
        {
            "sessions": [
                {
                    "session": serialize_session(snapshot.session),
                    "orders": [serialize_order(order) for order in snapshot.orders],
                    "customers": [
                        serialize_customer(customer) for customer in snapshot.customers
                    ],
                }
                for snapshot in overview.sessions
            ],
            "totalSessions": overview.total_sessions,
            "activeSessions": overview.active_sessions,
            "totalRevenue": overview.total_revenue,
        },
    )
