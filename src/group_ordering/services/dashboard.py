"""Staff dashboard views over sessions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from group_ordering.domain.orders import CustomerSpend, OrderRecord
from group_ordering.domain.sessions import (
    STATUS_ACTIVE,
    SessionCustomer,
    SessionRecord,
)
from group_ordering.services.orders import average_order_value, per_customer_breakdown
from group_ordering.services.sessions import SessionService


@dataclass(frozen=True)
class SessionDetail:
    """Everything staff see when opening a single session."""

    session: SessionRecord
    customers: list[SessionCustomer]
    orders: list[OrderRecord]
    breakdown: list[CustomerSpend]
    average_order_value: float
    duration: str


@dataclass(frozen=True)
class SessionSnapshot:
    """A session with its current orders and roster."""

    session: SessionRecord
    orders: list[OrderRecord]
    customers: list[SessionCustomer]


@dataclass(frozen=True)
class RestaurantOverview:
    """Sessions of one restaurant with headline counts."""

    sessions: list[SessionSnapshot]
    total_sessions: int
    active_sessions: int
    total_revenue: int


@dataclass
class DashboardService:
    """Read models for waiter and admin dashboards."""

    session_service: SessionService

    def session_detail(self, session_id: UUID) -> SessionDetail:
        """Return a session with roster, orders and spend breakdown."""
        session = self.session_service.get_session_by_id(session_id)
        customers = self.session_service.get_session_customers(session_id)
        orders = self.session_service.get_session_orders(session_id)
        return SessionDetail(
            session=session,
            customers=customers,
            orders=orders,
            breakdown=per_customer_breakdown(orders, customers),
            average_order_value=average_order_value(orders),
            duration=format_duration(session.created_at, self.session_service.clock()),
        )

    def restaurant_overview(
        self, restaurant_id: UUID, since: datetime | None = None
    ) -> RestaurantOverview:
        """Return a restaurant's sessions with their orders and roster.

        Active sessions come first, then the rest newest first. ``since``
        drops sessions created before it.
        """
        sessions = [
            session
            for session in self.session_service.get_restaurant_sessions(restaurant_id)
            if since is None or session.created_at >= since
        ]
        sessions.sort(key=lambda session: session.created_at, reverse=True)
        sessions.sort(key=lambda session: session.status != STATUS_ACTIVE)
        snapshots = [
            SessionSnapshot(
                session=session,
                orders=self.session_service.get_session_orders(session.id),
                customers=self.session_service.get_session_customers(session.id),
            )
            for session in sessions
        ]
        return RestaurantOverview(
            sessions=snapshots,
            total_sessions=len(snapshots),
            active_sessions=sum(
                1 for session in sessions if session.status == STATUS_ACTIVE
            ),
            total_revenue=sum(session.total_amount for session in sessions),
        )


def format_duration(start: datetime, end: datetime) -> str:
    """Format elapsed time as ``"2h 5m"`` or ``"45m"``."""
    minutes = max(int((end - start).total_seconds() // 60), 0)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def day_start(moment: datetime) -> datetime:
    """Return midnight of ``moment``'s day in the same timezone."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)
