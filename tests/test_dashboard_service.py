"""Tests for staff dashboard read models."""

from dataclasses import replace
from datetime import UTC, datetime, timedelta

import pytest

from group_ordering.domain.errors import NotFoundError
from group_ordering.services.dashboard import (
    DashboardService,
    day_start,
    format_duration,
)
from group_ordering.services.sessions import SessionService
from tests.conftest import (
    OTHER_TABLE_ID,
    RESTAURANT_ID,
    TABLE_ID,
    InMemoryOrderRepository,
    InMemorySessionRepository,
)


def test_session_detail_includes_breakdown(
    session_service: SessionService,
    order_repository: InMemoryOrderRepository,
) -> None:
    session = session_service.create_session(TABLE_ID, RESTAURANT_ID)
    alice = session_service.join_session(session.otp, TABLE_ID, "Alice", "5550001")
    bob = session_service.join_session(session.otp, TABLE_ID, "Bob", "5550002")
    order_repository.add_order(session.id, 1200, customer_id=bob.customer.id)
    order_repository.add_order(session.id, 300, customer_id=alice.customer.id)
    order_repository.add_order(session.id, 300, customer_id=alice.customer.id)

    detail = DashboardService(session_service).session_detail(session.id)

    assert detail.session.id == session.id
    assert len(detail.customers) == 2
    assert len(detail.orders) == 3
    assert detail.average_order_value == 600.0
    assert [item.name for item in detail.breakdown] == ["Bob", "Alice"]
    assert detail.duration == "0m"


def test_session_detail_unknown_session(session_service: SessionService) -> None:
    with pytest.raises(NotFoundError):
        DashboardService(session_service).session_detail(TABLE_ID)


def test_restaurant_overview_counts(
    session_service: SessionService,
    order_repository: InMemoryOrderRepository,
) -> None:
    first = session_service.create_session(TABLE_ID, RESTAURANT_ID)
    second = session_service.create_session(OTHER_TABLE_ID, RESTAURANT_ID)
    order_repository.add_order(first.id, 800)
    order_repository.add_order(second.id, 450)
    session_service.update_session_total(first.id)
    session_service.update_session_total(second.id)
    session_service.close_session(second.id)

    overview = DashboardService(session_service).restaurant_overview(RESTAURANT_ID)

    assert overview.total_sessions == 2
    assert overview.active_sessions == 1
    assert overview.total_revenue == 1250
    assert {len(snapshot.orders) for snapshot in overview.sessions} == {1}


def test_restaurant_overview_orders_active_first_and_filters_by_day(
    session_service: SessionService,
    session_repository: InMemorySessionRepository,
) -> None:
    midnight = day_start(datetime.now(tz=UTC))
    noon = midnight + timedelta(hours=12)
    older_active = session_service.create_session(TABLE_ID, RESTAURANT_ID)
    newer_billed = session_service.create_session(OTHER_TABLE_ID, RESTAURANT_ID)
    session_service.close_session(newer_billed.id)
    stale = session_service.create_session(OTHER_TABLE_ID, RESTAURANT_ID)
    session_service.close_session(stale.id)
    for session_id, created_at in (
        (older_active.id, noon - timedelta(minutes=30)),
        (newer_billed.id, noon),
        (stale.id, midnight - timedelta(hours=1)),
    ):
        session_repository.sessions[session_id] = replace(
            session_repository.sessions[session_id], created_at=created_at
        )
    dashboard = DashboardService(session_service)

    everything = dashboard.restaurant_overview(RESTAURANT_ID)
    today = dashboard.restaurant_overview(RESTAURANT_ID, since=midnight)

    assert [item.session.id for item in everything.sessions] == [
        older_active.id,
        newer_billed.id,
        stale.id,
    ]
    assert [item.session.id for item in today.sessions] == [
        older_active.id,
        newer_billed.id,
    ]
    assert today.total_sessions == 2


def test_format_duration() -> None:
    start = datetime(2026, 1, 1, 18, 0, tzinfo=UTC)
    assert format_duration(start, start + timedelta(minutes=45)) == "45m"
    assert format_duration(start, start + timedelta(hours=2, minutes=5)) == "2h 5m"
    assert format_duration(start, start - timedelta(minutes=1)) == "0m"


def test_day_start_keeps_timezone() -> None:
    moment = datetime(2026, 4, 2, 21, 15, 7, tzinfo=UTC)
    assert day_start(moment) == datetime(2026, 4, 2, tzinfo=UTC)
