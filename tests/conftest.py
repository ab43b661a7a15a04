"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from group_ordering.config import Settings
from group_ordering.containers import AppContainer
from group_ordering.domain.errors import ConflictError
from group_ordering.domain.orders import OrderRecord, TableRecord
from group_ordering.domain.sessions import (
    STATUS_ACTIVE,
    STATUS_CLEARED,
    SessionCustomer,
    SessionRecord,
)
from group_ordering.services.dashboard import DashboardService
from group_ordering.services.orders import OrderRepository
from group_ordering.services.sessions import (
    CustomerRepository,
    SessionRepository,
    SessionService,
    TableRepository,
)

RESTAURANT_ID = UUID("0534f507-9ea4-40e9-8b05-4de784984f79")
TABLE_ID = UUID("7f1c2a9e-3b64-4d0a-9a8e-2f6d1c0b5e11")
OTHER_TABLE_ID = UUID("a2b4c6d8-1e3f-4a5b-8c7d-9e0f1a2b3c4d")


@dataclass
class InMemorySessionRepository(SessionRepository):
    """In-memory session repository for tests."""

    sessions: dict[UUID, SessionRecord] = field(default_factory=dict)

    def create_session(  # noqa: PLR0913
        self,
        session_id: UUID,
        table_id: UUID,
        restaurant_id: UUID,
        otp: str,
        otp_expires_at: datetime,
    ) -> SessionRecord:
        if self._active_for(table_id) is not None:
            raise ConflictError("duplicate active session")
        now = datetime.now(tz=UTC)
        session = SessionRecord(
            id=session_id,
            table_id=table_id,
            restaurant_id=restaurant_id,
            otp=otp,
            otp_expires_at=otp_expires_at,
            status=STATUS_ACTIVE,
            total_amount=0,
            version=0,
            created_at=now,
            updated_at=now,
        )
        self.sessions[session.id] = session
        return session

    def get_session(self, session_id: UUID) -> SessionRecord | None:
        session = self.sessions.get(session_id)
        if session is None or session.deleted_at is not None:
            return None
        return session

    def get_active_session(self, table_id: UUID) -> SessionRecord | None:
        return self._active_for(table_id)

    def _active_for(self, table_id: UUID) -> SessionRecord | None:
        active = [
            session
            for session in self.sessions.values()
            if session.table_id == table_id and session.is_active
        ]
        if not active:
            return None
        return max(active, key=lambda session: session.created_at)

    def list_active_sessions(self) -> list[SessionRecord]:
        return [session for session in self.sessions.values() if session.is_active]

    def list_restaurant_sessions(self, restaurant_id: UUID) -> list[SessionRecord]:
        return [
            session
            for session in self.sessions.values()
            if session.restaurant_id == restaurant_id and session.deleted_at is None
        ]

    def update_otp(
        self, session_id: UUID, otp: str, otp_expires_at: datetime
    ) -> SessionRecord | None:
        session = self.get_session(session_id)
        if session is None or session.status != STATUS_ACTIVE:
            return None
        return self._store(replace(session, otp=otp, otp_expires_at=otp_expires_at))

    def update_total(
        self, session_id: UUID, total_amount: int, expected_version: int
    ) -> SessionRecord | None:
        session = self.get_session(session_id)
        if session is None or session.version != expected_version:
            return None
        return self._store(
            replace(session, total_amount=total_amount, version=session.version + 1)
        )

    def update_status(
        self, session_id: UUID, from_status: str, to_status: str
    ) -> SessionRecord | None:
        session = self.get_session(session_id)
        if session is None or session.status != from_status:
            return None
        return self._store(replace(session, status=to_status))

    def clear_session(self, session_id: UUID) -> bool:
        session = self.get_session(session_id)
        if session is None:
            return False
        self._store(
            replace(session, status=STATUS_CLEARED, deleted_at=datetime.now(tz=UTC))
        )
        return True

    def _store(self, session: SessionRecord) -> SessionRecord:
        updated = replace(session, updated_at=datetime.now(tz=UTC))
        self.sessions[updated.id] = updated
        return updated


@dataclass
class InMemoryCustomerRepository(CustomerRepository):
    """In-memory roster repository for tests."""

    customers: dict[UUID, SessionCustomer] = field(default_factory=dict)
    removed: set[UUID] = field(default_factory=set)

    def add_customer(self, session_id: UUID, name: str, phone: str) -> SessionCustomer:
        customer = SessionCustomer(
            id=uuid4(),
            session_id=session_id,
            name=name,
            phone=phone,
            joined_at=datetime.now(tz=UTC),
        )
        self.customers[customer.id] = customer
        return customer

    def list_customers(self, session_id: UUID) -> list[SessionCustomer]:
        return [
            customer
            for customer in self.list_all_customers()
            if customer.session_id == session_id
        ]

    def list_all_customers(self) -> list[SessionCustomer]:
        return [
            customer
            for customer_id, customer in self.customers.items()
            if customer_id not in self.removed
        ]

    def remove_customer(self, customer_id: UUID) -> bool:
        if customer_id not in self.customers or customer_id in self.removed:
            return False
        self.removed.add(customer_id)
        return True


@dataclass
class InMemoryTableRepository(TableRepository):
    """In-memory table lookup for tests."""

    tables: dict[UUID, TableRecord] = field(default_factory=dict)

    def add_table(
        self,
        table_id: UUID,
        restaurant_id: UUID = RESTAURANT_ID,
        is_active: bool = True,
    ) -> TableRecord:
        table = TableRecord(
            id=table_id,
            restaurant_id=restaurant_id,
            table_number=len(self.tables) + 1,
            is_active=is_active,
        )
        self.tables[table_id] = table
        return table

    def get_table(self, table_id: UUID) -> TableRecord | None:
        return self.tables.get(table_id)


@dataclass
class InMemoryOrderRepository(OrderRepository):
    """In-memory order store for tests."""

    orders: list[OrderRecord] = field(default_factory=list)

    def add_order(
        self,
        session_id: UUID | None,
        total: int,
        customer_id: UUID | None = None,
        status: str = "pending",
    ) -> OrderRecord:
        order = OrderRecord(
            id=uuid4(),
            session_id=session_id,
            customer_id=customer_id,
            total=total,
            status=status,
            created_at=datetime.now(tz=UTC),
        )
        self.orders.append(order)
        return order

    def list_session_orders(self, session_id: UUID) -> list[OrderRecord]:
        return [order for order in self.orders if order.session_id == session_id]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        staff_tokens="waiter-token:waiter,owner-token:owner,chef-token:chef",
        environment="test",
    )


@pytest.fixture
def session_repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture
def customer_repository() -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository()


@pytest.fixture
def table_repository() -> InMemoryTableRepository:
    repository = InMemoryTableRepository()
    repository.add_table(TABLE_ID)
    repository.add_table(OTHER_TABLE_ID)
    return repository


@pytest.fixture
def order_repository() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def session_service(
    session_repository: InMemorySessionRepository,
    customer_repository: InMemoryCustomerRepository,
    table_repository: InMemoryTableRepository,
    order_repository: InMemoryOrderRepository,
) -> SessionService:
    return SessionService(
        session_repository=session_repository,
        customer_repository=customer_repository,
        table_repository=table_repository,
        order_repository=order_repository,
    )


@pytest.fixture
def container(settings: Settings, session_service: SessionService) -> AppContainer:
    return AppContainer(
        settings=settings,
        session_service=session_service,
        dashboard_service=DashboardService(session_service),
    )
