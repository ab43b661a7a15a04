"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from group_ordering.adapters.supabase_customer_repository import (
    SupabaseCustomerRepository,
)
from group_ordering.adapters.supabase_order_repository import SupabaseOrderRepository
from group_ordering.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from group_ordering.adapters.supabase_table_repository import SupabaseTableRepository
from group_ordering.config import Settings
from group_ordering.services.dashboard import DashboardService
from group_ordering.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    dashboard_service: DashboardService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_service = SessionService(
        session_repository=SupabaseSessionRepository(supabase_client),
        customer_repository=SupabaseCustomerRepository(supabase_client),
        table_repository=SupabaseTableRepository(supabase_client),
        order_repository=SupabaseOrderRepository(supabase_client),
        otp_ttl_hours=resolved_settings.otp_ttl_hours,
        total_update_attempts=resolved_settings.total_update_attempts,
    )
    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        dashboard_service=DashboardService(session_service),
    )
