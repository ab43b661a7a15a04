"""Staff token authentication for privileged endpoints."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

from group_ordering.config import parse_staff_tokens

if TYPE_CHECKING:
    from group_ordering.containers import AppContainer

SESSION_MANAGERS = ("admin", "waiter", "owner")
SESSION_AUDITORS = ("admin", "owner")


def _get_staff_tokens(request: Request) -> dict[str, str]:
    container: AppContainer = request.app.state.container
    return parse_staff_tokens(container.settings.staff_tokens)


def require_role(*roles: str) -> Callable[..., Awaitable[str]]:
    """Build a dependency that resolves the caller's role from X-Staff-Token."""

    async def dependency(
        x_staff_token: str | None = Header(default=None),
        staff_tokens: dict[str, str] = Depends(_get_staff_tokens),
    ) -> str:
        role = staff_tokens.get(x_staff_token) if x_staff_token else None
        if role is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
        if role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
        return role

    return dependency
