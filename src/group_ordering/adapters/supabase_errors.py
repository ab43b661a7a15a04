"""Translation of Supabase client failures into session errors."""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import httpx
from postgrest.exceptions import APIError

from group_ordering.domain.errors import ConflictError, StoreUnavailableError

_UNIQUE_VIOLATION = "23505"


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Re-raise PostgREST and transport errors as session errors."""
    try:
        yield
    except APIError as exc:
        if exc.code == _UNIQUE_VIOLATION:
            raise ConflictError(f"{action}: {exc.message}") from exc
        raise StoreUnavailableError(f"{action}: {exc.message}") from exc
    except httpx.HTTPError as exc:
        raise StoreUnavailableError(f"{action}: {exc}") from exc


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO timestamp column, returning None for empty values."""
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
