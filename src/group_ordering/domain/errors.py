"""Errors raised by the session lifecycle."""


class SessionError(Exception):
    """Base class for session lifecycle failures."""


class NotFoundError(SessionError):
    """Referenced table, session or customer is missing or soft-deleted."""


class ConflictError(SessionError):
    """Write would break a uniqueness rule or lost a concurrent update race."""


class InvalidCredentialError(SessionError):
    """OTP does not match the session's current OTP or has expired."""


class InvalidStateError(SessionError):
    """Session is not in the status the operation requires."""


class ValidationError(SessionError):
    """Malformed input rejected before reaching the lifecycle service."""


class StoreUnavailableError(SessionError):
    """The backing store failed to answer."""
