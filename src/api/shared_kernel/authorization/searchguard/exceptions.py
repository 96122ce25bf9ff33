"""Exceptions for SearchGuard index operations."""


class TenantIndexError(Exception):
    """Base exception for tenant index errors."""

    pass


class TenantIndexRequestError(TenantIndexError):
    """Raised when the roles API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
