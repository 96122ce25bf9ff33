"""Exceptions raised across the Customer ports.

Infrastructure raises these; the application layer converts them into
operation results for the caller.
"""


class CustomerStoreError(Exception):
    """Raised when the primary store rejects or fails a statement.

    Carries the repository operation name so callers can log or retry
    without seeing connection details.
    """

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation


class DuplicateCustomerNameError(CustomerStoreError):
    """Raised when a create or rename collides with an existing customer name.

    Customer names are globally unique because they double as tenant keys.
    """

    def __init__(self, operation: str, name: str):
        super().__init__(operation, f"Customer '{name}' already exists")
        self.name = name


class TenantSyncError(Exception):
    """Raised when the tenant index could not be brought in line with the store.

    The customer mutation that triggered the sync is already committed; the
    index may now be stale until the next successful resync.
    """

    pass
