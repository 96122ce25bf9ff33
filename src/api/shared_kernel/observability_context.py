"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events emitted by a probe.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        caller_role: Role of the caller performing the operation (if known).
        operation: Name of the customer operation being performed.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", caller_role="admin")
        probe = DefaultCustomerServiceProbe().with_context(context)
    """

    request_id: str | None = None
    caller_role: str | None = None
    operation: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.caller_role is not None:
            result["caller_role"] = self.caller_role
        if self.operation is not None:
            result["operation"] = self.operation
        result.update(self.extra)
        return result

