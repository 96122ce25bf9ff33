"""Probes for process-wide infrastructure (database engines).

Bounded contexts keep their own probes next to the code they observe; this
package only covers what is shared by every context.
"""

from shared_kernel.observability_context import ObservationContext
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "ObservationContext",
]
