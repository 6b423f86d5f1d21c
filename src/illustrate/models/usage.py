"""Per-connection usage counters."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from illustrate.models.enums import ProviderCode


@dataclass
class UsageRecord:
    """Credits used and request count for one provider connection.

    Persistence belongs to the caller; the job queue only increments.
    """

    provider: ProviderCode
    id: UUID = field(default_factory=uuid4)
    credits_used: float = 0.0
    total_requests: int = 0
    last_used_at: Optional[datetime] = None

    def record(self, cost: float) -> None:
        if cost < 0:
            raise ValueError(f"cost must be non-negative, got {cost}")
        self.credits_used += cost
        self.total_requests += 1
        self.last_used_at = datetime.now(timezone.utc)
