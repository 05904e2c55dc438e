"""Clock implementation."""

from datetime import datetime, timezone

from case_aggregator.domain.ports import ClockPort
from case_aggregator.domain.types import Timestamp


class SystemClock(ClockPort):
    """System clock implementation."""

    def now(self) -> Timestamp:
        """Get current UTC timestamp."""
        return datetime.now(timezone.utc)
