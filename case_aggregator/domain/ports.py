"""Ports (interfaces) for infrastructure adapters."""

from abc import ABC, abstractmethod

from case_aggregator.domain.types import EventPayloadDict, MetaPayloadDict, Timestamp


class MetaSourcePort(ABC):
    """Port for reading the geographic meta-descriptor payload."""

    @abstractmethod
    async def load_meta(self) -> MetaPayloadDict:
        """Load meta payload (states, counties, dimension tables)."""


class EventSourcePort(ABC):
    """Port for reading the event list payload."""

    @abstractmethod
    async def load_events(self) -> EventPayloadDict:
        """Load event payload (start date, records)."""


class ClockPort(ABC):
    """Port for time operations."""

    @abstractmethod
    def now(self) -> Timestamp:
        """Get current timestamp."""
