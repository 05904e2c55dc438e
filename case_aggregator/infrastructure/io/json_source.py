"""Local filesystem payload source."""

import asyncio
import json
from pathlib import Path

import structlog

from case_aggregator.domain.ports import EventSourcePort, MetaSourcePort
from case_aggregator.domain.types import EventPayloadDict, MetaPayloadDict

logger = structlog.get_logger()


class LocalJsonSource(MetaSourcePort, EventSourcePort):
    """Reads meta and event payloads from a data directory."""

    def __init__(
        self,
        data_dir: str | Path,
        meta_file_name: str = "meta.json",
        data_file_name: str = "data.json",
    ) -> None:
        """Initialize local source."""
        self.data_dir = Path(data_dir)
        self.meta_path = self.data_dir / meta_file_name
        self.data_path = self.data_dir / data_file_name

    async def load_meta(self) -> MetaPayloadDict:
        return await asyncio.to_thread(self._read, self.meta_path)

    async def load_events(self) -> EventPayloadDict:
        return await asyncio.to_thread(self._read, self.data_path)

    @staticmethod
    def _read(path: Path) -> dict:
        logger.info("loading_payload", path=str(path))
        if not path.exists():
            raise FileNotFoundError(f"Payload not found: {path}")
        with path.open(encoding="utf-8") as f:
            return json.load(f)
