"""S3-backed payload source."""

import structlog

from case_aggregator.domain.ports import EventSourcePort, MetaSourcePort
from case_aggregator.domain.types import EventPayloadDict, MetaPayloadDict
from case_aggregator.infrastructure.aws.s3_io import S3IO

logger = structlog.get_logger()


class S3JsonSource(MetaSourcePort, EventSourcePort):
    """Reads meta and event payloads published under an S3 prefix."""

    def __init__(
        self,
        s3_io: S3IO,
        prefix: str = "",
        meta_file_name: str = "meta.json",
        data_file_name: str = "data.json",
    ) -> None:
        """Initialize S3 source."""
        self.s3_io = s3_io
        self.meta_key = S3IO.join(prefix, meta_file_name)
        self.data_key = S3IO.join(prefix, data_file_name)

    async def load_meta(self) -> MetaPayloadDict:
        return await self._load(self.meta_key)

    async def load_events(self) -> EventPayloadDict:
        return await self._load(self.data_key)

    async def _load(self, key: str) -> dict:
        logger.info("loading_payload", bucket=self.s3_io.bucket, key=key)
        if not await self.s3_io.object_exists(key):
            logger.error("payload_not_found", bucket=self.s3_io.bucket, key=key)
            raise FileNotFoundError(f"Payload not found: s3://{self.s3_io.bucket}/{key}")
        return await self.s3_io.get_json(key)
