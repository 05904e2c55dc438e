"""S3 I/O operations."""

import asyncio
import json

import boto3
from botocore.exceptions import ClientError
from tenacity import retry, stop_after_attempt, wait_exponential

from case_aggregator.infrastructure.config.settings import Settings


class S3IO:
    """Reads published JSON payloads from S3."""

    def __init__(self, settings: Settings) -> None:
        """Initialize S3 client."""
        if not settings.aws_s3_bucket:
            raise ValueError("aws_s3_bucket must be set to read payloads from S3")
        self.settings = settings
        self.s3_client = boto3.client("s3", region_name=settings.aws_region)
        self.bucket = settings.aws_s3_bucket

    @staticmethod
    def join(prefix: str, name: str) -> str:
        """Join a key prefix and an object name with a single separator."""
        prefix = prefix.strip("/")
        return f"{prefix}/{name}" if prefix else name

    @retry(stop=stop_after_attempt(3), wait=wait_exponential(multiplier=1, min=2, max=10))
    async def get_json(self, key: str) -> dict:
        """Get JSON object from S3."""
        try:
            content = await asyncio.to_thread(self._read_text, key)
            return json.loads(content)
        except ClientError as e:
            raise RuntimeError(f"Failed to read S3 object {key}: {e}") from e

    async def object_exists(self, key: str) -> bool:
        """Check if object exists in S3."""
        try:
            await asyncio.to_thread(self.s3_client.head_object, Bucket=self.bucket, Key=key)
            return True
        except ClientError:
            return False

    def _read_text(self, key: str) -> str:
        response = self.s3_client.get_object(Bucket=self.bucket, Key=key)
        return response["Body"].read().decode("utf-8")
