"""Payload source selection."""

import structlog

from case_aggregator.domain.ports import EventSourcePort, MetaSourcePort
from case_aggregator.infrastructure.aws.s3_io import S3IO
from case_aggregator.infrastructure.aws.s3_source import S3JsonSource
from case_aggregator.infrastructure.config.settings import Settings
from case_aggregator.infrastructure.io.json_source import LocalJsonSource

logger = structlog.get_logger()


def build_sources(settings: Settings) -> tuple[MetaSourcePort, EventSourcePort]:
    """S3 source when a bucket is configured, local data directory otherwise."""
    if settings.aws_s3_bucket:
        logger.info("using_s3_source", bucket=settings.aws_s3_bucket, prefix=settings.aws_s3_prefix)
        source = S3JsonSource(
            S3IO(settings),
            prefix=settings.aws_s3_prefix,
            meta_file_name=settings.meta_file_name,
            data_file_name=settings.data_file_name,
        )
    else:
        logger.info("using_local_source", data_dir=settings.data_dir)
        source = LocalJsonSource(
            settings.data_dir,
            meta_file_name=settings.meta_file_name,
            data_file_name=settings.data_file_name,
        )
    return source, source
