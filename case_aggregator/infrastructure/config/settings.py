"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    data_dir: str = "data"
    meta_file_name: str = "meta.json"
    data_file_name: str = "data.json"
    nation_name: str = "Deutschland"
    # Events more than max_days after startDate are skipped
    max_days: int = 36_600

    # Payloads are read from S3 when a bucket is set, from data_dir otherwise
    aws_region: str = "eu-central-1"
    aws_s3_bucket: str | None = None
    aws_s3_prefix: str = ""

    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CASE_AGGREGATOR_",
        extra="ignore",
    )
