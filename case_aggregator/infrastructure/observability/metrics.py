"""Prometheus metrics."""

from prometheus_client import Counter, Histogram

snapshots_built = Counter(
    "snapshots_built_total",
    "Total number of snapshots built",
)

snapshots_failed = Counter(
    "snapshots_failed_total",
    "Total number of failed snapshot builds",
    ["error_code"],
)

event_rows_skipped = Counter(
    "event_rows_skipped_total",
    "Total number of malformed event rows skipped",
    ["reason"],
)

snapshot_build_duration_seconds = Histogram(
    "snapshot_build_duration_seconds",
    "Duration of snapshot builds in seconds",
    buckets=[0.1, 0.5, 1, 5, 10, 30, 60, 120, 300],
)

data_row_cache_misses = Counter(
    "data_row_cache_misses_total",
    "Total number of day series computed (cache misses)",
)
