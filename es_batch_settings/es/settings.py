"""Elasticsearch settings configuration.

This module centralizes ES-related settings with documentation on their purpose
and the reasoning behind each value.
"""

from typing import Any, Dict

# === Index Setting Names ===
# Flat setting names as returned by GET /<index>/_settings?flat_settings=true.

REFRESH_INTERVAL_SETTING = "index.refresh_interval"
NUMBER_OF_REPLICAS_SETTING = "index.number_of_replicas"


# === Disabled Values ===
# Values applied to indexes for the duration of a batch job.

# "-1" disables periodic refresh; documents become searchable on explicit refresh only.
DISABLED_REFRESH_INTERVAL = "-1"

# No replicas: primaries are not copied while indexing.
# A node failure during the job may lose data, so only for indexes that can be rebuilt.
DISABLED_REPLICAS = 0


# === Job Execution Context Keys ===
# Default keys shared between before_job and after_job of the toggle listeners.
# Change them only when several listeners of the same kind are attached to one job.

CONTEXT_KEYS: Dict[str, str] = {
    "refresh_indices": "REFRESH_INDICES",
    "initial_refresh_interval": "INITIAL_REFRESH_INTERVAL",
    "disable_replicas_indices": "DISABLE_REPLICAS_INDICES",
    "initial_replicas_count": "INITIAL_REPLICAS_COUNT",
}


# === Bulk Insert Settings ===
# Settings for elasticsearch.helpers.parallel_bulk() operations.

BULK_INSERT_SETTINGS: Dict[str, Any] = {
    # Number of documents per bulk request.
    # 5000 provides good throughput for large-scale data ingestion.
    # Reduce if memory pressure occurs with very large documents.
    "batch_size": 5000,

    # Number of threads used by parallel_bulk.
    "thread_count": 4,

    # Request timeout in seconds.
    # 600 seconds for large-scale bulk inserts with batch_size=5000.
    "request_timeout": 600,

    # Maximum number of failed document details kept in the result.
    "max_errors": 100,
}
