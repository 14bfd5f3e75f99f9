from datetime import date, datetime
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from es_batch_settings.config import Config

# log_level usage:
# - DEBUG: Detailed info for debugging (config dumps, raw responses). Not shown in stderr.
# - INFO: Progress, captured/restored settings, statistics. Shown in stderr.
# - WARNING: Succeeded but incomplete (e.g. some documents failed to index). Shown in stderr.
# - ERROR: Failed step or hook. Shown in stderr.
# - CRITICAL: Fatal, processing stops (raises exception). Shown in stderr.
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# lifecycle is expressed in the extra field:
# - lifecycle="start": run started
# - lifecycle="end": run completed successfully
# - lifecycle="failed": run failed
Lifecycle = Literal["start", "end", "failed"]


class Extra(BaseModel):
    """
    Additional structured data for log records.

    Reserved fields have predefined meanings.
    Additional arbitrary fields are allowed via extra="allow".
    """
    model_config = ConfigDict(extra="allow")

    lifecycle: Optional[Lifecycle] = Field(
        default=None,
        description="Run lifecycle stage: start, end, or failed",
    )
    job_name: Optional[str] = Field(
        default=None,
        description="Name of the batch job",
        examples=["bulk_insert_bioproject"],
    )
    index: Optional[str] = Field(
        default=None,
        description="Elasticsearch index name",
        examples=["bioproject", "sra-run"],
    )
    indices: Optional[List[str]] = Field(
        default=None,
        description="Elasticsearch index names targeted by a single request",
    )
    setting: Optional[str] = Field(
        default=None,
        description="Index setting name",
        examples=["index.refresh_interval", "index.number_of_replicas"],
    )
    value: Optional[Union[str, int]] = Field(
        default=None,
        description="Index setting value",
        examples=["1s", "-1", 1],
    )
    context_key: Optional[str] = Field(
        default=None,
        description="Job execution context key",
        examples=["REFRESH_INDICES", "INITIAL_REPLICAS_COUNT"],
    )
    file: Optional[str] = Field(
        default=None,
        description="File path being processed",
        examples=["/path/to/data.jsonl"],
    )
    count: Optional[int] = Field(
        default=None,
        description="Count of items (for summary logs)",
        ge=0,
    )


class LoggerContext(BaseModel):
    """Runtime context for logger."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    run_name: str = Field(
        ...,
        description="Name of the run",
    )
    run_id: str = Field(
        ...,
        description="Unique run identifier: {YYYYMMDD}_{run_name}_{hex4}",
    )
    run_date: date = Field(
        ...,
        description="Run date (TODAY when logger was initialized)",
    )
    log_file: Path = Field(
        ...,
        description="Path to the JSONL log file",
    )
    config: Config = Field(
        ...,
        description="Config instance",
    )


class ErrorInfo(BaseModel):
    """Exception information for error logs."""

    type: str = Field(
        ...,
        description="Exception class name",
        examples=["ApiError", "MissingContextValueError"],
    )
    message: str = Field(
        ...,
        description="Exception message (str(e))",
    )
    traceback: Optional[str] = Field(
        default=None,
        description="Full traceback string",
    )


class LogRecord(BaseModel):
    """Single log record."""

    timestamp: datetime = Field(
        ...,
        description="Log timestamp in UTC",
        examples=["2026-01-13T10:30:00+00:00"],
    )

    # run identifiers
    run_date: date = Field(
        ...,
        description="Run date (TODAY when logger was initialized)",
        examples=["2026-01-13"],
    )
    run_id: str = Field(
        ...,
        description="Unique run identifier: {YYYYMMDD}_{run_name}_{hex4}",
        examples=["20260113_es_bulk_insert_a1b2"],
    )
    run_name: str = Field(
        ...,
        description="Name of the run (CLI command name or 'adhoc')",
        examples=["es_bulk_insert", "es_show_settings"],
    )

    # log source (module path)
    source: str = Field(
        ...,
        description="Python module path where log was emitted",
        examples=["es_batch_settings.listeners.base"],
    )

    log_level: LogLevel = Field(
        ...,
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    message: Optional[str] = Field(
        default=None,
        description="Human-readable log message",
    )
    error: Optional[ErrorInfo] = Field(
        default=None,
        description="Error information (set when exception occurred)",
    )
    extra: Extra = Field(
        default_factory=Extra,
        description="Additional structured data (lifecycle, index, setting, etc.)",
    )
