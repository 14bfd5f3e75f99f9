"""Elasticsearch bulk insert job with index settings relaxed during the load."""

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any, List

from elasticsearch import Elasticsearch, helpers
from pydantic import BaseModel

from es_batch_settings.config import Config
from es_batch_settings.es.client import (check_index_exists, get_es_client,
                                         refresh_index)
from es_batch_settings.es.settings import BULK_INSERT_SETTINGS, CONTEXT_KEYS
from es_batch_settings.exceptions import IndexNotFoundError
from es_batch_settings.job.execution import JobExecution
from es_batch_settings.job.listener import JobExecutionListener, run_job
from es_batch_settings.listeners.refresh import DisableRefreshDuringJobListener
from es_batch_settings.listeners.replicas import DisableReplicasDuringJobListener
from es_batch_settings.logging.logger import log_info


class BulkInsertResult(BaseModel):
    """Result of a bulk insert operation."""

    index: str
    total_docs: int
    success_count: int
    error_count: int
    errors: list[dict[str, Any]]


def generate_bulk_actions(
    jsonl_file: Path,
    index: str,
    id_field: str = "identifier",
) -> Iterator[dict[str, Any]]:
    """Generate bulk actions from a JSONL file.

    Args:
        jsonl_file: Path to the JSONL file
        index: Target index name
        id_field: Document field used as the Elasticsearch _id

    Yields:
        Bulk action dictionaries
    """
    with jsonl_file.open("r", encoding="utf-8") as f:
        for raw_line in f:
            line = raw_line.strip()
            if not line:
                continue
            doc = json.loads(line)
            identifier = doc.get(id_field)
            if not identifier:
                continue
            yield {
                "_op_type": "index",
                "_index": index,
                "_id": identifier,
                "_source": doc,
            }


def build_listeners(es_client: Elasticsearch, disable_replicas: bool = False) -> List[JobExecutionListener]:
    listeners: List[JobExecutionListener] = [DisableRefreshDuringJobListener(es_client)]
    if disable_replicas:
        listeners.append(DisableReplicasDuringJobListener(es_client))
    return listeners


def bulk_insert_jsonl(
    config: Config,
    jsonl_files: list[Path],
    index: str,
    batch_size: int = BULK_INSERT_SETTINGS["batch_size"],
    max_errors: int = BULK_INSERT_SETTINGS["max_errors"],
    disable_replicas: bool = False,
) -> BulkInsertResult:
    """Bulk insert JSONL files into Elasticsearch.

    Refresh is disabled on the index while the documents are loaded (and
    replicas too when ``disable_replicas`` is set); the previous settings are
    restored afterwards even if the load fails.

    Args:
        config: Configuration object
        jsonl_files: List of JSONL file paths to insert
        index: Target index name
        batch_size: Number of documents per bulk request
        max_errors: Maximum number of error details to keep
        disable_replicas: Also drop replicas to 0 during the load

    Returns:
        BulkInsertResult with success/error counts and error details

    Raises:
        IndexNotFoundError: If the target index does not exist
    """
    es_client = get_es_client(config)

    if not check_index_exists(es_client, index):
        raise IndexNotFoundError(index)

    result = BulkInsertResult(
        index=index,
        total_docs=0,
        success_count=0,
        error_count=0,
        errors=[],
    )

    def load(job_execution: JobExecution) -> None:
        for jsonl_file in jsonl_files:
            log_info("inserting documents", index=index, file=str(jsonl_file))
            actions = generate_bulk_actions(jsonl_file, index)

            for ok, info in helpers.parallel_bulk(
                es_client,
                actions,
                thread_count=BULK_INSERT_SETTINGS["thread_count"],
                chunk_size=batch_size,
                raise_on_error=False,
                raise_on_exception=False,
                request_timeout=BULK_INSERT_SETTINGS["request_timeout"],
            ):
                if ok:
                    result.success_count += 1
                else:
                    result.error_count += 1
                    if len(result.errors) < max_errors:
                        result.errors.append(info)
            result.total_docs = result.success_count + result.error_count

    job_execution = JobExecution(job_name=f"bulk_insert_{index}")
    job_execution.context.put(CONTEXT_KEYS["refresh_indices"], [index])
    if disable_replicas:
        job_execution.context.put(CONTEXT_KEYS["disable_replicas_indices"], [index])

    try:
        run_job(job_execution, build_listeners(es_client, disable_replicas), load)
    finally:
        # Make the loaded docs searchable now that refresh is back
        refresh_index(es_client, index, timeout=config.request_timeout)

    return result


def bulk_insert_from_dir(
    config: Config,
    jsonl_dir: Path,
    index: str,
    pattern: str = "*.jsonl",
    batch_size: int = BULK_INSERT_SETTINGS["batch_size"],
    max_errors: int = BULK_INSERT_SETTINGS["max_errors"],
    disable_replicas: bool = False,
) -> BulkInsertResult:
    """Bulk insert all JSONL files from a directory.

    Args:
        config: Configuration object
        jsonl_dir: Directory containing JSONL files
        index: Target index name
        pattern: Glob pattern to match JSONL files
        batch_size: Number of documents per bulk request
        max_errors: Maximum number of error details to keep
        disable_replicas: Also drop replicas to 0 during the load

    Returns:
        BulkInsertResult with success/error counts
    """
    if not jsonl_dir.is_dir():
        raise FileNotFoundError(f"Directory '{jsonl_dir}' does not exist.")

    jsonl_files = sorted(jsonl_dir.glob(pattern))
    if not jsonl_files:
        return BulkInsertResult(
            index=index,
            total_docs=0,
            success_count=0,
            error_count=0,
            errors=[],
        )

    return bulk_insert_jsonl(
        config=config,
        jsonl_files=jsonl_files,
        index=index,
        batch_size=batch_size,
        max_errors=max_errors,
        disable_replicas=disable_replicas,
    )
