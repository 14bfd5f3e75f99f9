"""Elasticsearch CLI commands.

Usage:
    es_bulk_insert --index bioproject --dir /path/to/jsonl/
    es_bulk_insert --index sra-run --file /path/to/sra_run.jsonl --disable-replicas
    es_show_settings --index bioproject --index biosample
"""

import argparse
import sys
from pathlib import Path

from es_batch_settings.config import Config, get_config
from es_batch_settings.es.bulk_insert import (bulk_insert_from_dir,
                                              bulk_insert_jsonl)
from es_batch_settings.es.client import get_es_client
from es_batch_settings.es.operations import IndexSettingsOperations
from es_batch_settings.es.settings import BULK_INSERT_SETTINGS
from es_batch_settings.logging.logger import (log_debug, log_error, log_info,
                                              log_warn, run_logger)

# === Bulk Insert ===


def parse_bulk_insert_args(args: list[str]) -> tuple[Config, str, Path, list[Path], str, int, bool]:
    parser = argparse.ArgumentParser(
        description="Bulk insert JSONL files into Elasticsearch with refresh disabled during the load."
    )
    parser.add_argument(
        "--index",
        required=True,
        help="Target index name (e.g., bioproject, sra-run)",
    )
    parser.add_argument(
        "--dir",
        help="Directory containing JSONL files",
    )
    parser.add_argument(
        "--file",
        action="append",
        dest="files",
        help="JSONL file to insert (can be specified multiple times)",
    )
    parser.add_argument(
        "--pattern",
        default="*.jsonl",
        help="Glob pattern to match JSONL files when using --dir (default: *.jsonl)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=BULK_INSERT_SETTINGS["batch_size"],
        help=f"Number of documents per bulk request (default: {BULK_INSERT_SETTINGS['batch_size']})",
    )
    parser.add_argument(
        "--disable-replicas",
        action="store_true",
        help="Also set replicas to 0 during the load. Data may be lost if a node fails; "
             "use only for indexes that can be rebuilt.",
    )

    parsed = parser.parse_args(args)
    config = get_config()

    if not parsed.dir and not parsed.files:
        parser.error("Either --dir or --file must be specified")

    jsonl_dir = Path(parsed.dir) if parsed.dir else Path()
    jsonl_files = [Path(f) for f in (parsed.files or [])]

    return config, parsed.index, jsonl_dir, jsonl_files, parsed.pattern, parsed.batch_size, parsed.disable_replicas


def main_bulk_insert() -> None:
    config, index, jsonl_dir, jsonl_files, pattern, batch_size, disable_replicas = parse_bulk_insert_args(sys.argv[1:])
    with run_logger(config=config):
        log_debug("config loaded", config=config.model_dump(mode="json"))
        log_info("bulk inserting into elasticsearch", index=index, pattern=pattern, disable_replicas=disable_replicas)

        try:
            if jsonl_files:
                result = bulk_insert_jsonl(
                    config=config,
                    jsonl_files=jsonl_files,
                    index=index,
                    batch_size=batch_size,
                    disable_replicas=disable_replicas,
                )
            else:
                result = bulk_insert_from_dir(
                    config=config,
                    jsonl_dir=jsonl_dir,
                    index=index,
                    pattern=pattern,
                    batch_size=batch_size,
                    disable_replicas=disable_replicas,
                )

            log_info(
                "bulk insert completed",
                index=result.index,
                count=result.total_docs,
                success_count=result.success_count,
                error_count=result.error_count,
            )

            if result.errors:
                log_warn("some documents failed to insert", errors=result.errors[:10])
        except Exception as e:
            log_error("failed to bulk insert", error=e, index=index)
            sys.exit(1)


# === Show Settings ===


def parse_show_settings_args(args: list[str]) -> tuple[Config, list[str]]:
    parser = argparse.ArgumentParser(description="Show refresh interval and replica count of Elasticsearch indexes.")
    parser.add_argument(
        "--index",
        action="append",
        dest="indices",
        required=True,
        help="Index name (can be specified multiple times)",
    )

    parsed = parser.parse_args(args)
    config = get_config()

    return config, parsed.indices


def main_show_settings() -> None:
    config, indices = parse_show_settings_args(sys.argv[1:])
    with run_logger(config=config):
        log_debug("config loaded", config=config.model_dump(mode="json"))
        operations = IndexSettingsOperations(get_es_client(config))

        try:
            for index in indices:
                refresh_interval = operations.get_refresh_interval(index)
                replicas = operations.get_replicas(index)
                log_info(
                    f"{index}: refresh_interval={refresh_interval}, number_of_replicas={replicas}",
                    index=index,
                    refresh_interval=refresh_interval,
                    number_of_replicas=replicas,
                )
        except Exception as e:
            log_error("failed to get index settings", error=e)
            sys.exit(1)
