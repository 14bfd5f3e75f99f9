"""Tests for logger module."""
import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from es_batch_settings.config import Config
from es_batch_settings.logging.logger import (init_logger, log_critical,
                                              log_debug, log_error, log_info,
                                              log_warn, run_logger)


def _read_records(config: Config) -> List[Dict[str, Any]]:
    log_files = list(config.result_dir.joinpath("logs").glob("*.log.jsonl"))
    assert len(log_files) == 1
    with log_files[0].open("r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


class TestRunLogger:
    """Tests for run_logger context manager."""

    def test_run_logger_success(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        """Test run_logger logs start and end on success."""
        with run_logger(run_name="test_success", config=test_config) as ctx:
            log_info("test message")

        assert ctx.run_name == "test_success"
        assert "_test_success_" in ctx.run_id

        records = _read_records(test_config)
        assert len(records) == 3  # start, test message, end

        assert records[0]["log_level"] == "INFO"
        assert records[0]["extra"]["lifecycle"] == "start"
        assert "started" in records[0]["message"]

        assert records[1]["log_level"] == "INFO"
        assert records[1]["message"] == "test message"
        assert records[1]["source"] == __name__

        assert records[2]["log_level"] == "INFO"
        assert records[2]["extra"]["lifecycle"] == "end"
        assert "completed" in records[2]["message"]

    def test_run_logger_failure(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        """Test run_logger logs start and failed on exception."""
        with pytest.raises(ValueError, match="Test error"):
            with run_logger(run_name="test_failure", config=test_config):
                raise ValueError("Test error")

        records = _read_records(test_config)
        assert len(records) == 2  # start, failed

        assert records[0]["extra"]["lifecycle"] == "start"
        assert records[1]["log_level"] == "CRITICAL"
        assert records[1]["extra"]["lifecycle"] == "failed"
        assert records[1]["error"]["type"] == "ValueError"
        assert "Test error" in records[1]["error"]["traceback"]

    def test_infer_run_name(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        """When run_name is not provided, it is taken from argv."""
        with run_logger(config=test_config):
            log_info("test")

        records = _read_records(test_config)
        assert records[0]["run_name"] == "es_batch_settings"


class TestLogLevels:
    def test_log_levels(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        init_logger(run_name="test_levels", config=test_config)

        log_debug("debug message")
        log_info("info message")
        log_warn("warning message")
        log_error("error message")
        log_critical("critical message")

        levels = [r["log_level"] for r in _read_records(test_config)]
        assert levels == ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    def test_log_error_with_exception(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        init_logger(run_name="test_error", config=test_config)

        try:
            raise RuntimeError("remote failure")
        except RuntimeError as e:
            log_error("put_settings failed", error=e, index="bioproject")

        record = _read_records(test_config)[0]
        assert record["error"]["type"] == "RuntimeError"
        assert record["error"]["message"] == "remote failure"
        assert record["extra"]["index"] == "bioproject"

    def test_not_initialized_is_noop(self, clean_ctx: None, tmp_path: Path) -> None:
        # library callers may log outside of a run
        log_info("nothing to write to")
        assert list(tmp_path.iterdir()) == []


class TestLogWithExtra:
    def test_log_with_extra(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        init_logger(run_name="test_extra", config=test_config)

        log_info("captured index setting", index="bioproject", setting="index.refresh_interval", value="1s")
        log_info("captured index setting", index="biosample", setting="index.number_of_replicas", value=1)
        log_info("disabled", indices=["a", "b"], custom_field="kept")

        records = _read_records(test_config)
        assert records[0]["extra"]["index"] == "bioproject"
        assert records[0]["extra"]["value"] == "1s"
        assert records[1]["extra"]["value"] == 1
        assert records[2]["extra"]["indices"] == ["a", "b"]
        assert records[2]["extra"]["custom_field"] == "kept"

    def test_log_with_path_object(
        self,
        test_config: Config,
        clean_ctx: None,
    ) -> None:
        """Test that Path objects are converted to strings."""
        init_logger(run_name="test_path", config=test_config)

        log_info("processing", file=Path("/path/to/file.jsonl"))

        record = _read_records(test_config)[0]
        assert record["extra"]["file"] == "/path/to/file.jsonl"


class TestStderrOutput:
    def test_stderr_output_info(
        self,
        test_config: Config,
        clean_ctx: None,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that INFO and above are written to stderr."""
        init_logger(run_name="test_stderr", config=test_config)

        log_debug("debug message")  # Should NOT appear in stderr
        log_info("info message")  # Should appear
        log_warn("warning message")  # Should appear

        stderr = capsys.readouterr().err
        assert "debug message" not in stderr
        assert "info message" in stderr
        assert "warning message" in stderr

    def test_stderr_debug_mode(
        self,
        test_config: Config,
        clean_ctx: None,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        init_logger(run_name="test_stderr_debug", config=test_config.model_copy(update={"debug": True}))

        log_debug("debug message")

        assert "debug message" in capsys.readouterr().err

    def test_stderr_output_with_extra(
        self,
        test_config: Config,
        clean_ctx: None,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        init_logger(run_name="test_stderr_extra", config=test_config)

        log_info("restored index setting", index="bioproject", setting="index.refresh_interval", value="1s")

        stderr = capsys.readouterr().err
        assert "index=bioproject" in stderr
        assert "setting=index.refresh_interval" in stderr
        assert "value=1s" in stderr
