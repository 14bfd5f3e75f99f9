import inspect
import sys
import traceback
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from secrets import token_hex
from typing import Any, Generator, Optional

from es_batch_settings.config import (LOCAL_TZ, LOG_DIR_NAME, TODAY,
                                      TODAY_STR, Config, default_config)
from es_batch_settings.logging.schema import (ErrorInfo, Extra, LoggerContext,
                                              LogLevel, LogRecord)

_ctx: ContextVar[Optional[LoggerContext]] = ContextVar("_ctx", default=None)

STDERR_LEVELS = ("INFO", "WARNING", "ERROR", "CRITICAL")
STDERR_EXTRA_KEYS = ("index", "file", "setting", "value")


def _default_run_name() -> str:
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).stem
    return "adhoc"


def init_logger(
    *,
    run_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> LoggerContext:
    if config is None:
        config = default_config
    if run_name is None:
        run_name = _default_run_name()
    run_id = f"{TODAY_STR}_{run_name}_{token_hex(2)}"
    log_file = config.result_dir.joinpath(LOG_DIR_NAME, f"{run_id}.log.jsonl")
    log_file.parent.mkdir(parents=True, exist_ok=True)

    ctx = LoggerContext(
        run_name=run_name,
        run_id=run_id,
        run_date=TODAY,
        log_file=log_file,
        config=config,
    )
    _ctx.set(ctx)

    return ctx


@contextmanager
def run_logger(
    *,
    run_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> Generator[LoggerContext, None, None]:
    """Initialize the logger for one run and record its lifecycle.

    Logs a start record on entry, an end record on normal exit, and a
    CRITICAL failed record (with the exception) before re-raising.
    """
    ctx = init_logger(run_name=run_name, config=config)
    _log("INFO", f"{ctx.run_name} started", extra={"lifecycle": "start"})
    try:
        yield ctx
    except BaseException as e:
        _log("CRITICAL", f"{ctx.run_name} failed", error=e, extra={"lifecycle": "failed"})
        raise
    _log("INFO", f"{ctx.run_name} completed", extra={"lifecycle": "end"})


def log_debug(message: str, **extra: Any) -> None:
    _log("DEBUG", message, extra=extra)


def log_info(message: str, **extra: Any) -> None:
    _log("INFO", message, extra=extra)


def log_warn(message: str, **extra: Any) -> None:
    _log("WARNING", message, extra=extra)


def log_error(message: str, error: Optional[BaseException] = None, **extra: Any) -> None:
    _log("ERROR", message, error=error, extra=extra)


def log_critical(message: str, error: Optional[BaseException] = None, **extra: Any) -> None:
    _log("CRITICAL", message, error=error, extra=extra)


def _log(
    log_level: LogLevel,
    message: Optional[str],
    *,
    error: Optional[BaseException] = None,
    extra: Optional[dict[str, Any]] = None,
) -> None:
    ctx = _ctx.get()
    if ctx is None:
        # Library use outside of a run: nothing to write to.
        return

    error_info: Optional[ErrorInfo] = None
    if error is not None:
        error_info = ErrorInfo(
            type=type(error).__name__,
            message=str(error),
            traceback="".join(traceback.format_exception(type(error), error, error.__traceback__)),
        )

    record = LogRecord(
        timestamp=datetime.now(LOCAL_TZ),
        run_date=ctx.run_date,
        run_id=ctx.run_id,
        run_name=ctx.run_name,
        source=_detect_source(),
        log_level=log_level,
        message=message,
        error=error_info,
        extra=Extra(**{k: str(v) if isinstance(v, Path) else v for k, v in (extra or {}).items()}),
    )

    _append_jsonl(ctx.log_file, record)
    _emit_stderr(record, ctx.config.debug)


def _append_jsonl(path: Path, record: LogRecord) -> None:
    with path.open("a", encoding="utf-8") as f:
        f.write(record.model_dump_json())
        f.write("\n")


def _emit_stderr(record: LogRecord, debug: bool = False) -> None:
    if record.log_level not in STDERR_LEVELS and not debug:
        return

    ts = record.timestamp.isoformat(timespec="seconds")
    line = f"{ts} - {record.run_name} - {record.log_level}"
    if record.message:
        line += f" - {record.message}"
    for key in STDERR_EXTRA_KEYS:
        value = getattr(record.extra, key)
        if value is not None:
            line += f" {key}={value}"
    if record.error is not None:
        line += f" ({record.error.type}: {record.error.message})"

    sys.stderr.write(line + "\n")
    sys.stderr.flush()


def _detect_source() -> str:
    frame = inspect.currentframe()
    try:
        caller = frame
        # skip frames of this module and of the run_logger context manager
        while caller is not None and caller.f_globals.get("__name__") in (__name__, "contextlib"):
            caller = caller.f_back
        if caller is None:
            return "<unknown>"

        return caller.f_globals.get("__name__") or "<unknown>"
    finally:
        del frame
