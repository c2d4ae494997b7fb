"""Session-scoped structured logging: one JSON object per line.

Explorer components log through ``structlog.get_logger(__name__)``.
``setup_structured_logging`` points structlog at the standard library, and
the ``dashboard_explorer`` logger hands records to a bounded queue drained by
a background listener, so a slow disk never stalls a navigation command.

Each line carries ``timestamp``, ``level``, ``logger``, ``session_id`` and
``message``; structlog keyword fields (stdlib ``extra``) are nested under
``fields`` and tracebacks under ``exception``. Everything passes through the
redactor first.
"""

from __future__ import annotations

import atexit
import json
import logging
import logging.handlers
import math
import queue
import sys
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Final

import structlog

from dashboard_explorer.constants import LOG_DIR
from dashboard_explorer.observability.redaction import (
    JSONValue,
    LogRedactor,
    passthrough,
    redact,
)

DEFAULT_LOGGER_NAME: Final[str] = "dashboard_explorer"
DEFAULT_LOG_FILENAME: Final[str] = "explorer.jsonl"
DEFAULT_QUEUE_SIZE: Final[int] = 4096

# Attributes every LogRecord has; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES: Final[frozenset[str]] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}

_active_lock = threading.Lock()
_active: StructuredLoggingHandle | None = None
_atexit_hooked = False


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Settings for one session's structured log."""

    session_id: str
    base_log_dir: Path | str = Path(LOG_DIR)
    logger_name: str = DEFAULT_LOGGER_NAME
    level: int | str = "INFO"
    queue_size: int = DEFAULT_QUEUE_SIZE
    log_filename: str = DEFAULT_LOG_FILENAME
    log_to_stdout: bool = True
    redactor: LogRedactor | None = None


class _LossyQueueHandler(logging.handlers.QueueHandler):
    """Enqueue without blocking; records that do not fit are counted and dropped."""

    def __init__(self, log_queue: queue.Queue[logging.LogRecord]) -> None:
        super().__init__(log_queue)
        self._dropped_lock = threading.Lock()
        self.dropped = 0

    def prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        # The listener lives in this process, so exc_info and extras survive as-is.
        return record

    def enqueue(self, record: logging.LogRecord) -> None:
        try:
            self.queue.put_nowait(record)
        except queue.Full:
            with self._dropped_lock:
                self.dropped += 1


class _JsonLinesFormatter(logging.Formatter):
    def __init__(self, *, session_id: str, redactor: LogRedactor) -> None:
        super().__init__()
        self._session_id = session_id
        self._redactor = redactor

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, JSONValue] = {
            "timestamp": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "session_id": self._session_id,
            "message": _as_text(self._redactor(record.getMessage())),
        }

        fields = {
            key: _to_json(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES and not key.startswith("_")
        }
        if fields:
            entry["fields"] = self._redactor(fields)

        if record.exc_info:
            entry["exception"] = _as_text(self._redactor(self.formatException(record.exc_info)))

        return json.dumps(entry, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


class StructuredLoggingHandle:
    """Owns the queue listener and sinks of the active logging setup."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        session_id: str,
        log_path: Path,
        queue_handler: _LossyQueueHandler,
        listener: logging.handlers.QueueListener,
        sinks: tuple[logging.Handler, ...],
    ) -> None:
        self.logger = logger
        self.session_id = session_id
        self.log_path = log_path
        self._queue_handler = queue_handler
        self._listener = listener
        self._sinks = sinks
        self._lock = threading.Lock()
        self._closed = False

    @property
    def dropped_records(self) -> int:
        return self._queue_handler.dropped

    @property
    def is_shutdown(self) -> bool:
        return self._closed

    def flush(self, *, timeout_seconds: float = 2.0) -> None:
        """Wait (bounded) for the listener to drain the queue, then flush sinks."""

        pending: queue.Queue[logging.LogRecord] = self._listener.queue  # type: ignore[assignment]
        deadline = time.monotonic() + max(timeout_seconds, 0.0)
        while pending.unfinished_tasks and time.monotonic() < deadline:
            time.sleep(0.01)
        for sink in self._sinks:
            sink.flush()

    def shutdown(self, *, timeout_seconds: float = 2.0) -> None:
        with self._lock:
            if self._closed:
                return
            self.flush(timeout_seconds=timeout_seconds)
            self._listener.stop()
            self.logger.removeHandler(self._queue_handler)
            self._queue_handler.close()
            for sink in self._sinks:
                sink.close()
            self._closed = True


def setup_logging(
    observability_config: Mapping[str, object] | None = None,
    *,
    session_id: str,
    log_dir: Path | str | None = None,
    logger_name: str = DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Start structured logging from an ``[observability]`` config section.

    ``log_dir`` overrides the section's ``log_dir``. Returns the configured
    standard-library logger; components keep using structlog.
    """

    section = observability_config or {}
    level = section.get("log_level", "INFO")
    base_dir = log_dir if log_dir is not None else section.get("log_dir", str(LOG_DIR))
    handle = setup_structured_logging(
        LoggingConfig(
            session_id=session_id,
            base_log_dir=base_dir if isinstance(base_dir, (str, Path)) else Path(LOG_DIR),
            logger_name=logger_name,
            level=level if isinstance(level, (int, str)) else "INFO",
            log_to_stdout=bool(section.get("log_to_stdout", True)),
            redactor=redact if section.get("redact_secrets", True) else passthrough,
        )
    )
    return handle.logger


def setup_structured_logging(config: LoggingConfig) -> StructuredLoggingHandle:
    """Replace any active setup with a fresh one for ``config.session_id``."""

    global _active

    _close_active()

    session_id = _require_text(config.session_id, "session_id")
    logger_name = _require_text(config.logger_name, "logger_name")
    filename = _require_text(config.log_filename, "log_filename")
    if Path(filename).name != filename:
        raise ValueError("log_filename must not include path separators")
    if config.queue_size <= 0:
        raise ValueError("queue_size must be > 0")
    level = _resolve_level(config.level)

    log_path = Path(config.base_log_dir) / session_id / filename
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = _JsonLinesFormatter(
        session_id=session_id,
        redactor=config.redactor if config.redactor is not None else redact,
    )
    sinks: list[logging.Handler] = [logging.FileHandler(log_path, encoding="utf-8")]
    if config.log_to_stdout:
        sinks.append(logging.StreamHandler(sys.stdout))
    for sink in sinks:
        sink.setLevel(level)
        sink.setFormatter(formatter)

    logger = logging.getLogger(logger_name)
    for stale in list(logger.handlers):
        logger.removeHandler(stale)
        stale.close()
    logger.setLevel(level)
    logger.propagate = False

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(maxsize=config.queue_size)
    queue_handler = _LossyQueueHandler(log_queue)
    queue_handler.setLevel(level)
    listener = logging.handlers.QueueListener(log_queue, *sinks, respect_handler_level=True)
    listener.start()
    logger.addHandler(queue_handler)

    _configure_structlog()

    handle = StructuredLoggingHandle(
        logger=logger,
        session_id=session_id,
        log_path=log_path,
        queue_handler=queue_handler,
        listener=listener,
        sinks=tuple(sinks),
    )
    with _active_lock:
        _active = handle
    _hook_atexit()
    return handle


def flush_logging(
    handle: StructuredLoggingHandle | None = None,
    *,
    timeout_seconds: float = 2.0,
) -> None:
    target = handle if handle is not None else get_active_logging_handle()
    if target is not None:
        target.flush(timeout_seconds=timeout_seconds)


def shutdown_logging(
    handle: StructuredLoggingHandle | None = None,
    *,
    timeout_seconds: float = 2.0,
) -> None:
    """Drain and close ``handle`` (default: the active one) and reset structlog."""

    global _active

    target = handle if handle is not None else get_active_logging_handle()
    if target is None:
        return
    target.shutdown(timeout_seconds=timeout_seconds)
    with _active_lock:
        if _active is target:
            _active = None
            structlog.reset_defaults()


def get_active_logging_handle() -> StructuredLoggingHandle | None:
    with _active_lock:
        return _active


def default_log_redactor(value: JSONValue) -> JSONValue:
    return redact(value)


def _configure_structlog() -> None:
    # Keyword fields travel as stdlib ``extra`` and end up under "fields".
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _close_active() -> None:
    global _active

    with _active_lock:
        previous, _active = _active, None
    if previous is not None:
        previous.shutdown()


def _hook_atexit() -> None:
    global _atexit_hooked

    if not _atexit_hooked:
        atexit.register(shutdown_logging)
        _atexit_hooked = True


def _require_text(value: object, name: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {type(value).__name__}")
    text = value.strip()
    if not text:
        raise ValueError(f"{name} must not be empty")
    return text


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        resolved = logging.getLevelNamesMapping().get(level.strip().upper())
        if resolved is not None:
            return resolved
    raise ValueError(f"unsupported logging level {level!r}")


def _utc_timestamp(epoch_seconds: float) -> str:
    moment = datetime.fromtimestamp(epoch_seconds, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_text(value: JSONValue) -> str:
    if isinstance(value, str):
        return value
    return "" if value is None else json.dumps(value, sort_keys=True, ensure_ascii=False)


def _to_json(value: object) -> JSONValue:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else repr(value)
    if isinstance(value, datetime):
        aware = value if value.tzinfo is not None else value.replace(tzinfo=UTC)
        return aware.astimezone(UTC).isoformat().replace("+00:00", "Z")
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, Mapping):
        return {str(key): _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_json(item) for item in value]
    return repr(value)


__all__ = [
    "LoggingConfig",
    "LogRedactor",
    "StructuredLoggingHandle",
    "default_log_redactor",
    "flush_logging",
    "get_active_logging_handle",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
