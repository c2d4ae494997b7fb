"""Public observability primitives: structured JSON-lines logging and redaction."""

from dashboard_explorer.observability.logging import (
    LoggingConfig,
    StructuredLoggingHandle,
    default_log_redactor,
    flush_logging,
    get_active_logging_handle,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)
from dashboard_explorer.observability.redaction import LogRedactor, redact, redact_text

__all__ = [
    "LogRedactor",
    "LoggingConfig",
    "StructuredLoggingHandle",
    "default_log_redactor",
    "flush_logging",
    "get_active_logging_handle",
    "redact",
    "redact_text",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
