"""Logging helpers for doclock."""

import contextlib
import json
import logging
import re
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from doclock.core.config import LogConfig
from doclock.core.constants import VALID_LOG_FORMATS, VALID_LOG_LEVELS

_LOG_RECORD_RESERVED_FIELDS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime"}
_REDACTED_VALUE = "[REDACTED]"
_SENSITIVE_KEY_REGEX = r"api[_-]?key|apikey|password|passwd|secret|token|authorization"
_SENSITIVE_KEY_VALUE_PATTERN = re.compile(
    rf"""(?ix)
    (?P<key>["']?(?:{_SENSITIVE_KEY_REGEX})["']?)
    (?P<separator>\s*[:=]\s*)
    (?P<value>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|[^,\s;}}\]]+)
    """
)
_URL_CREDENTIALS_PATTERN = re.compile(r"(?P<scheme>[a-z][a-z0-9+.-]*://)(?P<userinfo>[^/@\s]+)@", re.IGNORECASE)
_SENSITIVE_FIELD_PATTERN = re.compile(rf"(?i)^(?:.*_)?(?:{_SENSITIVE_KEY_REGEX})$")


def _redact_key_value_match(match: re.Match[str]) -> str:
    value = match.group("value")
    if len(value) >= 2 and value[0] in {"'", '"'} and value[-1] == value[0]:
        redacted = f"{value[0]}{_REDACTED_VALUE}{value[0]}"
    else:
        redacted = _REDACTED_VALUE
    return f"{match.group('key')}{match.group('separator')}{redacted}"


def _redact_message(message: str) -> str:
    redacted = _SENSITIVE_KEY_VALUE_PATTERN.sub(_redact_key_value_match, message)
    return _URL_CREDENTIALS_PATTERN.sub(lambda m: f"{m.group('scheme')}{_REDACTED_VALUE}@", redacted)


def _is_sensitive_field(name: str) -> bool:
    return bool(_SENSITIVE_FIELD_PATTERN.match(name))


def _safe_record_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except Exception:
        # Keep logging resilient when message formatting fails.
        return f"{record.msg} [log-message-format-error]"


class SensitiveDataFilter(logging.Filter):
    """Best-effort redaction of API keys and passwords in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _redact_message(_safe_record_message(record))
        record.args = ()
        for key in list(record.__dict__):
            if key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_"):
                continue
            if _is_sensitive_field(key):
                record.__dict__[key] = _REDACTED_VALUE
        return True


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging output.

    Each log record is a single JSON object on one line, with any
    ``extra`` fields (resource, owner, index) merged in.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _redact_message(_safe_record_message(record)),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_"):
                continue
            log_entry.setdefault(key, _REDACTED_VALUE if _is_sensitive_field(key) else value)

        return json.dumps(log_entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges contextual fields into record extras."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra")
        merged_extra = dict(self.extra)
        if isinstance(extra, dict):
            merged_extra.update(extra)
        kwargs["extra"] = merged_extra
        return msg, kwargs


def with_log_context(
    logger: logging.Logger | logging.LoggerAdapter, **context: object
) -> logging.Logger | logging.LoggerAdapter:
    """Return a logger enriched with persistent contextual fields."""
    if not isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        # Preserve test doubles that do not satisfy the logging interfaces.
        return logger

    base_logger = logger
    existing_context: dict[str, object] = {}
    while isinstance(base_logger, logging.LoggerAdapter):
        existing_context = {**dict(getattr(base_logger, "extra", None) or {}), **existing_context}
        base_logger = base_logger.logger

    existing_context.update({k: v for k, v in context.items() if v is not None})
    return ContextLoggerAdapter(base_logger, existing_context)


def setup_logging(config: LogConfig | None = None) -> logging.Logger:
    """Setup logging to the console and, optionally, a rotating log file.

    Args:
        config: Logging configuration; defaults to INFO text output on stderr

    Returns:
        The package logger
    """
    config = config or LogConfig()

    log_level = config.level.upper()
    if log_level not in VALID_LOG_LEVELS:
        print(f"Warning: Invalid log level '{config.level}', using INFO", file=sys.stderr)
        log_level = "INFO"
    numeric_level = getattr(logging, log_level, logging.INFO)

    log_format = config.format.lower()
    if log_format not in VALID_LOG_FORMATS:
        print(f"Warning: Invalid log format '{config.format}', using text", file=sys.stderr)
        log_format = "text"

    # Clear any existing handlers from root logger
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        log_file = Path(config.file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    log_file, maxBytes=config.file_max_bytes, backupCount=config.file_backup_count, encoding="utf-8"
                )
            )
        except OSError as e:
            print(f"Warning: Cannot open log file {log_file}: {e}. Logging to console only.", file=sys.stderr)

    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        handler.addFilter(SensitiveDataFilter())
        logging.root.addHandler(handler)

    logging.root.setLevel(numeric_level)

    logger = logging.getLogger("doclock")
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logger.debug("Logging initialized at %s (%s)", log_level, log_format)

    for handler in logging.root.handlers:
        with contextlib.suppress(Exception):
            handler.flush()

    return logger
