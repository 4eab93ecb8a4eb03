import logging
import re
import sys
from typing import TextIO

# Emojis per level
EMOJI_MAP = {
    "DEBUG": "🐞",
    "INFO": "💡",
    "WARNING": "⚠️",
    "ERROR": "🔥",
    "CRITICAL": "💀",
}

# Provider URLs and headers carry credentials; never let them reach a handler.
_SECRET_PATTERNS = (
    (re.compile(r"([?&]key=)[^&\s]+"), r"\1[REDACTED_API_KEY]"),
    (re.compile(r"(Bearer\s+)[A-Za-z0-9._\-]+"), r"\1[REDACTED]"),
    (re.compile(r"\bsk-[A-Za-z0-9_\-]{8,}"), "sk-[REDACTED]"),
)

_DEFAULT_RECORD_ATTRS = frozenset(
    logging.LogRecord(
        name="",
        level=logging.NOTSET,
        pathname="",
        lineno=0,
        msg="",
        args=(),
        exc_info=None,
    ).__dict__
) | {"message", "asctime"}


def redact_secrets(text: str) -> str:
    """Mask API keys embedded in URLs, auth headers and raw secrets."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class EmojiFormatter(logging.Formatter):
    """Formatter that adds emojis, the logger name and extra fields.

    Every formatted line goes through :func:`redact_secrets`.
    """

    def format(self, record: logging.LogRecord) -> str:
        emoji = EMOJI_MAP.get(record.levelname, "")
        log_line = (
            f"{emoji} [{record.levelname:<8}] ({record.name}) {record.getMessage()}"
        )

        extra_attrs = {
            k: v
            for k, v in record.__dict__.items()
            if k not in _DEFAULT_RECORD_ATTRS and not k.startswith("_")
        }
        if extra_attrs:
            extra_str = " ".join(f"{k}={v!r}" for k, v in extra_attrs.items())
            log_line = f"{log_line} | {extra_str}"

        if record.exc_info:
            log_line = f"{log_line}\n{self.formatException(record.exc_info)}"

        return redact_secrets(log_line)


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> None:
    """Configure root logger with emoji formatter."""
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(EmojiFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # httpx logs every request line at INFO, including query strings
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def parse_log_level(value: str | int | None, default: int = logging.INFO) -> int:
    """Map a CLI log level string ("debug", "WARNING", ...) to a logging constant."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    return getattr(logging, value.upper(), default)


def get_logger(name: str) -> logging.Logger:
    """Get a subsystem logger namespaced under ``roocode``."""
    return logging.getLogger(f"roocode.{name}")
