"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Logging must not change program behavior.
Never logs sensitive data (MPINs, passwords, API keys, prompt bodies);
SecretMaskingFilter is a last line for values that slip into a message.
"""

import logging
import re
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MASK = "***"
_SECRET_PATTERN = re.compile(
    r"""(?P<key>mpin|password|api[_-]?key)(?P<sep>["']?\s*[:=]\s*["']?)(?P<value>[^\s,'"}]+)""",
    re.IGNORECASE,
)


def mask_secrets(text: str) -> str:
    """Replace the value of any ``mpin=``/``password:``/``api_key=`` pair."""
    return _SECRET_PATTERN.sub(lambda m: f"{m['key']}{m['sep']}{MASK}", text)


class SecretMaskingFilter(logging.Filter):
    """Rewrites records so secret key/value pairs never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(SecretMaskingFilter())

    # The ledger client logs its own calls; per-request transport logs are noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
