"""
Centralized logging for Keyfleet.

Provides:
- Console logging on stderr (warnings by default, debug when verbose)
- Optional rotated log file
- Redaction of the run's secrets from every record

Per-host result lines are program output and do not go through the logger.
"""
from __future__ import annotations

import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from loguru import logger

from keyfleet.config.constants import LOG_RETENTION, LOG_ROTATION
from keyfleet.utils.security import REDACTED, redact_sensitive_info


def use_emoji_logs() -> bool:
    """
    Check if emoji prefixes should be used in log messages.

    Returns True unless USE_EMOJI_LOGS environment variable is set to "0" or "false".
    """
    value = os.environ.get("USE_EMOJI_LOGS", "1").lower()
    return value not in ("0", "false", "no", "off")


# Mapping of emoji prefixes to ASCII alternatives
_EMOJI_TO_ASCII = {
    "🌐": "[CONNECT]",
    "📁": "[FILE]",
    "🔑": "[KEY]",
    "✅": "[OK]",
    "❌": "[ERROR]",
    "⚠️": "[WARN]",
    "🔒": "[CLOSE]",
    "📊": "[STATS]",
}


def log_prefix(emoji: str) -> str:
    """
    Return the appropriate log prefix based on USE_EMOJI_LOGS setting.

    Args:
        emoji: The emoji to use when emoji logs are enabled.

    Returns:
        The emoji if USE_EMOJI_LOGS is enabled, otherwise the ASCII equivalent
        (or empty string if no mapping exists).
    """
    if use_emoji_logs():
        return emoji
    return _EMOJI_TO_ASCII.get(emoji, "")


def setup_logger(
    verbose: bool = False,
    log_file: str | Path | None = None,
    secrets: Iterable[str] = (),
) -> None:
    """
    Configure the logger for a run.

    Args:
        verbose: Log DEBUG+ to stderr instead of WARNING+.
        log_file: Optional file receiving DEBUG+ records, rotated by size.
        secrets: Values (e.g. the SSH password) that must never be logged.
    """
    logger.remove()

    console_format = (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
    logger.add(
        sys.stderr,
        format=console_format,
        level="DEBUG" if verbose else "WARNING",
        colorize=True,
    )

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            rotation=LOG_ROTATION,
            retention=LOG_RETENTION,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            enqueue=True,
        )

    logger.configure(patcher=make_redaction_patcher(secrets))


def make_redaction_patcher(secrets: Iterable[str] = ()):
    """Build a loguru patcher that scrubs ``secrets`` from message and extras."""
    known = [s for s in secrets if s]

    def _redact_value(value: Any) -> Any:
        if isinstance(value, str):
            return redact_sensitive_info(value, known)
        if isinstance(value, dict):
            return {k: _redact_value(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(_redact_value(item) for item in value)
        return value

    def redaction_filter(record):
        """Redact sensitive info from all logs."""
        try:
            record["message"] = redact_sensitive_info(record["message"], known)
        except Exception:
            record["message"] = REDACTED

        for key in list(record["extra"].keys()):
            try:
                record["extra"][key] = _redact_value(record["extra"][key])
            except Exception:
                record["extra"][key] = REDACTED

    return redaction_filter
