"""
Security utilities for Keyfleet.
"""
import re
from typing import List, Optional

REDACTED = "[REDACTED]"

_PASSWORD_FLAGS = ["password", "passwd", "pass", "pwd", "secret"]


def redact_sensitive_info(text: str, extra_secrets: Optional[List[str]] = None) -> str:
    """
    Redact sensitive information from text for logging.

    Patterns redacted:
    - Known secrets provided in extra_secrets
    - CLI flags: --password='value', --password value, --secret=value

    Args:
        text: Original text with potential sensitive data
        extra_secrets: Optional list of specific secret values to redact

    Returns:
        Text with sensitive values replaced by [REDACTED]
    """
    if not text:
        return text

    redacted = text

    # Longest first so overlapping secrets are fully removed
    if extra_secrets:
        sorted_secrets = sorted([s for s in extra_secrets if s], key=len, reverse=True)
        for secret in sorted_secrets:
            if len(secret) < 3:  # Don't redact very short strings to avoid false positives
                continue
            redacted = redacted.replace(secret, REDACTED)

    for flag in _PASSWORD_FLAGS:
        # Quoted values, closing quote must match the opening one
        redacted = re.sub(
            rf"(--{flag}[=\s]+)(['\"])(.*?)(\2)", rf"\1\2{REDACTED}\4", redacted, flags=re.IGNORECASE
        )
        redacted = re.sub(
            rf"(--{flag}[=\s]+)(?!['\"])(?!\[REDACTED\])(\S+)", rf"\1{REDACTED}", redacted,
            flags=re.IGNORECASE,
        )

    return redacted
