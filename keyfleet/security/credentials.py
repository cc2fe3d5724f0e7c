"""
Loading of the public key and the SSH password.

Both are read once, before any host is contacted, and shared read-only
by every task of the run.
"""

from __future__ import annotations

import getpass
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from keyfleet.core.exceptions import ConfigurationError
from keyfleet.utils.logger import log_prefix


def read_public_key(path: str | Path) -> str:
    """
    Read the public key to distribute.

    Args:
        path: Key file path. A leading ``~`` is expanded.

    Returns:
        Key content with surrounding whitespace removed.

    Raises:
        ConfigurationError: If the file cannot be read or is empty.
    """
    key_path = Path(path).expanduser()
    try:
        content = key_path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Failed to read public key: {e}", {"path": str(key_path)}
        ) from e

    if not content:
        raise ConfigurationError("Failed to read public key: empty public key", {"path": str(key_path)})

    logger.debug(f"{log_prefix('🔑')} Public key loaded from {key_path.name}")
    return content


def read_password(
    password: str | None = None,
    password_file: str | Path | None = None,
    prompt: Callable[[str], str] | None = None,
) -> str:
    """
    Resolve the SSH password.

    Priority: explicit value > password file > interactive prompt.
    The prompt defaults to a hidden getpass input.

    Raises:
        ConfigurationError: If the password file cannot be read.
    """
    if password:
        return password

    if password_file:
        file_path = Path(password_file).expanduser()
        try:
            return file_path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(
                f"Failed to read password: {e}", {"path": str(file_path)}
            ) from e

    prompt = prompt or getpass.getpass
    return prompt("Enter SSH password: ").strip()
