"""
Keyfleet Installer - Idempotent authorized_keys update for one host.

Sequence: connect, start SFTP, ensure ~/.ssh, open authorized_keys for
append, read it, append the key only if absent, fsync, chmod 0600.
Each step has its own exception so a failed attempt says exactly where
it stopped. There are no retries.
"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING

from loguru import logger

from keyfleet.config.constants import (
    AUTHORIZED_KEYS_FILE,
    AUTHORIZED_KEYS_MODE,
    SSH_DIR,
    SSH_DIR_MODE,
)
from keyfleet.core.exceptions import (
    DirectoryError,
    FileOpenError,
    FileReadError,
    InstallError,
    KeyPermissionError,
    SSHConnectionError,
    SyncError,
    TransferInitError,
    WriteError,
)
from keyfleet.core.types import InstallStatus, Outcome
from keyfleet.ssh.session import open_ssh_session
from keyfleet.utils.logger import log_prefix

if TYPE_CHECKING:
    from keyfleet.core.protocols import (
        RemoteFile,
        RemoteFileSystem,
        RemoteSession,
        SessionFactory,
    )
    from keyfleet.core.types import HostTask


class KeyInstaller:
    """
    Installs a public key on a single host.

    Args:
        session_factory: Opens an authenticated session for a task.
            Defaults to the asyncssh implementation.
    """

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._open_session = session_factory or open_ssh_session

    async def attempt(self, task: HostTask) -> Outcome:
        """Run :meth:`install` and convert its result into an Outcome."""
        try:
            status = await self.install(task)
        except InstallError as e:
            logger.warning(f"{log_prefix('❌')} [{task.host}] {e.step}: {e}")
            return Outcome.failed(task.host, e)
        return Outcome(host=task.host, status=status)

    async def install(self, task: HostTask) -> InstallStatus:
        """
        Install ``task.public_key`` into the remote authorized_keys file.

        Returns:
            INSTALLED if the key was appended, ALREADY_PRESENT if the file
            already contained it.

        Raises:
            InstallError: A subclass naming the step that failed.
        """
        host = task.host

        try:
            session = await self._open_session(task)
        except Exception as e:
            raise SSHConnectionError(host, _describe(e)) from e

        async with contextlib.AsyncExitStack() as stack:
            stack.push_async_callback(_release, host, "session", session)

            try:
                sftp = await session.open_file_transfer()
            except Exception as e:
                raise TransferInitError(host, _describe(e)) from e
            stack.push_async_callback(_release, host, "sftp", sftp)

            await self._ensure_ssh_dir(host, sftp)

            try:
                handle = await sftp.open_append(AUTHORIZED_KEYS_FILE)
            except Exception as e:
                raise FileOpenError(host, _describe(e)) from e
            stack.push_async_callback(_release, host, "file", handle)

            appended = await self._append_if_missing(host, handle, task.public_key)

            try:
                await sftp.chmod(AUTHORIZED_KEYS_FILE, AUTHORIZED_KEYS_MODE)
            except Exception as e:
                raise KeyPermissionError(host, _describe(e)) from e

        if appended:
            logger.info(f"{log_prefix('✅')} [{host}] Public key appended to {AUTHORIZED_KEYS_FILE}")
            return InstallStatus.INSTALLED
        logger.info(f"{log_prefix('✅')} [{host}] Public key already present")
        return InstallStatus.ALREADY_PRESENT

    async def _ensure_ssh_dir(self, host: str, sftp: RemoteFileSystem) -> None:
        """Create ~/.ssh if needed; restricting its mode is best-effort."""
        try:
            await sftp.makedirs(SSH_DIR)
        except Exception as e:
            raise DirectoryError(host, _describe(e)) from e

        try:
            await sftp.chmod(SSH_DIR, SSH_DIR_MODE)
        except Exception as e:
            logger.warning(f"{log_prefix('⚠️')} [{host}] Could not chmod {SSH_DIR}: {_describe(e)}")

    async def _append_if_missing(self, host: str, handle: RemoteFile, public_key: str) -> bool:
        """Append the key unless the file already contains it. Returns True if written."""
        try:
            existing = await handle.read_all()
        except Exception as e:
            raise FileReadError(host, _describe(e)) from e

        if public_key.encode("utf-8") in existing:
            logger.debug(f"{log_prefix('📁')} [{host}] Key found in {AUTHORIZED_KEYS_FILE}, skipping write")
            return False

        line = (public_key + "\n").encode("utf-8")
        if existing and not existing.endswith(b"\n"):
            # Last entry lacks a terminator; keep the new key on its own line
            line = b"\n" + line

        try:
            await handle.append(line)
        except Exception as e:
            raise WriteError(host, _describe(e)) from e

        try:
            await handle.fsync()
        except Exception as e:
            raise SyncError(host, _describe(e)) from e

        return True


def _describe(error: BaseException) -> str:
    """Readable reason for an underlying library error."""
    text = str(error).strip()
    if not text:
        return type(error).__name__
    return text


async def _release(
    host: str, what: str, resource: RemoteFile | RemoteFileSystem | RemoteSession
) -> None:
    """Close a remote resource; a failure here does not change the outcome."""
    try:
        await resource.close()
    except Exception as e:
        logger.debug(f"{log_prefix('🔒')} [{host}] Error closing {what}: {_describe(e)}")
