"""
Keyfleet SSH - Password-authenticated sessions over asyncssh.

Host keys are NOT verified (known_hosts=None): the tool is meant for
bootstrapping key access to freshly provisioned machines and accepts
that trust gap. Public key authentication is disabled so only the
supplied password is tried.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import asyncssh
from loguru import logger

from keyfleet.utils.logger import log_prefix

if TYPE_CHECKING:
    from keyfleet.core.types import HostTask


class AsyncSSHFile:
    """SFTP file handle opened for append."""

    def __init__(self, handle: asyncssh.SFTPClientFile) -> None:
        self._handle = handle

    async def read_all(self) -> bytes:
        # Append handles have no read position; read explicitly from the start.
        return await self._handle.read(-1, 0)

    async def append(self, data: bytes) -> None:
        await self._handle.write(data)

    async def fsync(self) -> None:
        await self._handle.fsync()

    async def close(self) -> None:
        await self._handle.close()


class AsyncSSHFileSystem:
    """SFTP client wrapper exposing the operations the installer needs."""

    def __init__(self, sftp: asyncssh.SFTPClient) -> None:
        self._sftp = sftp

    async def makedirs(self, path: str) -> None:
        await self._sftp.makedirs(path, exist_ok=True)

    async def chmod(self, path: str, mode: int) -> None:
        await self._sftp.chmod(path, mode)

    async def open_append(self, path: str) -> AsyncSSHFile:
        handle = await self._sftp.open(path, "a+", encoding=None)
        return AsyncSSHFile(handle)

    async def close(self) -> None:
        self._sftp.exit()
        await self._sftp.wait_closed()


class AsyncSSHSession:
    """An established SSH connection to one host."""

    def __init__(self, conn: asyncssh.SSHClientConnection, address: str) -> None:
        self._conn = conn
        self.address = address

    async def open_file_transfer(self) -> AsyncSSHFileSystem:
        sftp = await self._conn.start_sftp_client()
        return AsyncSSHFileSystem(sftp)

    async def close(self) -> None:
        self._conn.close()
        await self._conn.wait_closed()
        logger.debug(f"{log_prefix('🔒')} SSH connection to {self.address} closed")


async def open_ssh_session(task: HostTask) -> AsyncSSHSession:
    """
    Connect and authenticate with the task's username and password.

    The whole handshake, authentication included, is bounded by
    ``task.timeout``.

    Raises:
        asyncio.TimeoutError: If the connection does not complete in time.
        asyncssh.Error: If the handshake or authentication fails.
        OSError: If the host is unreachable.
    """
    logger.debug(f"{log_prefix('🌐')} Connecting to {task.address} as {task.username}")

    conn = await asyncio.wait_for(
        asyncssh.connect(
            task.host,
            port=task.port,
            username=task.username,
            password=task.password,
            known_hosts=None,
            client_keys=None,
            preferred_auth="password,keyboard-interactive",
            connect_timeout=task.timeout,
        ),
        timeout=task.timeout,
    )
    return AsyncSSHSession(conn, task.address)
