"""
Core Protocols - Remote capabilities the installer depends on.

The installer only talks to these interfaces; keyfleet.ssh.session
provides the asyncssh-backed implementation and tests provide fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from keyfleet.core.types import HostTask


@runtime_checkable
class RemoteFile(Protocol):
    """An open remote file positioned for append."""

    async def read_all(self) -> bytes:
        """Return the whole file content, starting at offset 0."""
        ...

    async def append(self, data: bytes) -> None:
        ...

    async def fsync(self) -> None:
        """Flush written data to the remote disk."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class RemoteFileSystem(Protocol):
    """File-transfer sub-channel opened over a session."""

    async def makedirs(self, path: str) -> None:
        """Create ``path`` recursively; an existing directory is not an error."""
        ...

    async def chmod(self, path: str, mode: int) -> None:
        ...

    async def open_append(self, path: str) -> RemoteFile:
        """Open ``path`` read-write, creating it if absent, in append mode."""
        ...

    async def close(self) -> None:
        ...


@runtime_checkable
class RemoteSession(Protocol):
    """An authenticated connection to one host."""

    async def open_file_transfer(self) -> RemoteFileSystem:
        ...

    async def close(self) -> None:
        ...


class SessionFactory(Protocol):
    """Opens an authenticated session for a task."""

    async def __call__(self, task: HostTask) -> RemoteSession:
        ...
