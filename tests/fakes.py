"""In-memory stand-ins for the remote session and SFTP capabilities."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field


class RemoteFailure(Exception):
    """Error raised by a fake remote when a failure is injected."""


@dataclass
class ConcurrencyProbe:
    """Counts sessions open at the same time across every fake remote."""

    active: int = 0
    peak: int = 0

    def enter(self) -> None:
        self.active += 1
        self.peak = max(self.peak, self.active)

    def leave(self) -> None:
        self.active -= 1


@dataclass
class FakeRemote:
    """
    State of one remote account.

    ``fail_on`` maps an operation name to the exception it raises:
    connect, transfer, makedirs, chmod_dir, open, read, append, fsync, chmod_file.
    """

    dirs: set[str] = field(default_factory=set)
    files: dict[str, bytearray] = field(default_factory=dict)
    modes: dict[str, int] = field(default_factory=dict)
    fail_on: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    delay: float = 0.0
    probe: ConcurrencyProbe | None = None
    open_handles: int = 0
    sessions_closed: int = 0

    async def _op(self, name: str) -> None:
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        else:
            await asyncio.sleep(0)
        if name in self.fail_on:
            raise self.fail_on[name]

    def content(self, path: str = ".ssh/authorized_keys") -> bytes:
        return bytes(self.files.get(path, b""))


class FakeFile:
    def __init__(self, remote: FakeRemote, path: str) -> None:
        self._remote = remote
        self._path = path

    async def read_all(self) -> bytes:
        await self._remote._op("read")
        return bytes(self._remote.files[self._path])

    async def append(self, data: bytes) -> None:
        await self._remote._op("append")
        self._remote.files[self._path].extend(data)

    async def fsync(self) -> None:
        await self._remote._op("fsync")

    async def close(self) -> None:
        self._remote.calls.append("close_file")
        self._remote.open_handles -= 1


class FakeFileSystem:
    def __init__(self, remote: FakeRemote) -> None:
        self._remote = remote

    async def makedirs(self, path: str) -> None:
        await self._remote._op("makedirs")
        self._remote.dirs.add(path)

    async def chmod(self, path: str, mode: int) -> None:
        await self._remote._op("chmod_dir" if path in self._remote.dirs else "chmod_file")
        self._remote.modes[path] = mode

    async def open_append(self, path: str) -> FakeFile:
        await self._remote._op("open")
        self._remote.files.setdefault(path, bytearray())
        self._remote.open_handles += 1
        return FakeFile(self._remote, path)

    async def close(self) -> None:
        self._remote.calls.append("close_sftp")


class FakeSession:
    def __init__(self, remote: FakeRemote) -> None:
        self._remote = remote

    async def open_file_transfer(self) -> FakeFileSystem:
        await self._remote._op("transfer")
        return FakeFileSystem(self._remote)

    async def close(self) -> None:
        self._remote.calls.append("close_session")
        self._remote.sessions_closed += 1
        if self._remote.probe is not None:
            self._remote.probe.leave()


class FakeFleet:
    """
    Session factory backed by an independent FakeRemote per host.

    Remotes are created on first use; ``remotes`` can be pre-populated to
    inject state or failures for specific hosts.
    """

    def __init__(self, delay: float = 0.0) -> None:
        self.remotes: dict[str, FakeRemote] = {}
        self.probe = ConcurrencyProbe()
        self.connects: list[str] = []
        self.delay = delay

    def remote(self, host: str) -> FakeRemote:
        if host not in self.remotes:
            self.remotes[host] = FakeRemote(delay=self.delay)
        remote = self.remotes[host]
        remote.probe = self.probe
        return remote

    async def __call__(self, task) -> FakeSession:
        self.connects.append(task.host)
        remote = self.remote(task.host)
        await remote._op("connect")
        self.probe.enter()
        return FakeSession(remote)
