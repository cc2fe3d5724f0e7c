"""
Keyfleet Core - Shared types and enums.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from keyfleet.core.exceptions import InstallError


class InstallStep(StrEnum):
    """Step of the install sequence, in execution order."""

    CONNECT = "connect"
    TRANSFER = "transfer"
    DIRECTORY = "directory"
    OPEN = "open"
    READ = "read"
    WRITE = "write"
    SYNC = "sync"
    PERMISSION = "permission"
    UNKNOWN = "unknown"


class InstallStatus(StrEnum):
    """Final status of one host's attempt."""

    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


@dataclass(frozen=True)
class HostTask:
    """Everything needed to install the key on one host."""

    host: str
    port: int
    username: str
    password: str = field(repr=False)
    public_key: str = field(repr=False)
    timeout: float

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class TaskTemplate:
    """
    Credentials and settings shared by every host of a run.

    Built once before scheduling starts and never mutated; each worker
    derives its HostTask from it.
    """

    username: str
    port: int
    password: str = field(repr=False)
    public_key: str = field(repr=False)
    timeout: float

    def for_host(self, host: str) -> HostTask:
        """Build the task for a single host."""
        return HostTask(
            host=host,
            port=self.port,
            username=self.username,
            password=self.password,
            public_key=self.public_key,
            timeout=self.timeout,
        )


@dataclass(frozen=True)
class Outcome:
    """Result of one host's install attempt."""

    host: str
    status: InstallStatus
    error: InstallError | None = None

    @property
    def success(self) -> bool:
        return self.status is not InstallStatus.FAILED

    @classmethod
    def failed(cls, host: str, error: InstallError) -> Outcome:
        return cls(host=host, status=InstallStatus.FAILED, error=error)

    def format_line(self) -> str:
        """Render the one-line report printed for this host."""
        if self.status is InstallStatus.INSTALLED:
            return f"[{self.host}] Public key installed successfully"
        if self.status is InstallStatus.ALREADY_PRESENT:
            return f"[{self.host}] Public key already present"
        return f"[{self.host}] ERROR: {self.error}"
