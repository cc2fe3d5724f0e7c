"""
Core Exceptions - Unified error hierarchy for Keyfleet.

Configuration errors abort the whole run. Install errors are per-host:
each one names the step where the host's attempt stopped.
"""

from __future__ import annotations

from keyfleet.core.types import InstallStep


class KeyfleetError(Exception):
    """Base exception for all Keyfleet errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(KeyfleetError):
    """Missing or invalid input detected before any remote work starts."""
    pass


# =============================================================================
# Install Errors (per host)
# =============================================================================

class InstallError(KeyfleetError):
    """A single host's key installation failed."""

    step: InstallStep = InstallStep.UNKNOWN
    summary: str = "installation failed"

    def __init__(self, host: str, reason: str):
        super().__init__(f"{self.summary}: {reason}")
        self.host = host
        self.reason = reason

    def __str__(self) -> str:
        return self.message


class SSHConnectionError(InstallError):
    """Connecting or authenticating to the host failed."""

    step = InstallStep.CONNECT
    summary = "connection failed"


class TransferInitError(InstallError):
    """The SFTP subsystem could not be started."""

    step = InstallStep.TRANSFER
    summary = "failed to create SFTP client"


class DirectoryError(InstallError):
    """The remote .ssh directory could not be created."""

    step = InstallStep.DIRECTORY
    summary = "failed to create .ssh directory"


class FileOpenError(InstallError):
    """The authorized_keys file could not be opened or created."""

    step = InstallStep.OPEN
    summary = "failed to open .ssh/authorized_keys"


class FileReadError(InstallError):
    """Existing authorized_keys content could not be read."""

    step = InstallStep.READ
    summary = "failed to read .ssh/authorized_keys"


class WriteError(InstallError):
    """Appending the public key failed."""

    step = InstallStep.WRITE
    summary = "failed to append public key"


class SyncError(InstallError):
    """The remote side could not confirm the write reached disk."""

    step = InstallStep.SYNC
    summary = "failed to write public key to remote disk"


class KeyPermissionError(InstallError):
    """Restricting authorized_keys to owner read/write failed."""

    step = InstallStep.PERMISSION
    summary = "failed to set file permission"
