"""
Keyfleet - Distribute an SSH public key to many hosts.

Installs a public key into each target account's authorized_keys file
over password-authenticated SFTP, with bounded parallelism.
"""
from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("keyfleet")
except PackageNotFoundError:
    # Package not installed, fallback to pyproject.toml
    __version__ = "0.1.0"

__author__ = "Keyfleet Contributors"
