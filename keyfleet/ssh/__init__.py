"""
Keyfleet SSH - asyncssh-backed remote session and SFTP access.
"""

from keyfleet.ssh.session import AsyncSSHSession, open_ssh_session

__all__ = ["AsyncSSHSession", "open_ssh_session"]
