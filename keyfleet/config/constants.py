"""
Keyfleet Configuration Constants.

Centralized defaults and remote layout values.
"""

# CLI defaults
DEFAULT_USER = "root"
DEFAULT_PORT = 22
DEFAULT_CONNECT_TIMEOUT = 10.0  # seconds
DEFAULT_CONCURRENCY = 5
DEFAULT_PUBLIC_KEY_PATH = "~/.ssh/id_rsa.pub"

# Environment
PASSWORD_ENV_VAR = "KEYFLEET_PASSWORD"

# Remote layout (relative to the login directory)
SSH_DIR = ".ssh"
AUTHORIZED_KEYS_FILE = ".ssh/authorized_keys"
SSH_DIR_MODE = 0o700
AUTHORIZED_KEYS_MODE = 0o600

# Logging
LOG_ROTATION = "10 MB"
LOG_RETENTION = "7 days"
