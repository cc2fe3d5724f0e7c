"""
Keyfleet Security - Local credential material.
"""

from keyfleet.security.credentials import read_password, read_public_key

__all__ = ["read_password", "read_public_key"]
