"""
Keyfleet Config - Run settings and defaults.
"""

from keyfleet.config.models import RunSettings

__all__ = ["RunSettings"]
