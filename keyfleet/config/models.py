"""
Keyfleet Config - Configuration models.

Pydantic models for type-safe run settings.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from keyfleet.config.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_PUBLIC_KEY_PATH,
    DEFAULT_USER,
)
from keyfleet.core.exceptions import ConfigurationError
from keyfleet.core.types import TaskTemplate


class RunSettings(BaseModel):
    """Settings for one distribution run."""

    hosts: list[str] = Field(min_length=1, description="Target hosts, in input order")
    username: str = Field(default=DEFAULT_USER, min_length=1, description="SSH login username")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="SSH port")
    timeout: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT, gt=0, description="Connection timeout in seconds"
    )
    concurrency: int = Field(
        default=DEFAULT_CONCURRENCY, ge=1, description="Simultaneous SSH connections"
    )
    key_path: Path = Field(
        default=Path(DEFAULT_PUBLIC_KEY_PATH), description="Public key file path"
    )
    password: str | None = Field(default=None, repr=False, description="Password value")
    password_file: Path | None = Field(default=None, description="File containing the password")

    @field_validator("hosts", mode="before")
    @classmethod
    def _split_hosts(cls, value: object) -> object:
        """Accept a comma-separated string; trim entries and drop empty ones."""
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, (list, tuple)):
            return [str(h).strip() for h in value if str(h).strip()]
        return value

    @classmethod
    def from_options(cls, **options: object) -> RunSettings:
        """
        Build settings from raw option values.

        Raises:
            ConfigurationError: If any value is missing or invalid.
        """
        try:
            return cls.model_validate(options)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid settings: {problems}") from e

    def build_template(self, public_key: str, password: str) -> TaskTemplate:
        """Freeze the shared per-host values for the scheduler."""
        return TaskTemplate(
            username=self.username,
            port=self.port,
            password=password,
            public_key=public_key,
            timeout=self.timeout,
        )
