"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from keyfleet.core.types import HostTask, TaskTemplate
from keyfleet.installer import KeyInstaller

from tests.fakes import FakeFleet, FakeRemote

PUBLIC_KEY = "ssh-ed25519 AAAAC3NzaC1lZDI1NTE5AAAAIGtestkeymaterial user@workstation"


@pytest.fixture
def template() -> TaskTemplate:
    """Shared credentials for a run."""
    return TaskTemplate(
        username="root",
        port=22,
        password="s3cret-pass",
        public_key=PUBLIC_KEY,
        timeout=5.0,
    )


@pytest.fixture
def task(template: TaskTemplate) -> HostTask:
    return template.for_host("10.0.0.1")


@pytest.fixture
def fleet() -> FakeFleet:
    return FakeFleet()


@pytest.fixture
def remote(fleet: FakeFleet, task: HostTask) -> FakeRemote:
    """The fake remote account behind ``task``."""
    return fleet.remote(task.host)


@pytest.fixture
def installer(fleet: FakeFleet) -> KeyInstaller:
    return KeyInstaller(session_factory=fleet)
