"""
Keyfleet Scheduler - Bounded-concurrency distribution over many hosts.

A fixed pool of worker tasks drains a queue of hosts. A semaphore
admission gate, sized independently of the pool, caps how many remote
installs are in flight. Every host is attempted exactly once and
produces exactly one Outcome; a failing host never stops the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

from loguru import logger

from keyfleet.core.exceptions import InstallError
from keyfleet.core.types import Outcome
from keyfleet.utils.logger import log_prefix

if TYPE_CHECKING:
    from keyfleet.core.types import TaskTemplate
    from keyfleet.installer import KeyInstaller

OutcomeCallback = Callable[[Outcome], None]


class TaskScheduler:
    """
    Runs the installer for each host with bounded parallelism.

    Args:
        installer: Installer invoked once per host.
        concurrency: Number of workers in the pool.
        max_in_flight: Admission gate size. Defaults to ``concurrency``.

    Raises:
        ValueError: If ``concurrency`` or ``max_in_flight`` is below 1.
    """

    def __init__(
        self,
        installer: KeyInstaller,
        concurrency: int,
        max_in_flight: int | None = None,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        if max_in_flight is None:
            max_in_flight = concurrency
        if max_in_flight < 1:
            raise ValueError(f"max_in_flight must be at least 1, got {max_in_flight}")

        self.installer = installer
        self.concurrency = concurrency
        self.max_in_flight = max_in_flight

    async def run(
        self,
        hosts: Sequence[str],
        template: TaskTemplate,
        on_outcome: OutcomeCallback | None = None,
    ) -> list[Outcome]:
        """
        Attempt every host and return one Outcome per host, in completion order.

        Args:
            hosts: Target hosts. Duplicates are attempted independently.
            template: Shared credentials used to build each HostTask.
            on_outcome: Called as soon as each host finishes. Errors it raises
                are logged and do not stop the run.
        """
        if not hosts:
            return []

        queue: asyncio.Queue[str] = asyncio.Queue()
        for host in hosts:
            queue.put_nowait(host)

        gate = asyncio.Semaphore(self.max_in_flight)
        outcomes: list[Outcome] = []

        logger.debug(
            f"{log_prefix('📊')} Distributing key to {len(hosts)} host(s), "
            f"{self.concurrency} worker(s), {self.max_in_flight} in flight max"
        )

        async def worker() -> None:
            while True:
                try:
                    host = queue.get_nowait()
                except asyncio.QueueEmpty:
                    return

                async with gate:
                    outcome = await self._attempt(host, template)

                outcomes.append(outcome)
                if on_outcome is not None:
                    try:
                        on_outcome(outcome)
                    except Exception:
                        logger.exception(f"{log_prefix('❌')} [{host}] Failed to report outcome")

        await asyncio.gather(*(worker() for _ in range(self.concurrency)))

        failed = sum(1 for o in outcomes if not o.success)
        logger.debug(f"{log_prefix('📊')} Done: {len(outcomes) - failed} succeeded, {failed} failed")
        return outcomes

    async def _attempt(self, host: str, template: TaskTemplate) -> Outcome:
        """Run one host's attempt; nothing raised here may reach other workers."""
        try:
            return await self.installer.attempt(template.for_host(host))
        except Exception as e:
            logger.exception(f"{log_prefix('❌')} [{host}] Unexpected error during install")
            return Outcome.failed(host, InstallError(host, f"unexpected error: {e}"))
