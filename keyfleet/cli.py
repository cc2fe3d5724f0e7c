#!/usr/bin/env python3
"""
Keyfleet CLI - Main entry point.

Reads the public key and password once, then installs the key on every
host given with --hosts. One line is printed per host as it finishes.
The exit code only reflects configuration errors, not per-host results.
"""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click
from loguru import logger
from rich.console import Console
from rich.markup import escape

from keyfleet import __version__
from keyfleet.config.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_PORT,
    DEFAULT_PUBLIC_KEY_PATH,
    DEFAULT_USER,
    PASSWORD_ENV_VAR,
)
from keyfleet.config.models import RunSettings
from keyfleet.core.exceptions import ConfigurationError
from keyfleet.core.types import Outcome
from keyfleet.installer import KeyInstaller
from keyfleet.scheduler import TaskScheduler
from keyfleet.security.credentials import read_password, read_public_key
from keyfleet.utils.logger import setup_logger

err_console = Console(stderr=True)


def _report(outcome: Outcome) -> None:
    click.echo(outcome.format_line())


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="keyfleet")
@click.option("--hosts", "-H", "hosts", default="",
              help='Comma-separated list of target hosts, e.g. "192.168.1.10,192.168.1.11"')
@click.option("--user", "-u", "username", default=DEFAULT_USER, show_default=True,
              help="SSH login username")
@click.option("--identity", "-i", "key_path", default=DEFAULT_PUBLIC_KEY_PATH, show_default=True,
              help="Public key file path")
@click.option("--password", envvar=PASSWORD_ENV_VAR, default=None,
              help=f"SSH password (less secure; also read from ${PASSWORD_ENV_VAR})")
@click.option("--password-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="File containing the SSH password")
@click.option("--concurrency", "-c", default=DEFAULT_CONCURRENCY, show_default=True, type=int,
              help="Number of concurrent SSH connections")
@click.option("--port", "-p", default=DEFAULT_PORT, show_default=True, type=int, help="SSH port")
@click.option("--timeout", "-t", default=DEFAULT_CONNECT_TIMEOUT, show_default=True, type=float,
              help="SSH connection timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write debug logs to this file")
def cli(
    hosts: str,
    username: str,
    key_path: str,
    password: str | None,
    password_file: Path | None,
    concurrency: int,
    port: int,
    timeout: float,
    verbose: bool,
    log_file: Path | None,
) -> None:
    """
    Install an SSH public key on many hosts using password authentication.

    Example: keyfleet -H "10.0.0.5,10.0.0.6" -u admin -i ~/.ssh/id_ed25519.pub
    """
    setup_logger(verbose=verbose, log_file=log_file, secrets=[password or ""])

    try:
        if not hosts.strip():
            raise ConfigurationError(
                'Please specify target hosts using --hosts, e.g. --hosts "192.168.1.10,192.168.1.11"'
            )
        settings = RunSettings.from_options(
            hosts=hosts,
            username=username,
            port=port,
            timeout=timeout,
            concurrency=concurrency,
            key_path=key_path,
            password=password,
            password_file=password_file,
        )
        public_key = read_public_key(settings.key_path)
        secret = read_password(settings.password, settings.password_file)
    except ConfigurationError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    # Re-install the patcher now that a prompted/file password is known
    setup_logger(verbose=verbose, log_file=log_file, secrets=[secret])

    template = settings.build_template(public_key=public_key, password=secret)
    scheduler = TaskScheduler(KeyInstaller(), concurrency=settings.concurrency)

    try:
        asyncio.run(scheduler.run(settings.hosts, template, on_outcome=_report))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
