"""
Steam CM MikroTik Sync - Run Command

Push mode or serve mode, selected by whether a listen port is configured.
"""

import asyncio
from typing import Optional

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError, SyncError
from ..dispatcher import DeliveryDispatcher
from ..shared.error_handlers import ErrorSeverity, log_error


def run_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Config file profile"),
    device: Optional[str] = typer.Option(None, "--device", "-d", help="RouterOS address"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="RouterOS user"),
    list_name: Optional[str] = typer.Option(None, "--list-name", "-l", help="Address-list name"),
    port: Optional[int] = typer.Option(
        None, "--port", help="Serve RouterOS scripts on this port instead of pushing"
    ),
):
    """
    Synchronize the address-list once, or serve scripts forever.

    Examples:
        # Push to the default gateway (192.168.88.1)
        steam-cm-mikrotik run

        # Serve scripts for /tool fetch on port 8080
        steam-cm-mikrotik run --port 8080
    """
    try:
        config = ConfigLoader.load(
            profile,
            overrides={"device_address": device, "username": user, "list_name": list_name, "listen_port": port},
        )
    except ConfigurationError as e:
        typer.echo(f"❌ {log_error('load_config', e)}", err=True)
        raise typer.Exit(1)

    operation = "serve" if config.serve_mode else "push"
    try:
        report = asyncio.run(DeliveryDispatcher(config).run())
    except SyncError as e:
        typer.echo(f"❌ {log_error(operation, e, ErrorSeverity.CRITICAL)}", err=True)
        raise typer.Exit(1)

    if report is None:
        return

    typer.echo(
        f"✅ Address-list '{report.list_name}' on {config.device_address}: "
        f"{report.deleted} removed, {report.inserted} added"
    )
    if report.failures:
        typer.echo(f"⚠️  {len(report.failures)} operations failed, see log for details")
