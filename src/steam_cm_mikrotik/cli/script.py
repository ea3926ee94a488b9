"""
Steam CM MikroTik Sync - Script Command
"""

import asyncio
from typing import Optional

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import SyncError
from ..dispatcher import DeliveryDispatcher
from ..shared.error_handlers import log_error


def script_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Config file profile"),
    list_name: Optional[str] = typer.Option(None, "--list-name", "-l", help="Address-list name"),
):
    """
    Fetch the CM list and print the RouterOS script. The device is not contacted.

    Examples:
        steam-cm-mikrotik script > steam_cm.rsc
    """
    try:
        config = ConfigLoader.load(profile, overrides={"list_name": list_name})
        script = asyncio.run(DeliveryDispatcher(config).render_script())
    except SyncError as e:
        typer.echo(f"❌ {log_error('render_script', e)}", err=True)
        raise typer.Exit(1)

    typer.echo(script)
