"""
Steam CM MikroTik Sync - Set Password Command

Stores the RouterOS password in the OS keyring so it never has to live in an
environment variable or the config file.
"""

from typing import Optional

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError


def set_password_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Config file profile"),
    device: Optional[str] = typer.Option(None, "--device", "-d", help="RouterOS address"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="RouterOS user"),
    password: str = typer.Option(
        ..., prompt="RouterOS password", hide_input=True, confirmation_prompt=True
    ),
):
    """
    Store the device password in the keyring.

    Examples:
        steam-cm-mikrotik set-password --device 192.168.88.1 --user admin
    """
    try:
        config = ConfigLoader.load(profile, overrides={"device_address": device, "username": user})
        ConfigLoader.store_password(config.username, config.device_address, password)
    except ConfigurationError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(1)

    typer.echo(f"🔐 Password stored for {config.username}@{config.device_address}")
