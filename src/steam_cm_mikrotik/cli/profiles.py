"""
Steam CM MikroTik Sync - Profile Commands

Save the effective settings as a named config file profile, and list the
profiles that exist. Passwords are never written to the file; use
set-password for those.
"""

from typing import Optional

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError


def save_profile_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Profile name to write"),
    device: Optional[str] = typer.Option(None, "--device", "-d", help="RouterOS address"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="RouterOS user"),
    list_name: Optional[str] = typer.Option(None, "--list-name", "-l", help="Address-list name"),
    port: Optional[int] = typer.Option(
        None, "--port", help="Serve RouterOS scripts on this port instead of pushing"
    ),
):
    """
    Save settings to a config file profile.

    Values not given on the command line are taken from the existing profile
    and the environment, so repeated calls only change what is passed.

    Examples:
        steam-cm-mikrotik save-profile --device 10.0.0.1 --list-name steam_cm

        steam-cm-mikrotik save-profile --profile office --port 8080
    """
    try:
        config = ConfigLoader.load(
            profile,
            overrides={"device_address": device, "username": user, "list_name": list_name, "listen_port": port},
        )
    except ConfigurationError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(1)

    try:
        ConfigLoader.save_profile(profile, config)
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Error saving profile: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✅ Profile '{profile}' saved")
    typer.echo(f"📍 Config location: {ConfigLoader.DEFAULT_CONFIG_FILE}")
    typer.echo("🔒 File permissions: 0600 (owner read/write only)")
    if not config.password:
        typer.echo(f"💡 Tip: run 'steam-cm-mikrotik set-password --profile {profile}' to store the password")


def list_profiles_command():
    """List the profiles in the config file."""
    try:
        profiles = ConfigLoader.list_profiles()
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Error listing profiles: {e}", err=True)
        raise typer.Exit(1)

    if not profiles:
        typer.echo("❌ No profiles configured yet")
        typer.echo("\n💡 Tip: Run 'steam-cm-mikrotik save-profile' to create one")
        return

    typer.echo(f"Found {len(profiles)} profile(s):\n")
    for profile in profiles:
        typer.echo(f"  • {profile}")
    typer.echo(f"\n📍 Config file: {ConfigLoader.DEFAULT_CONFIG_FILE}")
