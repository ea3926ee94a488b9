"""
Steam CM MikroTik Sync - Show Config Command
"""

import typer

from ..core.config_loader import ConfigLoader
from ..core.exceptions import ConfigurationError


def show_config_command(
    profile: str = typer.Option("default", "--profile", "-p", help="Config file profile"),
):
    """Show the effective configuration. The password is never printed."""
    try:
        config = ConfigLoader.load(profile)
    except ConfigurationError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(1)

    mode = f"serve on {config.listen_host}:{config.listen_port}" if config.serve_mode else "push"
    typer.echo(f"Mode:            {mode}")
    typer.echo(f"Device:          {config.device_address}")
    typer.echo(f"User:            {config.username}")
    typer.echo(f"Password:        {'(set)' if config.password else '(empty)'}")
    typer.echo(f"Address-list:    {config.list_name}")
    typer.echo(f"Timeouts:        directory {config.directory_timeout}s, device {config.device_timeout}s")
    typer.echo(f"Directory CA:    {config.directory_ca_file or '(bundled)'}")
    typer.echo(f"\n📍 Config file: {ConfigLoader.DEFAULT_CONFIG_FILE}")
