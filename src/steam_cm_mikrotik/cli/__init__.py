"""
Steam CM MikroTik Sync - CLI Interface

Command-line entry points for pushing the CM list to a device, serving the
RouterOS script, and managing stored settings.
"""

import logging
import sys

import typer

from .password import set_password_command
from .profiles import list_profiles_command, save_profile_command
from .run import run_command
from .script import script_command
from .show import show_config_command

app = typer.Typer(
    name="steam-cm-mikrotik",
    help="Keep a MikroTik address-list in sync with the Steam CM server list",
    add_completion=False
)


@app.callback()
def configure(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")
):
    """Steam CM MikroTik Sync."""
    logging.getLogger().setLevel(log_level.upper())


app.command(name="run", help="Push the CM list to the device, or serve scripts if a port is set")(run_command)
app.command(name="script", help="Print the RouterOS import script to stdout")(script_command)
app.command(name="set-password", help="Store the device password in the OS keyring")(set_password_command)
app.command(name="show-config", help="Show the effective configuration")(show_config_command)
app.command(name="save-profile", help="Save settings to a config file profile")(save_profile_command)
app.command(name="list-profiles", help="List config file profiles")(list_profiles_command)


def main():
    """CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("\n\nStopped by user")
        sys.exit(1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(1)
