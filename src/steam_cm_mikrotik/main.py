#!/usr/bin/env python3
"""
Steam CM MikroTik Sync - Main Entry Point

Configures logging and hands control to the CLI.
"""

import logging

from .cli import main as cli_main

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """Send all log records to stderr so script output on stdout stays clean."""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main():
    configure_logging()
    cli_main()


if __name__ == "__main__":
    main()
