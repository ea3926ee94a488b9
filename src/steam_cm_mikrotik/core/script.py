"""
Steam CM MikroTik Sync - RouterOS Script Generator

Renders an address set into a ``.rsc`` script that a RouterOS device can
``/import`` on its own. The script runs unattended, so every add is wrapped
in ``:do {...} on-error={}`` and never stops the import.
"""

from typing import Iterable, List

SCRIPT_LOG_LINE = '/log info "Import steam ipv4 cm server list..."'


def script_header(list_name: str) -> List[str]:
    """Header lines: log the import and wipe the list on the device."""
    return [
        SCRIPT_LOG_LINE,
        f"/ip firewall address-list remove [/ip firewall address-list find list={list_name}]",
        "/ip firewall address-list",
    ]


def add_directive(address: str, list_name: str) -> str:
    return f":do {{add address={address} list={list_name}}} on-error={{}}"


def generate_script(addresses: Iterable[str], list_name: str) -> str:
    """Generate the RouterOS script for ``addresses``.

    Args:
        addresses: Bare addresses, usually the output of ``normalize``
        list_name: Target address-list name

    Returns:
        Script text. An empty address set yields the header only.
    """
    header = "\n".join(script_header(list_name))
    actions = "\n".join(add_directive(address, list_name) for address in sorted(addresses))
    return f"{header}\n{actions}"
