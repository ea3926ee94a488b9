"""
Steam CM MikroTik Sync - Constants

This module contains the endpoints, defaults and timeouts used throughout the
project. RouterOS REST endpoints are relative to ``https://{device}/rest``.
"""

from pathlib import Path

# Steam Directory
STEAM_CM_LIST_URL = "https://api.steampowered.com/ISteamDirectory/GetCMList/v1/"
STEAM_CM_LIST_PARAMS = {"format": "json", "cellid": "0"}

# Pinned CA for api.steampowered.com, shipped inside the package
CERTS_DIR = Path(__file__).resolve().parent.parent / "certs"
STEAM_CA_FILE = CERTS_DIR / "DigiCertHighAssuranceEVRootCA.crt.pem"

# RouterOS REST API
API_FIREWALL_ADDRESS_LIST = "/ip/firewall/address-list"  # /{id} for DELETE

# Timeouts (seconds). Kept separate: WAN directory vs LAN gateway.
DIRECTORY_TIMEOUT = 30.0
DEVICE_TIMEOUT = 5.0  # 5s is already very long for a LAN gateway

# Configuration defaults
DEFAULT_DEVICE_ADDRESS = "192.168.88.1"
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = ""
DEFAULT_LIST_NAME = "steam_cm"
DEFAULT_LISTEN_HOST = "0.0.0.0"

# Environment variables
ENV_DEVICE_ADDRESS = "MIKROTIK_ADDRESS"
ENV_USERNAME = "MIKROTIK_USER"
ENV_PASSWORD = "MIKROTIK_PASS"
ENV_LISTEN_PORT = "MIKROTIK_FETCH_PORT"
ENV_LIST_NAME = "MIKROTIK_ADDRESS_LIST_NAME"

# Serve mode
REQUEST_HEAD_LIMIT = 8192
REQUEST_READ_TIMEOUT = 5.0

USER_AGENT = "steam-cm-mikrotik/1.0"
