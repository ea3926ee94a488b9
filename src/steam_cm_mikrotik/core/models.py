"""
Steam CM MikroTik Sync - Data Models

This module contains Pydantic models for configuration and for the payloads
exchanged with the Steam directory and the RouterOS REST API.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..shared.constants import (
    DEFAULT_DEVICE_ADDRESS,
    DEFAULT_LIST_NAME,
    DEFAULT_LISTEN_HOST,
    DEFAULT_PASSWORD,
    DEFAULT_USERNAME,
    DEVICE_TIMEOUT,
    DIRECTORY_TIMEOUT,
)


class SyncConfig(BaseModel):
    """Configuration for one synchronization run, built once at startup."""

    model_config = ConfigDict(validate_assignment=True)

    device_address: str = Field(default=DEFAULT_DEVICE_ADDRESS, description="RouterOS host")
    username: str = Field(default=DEFAULT_USERNAME, description="RouterOS user")
    password: str = Field(default=DEFAULT_PASSWORD, description="RouterOS password", repr=False)
    listen_port: Optional[int] = Field(
        default=None, ge=1, le=65535, description="Serve mode port, None for push mode"
    )
    list_name: str = Field(default=DEFAULT_LIST_NAME, description="Address-list name")
    listen_host: str = Field(default=DEFAULT_LISTEN_HOST, description="Serve mode bind address")
    directory_timeout: float = Field(default=DIRECTORY_TIMEOUT, gt=0)
    device_timeout: float = Field(default=DEVICE_TIMEOUT, gt=0)
    directory_ca_file: Optional[Path] = Field(
        default=None, description="Pinned CA bundle for the Steam directory"
    )

    @field_validator("device_address")
    @classmethod
    def validate_device_address(cls, v):
        """Reduce the device address to a bare host[:port]."""
        v = v.strip()
        for scheme in ("https://", "http://"):
            if v.startswith(scheme):
                v = v[len(scheme):]
        v = v.rstrip("/")
        if not v:
            raise ValueError("Device address must not be empty")
        return v

    @field_validator("list_name")
    @classmethod
    def validate_list_name(cls, v):
        """List names end up unquoted in RouterOS scripts."""
        if not v or any(ch.isspace() for ch in v):
            raise ValueError("List name must be non-empty and contain no whitespace")
        return v

    @field_validator("listen_port", mode="before")
    @classmethod
    def empty_port_means_push_mode(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def serve_mode(self) -> bool:
        return self.listen_port is not None


class ServerListPayload(BaseModel):
    """Inner ``response`` object of GetCMList."""

    serverlist: Optional[list[Any]] = None


class DirectoryResponse(BaseModel):
    """Envelope returned by ISteamDirectory/GetCMList."""

    response: Optional[ServerListPayload] = None


class AddressListEntry(BaseModel):
    """An existing /ip/firewall/address-list record on the device."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default="", alias=".id")
    address: str = ""
    list_name: str = Field(default="", alias="list")


class ListItem(BaseModel):
    """A desired address-list record to create on the device."""

    model_config = ConfigDict(populate_by_name=True)

    address: str
    list_name: str = Field(alias="list")

    def to_payload(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
