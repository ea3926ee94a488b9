"""
Tests for Pydantic models: configuration validation and payload parsing.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from steam_cm_mikrotik.core.models import (
    AddressListEntry,
    DirectoryResponse,
    ListItem,
    SyncConfig,
)
from steam_cm_mikrotik.shared.constants import DEVICE_TIMEOUT, DIRECTORY_TIMEOUT


class TestSyncConfig:
    """Test SyncConfig model."""

    def test_defaults(self):
        config = SyncConfig()

        assert config.device_address == "192.168.88.1"
        assert config.username == "admin"
        assert config.password == ""
        assert config.list_name == "steam_cm"
        assert config.listen_port is None
        assert config.listen_host == "0.0.0.0"
        assert config.serve_mode is False

    def test_timeouts_are_independent(self):
        config = SyncConfig()

        assert config.directory_timeout == DIRECTORY_TIMEOUT
        assert config.device_timeout == DEVICE_TIMEOUT
        assert config.device_timeout < config.directory_timeout

    def test_password_hidden_in_repr(self):
        config = SyncConfig(password="super_secret")

        assert "super_secret" not in repr(config)

    def test_listen_port_enables_serve_mode(self):
        config = SyncConfig(listen_port=8080)

        assert config.serve_mode is True

    def test_listen_port_from_string(self):
        assert SyncConfig(listen_port="8080").listen_port == 8080

    def test_empty_listen_port_means_push_mode(self):
        config = SyncConfig(listen_port="")

        assert config.listen_port is None
        assert config.serve_mode is False

    @pytest.mark.parametrize("port", [0, 70000, "abc"])
    def test_invalid_listen_port(self, port):
        with pytest.raises(ValidationError):
            SyncConfig(listen_port=port)

    def test_device_address_scheme_and_slash_stripped(self):
        config = SyncConfig(device_address="https://router.lan/")

        assert config.device_address == "router.lan"

    def test_device_address_with_port(self):
        assert SyncConfig(device_address="10.0.0.1:8443").device_address == "10.0.0.1:8443"

    def test_empty_device_address_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            SyncConfig(device_address="  ")

        assert exc_info.value.errors()[0]["loc"] == ("device_address",)

    @pytest.mark.parametrize("name", ["", "steam cm", "steam\tcm"])
    def test_invalid_list_name(self, name):
        with pytest.raises(ValidationError):
            SyncConfig(list_name=name)

    def test_validate_assignment(self):
        config = SyncConfig()

        with pytest.raises(ValidationError):
            config.list_name = "has space"

    def test_ca_file_path(self):
        assert SyncConfig(directory_ca_file="/etc/ca.pem").directory_ca_file == Path("/etc/ca.pem")

    def test_non_positive_timeout_rejected(self):
        with pytest.raises(ValidationError):
            SyncConfig(device_timeout=0)


class TestDirectoryResponse:
    """Test GetCMList envelope parsing."""

    def test_parses_serverlist(self):
        envelope = DirectoryResponse.model_validate(
            {"response": {"serverlist": ["1.2.3.4:27017"], "result": 1, "message": ""}}
        )

        assert envelope.response.serverlist == ["1.2.3.4:27017"]

    def test_missing_fields_are_none(self):
        assert DirectoryResponse.model_validate({}).response is None
        assert DirectoryResponse.model_validate({"response": {}}).response.serverlist is None


class TestAddressListEntry:
    """Test RouterOS entry parsing."""

    def test_parses_routeros_fields(self):
        entry = AddressListEntry.model_validate(
            {".id": "*1A", "address": "1.2.3.4", "list": "steam_cm", "dynamic": "false"}
        )

        assert entry.id == "*1A"
        assert entry.address == "1.2.3.4"
        assert entry.list_name == "steam_cm"

    def test_missing_id_defaults_to_empty(self):
        assert AddressListEntry.model_validate({"address": "1.2.3.4"}).id == ""


class TestListItem:
    """Test insert payloads."""

    def test_payload_uses_routeros_names(self):
        item = ListItem(address="1.2.3.4", list_name="steam_cm")

        assert item.to_payload() == {"address": "1.2.3.4", "list": "steam_cm"}

    def test_accepts_alias(self):
        assert ListItem.model_validate({"address": "1.2.3.4", "list": "x"}).list_name == "x"
