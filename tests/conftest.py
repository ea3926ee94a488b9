"""
Shared pytest configuration and fixtures for Steam CM MikroTik Sync tests.

This module provides:
- Sync configurations
- An in-memory RouterOS address-list behind httpx.MockTransport
- A mock Steam directory behind httpx.MockTransport
"""

import json
from typing import Iterable, Optional

import httpx
import pytest
import pytest_asyncio

from fixtures.mock_responses import (
    MOCK_ROUTEROS_BAD_ADDRESS,
    MOCK_ROUTEROS_NOT_FOUND,
    MOCK_ROUTEROS_UNAUTHORIZED,
    MOCK_SERVERLIST,
    cm_list_response,
)
from steam_cm_mikrotik.core.client import MikroTikClient
from steam_cm_mikrotik.core.directory import DirectoryFetcher
from steam_cm_mikrotik.core.models import SyncConfig

ADDRESS_LIST_PATH = "/rest/ip/firewall/address-list"


# ========== Configuration Fixtures ==========


@pytest.fixture
def sync_config() -> SyncConfig:
    """Provide a push-mode configuration for testing."""
    return SyncConfig(
        device_address="192.168.88.1",
        username="admin",
        password="test_password",
        list_name="steam_cm",
    )


# ========== RouterOS Mock ==========


class RouterOSMock:
    """In-memory /ip/firewall/address-list exposed through httpx.MockTransport."""

    def __init__(
        self,
        fail_deletes: Iterable[str] = (),
        fail_inserts: Iterable[str] = (),
        garbled_inserts: Iterable[str] = (),
        list_status: int = 200,
        unreachable: bool = False,
    ):
        self.entries = {}
        self.requests = []
        self.fail_deletes = set(fail_deletes)
        self.fail_inserts = set(fail_inserts)
        self.garbled_inserts = set(garbled_inserts)
        self.list_status = list_status
        self.unreachable = unreachable
        self._next_id = 1
        self.transport = httpx.MockTransport(self.handle)

    def add(self, address: str, list_name: str) -> dict:
        entry = {".id": f"*{self._next_id:X}", "address": address, "list": list_name, "dynamic": "false"}
        self._next_id += 1
        self.entries[entry[".id"]] = entry
        return entry

    def addresses(self, list_name: str) -> set:
        return {e["address"] for e in self.entries.values() if e["list"] == list_name}

    def count(self, method: str) -> int:
        return sum(1 for r in self.requests if r.method == method)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        path = request.url.path
        if request.method == "GET" and path == ADDRESS_LIST_PATH:
            if self.list_status == 401:
                return httpx.Response(401, json=MOCK_ROUTEROS_UNAUTHORIZED)
            if self.list_status != 200:
                return httpx.Response(self.list_status, json={"error": self.list_status})
            wanted = request.url.params.get("list")
            rows = [e for e in self.entries.values() if wanted is None or e["list"] == wanted]
            return httpx.Response(200, json=rows)

        if request.method == "DELETE" and path.startswith(ADDRESS_LIST_PATH + "/"):
            entry_id = path[len(ADDRESS_LIST_PATH) + 1:]
            if entry_id in self.fail_deletes or entry_id not in self.entries:
                return httpx.Response(404, json=MOCK_ROUTEROS_NOT_FOUND)
            del self.entries[entry_id]
            return httpx.Response(204)

        if request.method == "PUT" and path == ADDRESS_LIST_PATH:
            body = json.loads(request.content)
            if body["address"] in self.fail_inserts:
                return httpx.Response(400, json=MOCK_ROUTEROS_BAD_ADDRESS)
            if body["address"] in self.garbled_inserts:
                self.add(body["address"], body["list"])
                return httpx.Response(201, content=b"\x80garbage")
            return httpx.Response(201, json=self.add(body["address"], body["list"]))

        return httpx.Response(404, json=MOCK_ROUTEROS_NOT_FOUND)


@pytest.fixture
def routeros() -> RouterOSMock:
    """Provide an empty mock RouterOS device."""
    return RouterOSMock()


@pytest_asyncio.fixture
async def device_client(sync_config, routeros):
    """Provide a MikroTikClient wired to the mock device."""
    client = MikroTikClient(sync_config, transport=routeros.transport)
    yield client
    await client.close()


# ========== Steam Directory Mock ==========


class SteamDirectoryMock:
    """GetCMList endpoint exposed through httpx.MockTransport.

    ``serverlist`` may be replaced between requests to simulate churn.
    """

    def __init__(
        self,
        serverlist: Optional[list] = None,
        status_code: int = 200,
        payload: Optional[object] = None,
        raw_body: Optional[bytes] = None,
        error: Optional[type] = None,
    ):
        self.serverlist = list(MOCK_SERVERLIST if serverlist is None else serverlist)
        self.status_code = status_code
        self.payload = payload
        self.raw_body = raw_body
        self.error = error
        self.requests = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("simulated transport failure", request=request)
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        payload = self.payload if self.payload is not None else cm_list_response(self.serverlist)
        return httpx.Response(self.status_code, json=payload)


@pytest.fixture
def steam_directory() -> SteamDirectoryMock:
    """Provide a mock Steam directory publishing MOCK_SERVERLIST."""
    return SteamDirectoryMock()


@pytest_asyncio.fixture
async def directory_fetcher(steam_directory):
    """Provide a DirectoryFetcher wired to the mock directory."""
    fetcher = DirectoryFetcher(transport=steam_directory.transport)
    yield fetcher
    await fetcher.close()


# ========== Pytest Configuration ==========


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "asyncio: mark test as an asyncio test")
