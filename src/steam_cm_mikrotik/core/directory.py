"""
Steam CM MikroTik Sync - Steam Directory Fetcher

This module retrieves the raw connection-manager endpoint list from the Steam
directory service over a connection that trusts only the pinned CA.
"""

import logging
import ssl
import time
from pathlib import Path
from typing import List, Optional, Union

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..shared.constants import (
    DIRECTORY_TIMEOUT,
    STEAM_CA_FILE,
    STEAM_CM_LIST_PARAMS,
    STEAM_CM_LIST_URL,
    USER_AGENT,
)
from .client import request_logger
from .exceptions import (
    ConfigurationError,
    DirectoryError,
    NetworkError,
    TimeoutError as SyncTimeoutError,
)
from .models import DirectoryResponse, SyncConfig

logger = logging.getLogger("steam-cm-mikrotik")


class DirectoryFetcher:
    """Fetches ``address:port`` endpoints from ISteamDirectory/GetCMList."""

    def __init__(
        self,
        timeout: float = DIRECTORY_TIMEOUT,
        ca_file: Optional[Union[str, Path]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the directory fetcher.

        Args:
            timeout: Request timeout in seconds
            ca_file: Pinned CA bundle; defaults to the one shipped with the package
            transport: Optional httpx transport, used by tests

        Raises:
            ConfigurationError: If the CA bundle cannot be loaded
        """
        self.url = STEAM_CM_LIST_URL
        self.timeout = timeout
        self.ca_file = Path(ca_file) if ca_file else STEAM_CA_FILE

        self.client = httpx.AsyncClient(
            verify=self._create_ssl_context(self.ca_file),
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: SyncConfig, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "DirectoryFetcher":
        return cls(
            timeout=config.directory_timeout,
            ca_file=config.directory_ca_file,
            transport=transport,
        )

    @staticmethod
    def _create_ssl_context(ca_file: Path) -> ssl.SSLContext:
        """
        Create an SSL context that trusts only ``ca_file``.

        The host's default trust store is never loaded, so the directory
        issuer is trusted regardless of ambient system configuration.
        """
        try:
            context = ssl.create_default_context(cafile=str(ca_file))
        except (OSError, ssl.SSLError) as e:
            raise ConfigurationError(f"Cannot load pinned CA bundle {ca_file}: {e}",
                                     context={"ca_file": str(ca_file)})

        context.check_hostname = True
        context.verify_mode = ssl.CERT_REQUIRED
        context.minimum_version = ssl.TLSVersion.TLSv1_2
        return context

    async def close(self):
        """Close the httpx client."""
        await self.client.aclose()

    async def __aenter__(self) -> "DirectoryFetcher":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def fetch(self) -> List[str]:
        """Fetch the current CM endpoint list.

        Returns:
            Endpoints as published (``"address:port"``). An empty list when the
            directory answers with a non-success status or without
            ``response.serverlist``.

        Raises:
            NetworkError: DNS, connection or TLS failure
            SyncTimeoutError: The directory did not answer in time
            DirectoryError: The body is not valid JSON
        """
        operation = "fetch_cm_list"
        request_logger.log_request("GET", self.url, operation=operation)
        start_time = time.perf_counter()

        try:
            response = await self.client.get(self.url, params=STEAM_CM_LIST_PARAMS)
        except httpx.TimeoutException as e:
            request_logger.log_response(0, 0, None, operation, e)
            raise SyncTimeoutError(f"Steam directory timed out after {self.timeout}s",
                                   context={"timeout": self.timeout, "url": self.url})
        except httpx.RequestError as e:
            request_logger.log_response(0, 0, None, operation, e)
            raise NetworkError(f"Cannot reach Steam directory: {e}",
                               context={"url": self.url, "error": str(e)})

        duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
        request_logger.log_response(response.status_code, len(response.content), duration_ms, operation)

        if not response.is_success:
            logger.error(f"HTTP error from Steam directory: HTTP CODE {response.status_code}")
            return []

        try:
            data = response.json()
        except ValueError as e:
            raise DirectoryError(f"Steam directory returned invalid JSON: {e}",
                                 context={"url": self.url})

        try:
            envelope = DirectoryResponse.model_validate(data)
        except PydanticValidationError:
            envelope = None

        if envelope is None or envelope.response is None or envelope.response.serverlist is None:
            logger.warning("Steam directory error: missing serverlist field in response JSON")
            return []

        endpoints = [entry if isinstance(entry, str) else "" for entry in envelope.response.serverlist]
        logger.info(f"Fetched {len(endpoints)} CM endpoints from Steam directory")
        return endpoints
