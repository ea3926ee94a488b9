"""
Steam CM MikroTik Sync - RouterOS REST Client

This module provides the client used to manage a MikroTik device's firewall
address-list, plus the request/response logger shared by every HTTP call.
"""

import base64
import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from ..shared.constants import API_FIREWALL_ADDRESS_LIST, USER_AGENT
from .exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    NetworkError,
    TimeoutError as SyncTimeoutError,
)
from .models import AddressListEntry, ListItem, SyncConfig

logger = logging.getLogger("steam-cm-mikrotik")


class RequestResponseLogger:
    """Framework for logging API requests and responses with sensitive data protection."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict] = None,
        data: Optional[Dict] = None,
        operation: str = "unknown"
    ):
        """Log API request details with sensitive data sanitization.

        Args:
            method: HTTP method
            url: Request URL
            headers: Request headers
            data: Request payload
            operation: Operation name for context
        """
        safe_headers = {}
        if headers:
            for key, value in headers.items():
                if key.lower() == "authorization":
                    safe_headers[key] = "[REDACTED]"
                else:
                    safe_headers[key] = value

        log_data = {
            "operation": operation,
            "request": {
                "method": method,
                "url": url,
                "headers": safe_headers,
                "has_data": bool(data)
            }
        }

        self.logger.debug(f"API Request: {json.dumps(log_data)}")

    def log_response(
        self,
        status_code: int,
        response_size: Optional[int] = None,
        duration_ms: Optional[float] = None,
        operation: str = "unknown",
        error: Optional[Exception] = None
    ):
        """Log API response details with timing.

        Successful responses are logged at DEBUG, everything else at WARNING.
        """
        log_data = {
            "operation": operation,
            "response": {
                "status_code": status_code,
                "response_size": response_size,
                "duration_ms": duration_ms,
                "success": 200 <= status_code < 300,
                "has_error": bool(error)
            }
        }

        if error:
            log_data["error"] = str(error)

        level = logging.DEBUG if log_data["response"]["success"] else logging.WARNING
        self.logger.log(level, f"API Response: {json.dumps(log_data)}")


request_logger = RequestResponseLogger(logger)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class MikroTikClient:
    """Client for the RouterOS REST API.

    Gateways almost always run with a self-signed certificate, so this client
    never verifies TLS. It must not be used for public-internet calls.
    """

    def __init__(self, config: SyncConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize RouterOS API client.

        Args:
            config: Synchronization configuration (device, credentials, timeout)
            transport: Optional httpx transport, used by tests
        """
        self.device_address = config.device_address
        self.base_url = f"https://{self.device_address}/rest"
        self.username = config.username
        self.timeout = config.device_timeout

        # Fan-out is deliberately uncapped: one connection per pending item
        self.client = httpx.AsyncClient(
            verify=False,
            timeout=httpx.Timeout(self.timeout),
            limits=httpx.Limits(max_connections=None, max_keepalive_connections=20),
            transport=transport,
        )

        # An empty password is a valid RouterOS configuration
        auth_str = f"{config.username}:{config.password}"
        self.auth_header = base64.b64encode(auth_str.encode()).decode()

        logger.info(
            f"Initialized RouterOS client for {self.base_url} "
            f"(user: {self.username}, certificate verification: DISABLED)"
        )

    async def close(self):
        """Close the httpx client."""
        await self.client.aclose()

    async def __aenter__(self) -> "MikroTikClient":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "api_request",
        strict_json: bool = True,
    ) -> Any:
        """Make a request to the RouterOS REST API.

        Args:
            method: HTTP method (GET, PUT, DELETE, ...)
            endpoint: API endpoint (e.g., "/ip/firewall/address-list")
            data: JSON payload
            params: Query parameters
            operation: Name of operation for logging/error context
            strict_json: Raise on an undecodable 2xx body; otherwise log it
                and return None

        Returns:
            Decoded JSON body, or None for an empty body

        Raises:
            AuthenticationError: If authentication fails (401)
            AuthorizationError: If authorization fails (403)
            APIError: For other non-2xx responses, or an undecodable body
                when strict_json is set
            NetworkError: For network connection issues
            SyncTimeoutError: For request timeouts
        """
        url = f"{self.base_url}{endpoint}"
        headers = {
            "Authorization": f"Basic {self.auth_header}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

        request_logger.log_request(method, url, headers, data, operation)
        start_time = time.perf_counter()

        try:
            response = await self.client.request(
                method.upper(), url, headers=headers, json=data, params=params
            )
        except httpx.TimeoutException as e:
            request_logger.log_response(0, 0, _elapsed_ms(start_time), operation, e)
            raise SyncTimeoutError(f"Request timed out after {self.timeout}s",
                                   context={"timeout": self.timeout, "endpoint": endpoint})
        except httpx.ConnectError as e:
            request_logger.log_response(0, 0, _elapsed_ms(start_time), operation, e)
            raise NetworkError(f"Cannot connect to RouterOS at {self.device_address}",
                               context={"device": self.device_address, "endpoint": endpoint, "error": str(e)})
        except httpx.RequestError as e:
            request_logger.log_response(0, 0, _elapsed_ms(start_time), operation, e)
            raise NetworkError(f"Network error: {e}",
                               context={"endpoint": endpoint, "error": str(e)})

        response_size = len(response.content) if response.content else 0
        request_logger.log_response(response.status_code, response_size, _elapsed_ms(start_time), operation)

        if response.status_code == 401:
            raise AuthenticationError("Authentication failed - invalid RouterOS credentials",
                                      context={"status_code": 401, "endpoint": endpoint})
        elif response.status_code == 403:
            raise AuthorizationError("Access denied - RouterOS user lacks the required policy",
                                     context={"status_code": 403, "endpoint": endpoint})
        elif not response.is_success:
            raise APIError(f"API error: {response.status_code}",
                           status_code=response.status_code,
                           response_text=response.text,
                           context={"endpoint": endpoint})

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            if not strict_json:
                logger.warning(f"Ignoring undecodable {response.status_code} body for {operation}: {e}")
                return None
            raise APIError(f"Invalid JSON response from RouterOS API: {e}",
                           status_code=response.status_code,
                           response_text=response.text)

    async def list_entries(self, list_name: str) -> List[AddressListEntry]:
        """Return every address-list entry tagged with ``list_name``."""
        result = await self.request(
            "GET", API_FIREWALL_ADDRESS_LIST, params={"list": list_name}, operation="list_entries"
        )
        if not isinstance(result, list):
            raise APIError("Unexpected address-list response: expected a JSON array",
                           response_text=json.dumps(result))
        try:
            return [AddressListEntry.model_validate(entry) for entry in result]
        except PydanticValidationError as e:
            raise APIError(f"Malformed address-list entry: {e}", response_text=json.dumps(result))

    async def delete_entry(self, entry_id: str) -> None:
        """Delete a single address-list entry by its device-assigned id."""
        await self.request(
            "DELETE", f"{API_FIREWALL_ADDRESS_LIST}/{entry_id}", operation="delete_entry",
            strict_json=False,
        )

    async def add_entry(self, item: ListItem) -> Any:
        """Create a single address-list entry."""
        return await self.request(
            "PUT", API_FIREWALL_ADDRESS_LIST, data=item.to_payload(), operation="add_entry",
            strict_json=False,
        )
