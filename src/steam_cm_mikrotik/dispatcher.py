"""
Steam CM MikroTik Sync - Delivery Dispatcher

Chooses between push mode (reconcile the device once and exit) and serve
mode (hand out a freshly generated RouterOS script to every connection).
"""

import asyncio
import logging
from typing import Optional, Set

import httpx

from .core.client import MikroTikClient
from .core.directory import DirectoryFetcher
from .core.exceptions import ServeError, SyncError
from .core.models import SyncConfig
from .core.normalizer import normalize
from .core.reconciler import ListReconciler, ReconcileReport
from .core.script import generate_script
from .shared.constants import REQUEST_HEAD_LIMIT, REQUEST_READ_TIMEOUT
from .shared.error_handlers import ErrorSeverity, log_error

logger = logging.getLogger("steam-cm-mikrotik")


def http_response(body: str, status: str = "200 OK") -> bytes:
    """Build a minimal HTTP/1.1 response carrying only Content-Length."""
    payload = body.encode()
    head = f"HTTP/1.1 {status}\r\nContent-Length: {len(payload)}\r\n\r\n"
    return head.encode() + payload


class DeliveryDispatcher:
    """Top-level control for one configured run."""

    def __init__(
        self,
        config: SyncConfig,
        directory_transport: Optional[httpx.AsyncBaseTransport] = None,
        device_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self.directory_transport = directory_transport
        self.device_transport = device_transport
        self.fetcher: Optional[DirectoryFetcher] = None
        self._serve_lock = asyncio.Lock()

    def _new_fetcher(self) -> DirectoryFetcher:
        return DirectoryFetcher.from_config(self.config, transport=self.directory_transport)

    async def fetch_addresses(self, fetcher: DirectoryFetcher) -> Set[str]:
        """Fetch the directory and normalize it into an address set."""
        addresses = normalize(await fetcher.fetch())
        logger.info(f"Directory yielded {len(addresses)} distinct addresses")
        return addresses

    async def run(self) -> Optional[ReconcileReport]:
        """Run the mode selected by the configuration."""
        if self.config.serve_mode:
            await self.serve()
            return None
        return await self.run_push()

    # ---- push mode ----

    async def run_push(self) -> ReconcileReport:
        """Fetch, normalize and reconcile the device once.

        Raises:
            SyncError: The first hard error (directory transport failure or a
                failed enumeration on the device)
        """
        logger.info(
            f"Push mode: syncing address-list '{self.config.list_name}' "
            f"on {self.config.device_address}"
        )
        async with self._new_fetcher() as fetcher:
            addresses = await self.fetch_addresses(fetcher)

        async with MikroTikClient(self.config, transport=self.device_transport) as client:
            report = await ListReconciler(client, self.config.list_name).reconcile(addresses)

        if report.failures:
            logger.warning(
                f"{len(report.failures)} address-list operations failed; "
                "the next run will converge the list"
            )
        return report

    # ---- serve mode ----

    async def render_script(self) -> str:
        """Fetch the directory now and render the RouterOS script."""
        if self.fetcher is None:
            async with self._new_fetcher() as fetcher:
                addresses = await self.fetch_addresses(fetcher)
        else:
            addresses = await self.fetch_addresses(self.fetcher)
        return generate_script(addresses, self.config.list_name)

    async def _read_request_head(self, reader: asyncio.StreamReader) -> None:
        # The request content is irrelevant; drain the head so closing the
        # socket does not reset the connection under the client.
        try:
            await asyncio.wait_for(reader.readuntil(b"\r\n\r\n"), REQUEST_READ_TIMEOUT)
        except (asyncio.IncompleteReadError, asyncio.LimitOverrunError, asyncio.TimeoutError):
            logger.debug("Incomplete request head, answering anyway")

    async def handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Answer one connection with a freshly generated script."""
        peer = writer.get_extra_info("peername")
        async with self._serve_lock:
            try:
                await self._read_request_head(reader)
                try:
                    body = await self.render_script()
                except SyncError as e:
                    # Isolated to this connection. A recoverable directory answer
                    # (non-2xx, no serverlist) still gets a header-only script
                    # below; a hard failure gets a bodiless 503 rather than a
                    # best-effort empty script, which the device would import
                    # and so wipe its list. The server stays up either way.
                    log_error("serve_script", e, ErrorSeverity.HIGH)
                    writer.write(http_response("", status="503 Service Unavailable"))
                else:
                    writer.write(http_response(body))
                    logger.info(f"Served RouterOS script to {peer}")
                await writer.drain()
            except ConnectionError as e:
                logger.warning(f"Connection to {peer} lost while responding: {e}")
            finally:
                writer.close()
                try:
                    await writer.wait_closed()
                except ConnectionError:
                    pass

    async def start_server(self, port: Optional[int] = None) -> asyncio.AbstractServer:
        """Bind the script server.

        Args:
            port: Override for the configured listen port

        Raises:
            ServeError: If the socket cannot be bound
        """
        port = self.config.listen_port if port is None else port
        if self.fetcher is None:
            self.fetcher = self._new_fetcher()
        try:
            server = await asyncio.start_server(
                self.handle_connection,
                host=self.config.listen_host,
                port=port,
                limit=REQUEST_HEAD_LIMIT,
            )
        except OSError as e:
            await self.close()
            raise ServeError(f"Cannot listen on {self.config.listen_host}:{port}: {e}",
                             context={"host": self.config.listen_host, "port": port})

        bound = server.sockets[0].getsockname()
        logger.info(f"Config server listening on: {bound[0]}:{bound[1]}")
        return server

    async def serve(self) -> None:
        """Serve scripts until cancelled."""
        server = await self.start_server()
        try:
            async with server:
                await server.serve_forever()
        finally:
            await self.close()

    async def close(self) -> None:
        if self.fetcher is not None:
            await self.fetcher.close()
            self.fetcher = None
