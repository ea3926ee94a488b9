"""
Steam CM MikroTik Sync - Address-List Reconciliation

This module drives a device's address-list to a desired address set using
enumerate -> delete-all -> insert-all. Items within a phase run concurrently
and fail independently; the delete phase always finishes before inserts start.
There is no rollback: a partially failed cycle is repaired by the next one.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Iterable, List, Optional

import httpx

from .client import MikroTikClient
from .exceptions import SyncError
from .models import AddressListEntry, ListItem, SyncConfig

logger = logging.getLogger("steam-cm-mikrotik")


@dataclass(frozen=True)
class ItemResult:
    """Outcome of a single delete or insert request."""

    operation: str
    target: str
    ok: bool
    status_code: Optional[int] = None
    detail: str = ""


@dataclass
class ReconcileReport:
    """Summary of one reconciliation cycle."""

    list_name: str
    existing: int = 0
    deletes: List[ItemResult] = field(default_factory=list)
    inserts: List[ItemResult] = field(default_factory=list)

    @property
    def deleted(self) -> int:
        return sum(1 for r in self.deletes if r.ok)

    @property
    def inserted(self) -> int:
        return sum(1 for r in self.inserts if r.ok)

    @property
    def failures(self) -> List[ItemResult]:
        return [r for r in self.deletes + self.inserts if not r.ok]


async def _attempt(operation: str, target: str, call: Awaitable) -> ItemResult:
    """Await one device call and turn its outcome into an ItemResult."""
    try:
        await call
    except SyncError as e:
        status_code = getattr(e, "status_code", None) or e.context.get("status_code")
        if status_code:
            detail = getattr(e, "response_text", None) or e.message
            logger.error(f"MikroTik error: {status_code} {detail}")
        else:
            detail = e.message
            logger.error(f"Request failed: {detail}")
        return ItemResult(operation, target, False, status_code, detail)
    except Exception as e:
        # One item must never abort its siblings in the same gather.
        logger.exception(f"Request failed: {operation} {target}: {e}")
        return ItemResult(operation, target, False, None, str(e) or type(e).__name__)
    return ItemResult(operation, target, True)


class ListReconciler:
    """Converges one named address-list on one device."""

    def __init__(self, client: MikroTikClient, list_name: str):
        self.client = client
        self.list_name = list_name

    async def _delete(self, entry: AddressListEntry) -> ItemResult:
        if not entry.id:
            logger.error(f"Request failed: entry {entry.address!r} has no .id")
            return ItemResult("delete", "", False, None, "missing .id")
        return await _attempt("delete", entry.id, self.client.delete_entry(entry.id))

    async def _insert(self, address: str) -> ItemResult:
        item = ListItem(address=address, list_name=self.list_name)
        return await _attempt("insert", address, self.client.add_entry(item))

    async def reconcile(self, desired: Iterable[str]) -> ReconcileReport:
        """Replace the list's contents on the device with ``desired``.

        Raises:
            SyncError: If the existing entries cannot be enumerated. Nothing
                is deleted or inserted in that case.
        """
        report = ReconcileReport(list_name=self.list_name)

        existing = await self.client.list_entries(self.list_name)
        report.existing = len(existing)
        logger.info(f"Found {len(existing)} existing entries in address-list '{self.list_name}'")

        report.deletes = list(await asyncio.gather(*(self._delete(entry) for entry in existing)))
        report.inserts = list(await asyncio.gather(*(self._insert(address) for address in desired)))

        logger.info(
            f"Address-list '{self.list_name}': deleted {report.deleted}/{len(report.deletes)}, "
            f"inserted {report.inserted}/{len(report.inserts)}"
        )
        return report


async def reconcile(
    device_address: str,
    user: str,
    password: str,
    list_name: str,
    desired_addresses: Iterable[str],
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ReconcileReport:
    """Reconcile ``list_name`` on ``device_address`` with a one-off client."""
    config = SyncConfig(
        device_address=device_address, username=user, password=password, list_name=list_name
    )
    async with MikroTikClient(config, transport=transport) as client:
        return await ListReconciler(client, list_name).reconcile(desired_addresses)
