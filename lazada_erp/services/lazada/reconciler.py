# lazada_erp/services/lazada/reconciler.py
"""
Keeps local inventory and Lazada listings consistent.

sync_all() pushes the local quantity of every linked item to Lazada, one item
at a time. Each item's outcome is recorded on the item itself (sync_status,
last_synced_at, sync_errors) and in the SyncReport; one item failing never
stops the batch. Items already saved stay saved if the caller stops waiting
half way through.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Tuple

from lazada_erp.core.enums import SyncOutcomeStatus, SyncStatus
from lazada_erp.core.exceptions import ValidationError
from lazada_erp.core.utils import utc_now
from lazada_erp.models.inventory import InventoryItem
from lazada_erp.services.activity_logger import ActivityLogger
from lazada_erp.services.inventory_service import InventoryService
from .client import LazadaClient
from .payloads import validate_product_fields, validate_stock_update
from .results import RemoteBusinessError, RemoteResult

logger = logging.getLogger(__name__)

PLATFORM = "lazada"


@dataclass
class SyncOutcome:
    sku: str
    status: SyncOutcomeStatus
    detail: Optional[str] = None
    remote_id: Optional[str] = None
    response: Any = None


@dataclass
class SyncReport:
    """Per-run summary. Built fresh by every sync_all() call."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    outcomes: List[SyncOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def successes(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SyncOutcomeStatus.SUCCESS)

    @property
    def failures(self) -> int:
        return self.total - self.successes

    @property
    def message(self) -> str:
        return f"Synced {self.successes} of {self.total} items"

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "successes": self.successes,
            "total": self.total,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "results": [
                {
                    "sku": o.sku,
                    "status": o.status,
                    "detail": o.detail,
                    "remote_id": o.remote_id,
                    "response": o.response,
                }
                for o in self.outcomes
            ],
        }


_last_report: Optional[SyncReport] = None


def get_last_report() -> Optional[SyncReport]:
    """Most recent report produced by this process, if any"""
    return _last_report


def _remember_report(report: SyncReport) -> None:
    global _last_report
    _last_report = report


def _describe_exception(exc: Exception) -> str:
    detail = str(exc) or exc.__class__.__name__
    payload = getattr(exc, "payload", None)
    if payload:
        detail = f"{detail} | {str(payload)[:500]}"
    return detail


def _extract_item_id(result: RemoteResult) -> Optional[str]:
    data = getattr(result, "data", None)
    if isinstance(data, dict) and data.get("item_id") not in (None, ""):
        return str(data["item_id"])
    return None


class Reconciler:
    """
    Reconciles InventoryItems with their Lazada listings.
    """

    def __init__(
        self,
        inventory: InventoryService,
        client: LazadaClient,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self.inventory = inventory
        self.client = client
        self.activity_logger = activity_logger

    async def sync_all(self) -> SyncReport:
        """
        Push the local quantity of every linked item to Lazada.

        Returns:
            SyncReport with one outcome per linked item
        """
        report = SyncReport(started_at=utc_now())
        items = await self.inventory.load_items_with_remote_id()
        logger.info(f"Starting Lazada stock sync for {len(items)} linked items")

        for item in items:
            report.outcomes.append(await self._push_item(item))

        report.finished_at = utc_now()
        logger.info(f"Lazada stock sync finished: {report.message}")

        _remember_report(report)
        await self._log_batch(report)
        return report

    async def _push_item(self, item: InventoryItem) -> SyncOutcome:
        sku, remote_id = item.sku, item.remote_id
        result: Optional[RemoteResult] = None

        try:
            result = await self.client.update_stock(remote_id, item.quantity)
        except Exception as e:
            # Token and validation failures only cost this item
            logger.error(f"Stock sync failed for {sku}: {e}")
            detail = _describe_exception(e)
        else:
            detail = None if result.succeeded else result.describe()

        if result is not None and result.succeeded:
            item.mark_synced()
            await self.inventory.save_item(item)
            return SyncOutcome(
                sku=sku, status=SyncOutcomeStatus.SUCCESS, remote_id=remote_id, response=result.raw
            )

        item.mark_error(detail)
        await self.inventory.save_item(item)
        return SyncOutcome(
            sku=sku,
            status=SyncOutcomeStatus.ERROR,
            detail=detail,
            remote_id=remote_id,
            response=result.raw if result is not None else None,
        )

    async def sync_one(self, item: InventoryItem) -> RemoteResult:
        """
        Bring a single item in line with Lazada.

        Unlinked items are created on Lazada and linked to the new listing;
        linked items get a stock update. remote_id is only ever assigned here,
        and only while it is still empty.

        Raises:
            ValidationError: If the item is missing required fields
            LazadaAuthError: If no usable token is available
        """
        if item.is_linked:
            result = await self.client.update_stock(item.remote_id, item.quantity)
            await self._record(item, result)
            return result

        validate_product_fields(item)
        result = await self.client.create_product(item)

        if result.succeeded:
            new_remote_id = _extract_item_id(result)
            if new_remote_id is None:
                logger.error(f"Lazada created {item.sku} but returned no item_id: {result.raw}")
                result = RemoteBusinessError(
                    raw=result.raw, code=None, message="Lazada response did not include an item_id"
                )
            else:
                item.remote_id = new_remote_id

        await self._record(item, result)
        if result.succeeded:
            await self._log_created(item)
        return result

    async def push_stock(self, remote_id: str, quantity: int) -> Tuple[RemoteResult, Optional[InventoryItem]]:
        """
        Push a quantity for a listing id and mirror the outcome on the linked item.

        On success the local item takes the pushed quantity. Unknown listing ids
        are pushed anyway; there is just nothing local to update.
        """
        validate_stock_update(remote_id, quantity)
        result = await self.client.update_stock(remote_id, quantity)

        item = await self.inventory.get_item_by_remote_id(remote_id)
        if item is not None:
            if result.succeeded:
                item.quantity = int(quantity)
            await self._record(item, result)
        return result, item

    async def create_listing(self, data: Any) -> Tuple[RemoteResult, Optional[InventoryItem]]:
        """
        Create a Lazada listing from request data.

        The local item is only written once Lazada accepted the product. A local
        unlinked item with the same SKU is updated and linked instead of
        duplicated; if Lazada rejects the product that item only records the
        error.

        Raises:
            ValidationError: If required fields are missing or the SKU is already linked
        """
        validate_product_fields(data)
        fields = {
            "sku": data.sku,
            "name": data.name,
            "description": data.description,
            "price": float(data.price),
            "quantity": int(data.quantity),
            "category": data.category,
            "images": list(data.images or []),
        }

        existing = await self.inventory.get_item_by_sku(data.sku)
        if existing is not None and existing.is_linked:
            raise ValidationError(
                f"SKU '{data.sku}' is already linked to Lazada item {existing.remote_id}"
            )

        # Never added to the session; only carries the payload fields
        draft = InventoryItem(**fields, sync_status=SyncStatus.NOT_SYNCED.value, sync_errors=[])
        result = await self.client.create_product(draft)
        new_remote_id = _extract_item_id(result) if result.succeeded else None
        if new_remote_id is None:
            if result.succeeded:
                logger.error(f"Lazada created {data.sku} but returned no item_id: {result.raw}")
                result = RemoteBusinessError(
                    raw=result.raw, code=None, message="Lazada response did not include an item_id"
                )
            if existing is not None:
                # Stored fields stay as they were
                existing.mark_error(result.describe())
                await self.inventory.save_item(existing)
            return result, existing

        if existing is not None:
            for key, value in fields.items():
                if key != "sku":
                    setattr(existing, key, value)
            item = existing
        else:
            item = draft

        item.remote_id = new_remote_id
        item.mark_synced()
        item = await self.inventory.save_item(item)
        await self._log_created(item)
        return result, item

    async def _record(self, item: InventoryItem, result: RemoteResult) -> None:
        if result.succeeded:
            item.mark_synced()
        else:
            item.mark_error(result.describe())
        await self.inventory.save_item(item)

    async def _log_batch(self, report: SyncReport) -> None:
        if not self.activity_logger:
            return
        if report.failures == 0:
            status = "success"
        elif report.successes == 0 and report.total:
            status = "error"
        else:
            status = "partial"
        await self.activity_logger.log_sync(
            platform=PLATFORM,
            status=status,
            details={
                "total": report.total,
                "successes": report.successes,
                "errors": report.failures,
                "failed_skus": [o.sku for o in report.outcomes if o.status == SyncOutcomeStatus.ERROR],
            },
        )

    async def _log_created(self, item: InventoryItem) -> None:
        if not self.activity_logger:
            return
        await self.activity_logger.log_activity(
            action="create",
            entity_type="inventory_item",
            entity_id=item.sku,
            platform=PLATFORM,
            details={"remote_id": item.remote_id},
        )
