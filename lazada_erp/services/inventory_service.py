"""
Purpose: The central service for managing InventoryItem records.

Provides the plain CRUD operations behind the /inventory routes plus the
lookups the Lazada sync services need (items linked to a listing, lookups by
sku and by remote id, and saving an item after a sync attempt).

The sync-state columns (remote_id, sync_status, ...) are never written from
CRUD payloads; only the Lazada services change them.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, exists
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lazada_erp.core.enums import SyncStatus
from lazada_erp.core.exceptions import DuplicateSkuError, InventoryItemNotFoundError, ValidationError
from lazada_erp.models.inventory import InventoryItem
from lazada_erp.schemas.inventory import InventoryItemCreate, InventoryItemUpdate

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def sku_exists(self, sku: str) -> bool:
        """Check if a SKU already exists."""
        query = select(exists().where(InventoryItem.sku == sku))
        return bool(await self.db.scalar(query))

    async def list_items(self) -> List[InventoryItem]:
        """All items, newest first"""
        result = await self.db.execute(
            select(InventoryItem).order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
        )
        return list(result.scalars().all())

    async def get_item(self, item_id: int) -> InventoryItem:
        """
        Retrieves an item by ID.

        Raises:
            InventoryItemNotFoundError: If no item has that ID
        """
        item = await self.db.get(InventoryItem, item_id)
        if not item:
            raise InventoryItemNotFoundError(f"Inventory item with ID {item_id} not found")
        return item

    async def get_item_by_sku(self, sku: str) -> Optional[InventoryItem]:
        result = await self.db.execute(select(InventoryItem).where(InventoryItem.sku == sku))
        return result.scalar_one_or_none()

    async def get_item_by_remote_id(self, remote_id: str) -> Optional[InventoryItem]:
        result = await self.db.execute(
            select(InventoryItem).where(InventoryItem.remote_id == str(remote_id))
        )
        return result.scalars().first()

    async def load_items_with_remote_id(self) -> List[InventoryItem]:
        """Items linked to a Lazada listing, in insertion order."""
        result = await self.db.execute(
            select(InventoryItem)
            .where(InventoryItem.remote_id.is_not(None))
            .where(InventoryItem.remote_id != "")
            .order_by(InventoryItem.id)
        )
        return list(result.scalars().all())

    async def create_item(self, data: InventoryItemCreate) -> InventoryItem:
        """
        Creates a local, not yet synced item.

        Raises:
            DuplicateSkuError: If the SKU is already taken
        """
        if await self.sku_exists(data.sku):
            raise DuplicateSkuError(f"SKU '{data.sku}' already exists")

        item = InventoryItem(
            **data.model_dump(),
            sync_status=SyncStatus.NOT_SYNCED.value,
            sync_errors=[],
        )
        return await self.save_item(item)

    async def update_item(self, item_id: int, data: InventoryItemUpdate) -> InventoryItem:
        item = await self.get_item(item_id)
        changes = data.model_dump(exclude_unset=True)

        new_sku = changes.pop("sku", None)
        if new_sku is not None and new_sku != item.sku:
            raise ValidationError(f"SKU of item {item_id} cannot be changed")

        quantity_changed = "quantity" in changes and changes["quantity"] != item.quantity
        for key, value in changes.items():
            setattr(item, key, value)
        if quantity_changed:
            self._mark_pending(item)

        return await self.save_item(item)

    async def update_quantity(self, item_id: int, quantity: int) -> InventoryItem:
        if quantity is None or quantity < 0:
            raise ValidationError("Quantity must be a non-negative integer")

        item = await self.get_item(item_id)
        if quantity != item.quantity:
            item.quantity = quantity
            self._mark_pending(item)
        return await self.save_item(item)

    async def delete_item(self, item_id: int) -> None:
        item = await self.get_item(item_id)
        await self.db.delete(item)
        await self.db.commit()
        logger.info(f"Deleted inventory item {item.sku}")

    async def save_item(self, item: InventoryItem) -> InventoryItem:
        """Persist an item and commit immediately."""
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateSkuError(f"SKU '{item.sku}' already exists") from e
        await self.db.refresh(item)
        return item

    @staticmethod
    def _mark_pending(item: InventoryItem) -> None:
        # A linked item whose local stock moved needs another push
        if item.is_linked:
            item.sync_status = SyncStatus.PENDING.value
