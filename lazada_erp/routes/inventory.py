# lazada_erp/routes/inventory.py
"""
Plain CRUD over inventory items. These records are what the Lazada
reconciler reads and writes back to.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from lazada_erp.core.exceptions import DuplicateSkuError, InventoryItemNotFoundError, ValidationError
from lazada_erp.dependencies import get_inventory_service
from lazada_erp.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemRead,
    InventoryItemUpdate,
    QuantityUpdate,
)
from lazada_erp.services.inventory_service import InventoryService

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("", response_model=List[InventoryItemRead])
async def list_items(service: InventoryService = Depends(get_inventory_service)):
    return await service.list_items()


@router.get("/{item_id}", response_model=InventoryItemRead)
async def get_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    try:
        return await service.get_item(item_id)
    except InventoryItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("", response_model=InventoryItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(data: InventoryItemCreate, service: InventoryService = Depends(get_inventory_service)):
    try:
        item = await service.create_item(data)
    except DuplicateSkuError as e:
        raise HTTPException(status_code=409, detail=str(e))
    logger.info(f"Created inventory item {item.sku}")
    return item


@router.put("/{item_id}", response_model=InventoryItemRead)
async def update_item(
    item_id: int,
    data: InventoryItemUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        return await service.update_item(item_id, data)
    except InventoryItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{item_id}")
async def delete_item(item_id: int, service: InventoryService = Depends(get_inventory_service)):
    try:
        await service.delete_item(item_id)
    except InventoryItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"message": "Inventory item deleted successfully"}


@router.patch("/{item_id}/quantity", response_model=InventoryItemRead)
async def update_quantity(
    item_id: int,
    data: QuantityUpdate,
    service: InventoryService = Depends(get_inventory_service),
):
    try:
        return await service.update_quantity(item_id, data.quantity)
    except InventoryItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
