"""
Schemas for the inventory CRUD endpoints.

Write schemas never carry the Lazada sync-state fields; those are owned by the
sync services and only show up on InventoryItemRead.
"""

import json
from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from lazada_erp.core.enums import SyncStatus
from lazada_erp.schemas.base import BaseSchema, TimestampedSchema


class InventoryValidationMixin(BaseSchema):
    """Shared field cleaning for create/update payloads"""

    @field_validator('sku', 'name', mode='before', check_fields=False)
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError('Value must not be blank')
        return v

    @field_validator('images', mode='before', check_fields=False)
    @classmethod
    def validate_images(cls, v):
        if v is None: return []
        if isinstance(v, list): return [str(url).strip() for url in v if str(url).strip()]
        if isinstance(v, str):
            try: return json.loads(v)
            except json.JSONDecodeError:
                if '\n' in v: return [url.strip() for url in v.split('\n') if url.strip()]
                return [v.strip()] if v.strip() else []
        raise ValueError('images must be a list of URLs')


class InventoryItemBase(InventoryValidationMixin):
    sku: str
    name: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    quantity: int = Field(default=0, ge=0)
    category: Optional[str] = None
    images: List[str] = Field(default_factory=list)


class InventoryItemCreate(InventoryItemBase):
    pass


class InventoryItemUpdate(InventoryValidationMixin):
    """All fields optional; sku may be repeated but never changed"""
    sku: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None
    images: Optional[List[str]] = None


class QuantityUpdate(BaseSchema):
    quantity: int = Field(ge=0)


class InventoryItemRead(InventoryItemBase, TimestampedSchema):
    id: int
    remote_id: Optional[str] = None
    last_synced_at: Optional[datetime] = None
    sync_status: SyncStatus = SyncStatus.NOT_SYNCED
    sync_errors: List[str] = Field(default_factory=list)

    @field_validator('sync_errors', mode='before')
    @classmethod
    def default_errors(cls, v):
        return v or []
