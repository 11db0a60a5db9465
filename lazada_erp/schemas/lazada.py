"""
Request/response schemas for the Lazada endpoints.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from lazada_erp.core.enums import SyncOutcomeStatus
from lazada_erp.schemas.base import BaseSchema
from lazada_erp.schemas.inventory import InventoryItemRead, InventoryValidationMixin


class AuthStatus(BaseSchema):
    is_authorized: bool = Field(alias="isAuthorized")


class StockUpdateRequest(BaseSchema):
    item_id: Optional[str] = Field(default=None, alias="itemId")
    quantity: Optional[int] = None

    @field_validator('item_id', mode='before')
    @classmethod
    def item_id_as_text(cls, v):
        # Lazada item ids arrive as numbers from some clients
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class ProductCreateRequest(InventoryValidationMixin):
    """All optional; required fields are checked by validate_product_fields."""
    sku: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    quantity: Optional[int] = None
    category: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    @field_validator('sku', 'name', mode='before')
    @classmethod
    def strip_text(cls, v):
        # Blank counts as missing here, reported by validate_product_fields
        if isinstance(v, str):
            return v.strip() or None
        return v


class RemoteResultRead(BaseSchema):
    succeeded: bool
    code: Optional[str] = None
    message: Optional[str] = None
    response: Any = None


class ProductCreateResponse(RemoteResultRead):
    item: Optional[InventoryItemRead] = None


class SyncOutcomeRead(BaseSchema):
    sku: str
    status: SyncOutcomeStatus
    detail: Optional[str] = None
    remote_id: Optional[str] = None
    response: Any = None


class SyncReportRead(BaseSchema):
    message: str
    successes: int
    total: int
    started_at: datetime
    finished_at: Optional[datetime] = None
    results: List[SyncOutcomeRead]
