"""
Inventory item model.

An InventoryItem is the local record of a product. Once it has been created on
Lazada it carries the listing's item id in `remote_id`, which links it for
stock reconciliation. The sync-state columns belong to the Lazada sync
services; the CRUD routes only read them.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, JSON, inspect, text
from sqlalchemy.orm import validates

from lazada_erp.core.enums import SyncStatus
from lazada_erp.core.utils import utc_now
from ..database import Base


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=text("CURRENT_TIMESTAMP"), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=text("CURRENT_TIMESTAMP"), nullable=False)

    # Core item information
    sku = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    category = Column(String)
    images = Column(JSON, default=list)

    # Lazada sync state
    remote_id = Column(String, nullable=True, index=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    sync_status = Column(String, default=SyncStatus.NOT_SYNCED.value, nullable=False, index=True)
    sync_errors = Column(JSON, default=list)

    def _current_value(self, key):
        """Value of a set-once column as last loaded or assigned"""
        state = inspect(self)
        if key in state.dict:
            return state.dict[key]
        if state.has_identity:
            # Expired by a commit or rollback; the stored value is unknown here
            raise ValueError(f"{key} of InventoryItem {state.identity} is expired, refresh it before changing")
        return None

    @validates("remote_id")
    def validate_remote_id(self, key, value):
        # Set once: a listing id never moves to a different listing
        current = self._current_value(key)
        if current and value != current:
            raise ValueError(f"remote_id of {self.sku} is already set to {current}")
        return value

    @validates("sku")
    def validate_sku(self, key, value):
        current = self._current_value(key)
        if current is not None and value != current:
            raise ValueError(f"SKU {current} cannot be changed")
        return value

    @property
    def is_linked(self) -> bool:
        return bool(self.remote_id)

    def mark_synced(self, when=None):
        self.sync_status = SyncStatus.SYNCED.value
        self.last_synced_at = when or utc_now()
        self.sync_errors = []

    def mark_error(self, detail: str):
        # Each run reports only its own failure
        self.sync_status = SyncStatus.ERROR.value
        self.sync_errors = [detail]

    def __repr__(self):
        return f"<InventoryItem(id={self.id}, sku='{self.sku}', remote_id={self.remote_id}, sync_status='{self.sync_status}')>"
