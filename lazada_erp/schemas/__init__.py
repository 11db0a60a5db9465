from .inventory import InventoryItemCreate, InventoryItemUpdate, InventoryItemRead, QuantityUpdate
from .lazada import (
    AuthStatus,
    StockUpdateRequest,
    ProductCreateRequest,
    RemoteResultRead,
    ProductCreateResponse,
    SyncOutcomeRead,
    SyncReportRead,
)
