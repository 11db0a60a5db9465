"""
Core module exports.
"""
from .enums import (
    SyncStatus,
    SyncOutcomeStatus,
    SignMethod,
    LazadaMethod,
)

from .exceptions import (
    BaseServiceError,
    ValidationError,
    InventoryServiceError,
    InventoryItemNotFoundError,
    DuplicateSkuError,
    PlatformServiceError,
    LazadaServiceError,
    LazadaAuthError,
    AuthRequired,
    AuthExchangeFailed,
    RefreshFailed,
    LazadaAPIError,
    TransportError,
    BusinessError,
)
