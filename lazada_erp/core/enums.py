"""
Shared enums and constants used across the application.
"""

from enum import Enum


class SyncStatus(str, Enum):
    """Sync state of an inventory item against its Lazada listing"""
    NOT_SYNCED = "not_synced"
    PENDING = "pending"
    SYNCED = "synced"
    ERROR = "error"


class SyncOutcomeStatus(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class SignMethod(str, Enum):
    """
    Lazada signing variants. The value is the `sign_method` tag sent on the wire.
    """
    MD5 = "md5"
    HMAC_SHA256 = "sha256"


class LazadaMethod(str, Enum):
    PRODUCT_CREATE = "lazada.product.create"
    STOCK_UPDATE = "lazada.product.stock.update"
    PRODUCTS_GET = "lazada.products.get"


LAZADA_SUCCESS_CODE = "0"
