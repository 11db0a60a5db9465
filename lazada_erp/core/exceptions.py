from typing import Any, Optional


class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class ValidationError(BaseServiceError):
    """Raised when required item data is missing or invalid before a remote call."""
    pass

class InventoryServiceError(BaseServiceError):
    """Base exception for inventory service errors."""
    pass

class InventoryItemNotFoundError(InventoryServiceError):
    """Raised when an inventory item is not found."""
    pass

class DuplicateSkuError(InventoryServiceError):
    """Raised when a SKU is already taken by another item."""
    pass

class PlatformServiceError(BaseServiceError):
    """Base exception for platform service errors."""
    pass

class LazadaServiceError(PlatformServiceError):
    """Base exception for Lazada-specific errors."""
    pass

class LazadaAuthError(LazadaServiceError):
    """Base exception for credential problems. The user has to (re-)authorize."""
    pass

class AuthRequired(LazadaAuthError):
    """Raised when no Lazada credential has ever been granted."""
    pass

class AuthExchangeFailed(LazadaAuthError):
    """Raised when Lazada rejects an authorization code."""

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.payload = payload

class RefreshFailed(LazadaAuthError):
    """Raised when Lazada rejects the stored refresh token."""

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.payload = payload

class LazadaAPIError(LazadaServiceError):
    """Raised when a Lazada API call fails. Keeps the marketplace payload for debugging."""

    def __init__(self, message: str, code: Optional[str] = None, payload: Optional[Any] = None):
        super().__init__(message)
        self.code = code
        self.payload = payload

class TransportError(LazadaAPIError):
    """Raised when Lazada could not be reached or answered with a non-2xx status."""
    pass

class BusinessError(LazadaAPIError):
    """Raised when Lazada answered with a code other than "0"."""
    pass
