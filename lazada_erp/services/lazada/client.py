import logging
import httpx

from typing import Any, Dict, Optional

from lazada_erp.core.config import get_settings
from lazada_erp.core.enums import LazadaMethod, SignMethod
from lazada_erp.core.utils import mask_params, now_ms
from .payloads import render_product_xml, validate_stock_update
from .results import RemoteResult, RemoteTransportError, from_response_body
from .signer import sign
from .token_manager import TokenManager

logger = logging.getLogger(__name__)


class LazadaClient:
    """
    Client for the Lazada seller API.

    Every call is a signed POST to the API URL with the method name and its
    fields as query parameters. Business failures (code != "0") and transport
    failures come back as RemoteResult values; only token problems
    (AuthRequired, RefreshFailed, ...) and ValidationError are raised.
    """

    def __init__(self, token_manager: TokenManager, settings=None):
        self.token_manager = token_manager
        self.settings = settings or get_settings()
        self.app_key = self.settings.LAZADA_APP_KEY
        self.app_secret = self.settings.LAZADA_APP_SECRET
        self.api_url = self.settings.LAZADA_API_URL
        self.sign_method = SignMethod(self.settings.LAZADA_SIGN_METHOD)
        self.timeout = self.settings.LAZADA_REQUEST_TIMEOUT

    def _common_params(self, method: LazadaMethod, access_token: Optional[str]) -> Dict[str, Any]:
        params = {
            "app_key": self.app_key,
            "timestamp": now_ms(),
            "sign_method": self.sign_method.value,
            "method": method.value,
        }
        if access_token:
            params["access_token"] = access_token
        return params

    def build_params(
        self,
        method: LazadaMethod,
        api_params: Dict[str, Any],
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Common params + operation fields, with the signature added last."""
        params = {**self._common_params(method, access_token), **api_params}
        params["sign"] = sign(params, self.app_secret, self.sign_method)
        return params

    async def _make_request(self, method: LazadaMethod, api_params: Dict[str, Any]) -> RemoteResult:
        """
        Make a signed request to the Lazada API

        Args:
            method: API method name
            api_params: Operation-specific fields

        Returns:
            RemoteResult for the call
        """
        # Token errors propagate to the caller untouched
        access_token = await self.token_manager.get_valid_token()
        params = self.build_params(method, api_params, access_token)

        logger.debug(f"Lazada {method.value} params={mask_params(params)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.api_url, params=params)
        except httpx.RequestError as e:
            logger.error(f"Network error calling {method.value}: {str(e)}")
            return RemoteTransportError(message=str(e))

        if response.status_code < 200 or response.status_code >= 300:
            logger.error(f"Lazada API error ({method.value}): HTTP {response.status_code} {response.text[:500]}")
            return RemoteTransportError(
                message=f"Unexpected status for {method.value}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Lazada returned a non-JSON body for {method.value}: {response.text[:500]}")
            return RemoteTransportError(
                message=f"Invalid JSON in response to {method.value}",
                status_code=response.status_code,
                body=response.text,
            )

        if not isinstance(body, dict):
            return RemoteTransportError(
                message=f"Unexpected response shape for {method.value}",
                status_code=response.status_code,
                body=response.text,
            )

        result = from_response_body(body)
        if not result.succeeded:
            logger.warning(f"Lazada {method.value} failed: {result.describe()} (request_id={body.get('request_id')})")
        return result

    async def create_product(self, item: Any) -> RemoteResult:
        """
        Create a listing for an item.

        Args:
            item: InventoryItem or any object with sku/name/price/quantity/...

        Raises:
            ValidationError: If required fields are missing (no call is made)
        """
        payload = render_product_xml(item)
        logger.info(f"Creating Lazada product for SKU {item.sku}")
        return await self._make_request(LazadaMethod.PRODUCT_CREATE, {"payload": payload})

    async def update_stock(self, remote_id: str, quantity: int) -> RemoteResult:
        """
        Set the sellable quantity of a listing.

        Raises:
            ValidationError: If remote_id or quantity is missing/invalid (no call is made)
        """
        validate_stock_update(remote_id, quantity)
        logger.info(f"Updating Lazada stock for item {remote_id} to {quantity}")
        return await self._make_request(
            LazadaMethod.STOCK_UPDATE,
            {"item_id": str(remote_id), "quantity": int(quantity)},
        )

    async def list_products(self, filter: str = "all", offset: int = 0, limit: Optional[int] = None) -> RemoteResult:
        """Fetch listings from Lazada"""
        api_params: Dict[str, Any] = {"filter": filter}
        if offset:
            api_params["offset"] = offset
        if limit:
            api_params["limit"] = limit
        return await self._make_request(LazadaMethod.PRODUCTS_GET, api_params)
