"""
Lazada OAuth endpoints.

LazadaAuthClient talks to the auth API (authorization URL, token create,
token refresh). It does not store anything; TokenManager decides what to keep.
OAuthStateStore hands out the anti-forgery state for the authorize redirect.
"""

import logging
import secrets
import time
from typing import Any, Dict, Optional, Type
from urllib.parse import urlencode

import httpx

from lazada_erp.core.config import get_settings
from lazada_erp.core.enums import LAZADA_SUCCESS_CODE, SignMethod
from lazada_erp.core.exceptions import (
    AuthExchangeFailed,
    LazadaAuthError,
    RefreshFailed,
    TransportError,
)
from lazada_erp.core.utils import mask_params, now_ms
from .signer import sign

logger = logging.getLogger(__name__)

TOKEN_CREATE_PATH = "/auth/token/create"
TOKEN_REFRESH_PATH = "/auth/token/refresh"


class LazadaAuthClient:
    """
    Client for Lazada's OAuth endpoints.
    """

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self.app_key = self.settings.LAZADA_APP_KEY
        self.app_secret = self.settings.LAZADA_APP_SECRET
        self.auth_url = self.settings.LAZADA_AUTH_URL
        self.auth_api_url = self.settings.LAZADA_AUTH_API_URL.rstrip("/")
        self.callback_url = self.settings.LAZADA_CALLBACK_URL
        self.sign_method = SignMethod(self.settings.LAZADA_AUTH_SIGN_METHOD)
        self.timeout = self.settings.LAZADA_REQUEST_TIMEOUT

    def _require_app_credentials(self):
        if not self.app_key or not self.app_secret:
            raise ValueError(
                "Missing LAZADA_APP_KEY / LAZADA_APP_SECRET. Please check your .env file."
            )

    def generate_authorization_url(self, state: str) -> str:
        """URL of Lazada's consent page for this app"""
        if not self.app_key:
            raise ValueError("Lazada App Key is not configured in environment variables")
        if not self.callback_url:
            raise ValueError("Lazada Callback URL is not configured in environment variables")

        query = urlencode({
            "client_id": self.app_key,
            "response_type": "code",
            "redirect_uri": self.callback_url,
            "state": state,
        })
        logger.info("Generated Lazada authorization URL")
        return f"{self.auth_url}?{query}"

    async def create_token(self, code: str) -> Dict[str, Any]:
        """
        Exchange a one-time authorization code for a token set.

        Raises:
            AuthExchangeFailed: If Lazada rejects the code
            TransportError: If Lazada could not be reached
        """
        return await self._token_request(TOKEN_CREATE_PATH, {"code": code}, AuthExchangeFailed)

    async def refresh_token(self, refresh_token: str) -> Dict[str, Any]:
        """
        Trade the refresh token for a new token set.

        Raises:
            RefreshFailed: If Lazada rejects the refresh token
            TransportError: If Lazada could not be reached
        """
        return await self._token_request(
            TOKEN_REFRESH_PATH, {"refresh_token": refresh_token}, RefreshFailed
        )

    def _signed_params(self, api_path: str, extra: Dict[str, Any]) -> Dict[str, Any]:
        params = {
            "app_key": self.app_key,
            "timestamp": now_ms(),
            "sign_method": self.sign_method.value,
            **extra,
        }
        params["sign"] = sign(params, self.app_secret, self.sign_method, api_path=api_path)
        return params

    async def _token_request(
        self,
        api_path: str,
        extra: Dict[str, Any],
        error_cls: Type[LazadaAuthError],
    ) -> Dict[str, Any]:
        self._require_app_credentials()
        params = self._signed_params(api_path, extra)
        url = f"{self.auth_api_url}{api_path}"
        logger.debug(f"POST {url} params={mask_params(params)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, params=params)
        except httpx.RequestError as e:
            logger.error(f"Network error calling {api_path}: {str(e)}")
            raise TransportError(f"Network error calling {api_path}: {str(e)}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code != 200 or not isinstance(data, dict):
            logger.error(f"Lazada {api_path} failed with HTTP {response.status_code}")
            raise error_cls(
                f"Lazada {api_path} failed with HTTP {response.status_code}",
                payload=data if data is not None else response.text,
            )

        code = data.get("code")
        if not data.get("access_token") or (code is not None and code != LAZADA_SUCCESS_CODE):
            message = data.get("message") or "Invalid token response"
            logger.error(f"Lazada {api_path} rejected: {code} {message}")
            raise error_cls(f"Lazada rejected {api_path}: {message}", payload=data)

        return data


class OAuthStateStore:
    """
    In-memory anti-forgery state for the authorize redirect.

    States are single use and expire after `ttl_seconds`.
    """

    def __init__(self, ttl_seconds: int = 600):
        self.ttl_seconds = ttl_seconds
        self._states: Dict[str, float] = {}

    def issue(self) -> str:
        self._purge()
        state = secrets.token_hex(16)
        self._states[state] = time.monotonic() + self.ttl_seconds
        return state

    def consume(self, state: Optional[str]) -> bool:
        """True if the state was issued here and has not expired. A state only validates once."""
        self._purge()
        if not state:
            return False
        return self._states.pop(state, None) is not None

    def _purge(self):
        now = time.monotonic()
        for state, expires in list(self._states.items()):
            if expires <= now:
                del self._states[state]
