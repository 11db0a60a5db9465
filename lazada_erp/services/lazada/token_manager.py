"""
Lazada token lifecycle.

TokenManager is the only thing that decides whether the stored access token
is still good. It refreshes on demand, writes the new credential back as a
whole, and serializes refreshes so a batch of calls that all find the token
expired trigger a single refresh between them.

State, as seen by callers:
- no credential stored            -> AuthRequired
- credential valid                -> cached access token, no network call
- credential expired              -> refresh; new token on success,
                                     RefreshFailed (stale credential kept) on rejection
"""

import asyncio
import logging
from typing import Optional

from lazada_erp.core.exceptions import AuthRequired
from lazada_erp.core.utils import utc_now
from .auth import LazadaAuthClient
from .credential_store import Credential, CredentialStore

logger = logging.getLogger(__name__)


class TokenManager:
    """
    Owns the Lazada credential. One instance per process.
    """

    def __init__(
        self,
        store: CredentialStore,
        auth_client: LazadaAuthClient,
        refresh_margin_seconds: int = 0,
    ):
        self.store = store
        self.auth_client = auth_client
        self.refresh_margin_seconds = refresh_margin_seconds
        self._refresh_lock = asyncio.Lock()

    def _is_fresh(self, credential: Credential) -> bool:
        return credential.is_valid(utc_now(), self.refresh_margin_seconds)

    async def get_valid_token(self) -> str:
        """
        Get a valid access token, refreshing if necessary

        Raises:
            AuthRequired: If no credential has ever been granted
            RefreshFailed: If Lazada rejects the stored refresh token
            TransportError: If Lazada could not be reached during a refresh
        """
        credential = await self.store.load()
        if credential is None:
            raise AuthRequired("Lazada is not authorized yet. Complete the authorization flow first.")

        if self._is_fresh(credential):
            logger.debug("Using stored Lazada access token")
            return credential.access_token

        async with self._refresh_lock:
            # Someone else may have refreshed while we waited
            credential = await self.store.load()
            if credential is None:
                raise AuthRequired("Lazada is not authorized yet. Complete the authorization flow first.")
            if self._is_fresh(credential):
                return credential.access_token

            logger.info("Lazada access token expired, refreshing...")
            token_data = await self.auth_client.refresh_token(credential.refresh_token)

            refreshed = Credential.from_token_response(
                token_data, previous_refresh_token=credential.refresh_token
            )
            await self.store.replace(refreshed)
            logger.info("Successfully refreshed Lazada access token")
            return refreshed.access_token

    async def exchange_authorization_code(self, code: str) -> Credential:
        """
        Exchange the one-time code from the OAuth callback and store the result.

        Nothing is stored unless the exchange succeeds.

        Raises:
            AuthExchangeFailed: If Lazada rejects the code
        """
        token_data = await self.auth_client.create_token(code)
        credential = Credential.from_token_response(token_data)

        async with self._refresh_lock:
            await self.store.replace(credential)

        logger.info("Lazada authorization completed")
        return credential

    async def is_authorized(self) -> bool:
        """Credential exists and has not expired"""
        credential = await self.store.load()
        return credential is not None and credential.is_valid(utc_now())

    async def current_credential(self) -> Optional[Credential]:
        return await self.store.load()

    def authorization_url(self, state: str) -> str:
        return self.auth_client.generate_authorization_url(state)
