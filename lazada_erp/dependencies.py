from functools import lru_cache
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from lazada_erp.core.config import get_settings
from lazada_erp.database import async_session
from lazada_erp.services.activity_logger import ActivityLogger
from lazada_erp.services.inventory_service import InventoryService
from lazada_erp.services.lazada import (
    CredentialStore,
    LazadaAuthClient,
    LazadaClient,
    OAuthStateStore,
    Reconciler,
    TokenManager,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


@lru_cache()
def get_token_manager() -> TokenManager:
    """The process-wide token manager (one credential, one refresh lock)."""
    settings = get_settings()
    return TokenManager(
        store=CredentialStore(async_session),
        auth_client=LazadaAuthClient(settings),
        refresh_margin_seconds=settings.LAZADA_TOKEN_REFRESH_MARGIN_SECONDS,
    )


@lru_cache()
def get_oauth_state_store() -> OAuthStateStore:
    return OAuthStateStore(ttl_seconds=get_settings().LAZADA_OAUTH_STATE_TTL_SECONDS)


def get_lazada_client(token_manager: TokenManager = Depends(get_token_manager)) -> LazadaClient:
    return LazadaClient(token_manager)


def get_inventory_service(db: AsyncSession = Depends(get_db)) -> InventoryService:
    return InventoryService(db)


def get_reconciler(
    db: AsyncSession = Depends(get_db),
    client: LazadaClient = Depends(get_lazada_client),
) -> Reconciler:
    return Reconciler(InventoryService(db), client, ActivityLogger(db))
