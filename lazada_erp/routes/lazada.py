# lazada_erp/routes/lazada.py
"""
Lazada routes: OAuth flow, listing creation, stock pushes and the batch sync.

`callback_router` holds the OAuth callback, which Lazada's consent page calls
directly and so cannot carry basic auth. Everything else lives on `router`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from lazada_erp.core.config import Settings, get_settings
from lazada_erp.core.exceptions import (
    AuthExchangeFailed,
    LazadaAPIError,
    LazadaAuthError,
    TransportError,
    ValidationError,
)
from lazada_erp.core.templates import templates
from lazada_erp.dependencies import (
    get_db,
    get_lazada_client,
    get_oauth_state_store,
    get_reconciler,
    get_token_manager,
)
from lazada_erp.schemas.inventory import InventoryItemRead
from lazada_erp.schemas.lazada import (
    AuthStatus,
    ProductCreateRequest,
    ProductCreateResponse,
    RemoteResultRead,
    StockUpdateRequest,
    SyncReportRead,
)
from lazada_erp.services.activity_logger import ActivityLogger
from lazada_erp.services.lazada import (
    LazadaClient,
    OAuthStateStore,
    Reconciler,
    TokenManager,
    get_last_report,
)

router = APIRouter(prefix="/lazada", tags=["lazada"])
callback_router = APIRouter(prefix="/lazada", tags=["lazada"])

logger = logging.getLogger(__name__)

AUTHORIZE_PATH = "/lazada/auth"


def _auth_http_error(e: LazadaAuthError) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={
            "message": str(e),
            "authorize_url": AUTHORIZE_PATH,
            "payload": getattr(e, "payload", None),
        },
    )


def _remote_http_error(e: LazadaAPIError) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail={"message": str(e), "code": e.code, "payload": e.payload},
    )


# OAuth

@router.get("/auth")
async def start_authorization(
    token_manager: TokenManager = Depends(get_token_manager),
    state_store: OAuthStateStore = Depends(get_oauth_state_store),
):
    """Redirect the browser to Lazada's consent page"""
    try:
        url = token_manager.authorization_url(state_store.issue())
    except ValueError as e:
        logger.error(f"Cannot start Lazada authorization: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return RedirectResponse(url)


@router.get("/auth/status", response_model=AuthStatus)
async def authorization_status(token_manager: TokenManager = Depends(get_token_manager)):
    return AuthStatus(is_authorized=await token_manager.is_authorized())


@callback_router.get("/callback")
@callback_router.get("/auth/callback")
async def authorization_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    token_manager: TokenManager = Depends(get_token_manager),
    state_store: OAuthStateStore = Depends(get_oauth_state_store),
    settings: Settings = Depends(get_settings),
):
    """
    Lazada sends the user back here with a one-time code.

    The code is exchanged for a token set which replaces whatever was stored.
    """
    if not code:
        logger.error("Authorization code not received in callback")
        raise HTTPException(status_code=400, detail="Authorization code not received")

    if not state_store.consume(state):
        logger.warning("Lazada callback with unknown or expired state")
        raise HTTPException(status_code=400, detail="Invalid state parameter")

    try:
        credential = await token_manager.exchange_authorization_code(code)
    except AuthExchangeFailed as e:
        raise _auth_http_error(e)
    except TransportError as e:
        raise _remote_http_error(e)

    await ActivityLogger(db).log_activity(
        action="auth",
        entity_type="credential",
        entity_id="lazada",
        platform="lazada",
        details={"expires_at": credential.expires_at.isoformat()},
    )

    if settings.LAZADA_POST_AUTH_REDIRECT:
        return RedirectResponse(f"{settings.LAZADA_POST_AUTH_REDIRECT}?auth=success", status_code=302)

    return templates.TemplateResponse(
        request,
        "lazada/auth_complete.html",
        {"expires_at": credential.expires_at},
    )


# Listings and stock

@router.get("/products")
async def list_products(
    filter: str = Query("all"),
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    client: LazadaClient = Depends(get_lazada_client),
):
    try:
        result = await client.list_products(filter=filter, offset=offset, limit=limit)
        result.raise_for_failure()
    except LazadaAuthError as e:
        raise _auth_http_error(e)
    except LazadaAPIError as e:
        raise _remote_http_error(e)
    return result.raw


@router.post("/inventory/update", response_model=RemoteResultRead)
async def update_inventory(
    data: StockUpdateRequest,
    reconciler: Reconciler = Depends(get_reconciler),
):
    """Push a quantity for one Lazada listing"""
    try:
        result, _ = await reconciler.push_stock(data.item_id, data.quantity)
        result.raise_for_failure()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LazadaAuthError as e:
        raise _auth_http_error(e)
    except LazadaAPIError as e:
        raise _remote_http_error(e)

    return RemoteResultRead(
        succeeded=result.succeeded, code=result.code, message=result.message, response=result.raw
    )


@router.post("/product/create", response_model=ProductCreateResponse)
async def create_product(
    data: ProductCreateRequest,
    reconciler: Reconciler = Depends(get_reconciler),
):
    """Create a Lazada listing and the local item that tracks it"""
    try:
        result, item = await reconciler.create_listing(data)
        result.raise_for_failure()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except LazadaAuthError as e:
        raise _auth_http_error(e)
    except LazadaAPIError as e:
        raise _remote_http_error(e)

    logger.info(f"Created Lazada listing {item.remote_id} for {item.sku}")
    return ProductCreateResponse(
        succeeded=True,
        code=result.code,
        message=result.message,
        response=result.raw,
        item=InventoryItemRead.model_validate(item),
    )


# Batch sync

@router.post("/inventory/sync", response_model=SyncReportRead)
async def sync_inventory(reconciler: Reconciler = Depends(get_reconciler)):
    """Push the local quantity of every linked item to Lazada"""
    report = await reconciler.sync_all()
    return report.to_dict()


@router.get("/inventory/sync/last", response_model=SyncReportRead)
async def last_sync_report():
    report = get_last_report()
    if report is None:
        raise HTTPException(status_code=404, detail="No sync has run since startup")
    return report.to_dict()
