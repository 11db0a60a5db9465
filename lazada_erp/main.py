# lazada_erp/main.py

import logging
import subprocess
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import RedirectResponse

from lazada_erp import models  # noqa: F401  registers tables on Base.metadata
from lazada_erp.core.config import get_settings
from lazada_erp.core.logging_config import configure_logging
from lazada_erp.core.security import get_current_username, require_auth
from lazada_erp.routes import health, inventory
from lazada_erp.routes.lazada import callback_router as lazada_callback_router
from lazada_erp.routes.lazada import router as lazada_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    # Run migrations on startup
    if get_settings().RUN_MIGRATIONS:
        logger.info("Running database migrations...")
        try:
            result = subprocess.run(["alembic", "upgrade", "head"], capture_output=True, text=True)
        except OSError as e:
            logger.error(f"Migration error: {e}")
        else:
            if result.returncode == 0:
                logger.info("Migrations completed successfully")
            else:
                logger.error(f"Migration failed: {result.stderr}")

    yield


app = FastAPI(
    title="Lazada ERP",
    lifespan=lifespan
)


# Add middleware to handle HTTPS behind proxy
@app.middleware("http")
async def proxy_headers_middleware(request: Request, call_next):
    # The Lazada redirect_uri must match the public https scheme
    if request.headers.get("x-forwarded-proto") == "https":
        request.scope["scheme"] = "https"
    return await call_next(request)


# Include routers with authentication
app.include_router(inventory.router, prefix="/inventory", tags=["inventory"], dependencies=[require_auth()])
app.include_router(lazada_router, dependencies=[require_auth()])
app.include_router(lazada_callback_router)  # Lazada redirects the browser here, no basic auth
app.include_router(health.router)  # Health check should be accessible without auth


@app.get("/", dependencies=[Depends(get_current_username)])
async def root():
    return RedirectResponse(url="/inventory")
