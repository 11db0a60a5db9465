# lazada_erp/cli/lazada.py
"""
Command line access to the Lazada integration.

    lazada-erp auth-url
    lazada-erp exchange-code CODE
    lazada-erp auth-status
    lazada-erp sync [--sku SKU]
"""

import asyncio
import logging
import sys

import click

from lazada_erp.core.config import get_settings
from lazada_erp.core.exceptions import LazadaAPIError, LazadaAuthError, ValidationError
from lazada_erp.core.logging_config import configure_logging
from lazada_erp.core.utils import utc_now
from lazada_erp.database import async_session
from lazada_erp.services.activity_logger import ActivityLogger
from lazada_erp.services.inventory_service import InventoryService
from lazada_erp.services.lazada import (
    CredentialStore,
    LazadaAuthClient,
    LazadaClient,
    OAuthStateStore,
    Reconciler,
    SyncReport,
    TokenManager,
)

logger = logging.getLogger(__name__)


def _token_manager() -> TokenManager:
    settings = get_settings()
    return TokenManager(
        store=CredentialStore(async_session),
        auth_client=LazadaAuthClient(settings),
        refresh_margin_seconds=settings.LAZADA_TOKEN_REFRESH_MARGIN_SECONDS,
    )


def _print_report(report: SyncReport):
    for outcome in report.outcomes:
        line = f"  {outcome.status.value:<8} {outcome.sku}"
        if outcome.detail:
            line += f"  {outcome.detail}"
        click.echo(line)
    click.echo(report.message)


@click.group()
def cli():
    """Lazada inventory sync"""
    configure_logging()


@cli.command("auth-url")
def auth_url():
    """Print the Lazada consent URL"""
    # The CLI flow has no callback to check the state against
    state = OAuthStateStore().issue()
    try:
        click.echo(_token_manager().authorization_url(state))
    except ValueError as e:
        raise click.ClickException(str(e))


@cli.command("exchange-code")
@click.argument("code")
def exchange_code(code):
    """Exchange an authorization code and store the tokens"""

    async def _exchange():
        credential = await _token_manager().exchange_authorization_code(code)
        click.echo(f"Authorized. Access token valid until {credential.expires_at.isoformat()}")

    try:
        asyncio.run(_exchange())
    except (LazadaAuthError, LazadaAPIError) as e:
        raise click.ClickException(f"Authorization failed: {e}")


@cli.command("auth-status")
def auth_status():
    """Show whether a valid Lazada credential is stored"""

    async def _status():
        manager = _token_manager()
        credential = await manager.current_credential()
        if credential is None:
            click.echo("Not authorized")
            return False
        authorized = await manager.is_authorized()
        state = "valid" if authorized else "expired"
        click.echo(f"Access token {state} (expires {credential.expires_at.isoformat()})")
        return authorized

    if not asyncio.run(_status()):
        sys.exit(1)


@cli.command("sync")
@click.option("--sku", default=None, help="Sync a single item instead of every linked item")
def sync(sku):
    """Push local stock to Lazada"""

    async def _sync() -> bool:
        async with async_session() as session:
            inventory = InventoryService(session)
            reconciler = Reconciler(
                inventory, LazadaClient(_token_manager()), ActivityLogger(session)
            )

            if sku is None:
                report = await reconciler.sync_all()
                _print_report(report)
                return report.failures == 0

            item = await inventory.get_item_by_sku(sku)
            if item is None:
                raise click.ClickException(f"No inventory item with SKU {sku}")
            result = await reconciler.sync_one(item)
            if result.succeeded:
                click.echo(f"{sku} synced at {utc_now().isoformat()} (Lazada item {item.remote_id})")
            else:
                click.echo(f"{sku} failed: {result.describe()}")
            return result.succeeded

    try:
        ok = asyncio.run(_sync())
    except (ValidationError, LazadaAuthError, LazadaAPIError) as e:
        raise click.ClickException(str(e))

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
