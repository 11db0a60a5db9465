"""
Durable storage for the single Lazada credential.

The credential lives in the app_settings key/value table as three keys. They
are always written together in one transaction, so a reader sees either the
previous triple or the new one, never a mix.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lazada_erp.core.utils import ensure_aware, from_epoch_ms, to_epoch_ms, utc_now
from lazada_erp.models.app_setting import AppSetting

logger = logging.getLogger(__name__)

TOKEN_KEYS = {
    "access_token": ("lazada_access_token", "Lazada API access token"),
    "refresh_token": ("lazada_refresh_token", "Lazada API refresh token"),
    "expires_at": ("lazada_token_expiry", "Lazada API token expiry timestamp (epoch ms)"),
}


@dataclass(frozen=True)
class Credential:
    access_token: str
    refresh_token: str
    expires_at: datetime

    @classmethod
    def from_token_response(cls, data: dict, previous_refresh_token: Optional[str] = None) -> "Credential":
        """Build from a /auth/token/* response; expires_in is in seconds."""
        expires_in = int(data.get("expires_in") or 0)
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token") or previous_refresh_token or "",
            expires_at=utc_now() + timedelta(seconds=expires_in),
        )

    def is_valid(self, now: Optional[datetime] = None, margin_seconds: int = 0) -> bool:
        now = now or utc_now()
        return now + timedelta(seconds=margin_seconds) < ensure_aware(self.expires_at)

    def __repr__(self):
        # Tokens stay out of logs and tracebacks
        return f"Credential(expires_at={self.expires_at.isoformat()})"


class CredentialStore:
    """
    Load/replace access to the stored credential.

    Takes a session factory rather than a session so a single store can be
    shared by the whole process.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def load(self) -> Optional[Credential]:
        keys = [key for key, _ in TOKEN_KEYS.values()]
        async with self.session_factory() as session:
            result = await session.execute(select(AppSetting).where(AppSetting.key.in_(keys)))
            values = {row.key: row.value for row in result.scalars().all()}

        access_token = values.get(TOKEN_KEYS["access_token"][0])
        refresh_token = values.get(TOKEN_KEYS["refresh_token"][0])
        expiry = values.get(TOKEN_KEYS["expires_at"][0])

        if not access_token or not refresh_token or not expiry:
            return None

        try:
            expires_at = from_epoch_ms(int(expiry))
        except (TypeError, ValueError):
            logger.error(f"Invalid stored token expiry: {expiry!r}")
            return None

        return Credential(access_token=access_token, refresh_token=refresh_token, expires_at=expires_at)

    async def replace(self, credential: Credential) -> None:
        """Write all three fields in one transaction."""
        values = {
            "access_token": credential.access_token,
            "refresh_token": credential.refresh_token,
            "expires_at": str(to_epoch_ms(credential.expires_at)),
        }
        async with self.session_factory() as session:
            async with session.begin():
                await self._write(session, values)

        logger.info(f"Stored Lazada credential (expires: {credential.expires_at.isoformat()})")

    @staticmethod
    async def _write(session: AsyncSession, values: dict) -> None:
        for field, value in values.items():
            key, description = TOKEN_KEYS[field]
            setting = await session.get(AppSetting, key)
            if setting:
                setting.value = value
                setting.description = description
            else:
                session.add(AppSetting(key=key, value=value, description=description))
