"""
Utility functions for the application.
"""
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable

REDACTED = "[REDACTED]"
SENSITIVE_PARAMS = ("app_secret", "access_token", "refresh_token", "code", "sign")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """Milliseconds since the epoch, the timestamp format Lazada expects."""
    return int(time.time() * 1000)


def to_epoch_ms(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; we store everything in UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def mask_params(params: Dict[str, Any], sensitive: Iterable[str] = SENSITIVE_PARAMS) -> Dict[str, Any]:
    """Copy of request params safe to put in a log line"""
    return {k: (REDACTED if k in sensitive else v) for k, v in params.items()}
