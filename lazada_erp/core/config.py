# lazada_erp/core/config.py

import os
from functools import lru_cache
from typing import Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Database settings
    DATABASE_URL: str = ""

    # Lazada app credentials
    LAZADA_APP_KEY: str = ""
    LAZADA_APP_SECRET: str = ""

    # Lazada endpoints
    LAZADA_API_URL: str = "https://api.lazada.com.my/rest"
    LAZADA_AUTH_URL: str = "https://auth.lazada.com/oauth/authorize"
    LAZADA_AUTH_API_URL: str = "https://auth.lazada.com/rest"
    LAZADA_CALLBACK_URL: str = ""
    LAZADA_POST_AUTH_REDIRECT: str = ""  # e.g. "/lazada" to bounce back to the UI

    # Signing: "md5" or "sha256"
    LAZADA_SIGN_METHOD: str = "md5"         # general API calls
    LAZADA_AUTH_SIGN_METHOD: str = "sha256"  # /auth/token/* endpoints

    LAZADA_TOKEN_REFRESH_MARGIN_SECONDS: int = 0
    LAZADA_REQUEST_TIMEOUT: float = 30.0
    LAZADA_OAUTH_STATE_TTL_SECONDS: int = 600

    # Basic Auth
    BASIC_AUTH_USERNAME: str = "admin"
    BASIC_AUTH_PASSWORD: Optional[str] = None

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    RUN_MIGRATIONS: bool = False

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
