from lazada_erp.core.config import Settings, clear_settings_cache, get_settings
from lazada_erp.core.utils import REDACTED, from_epoch_ms, mask_params, to_epoch_ms, utc_now


def test_lazada_defaults():
    settings = Settings(_env_file=None)

    assert settings.LAZADA_API_URL == "https://api.lazada.com.my/rest"
    assert settings.LAZADA_AUTH_URL == "https://auth.lazada.com/oauth/authorize"
    assert settings.LAZADA_SIGN_METHOD == "md5"
    assert settings.LAZADA_AUTH_SIGN_METHOD == "sha256"
    assert settings.LAZADA_TOKEN_REFRESH_MARGIN_SECONDS == 0


def test_clear_settings_cache_rereads_environment(monkeypatch):
    monkeypatch.setenv("LAZADA_TOKEN_REFRESH_MARGIN_SECONDS", "120")
    clear_settings_cache()
    try:
        assert get_settings().LAZADA_TOKEN_REFRESH_MARGIN_SECONDS == 120
        assert get_settings() is get_settings()
    finally:
        monkeypatch.delenv("LAZADA_TOKEN_REFRESH_MARGIN_SECONDS")
        clear_settings_cache()


def test_mask_params_hides_secrets():
    params = {"app_key": "k", "access_token": "t", "sign": "S", "code": "c", "quantity": 1}

    masked = mask_params(params)

    assert masked == {"app_key": "k", "access_token": REDACTED, "sign": REDACTED, "code": REDACTED, "quantity": 1}
    assert params["access_token"] == "t"


def test_epoch_ms_round_trip():
    now = utc_now()
    assert to_epoch_ms(from_epoch_ms(to_epoch_ms(now))) == to_epoch_ms(now)
