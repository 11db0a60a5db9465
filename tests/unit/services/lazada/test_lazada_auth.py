from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from lazada_erp.core.enums import SignMethod
from lazada_erp.core.exceptions import AuthExchangeFailed, RefreshFailed, TransportError
from lazada_erp.services.lazada.auth import (
    TOKEN_CREATE_PATH,
    TOKEN_REFRESH_PATH,
    LazadaAuthClient,
    OAuthStateStore,
)
from lazada_erp.services.lazada.signer import sign

TOKEN_RESPONSE = {
    "access_token": "new-access-token",
    "refresh_token": "new-refresh-token",
    "expires_in": 604800,
    "refresh_expires_in": 2592000,
    "account": "seller@example.com",
    "code": "0",
    "request_id": "0b8f1a2b",
}


"""
1. Authorization URL
"""

def test_generate_authorization_url(settings):
    """The consent URL carries the app key, callback and state"""
    url = LazadaAuthClient(settings).generate_authorization_url("abc123")

    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    assert url.startswith("https://auth.lazada.test/oauth/authorize?")
    assert query["client_id"] == ["test-app-key"]
    assert query["response_type"] == ["code"]
    assert query["redirect_uri"] == ["https://erp.example.com/lazada/callback"]
    assert query["state"] == ["abc123"]


def test_generate_authorization_url_requires_callback(settings):
    settings.LAZADA_CALLBACK_URL = ""
    with pytest.raises(ValueError):
        LazadaAuthClient(settings).generate_authorization_url("abc123")


"""
2. Token create
"""

@pytest.mark.asyncio
async def test_create_token_success(settings, mock_httpx, make_response):
    """Code exchange posts a signed request to the token-create endpoint"""
    mock_httpx.post.return_value = make_response(TOKEN_RESPONSE)

    data = await LazadaAuthClient(settings).create_token("one-time-code")

    assert data["access_token"] == "new-access-token"

    args, kwargs = mock_httpx.post.call_args
    assert args[0] == f"https://auth.lazada.test/rest{TOKEN_CREATE_PATH}"
    params = kwargs["params"]
    assert params["code"] == "one-time-code"
    assert params["app_key"] == "test-app-key"
    assert params["sign_method"] == "sha256"
    assert len(str(params["timestamp"])) == 13
    unsigned = {k: v for k, v in params.items() if k != "sign"}
    assert params["sign"] == sign(unsigned, "test-app-secret", SignMethod.HMAC_SHA256, api_path=TOKEN_CREATE_PATH)


@pytest.mark.asyncio
async def test_create_token_rejected_code(settings, mock_httpx, make_response):
    """A non-zero code raises with the marketplace payload attached"""
    body = {"code": "InvalidCode", "message": "Invalid authorization code", "request_id": "x"}
    mock_httpx.post.return_value = make_response(body)

    with pytest.raises(AuthExchangeFailed) as exc_info:
        await LazadaAuthClient(settings).create_token("bad-code")

    assert exc_info.value.payload == body


@pytest.mark.asyncio
async def test_create_token_http_error(settings, mock_httpx, make_response):
    mock_httpx.post.return_value = make_response(ValueError("no json"), status_code=500, text="Internal error")

    with pytest.raises(AuthExchangeFailed) as exc_info:
        await LazadaAuthClient(settings).create_token("code")

    assert exc_info.value.payload == "Internal error"


@pytest.mark.asyncio
async def test_create_token_network_error(settings, mock_httpx):
    mock_httpx.post.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(TransportError):
        await LazadaAuthClient(settings).create_token("code")


@pytest.mark.asyncio
async def test_create_token_requires_app_credentials(settings, mock_httpx):
    settings.LAZADA_APP_SECRET = ""
    with pytest.raises(ValueError):
        await LazadaAuthClient(settings).create_token("code")
    mock_httpx.post.assert_not_called()


"""
3. Token refresh
"""

@pytest.mark.asyncio
async def test_refresh_token_success(settings, mock_httpx, make_response):
    mock_httpx.post.return_value = make_response(TOKEN_RESPONSE)

    data = await LazadaAuthClient(settings).refresh_token("old-refresh-token")

    assert data["refresh_token"] == "new-refresh-token"
    args, kwargs = mock_httpx.post.call_args
    assert args[0].endswith(TOKEN_REFRESH_PATH)
    assert kwargs["params"]["refresh_token"] == "old-refresh-token"


@pytest.mark.asyncio
async def test_refresh_token_missing_access_token(settings, mock_httpx, make_response):
    """Code "0" without an access token is still a failed refresh"""
    mock_httpx.post.return_value = make_response({"code": "0", "request_id": "x"})

    with pytest.raises(RefreshFailed):
        await LazadaAuthClient(settings).refresh_token("old-refresh-token")


@pytest.mark.asyncio
async def test_refresh_token_rejected(settings, mock_httpx, make_response):
    mock_httpx.post.return_value = make_response(
        {"code": "IllegalRefreshToken", "message": "refresh token expired"}
    )

    with pytest.raises(RefreshFailed) as exc_info:
        await LazadaAuthClient(settings).refresh_token("old-refresh-token")

    assert "refresh token expired" in str(exc_info.value)


"""
4. OAuth state
"""

def test_state_is_single_use():
    store = OAuthStateStore()
    state = store.issue()

    assert len(state) == 32
    assert store.consume(state)
    assert not store.consume(state)


def test_unknown_or_missing_state_rejected():
    store = OAuthStateStore()
    store.issue()

    assert not store.consume("forged")
    assert not store.consume(None)
    assert not store.consume("")


def test_expired_state_rejected(mocker):
    store = OAuthStateStore(ttl_seconds=60)
    monotonic = mocker.patch("lazada_erp.services.lazada.auth.time.monotonic", return_value=1000.0)
    state = store.issue()

    monotonic.return_value = 1061.0
    assert not store.consume(state)
