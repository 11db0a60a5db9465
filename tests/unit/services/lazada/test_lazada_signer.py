import hashlib
import hmac

import pytest

from lazada_erp.core.enums import SignMethod
from lazada_erp.services.lazada.signer import concatenate_params, sign

SECRET = "test-app-secret"

PARAMS = {
    "app_key": "123456",
    "timestamp": 1700000000000,
    "sign_method": "md5",
    "method": "lazada.product.stock.update",
    "item_id": "987654",
    "quantity": 7,
}


"""
1. Parameter concatenation
"""

def test_concatenate_params_sorts_keys_without_separators():
    """Keys are sorted and each is followed directly by its value"""
    result = concatenate_params({"b": "2", "a": "1", "c": 3})
    assert result == "a1b2c3"


def test_concatenate_params_skips_sign_and_none():
    """An existing signature and unset values are not part of the string"""
    result = concatenate_params({"a": "1", "sign": "ABC", "b": None})
    assert result == "a1"


"""
2. MD5 variant
"""

def test_md5_signature_matches_secret_wrapped_digest():
    """MD5(secret + params + secret), uppercase hex"""
    expected = hashlib.md5(
        f"{SECRET}{concatenate_params(PARAMS)}{SECRET}".encode("utf-8")
    ).hexdigest().upper()

    assert sign(PARAMS, SECRET, SignMethod.MD5) == expected


def test_signature_is_deterministic_and_order_independent():
    """Same parameters in any insertion order give the same signature"""
    reordered = dict(reversed(list(PARAMS.items())))

    assert sign(PARAMS, SECRET) == sign(PARAMS, SECRET)
    assert sign(PARAMS, SECRET) == sign(reordered, SECRET)


def test_signature_changes_with_any_value():
    """Changing a single value changes the signature"""
    changed = {**PARAMS, "quantity": 8}
    assert sign(PARAMS, SECRET) != sign(changed, SECRET)


def test_signature_changes_with_secret():
    assert sign(PARAMS, SECRET) != sign(PARAMS, "another-secret")


def test_signature_is_uppercase_hex():
    signature = sign(PARAMS, SECRET)
    assert len(signature) == 32
    assert signature == signature.upper()
    int(signature, 16)


def test_existing_sign_param_does_not_change_signature():
    """Re-signing already signed params gives the same value"""
    signed = {**PARAMS, "sign": sign(PARAMS, SECRET)}
    assert sign(signed, SECRET) == signed["sign"]


"""
3. HMAC-SHA256 variant
"""

def test_hmac_signature_prefixes_api_path():
    """HMAC-SHA256(secret, api_path + params), uppercase hex"""
    params = {"app_key": "123456", "timestamp": 1700000000000, "sign_method": "sha256", "code": "abc"}
    expected = hmac.new(
        SECRET.encode("utf-8"),
        f"/auth/token/create{concatenate_params(params)}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest().upper()

    assert sign(params, SECRET, SignMethod.HMAC_SHA256, api_path="/auth/token/create") == expected


def test_hmac_signature_depends_on_api_path():
    params = {"app_key": "123456", "refresh_token": "r"}
    create = sign(params, SECRET, SignMethod.HMAC_SHA256, api_path="/auth/token/create")
    refresh = sign(params, SECRET, SignMethod.HMAC_SHA256, api_path="/auth/token/refresh")
    assert create != refresh
    assert len(create) == 64


def test_sign_method_accepts_plain_string():
    assert sign(PARAMS, SECRET, "md5") == sign(PARAMS, SECRET, SignMethod.MD5)


def test_unknown_sign_method_rejected():
    with pytest.raises(ValueError):
        sign(PARAMS, SECRET, "sha1")
