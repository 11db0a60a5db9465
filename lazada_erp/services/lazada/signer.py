# lazada_erp/services/lazada/signer.py
"""
Lazada request signing.

The parameter string is built by sorting the parameter names and appending
each name directly followed by its value, with no separators. Two variants
sign that string:

- SignMethod.MD5 ("md5"): MD5 over secret + params + secret. Used for the
  general API calls (lazada.product.*).
- SignMethod.HMAC_SHA256 ("sha256"): HMAC-SHA256 keyed with the app secret
  over api_path + params. Used for the /auth/token/* endpoints.

Both render the digest as uppercase hex.
"""

import hashlib
import hmac
from typing import Any, Mapping

from lazada_erp.core.enums import SignMethod

SIGN_PARAM = "sign"


def concatenate_params(params: Mapping[str, Any]) -> str:
    """Sorted key+value pairs joined with no separators. `sign` and None values are left out."""
    return "".join(
        f"{key}{params[key]}"
        for key in sorted(params)
        if key != SIGN_PARAM and params[key] is not None
    )


def sign(
    params: Mapping[str, Any],
    secret: str,
    method: SignMethod = SignMethod.MD5,
    api_path: str = "",
) -> str:
    """
    Sign a set of request parameters.

    Args:
        params: Request parameters (values are rendered with str())
        secret: The app secret
        method: Which signing variant to use
        api_path: Prefix for the HMAC variant, e.g. "/auth/token/create". Ignored by MD5.

    Returns:
        Uppercase hex digest
    """
    method = SignMethod(method)
    payload = concatenate_params(params)

    if method is SignMethod.MD5:
        digest = hashlib.md5(f"{secret}{payload}{secret}".encode("utf-8")).hexdigest()
    elif method is SignMethod.HMAC_SHA256:
        digest = hmac.new(
            secret.encode("utf-8"),
            f"{api_path}{payload}".encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
    else:
        raise ValueError(f"Unsupported sign method: {method}")

    return digest.upper()
