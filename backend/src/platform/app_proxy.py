"""
Shopify App Proxy request signature verification.

When a storefront visitor requests https://{shop}/apps/404redirect/...,
Shopify forwards the request to the app and appends query parameters
(shop, path_prefix, timestamp, logged_in_customer_id, ...) plus a
`signature` parameter: HMAC-SHA256 over the other parameters, keyed by the
app's API secret, hex encoded.

The canonical payload is every parameter except `signature`, rendered as
"key=value", sorted by key, joined with "&". Values are used exactly as
decoded from the query string. Unlike the OAuth/admin HMAC scheme there is
no URL encoding of the payload.

Documentation: https://shopify.dev/docs/apps/build/online-store/display-dynamic-data

SECURITY:
- Verification fails closed: a missing signature is False, never an error
- Callers must not distinguish "missing" from "mismatched" in responses
- Digest comparison is constant-time
"""

import hmac
import hashlib
from typing import Iterable, Mapping, Tuple, Union

SIGNATURE_PARAM = "signature"

QueryInput = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def query_params_to_dict(query_params: QueryInput) -> dict[str, str]:
    """
    Collapse query parameters into a single value per key.

    Accepts a plain mapping, a list of (key, value) pairs, or a multi-valued
    mapping such as Starlette's QueryParams. For duplicated keys the last
    value wins.
    """
    if hasattr(query_params, "multi_items"):
        items = query_params.multi_items()
    elif isinstance(query_params, Mapping):
        items = query_params.items()
    else:
        items = query_params

    params: dict[str, str] = {}
    for key, value in items:
        params[key] = value
    return params


def canonicalize_proxy_params(parameters: Mapping[str, str]) -> str:
    """
    Build the canonical payload that Shopify signs.

    Keys are sorted by code point, so the payload is identical on every
    platform regardless of locale.

    Example:
        {"shop": "a.myshopify.com", "path_prefix": "/apps/x"}
        -> "path_prefix=/apps/x&shop=a.myshopify.com"
    """
    return "&".join(
        f"{key}={value}"
        for key, value in sorted(parameters.items())
        if key != SIGNATURE_PARAM
    )


def compute_proxy_signature(parameters: Mapping[str, str], secret: str) -> str:
    """
    Compute the hex HMAC-SHA256 signature for App Proxy parameters.

    Any `signature` entry in parameters is ignored.

    Returns:
        64-character lowercase hex digest
    """
    payload = canonicalize_proxy_params(parameters)
    return hmac.new(
        secret.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_proxy_signature(parameters: Mapping[str, str], secret: str) -> bool:
    """
    Verify that App Proxy query parameters were signed by Shopify.

    Pure function: does not mutate parameters and keeps no state, so it is
    safe to call from any number of concurrent requests.

    Args:
        parameters: Decoded query parameters, one value per key
        secret: Shopify app API secret (must be non-empty; checking that
            is the caller's job)

    Returns:
        True if the signature matches, False otherwise
    """
    provided = parameters.get(SIGNATURE_PARAM)
    if not provided or not isinstance(provided, str):
        return False

    expected = compute_proxy_signature(parameters, secret)

    # compare_digest raises TypeError on non-ASCII str; encode to keep the
    # result a plain mismatch
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
