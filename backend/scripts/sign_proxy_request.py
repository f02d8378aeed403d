#!/usr/bin/env python3
"""
Script to call the App Proxy settings endpoint locally with a valid signature.

Builds the query Shopify would forward for a storefront request, signs it
with SHOPIFY_API_SECRET, and optionally sends it.

Usage:
    # Start your server first (ENV=production to exercise verification)
    ENV=production SHOPIFY_API_SECRET=s3cr3t uvicorn main:app --reload

    # Print a signed URL
    python scripts/sign_proxy_request.py --shop test-store.myshopify.com

    # Sign and send
    python scripts/sign_proxy_request.py --shop test-store.myshopify.com --send

    # Send with a tampered signature (expect 401)
    python scripts/sign_proxy_request.py --shop test-store.myshopify.com --send --tamper
"""

import argparse
import os
import sys
import time
from pathlib import Path
from urllib.parse import urlencode

import httpx

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from src.config.app_config import DEFAULT_APP_PROXY_PATH
from src.platform.app_proxy import SIGNATURE_PARAM, compute_proxy_signature

DEFAULT_SECRET = os.getenv("SHOPIFY_API_SECRET", "test_proxy_secret")
DEFAULT_BASE_URL = os.getenv("TEST_BASE_URL", "http://localhost:8000")


def build_signed_params(shop: str, secret: str, extra: dict, tamper: bool = False) -> dict:
    """Build App Proxy query parameters with a signature."""
    params = {
        "shop": shop,
        "path_prefix": os.getenv("APP_PROXY_PATH", DEFAULT_APP_PROXY_PATH),
        "timestamp": str(int(time.time())),
        "logged_in_customer_id": "",
    }
    params.update(extra)

    signature = compute_proxy_signature(params, secret)
    if tamper:
        signature = signature[:-1] + ("0" if signature[-1] != "0" else "1")

    params[SIGNATURE_PARAM] = signature
    return params


def main():
    parser = argparse.ArgumentParser(description="Sign an App Proxy settings request")
    parser.add_argument("--shop", default="test-store.myshopify.com")
    parser.add_argument("--param", action="append", default=[], help="Extra key=value parameter")
    parser.add_argument("--send", action="store_true", help="Send the request")
    parser.add_argument("--tamper", action="store_true", help="Corrupt the signature")
    args = parser.parse_args()

    extra = {}
    for item in args.param:
        key, _, value = item.partition("=")
        extra[key] = value

    params = build_signed_params(args.shop, DEFAULT_SECRET, extra, tamper=args.tamper)
    url = f"{DEFAULT_BASE_URL}/api/proxy/settings?{urlencode(params)}"
    print(url)

    if args.send:
        try:
            response = httpx.get(url)
            print(f"Response Status: {response.status_code}")
            print(f"Response Body: {response.text}")
        except httpx.HTTPError as e:
            print(f"Error: {e}")
            sys.exit(1)


if __name__ == "__main__":
    main()
