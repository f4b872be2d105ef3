#!/usr/bin/env python3
"""
Bitget Request Signer
==================================================
HMAC-SHA256 signature generation for UTA API requests.

Signature input is the exact concatenation, without separators, of:

    timestamp + METHOD + requestPath [+ "?" + queryString] [+ body]

The exchange rebuilds the same string server-side, so every byte
must match what is actually sent.
"""

import base64
import hashlib
import hmac
from typing import Optional


def sign(secret_key: str, message: str) -> str:
    """
    Generate HMAC-SHA256 signature.

    Args:
        secret_key: API secret key
        message: Canonical signature input

    Returns:
        Base64 (standard alphabet) encoded signature
    """
    digest = hmac.new(
        secret_key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_sign_string(
    timestamp: str,
    method: str,
    request_path: str,
    query_string: str = "",
    body: Optional[str] = None,
) -> str:
    """
    Build the canonical signature input.

    Args:
        timestamp: Decimal epoch milliseconds
        method: HTTP method (upper-cased here)
        request_path: Endpoint path, e.g. "/api/v3/account/settings"
        query_string: Encoded query string without the leading "?"
        body: Raw JSON body exactly as sent

    Returns:
        Signature input string
    """
    parts = [timestamp, method.upper(), request_path]
    if query_string:
        parts.append("?")
        parts.append(query_string)
    if body:
        parts.append(body)
    return "".join(parts)


class Signer:
    """Signs requests for one secret key"""

    def __init__(self, secret_key: str):
        self._secret_key = secret_key

    def __repr__(self) -> str:
        return "Signer(secret_key=***)"

    def sign(self, message: str) -> str:
        return sign(self._secret_key, message)

    def sign_request(
        self,
        timestamp: str,
        method: str,
        request_path: str,
        query_string: str = "",
        body: Optional[str] = None,
    ) -> str:
        """Build the canonical string for a request and sign it"""
        return self.sign(
            build_sign_string(timestamp, method, request_path, query_string, body)
        )
