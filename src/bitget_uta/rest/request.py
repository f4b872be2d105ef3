#!/usr/bin/env python3
"""
UTA Request Builder
==================================================
Assembles URL, headers and body for one API call.

Features:
- Deterministic query string ordering (alphabetical by key)
- Signature computed over the exact query and body that are sent
- Auth headers only on signed requests
- Demo-trading marker header on every request when enabled
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode

from bitget_uta.rest.credentials import Credentials
from bitget_uta.rest.errors import ValidationError
from bitget_uta.rest.signer import build_sign_string, sign

USER_AGENT = "bitget-uta-python/1.0"

HEADER_ACCESS_KEY = "ACCESS-KEY"
HEADER_ACCESS_SIGN = "ACCESS-SIGN"
HEADER_ACCESS_TIMESTAMP = "ACCESS-TIMESTAMP"
HEADER_ACCESS_PASSPHRASE = "ACCESS-PASSPHRASE"
HEADER_DEMO_TRADING = "paptrading"

AUTH_HEADERS = (
    HEADER_ACCESS_KEY,
    HEADER_ACCESS_SIGN,
    HEADER_ACCESS_TIMESTAMP,
    HEADER_ACCESS_PASSPHRASE,
)

QueryParams = Mapping[str, object]
Body = Union[bytes, str, Mapping[str, Any]]


@dataclass(frozen=True)
class RequestDescriptor:
    """One API call as described by a service: immutable, built per call"""

    method: str
    path: str
    query: Tuple[Tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    signed: bool = False

    @classmethod
    def create(
        cls,
        method: str,
        path: str,
        query: Optional[QueryParams] = None,
        body: Optional[Body] = None,
        signed: bool = False,
    ) -> "RequestDescriptor":
        """Normalize method, query and body into a descriptor"""
        return cls(
            method=method.upper(),
            path=path,
            query=normalize_query(query),
            body=encode_body(body),
            signed=signed,
        )

    @property
    def query_string(self) -> str:
        return urlencode(self.query) if self.query else ""


@dataclass(frozen=True)
class PreparedRequest:
    """Fully assembled request, ready for the transport"""

    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes]
    timestamp: str


def _query_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_query(query: Optional[QueryParams]) -> Tuple[Tuple[str, str], ...]:
    """
    Canonical query parameters.

    None values are dropped, values are stringified and keys are sorted
    so the encoded string is stable across calls.
    """
    if not query:
        return ()
    return tuple(
        (str(key), _query_value(value))
        for key, value in sorted(query.items(), key=lambda item: str(item[0]))
        if value is not None
    )


def encode_query(query: Optional[QueryParams]) -> str:
    """Percent-encoded, key-sorted query string (no leading '?')"""
    normalized = normalize_query(query)
    return urlencode(normalized) if normalized else ""


def encode_body(body: Optional[Body]) -> Optional[bytes]:
    """
    Serialize a request body.

    Bytes pass through untouched and str is UTF-8 encoded. Mappings are
    dumped as compact JSON. An empty mapping yields no body.
    """
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    if not body:
        return None
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def build_request(
    base_url: str,
    descriptor: RequestDescriptor,
    credentials: Optional[Credentials],
    timestamp: str,
    demo_trading: bool = False,
) -> PreparedRequest:
    """
    Build URL, headers and body for one call.

    Args:
        base_url: Scheme and host, e.g. "https://api.bitget.com"
        descriptor: What to call
        credentials: Required when descriptor.signed is True
        timestamp: Decimal epoch milliseconds used in the signature
        demo_trading: Add the paper-trading marker header

    Returns:
        PreparedRequest

    Raises:
        ValidationError: Signed request without complete credentials
    """
    query_string = descriptor.query_string

    url = base_url.rstrip("/") + descriptor.path
    if query_string:
        url += "?" + query_string

    headers = {
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }

    if descriptor.signed:
        if credentials is None or not credentials.is_complete:
            raise ValidationError(
                f"signed request to {descriptor.path} requires api key, secret key and passphrase"
            )

        body_text = descriptor.body.decode("utf-8") if descriptor.body else None
        message = build_sign_string(
            timestamp, descriptor.method, descriptor.path, query_string, body_text
        )

        headers[HEADER_ACCESS_KEY] = credentials.api_key
        headers[HEADER_ACCESS_SIGN] = sign(credentials.secret_key, message)
        headers[HEADER_ACCESS_TIMESTAMP] = timestamp
        headers[HEADER_ACCESS_PASSPHRASE] = credentials.passphrase

    if demo_trading:
        headers[HEADER_DEMO_TRADING] = "1"

    return PreparedRequest(
        method=descriptor.method,
        url=url,
        headers=headers,
        body=descriptor.body,
        timestamp=timestamp,
    )
