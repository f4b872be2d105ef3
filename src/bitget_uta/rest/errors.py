#!/usr/bin/env python3
"""
UTA REST Errors
==================================================
Error taxonomy for the request pipeline.

- ValidationError: raised locally before any I/O
- TransportError: connection failure, timeout, cancellation, non-2xx status
- DecodeError: 2xx response whose body is not a valid envelope
- APIError: well-formed envelope with a non-success code
"""

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from bitget_uta.rest.response import ApiResponse


# Hints for the codes the exchange returns when authentication goes wrong.
# The exchange gives no further detail, so these point at the usual cause.
_DIAGNOSIS = {
    "40001": "ACCESS-KEY header missing. Signed call made without credentials?",
    "40002": "ACCESS-SIGN header missing.",
    "40003": "Signature empty.",
    "40005": "Invalid ACCESS-TIMESTAMP. Timestamp must be decimal epoch milliseconds.",
    "40006": "Invalid ACCESS-KEY. Check BITGET_API_KEY.",
    "40008": "Request timestamp expired. Check system clock sync.",
    "40009": "Signature mismatch. Check BITGET_SECRET_KEY (quotes/whitespace) and that query/body were not altered after signing.",
    "40011": "ACCESS-PASSPHRASE header missing.",
    "40012": "API key or passphrase incorrect. Check BITGET_PASSPHRASE.",
    "40014": "API key lacks permission for this endpoint.",
    "429": "Rate limit exceeded. Slow down; this client does not retry.",
}


class UTAError(Exception):
    """Base class for every error raised by this package"""


class ValidationError(UTAError):
    """Request rejected locally before any network call"""


class MissingParameterError(ValidationError):
    """Required parameter absent"""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"missing required parameter: {parameter}")


class TransportError(UTAError):
    """Network-level failure; the request may or may not have reached the exchange"""

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        self.message = message
        self.cause = cause
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class HTTPStatusError(TransportError):
    """Non-2xx HTTP status; the body is kept verbatim for diagnosis"""

    def __init__(self, status_code: int, body: str):
        super().__init__(
            f"API request failed with status {status_code}: {body}",
            status_code=status_code,
            body=body,
        )


class RequestTimeoutError(TransportError):
    """Wall-clock timeout expired before a complete response arrived"""

    def __init__(self, timeout: float, cause: Optional[BaseException] = None):
        self.timeout = timeout
        super().__init__(f"HTTP request timed out after {timeout:g}s", cause=cause)


class CallCancelledError(TransportError):
    """Caller cancelled the call while it was in flight"""

    def __init__(self):
        super().__init__("HTTP request cancelled by caller")


class DecodeError(UTAError):
    """2xx response whose body is not a valid response envelope"""

    def __init__(self, message: str, raw: bytes = b"", cause: Optional[BaseException] = None):
        self.message = message
        self.raw = raw
        self.cause = cause
        super().__init__(f"failed to decode response: {message}")


class APIError(UTAError):
    """Exchange rejected the request with a non-success envelope code"""

    def __init__(
        self,
        code: str,
        message: str,
        response: Optional["ApiResponse"] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.code = code
        self.message = message
        self.response = response
        self.headers = headers or {}
        super().__init__(f"API error: code={code}, msg={message}")

    def get_diagnosis(self) -> str:
        """Get human-readable diagnosis"""
        hint = _DIAGNOSIS.get(self.code)
        if hint:
            return hint
        return f"Bitget API error {self.code}: {self.message}"


def is_api_error(exc: BaseException, code: Optional[str] = None) -> bool:
    """True if exc is an APIError, optionally with the given code"""
    if not isinstance(exc, APIError):
        return False
    return code is None or exc.code == code
