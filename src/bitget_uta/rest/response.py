#!/usr/bin/env python3
"""
UTA Response Decoder
==================================================
Parses the JSON envelope every UTA endpoint returns:

    {"code": "00000", "msg": "success", "requestTime": 1700000000000, "data": ...}

"00000" is the only success code. `data` is left as parsed JSON for
the calling service to turn into a concrete result type.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from bitget_uta.rest.errors import APIError, DecodeError, HTTPStatusError

SUCCESS_CODE = "00000"


@dataclass(frozen=True)
class ApiResponse:
    """Response envelope"""

    code: str
    msg: str
    request_time: int
    data: Any
    raw: bytes = b""

    @property
    def is_success(self) -> bool:
        return self.code == SUCCESS_CODE

    @classmethod
    def from_dict(cls, payload: Dict[str, Any], raw: bytes = b"") -> "ApiResponse":
        code = payload.get("code")
        if code is None:
            raise DecodeError("envelope has no 'code' field", raw=raw)

        request_time = payload.get("requestTime") or 0
        try:
            request_time = int(request_time)
        except (TypeError, ValueError) as e:
            raise DecodeError(
                f"invalid requestTime {request_time!r}", raw=raw, cause=e
            ) from e

        return cls(
            code=str(code),
            msg=str(payload.get("msg") or ""),
            request_time=request_time,
            data=payload.get("data"),
            raw=raw,
        )


def parse_envelope(raw_body: bytes) -> ApiResponse:
    """
    Parse raw bytes into an ApiResponse without checking the code.

    Raises:
        DecodeError: Body is not a JSON object with a code field
    """
    try:
        payload = json.loads(raw_body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(str(e), raw=raw_body, cause=e) from e

    if not isinstance(payload, dict):
        raise DecodeError(
            f"expected JSON object, got {type(payload).__name__}", raw=raw_body
        )

    return ApiResponse.from_dict(payload, raw=raw_body)


def decode_response(
    status_code: int,
    raw_body: bytes,
    headers: Optional[Dict[str, str]] = None,
) -> ApiResponse:
    """
    Interpret status, parse the envelope and check the application code.

    Args:
        status_code: HTTP status
        raw_body: Response body as received
        headers: Response headers, attached to APIError

    Returns:
        ApiResponse with code "00000"

    Raises:
        HTTPStatusError: Non-2xx status (body not decoded)
        DecodeError: Malformed envelope
        APIError: Non-success code; carries the parsed envelope
    """
    if not 200 <= status_code < 300:
        raise HTTPStatusError(status_code, raw_body.decode("utf-8", errors="replace"))

    envelope = parse_envelope(raw_body)

    if not envelope.is_success:
        raise APIError(envelope.code, envelope.msg, response=envelope, headers=headers)

    return envelope
