"""
REST request pipeline

Signer → request builder → transport → response decoder, composed by
UTAClient.
"""

from .client import UTAClient
from .credentials import Credentials
from .errors import APIError, DecodeError, TransportError, UTAError, ValidationError
from .response import ApiResponse
from .transport import HttpTransport, RawResponse

__all__ = [
    "UTAClient",
    "Credentials",
    "ApiResponse",
    "HttpTransport",
    "RawResponse",
    "UTAError",
    "ValidationError",
    "TransportError",
    "DecodeError",
    "APIError",
]
