"""
bitget-uta - Python client for the Bitget Unified Trading Account REST API

Components:
- REST: signing, request building, transport, envelope decoding, client
- Services: one generic describe-then-execute builder per registered endpoint
- Shared: configuration, logging, secret handling, time helpers

Every call funnels through UTAClient.execute().
"""

__version__ = "1.0.0"
__author__ = "bitget-uta contributors"
__description__ = "Python client for the Bitget Unified Trading Account REST API"

# Ensure Python 3.11+ requirement
import sys
if sys.version_info < (3, 11):
    raise RuntimeError("bitget-uta requires Python 3.11 or higher")

from . import shared
from . import rest
from . import services

from .rest.client import UTAClient
from .rest.credentials import Credentials
from .rest.errors import (
    APIError,
    CallCancelledError,
    DecodeError,
    HTTPStatusError,
    MissingParameterError,
    RequestTimeoutError,
    TransportError,
    UTAError,
    ValidationError,
)
from .services.constants import Category, OrderType, Side, TimeInForce
from .shared.config import ConfigError, UTAConfig, load_config

__all__ = [
    "shared",
    "rest",
    "services",
    "UTAClient",
    "Credentials",
    "UTAConfig",
    "load_config",
    "ConfigError",
    "UTAError",
    "ValidationError",
    "MissingParameterError",
    "TransportError",
    "HTTPStatusError",
    "RequestTimeoutError",
    "CallCancelledError",
    "DecodeError",
    "APIError",
    "Category",
    "Side",
    "OrderType",
    "TimeInForce",
]
