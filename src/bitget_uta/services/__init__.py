"""
Endpoint services

Endpoints are declared once in the registry and executed through the
generic Service builder.
"""

from . import constants
from . import models
from .endpoints import REGISTRY, EndpointSpec, Param, get_endpoint
from .service import Service

__all__ = [
    "constants",
    "models",
    "REGISTRY",
    "EndpointSpec",
    "Param",
    "get_endpoint",
    "Service",
]
