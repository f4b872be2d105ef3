"""
Shared utilities for bitget-uta

Configuration, logging, secret sanitizing and time operations.
"""

from . import config
from . import logging
from . import secrets
from . import time

__all__ = [
    "config",
    "logging",
    "secrets",
    "time",
]
