#!/usr/bin/env python3
"""
Credential Sanitizer
========================================
Strict sanitization and validation of API key, secret and passphrase.

Values copied from the exchange UI into .env files often pick up
quotes, trailing newlines or a BOM. Any of those silently breaks the
HMAC signature, and the exchange only answers with a generic
"sign signature error", so they are stripped before use.
"""

import logging
from typing import Tuple

logger = logging.getLogger(__name__)


def sanitize_secret(raw_secret: str, label: str = "secret") -> Tuple[str, dict]:
    """
    Sanitize a credential value.

    Args:
        raw_secret: Raw value from environment
        label: Credential name used in log messages (never the value)

    Returns:
        (sanitized_value, metadata_dict)
    """
    metadata = {
        "original_len": len(raw_secret) if raw_secret else 0,
        "sanitized_len": 0,
        "changes_made": [],
        "printable_only": False,
        "has_non_ascii": False,
        "has_control_chars": False,
        "sanitized": False,
    }

    if not raw_secret:
        return "", metadata

    # Step 1: Strip leading/trailing whitespace
    value = raw_secret.strip()
    if len(value) != len(raw_secret):
        metadata["changes_made"].append("whitespace_stripped")

    # Step 2: Remove surrounding quotes/backticks
    for quote_char in ['"', "'", "`"]:
        if value.startswith(quote_char) and value.endswith(quote_char) and len(value) > 1:
            value = value[1:-1]
            metadata["changes_made"].append(f"quotes_removed_{quote_char}")

    # Step 3: BOM
    if value.startswith("\ufeff"):
        value = value[1:]
        metadata["changes_made"].append("BOM_removed")

    # Step 4: Drop control characters, keep printable and flag non-ASCII
    cleaned = []
    has_control = False
    has_non_ascii = False

    for char in value:
        code = ord(char)
        if 32 <= code <= 126:
            cleaned.append(char)
        elif code > 127:
            has_non_ascii = True
            cleaned.append(char)
        else:
            has_control = True

    if has_control:
        metadata["changes_made"].append("control_chars_removed")
        metadata["has_control_chars"] = True

    if has_non_ascii:
        metadata["has_non_ascii"] = True

    sanitized = "".join(cleaned)
    metadata["sanitized_len"] = len(sanitized)
    metadata["printable_only"] = all(32 <= ord(c) <= 126 for c in sanitized)
    metadata["sanitized"] = len(metadata["changes_made"]) > 0

    if metadata["has_non_ascii"]:
        logger.warning(f"{label} contains non-ASCII characters - might be invalid")

    if metadata["sanitized"]:
        logger.warning(f"{label.upper()}_SANITIZED: {', '.join(metadata['changes_made'])}")
        logger.warning(
            f"{label} original length: {metadata['original_len']}, "
            f"sanitized: {metadata['sanitized_len']}"
        )

    return sanitized, metadata


def validate_secret_format(secret: str) -> Tuple[bool, str]:
    """
    Validate secret key format.

    Bitget secret keys are 64 hex characters; anything in a sane
    length range made of base64-ish characters is accepted.

    Args:
        secret: Sanitized secret

    Returns:
        (is_valid, error_message)
    """
    if not secret:
        return False, "Secret is empty"

    if len(secret) < 16:
        return False, f"Secret too short ({len(secret)} chars, expected ≥16)"

    if len(secret) > 128:
        return False, f"Secret too long ({len(secret)} chars, expected ≤128)"

    if not all(c.isalnum() or c in ["+", "/", "=", "-", "_"] for c in secret):
        return (
            False,
            "Secret contains invalid characters (expected alphanumeric + base64)",
        )

    return True, "OK"
