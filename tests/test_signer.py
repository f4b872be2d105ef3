#!/usr/bin/env python3
"""
Tests for request signing

Known-answer vectors for HMAC-SHA256/base64 and the canonical
signature input.
"""

import base64

from bitget_uta.rest.signer import Signer, build_sign_string, sign


def test_sign_known_vector():
    """Signature matches the reference vector"""
    signature = sign("test_secret_key", "1234567890GETapi/v3/account/settings")
    assert signature == "ePQkXFxpHaTJ4qBp+vIi0gkIv9TnPQ8uUC0VlhC39H8="


def test_sign_is_deterministic():
    message = "1700000000000GET/api/v3/account/assets"
    assert sign("test_secret_key", message) == sign("test_secret_key", message)


def test_sign_depends_on_key_and_message():
    base = sign("test_secret_key", "message")
    assert sign("other_secret_key", "message") != base
    assert sign("test_secret_key", "message2") != base


def test_sign_is_standard_base64_of_sha256_digest():
    decoded = base64.b64decode(sign("test_secret_key", "anything"), validate=True)
    assert len(decoded) == 32, "HMAC-SHA256 digest should be 32 bytes"


def test_build_sign_string_without_query_or_body():
    message = build_sign_string("1700000000000", "get", "/api/v3/account/settings")
    assert message == "1700000000000GET/api/v3/account/settings"


def test_build_sign_string_with_query():
    message = build_sign_string(
        "1700000000000", "GET", "/api/v3/account/fee-rate", "category=SPOT&symbol=BTCUSDT"
    )
    assert message == "1700000000000GET/api/v3/account/fee-rate?category=SPOT&symbol=BTCUSDT"
    assert sign("test_secret_key", message) == "47VQSJ1DHoToZ3tnzoGStraC+nxMF0uwdrea60WpYlg="


def test_build_sign_string_with_body():
    body = '{"symbol":"BTCUSDT","category":"SPOT"}'
    message = build_sign_string("1700000000000", "POST", "/api/v3/trade/place-order", "", body)
    assert message == "1700000000000POST/api/v3/trade/place-order" + body
    assert sign("test_secret_key", message) == "Peln1aehATWlYWL37ot4RvmscPWBTZAo4NtHrTf2y88="


def test_empty_body_is_not_appended():
    assert build_sign_string("1", "POST", "/p", "", "") == "1POST/p"
    assert build_sign_string("1", "POST", "/p", "", None) == "1POST/p"


def test_signer_class_matches_function_and_hides_secret():
    signer = Signer("test_secret_key")
    assert signer.sign("abc") == sign("test_secret_key", "abc")
    assert signer.sign_request("1234567890", "GET", "api/v3/account/settings") == \
        "ePQkXFxpHaTJ4qBp+vIi0gkIv9TnPQ8uUC0VlhC39H8="
    assert "test_secret_key" not in repr(signer)
