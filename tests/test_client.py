#!/usr/bin/env python3
"""
Tests for UTAClient.call_api

End-to-end through the real signer, builder and decoder with a fake
transport standing in for HTTP.
"""

import logging
import threading
from urllib.parse import urlsplit

import pytest

from bitget_uta.rest.client import UTAClient
from bitget_uta.rest.errors import (
    APIError,
    DecodeError,
    HTTPStatusError,
    RequestTimeoutError,
    ValidationError,
)
from bitget_uta.rest.request import AUTH_HEADERS
from bitget_uta.rest.signer import sign
from bitget_uta.shared.config import ConfigError, UTAConfig
from conftest import API_KEY, PASSPHRASE, SECRET_KEY, FakeTransport


def test_unsigned_call_has_no_auth_headers(public_client, transport):
    transport.queue_data([{"symbol": "BTCUSDT"}], headers={"x-request-id": "r1"})

    result, headers = public_client.call_api(
        "GET", "/api/v3/market/tickers", query={"category": "SPOT"}
    )

    assert result.is_success
    assert result.data == [{"symbol": "BTCUSDT"}]
    assert headers == {"x-request-id": "r1"}

    call = transport.last
    assert call["method"] == "GET"
    assert call["url"] == "https://api.bitget.com/api/v3/market/tickers?category=SPOT"
    assert call["body"] is None
    for header in AUTH_HEADERS:
        assert header not in call["headers"]


def test_signed_call_signature_verifies(client, transport):
    transport.queue_data({"makerRate": "0.001"})

    client.call_api(
        "GET",
        "/api/v3/account/fee-rate",
        query={"symbol": "BTCUSDT", "category": "SPOT"},
        signed=True,
    )

    headers = transport.last["headers"]
    url = urlsplit(transport.last["url"])
    timestamp = headers["ACCESS-TIMESTAMP"]

    assert timestamp.isdigit() and len(timestamp) == 13, "timestamp should be epoch ms"
    assert headers["ACCESS-KEY"] == API_KEY
    assert headers["ACCESS-PASSPHRASE"] == PASSPHRASE
    expected = sign(SECRET_KEY, f"{timestamp}GET{url.path}?{url.query}")
    assert headers["ACCESS-SIGN"] == expected


def test_signed_post_sends_compact_json_body(client, transport):
    transport.queue_data({"orderId": "1"})

    client.call_api(
        "POST",
        "/api/v3/trade/place-order",
        body={"symbol": "BTCUSDT", "category": "SPOT"},
        signed=True,
    )

    call = transport.last
    assert call["body"] == b'{"symbol":"BTCUSDT","category":"SPOT"}'
    timestamp = call["headers"]["ACCESS-TIMESTAMP"]
    expected = sign(SECRET_KEY, f"{timestamp}POST/api/v3/trade/place-order" + call["body"].decode())
    assert call["headers"]["ACCESS-SIGN"] == expected


def test_api_error_carries_code_message_and_envelope(client, transport):
    transport.queue_data(code="40012", msg="apikey/password is incorrect", headers={"h": "v"})

    with pytest.raises(APIError) as exc_info:
        client.call_api("GET", "/api/v3/account/settings", signed=True)

    error = exc_info.value
    assert error.code == "40012"
    assert error.message == "apikey/password is incorrect"
    assert error.response.code == "40012"
    assert error.headers == {"h": "v"}


def test_http_500_raises_status_error(client, transport):
    transport.queue(500, "server error")

    with pytest.raises(HTTPStatusError) as exc_info:
        client.call_api("GET", "/api/v3/market/tickers", query={"category": "SPOT"})

    assert exc_info.value.status_code == 500
    assert "server error" in str(exc_info.value)


def test_malformed_json_raises_decode_error(client, transport):
    transport.queue(200, "<html>not json</html>")

    with pytest.raises(DecodeError) as exc_info:
        client.call_api("GET", "/api/v3/market/tickers")
    assert exc_info.value.raw == b"<html>not json</html>"


def test_transport_errors_propagate(client, transport):
    transport.responses.append(RequestTimeoutError(30.0))

    with pytest.raises(RequestTimeoutError):
        client.call_api("GET", "/api/v3/market/tickers")


def test_signed_call_without_credentials_never_dispatches(public_client, transport):
    with pytest.raises(ValidationError):
        public_client.call_api("GET", "/api/v3/account/settings", signed=True)
    assert transport.calls == []


def test_demo_trading_header(transport):
    client = UTAClient(transport=transport).set_demo_trading(True)
    transport.queue_data([])

    client.call_api("GET", "/api/v3/market/tickers")

    assert transport.last["headers"]["paptrading"] == "1"


def test_timeout_and_cancel_are_passed_to_transport(client, transport):
    transport.queue_data().queue_data()
    cancel = threading.Event()

    client.call_api("GET", "/x")
    client.call_api("GET", "/x", cancel=cancel, timeout=2.5)

    assert transport.calls[0]["timeout"] == 30.0
    assert transport.calls[0]["cancel"] is None
    assert transport.calls[1]["timeout"] == 2.5
    assert transport.calls[1]["cancel"] is cancel


def test_set_base_url(transport):
    client = UTAClient(transport=transport).set_base_url("http://localhost:8080/")
    transport.queue_data()

    client.call_api("GET", "/api/v3/market/tickers")

    assert transport.last["url"] == "http://localhost:8080/api/v3/market/tickers"
    assert client.base_url == "http://localhost:8080"


def test_clients_are_independent():
    first = FakeTransport()
    second = FakeTransport()
    a = UTAClient("key-a", SECRET_KEY, PASSPHRASE, transport=first)
    b = UTAClient("key-b", "another_secret", PASSPHRASE, transport=second, demo_trading=True)
    first.queue_data()
    second.queue_data()

    a.call_api("GET", "/api/v3/account/settings", signed=True)
    b.call_api("GET", "/api/v3/account/settings", signed=True)

    assert first.last["headers"]["ACCESS-KEY"] == "key-a"
    assert second.last["headers"]["ACCESS-KEY"] == "key-b"
    assert "paptrading" not in first.last["headers"]
    assert second.last["headers"]["paptrading"] == "1"


def test_credentials_never_logged(client, transport, caplog):
    caplog.set_level(logging.DEBUG, logger="bitget_uta.rest.client")
    transport.queue_data(code="40009", msg=f"bad sign for {API_KEY}")

    with pytest.raises(APIError):
        client.call_api("GET", "/api/v3/account/settings", signed=True)

    assert caplog.records, "client should log request and error"
    for secret in (API_KEY, SECRET_KEY, PASSPHRASE):
        assert secret not in caplog.text
    assert "***" in caplog.text


def test_logging_failure_does_not_change_outcome(transport):
    broken = logging.getLogger("tests.broken_logger")
    broken.setLevel(logging.DEBUG)

    def explode(*args, **kwargs):
        raise RuntimeError("log sink down")

    broken.log = explode
    client = UTAClient(transport=transport, logger=broken)
    transport.queue_data({"ok": True})

    result, _ = client.call_api("GET", "/api/v3/market/tickers")

    assert result.data == {"ok": True}


def test_repr_hides_credentials(client):
    text = repr(client)
    assert SECRET_KEY not in text
    assert API_KEY not in text
    assert PASSPHRASE not in text


def test_from_config(transport):
    config = UTAConfig(
        api_key=API_KEY,
        secret_key=SECRET_KEY,
        passphrase=PASSPHRASE,
        base_url="https://api.bitget.com",
        demo_trading=True,
        timeout=7.0,
    )
    client = UTAClient.from_config(config, transport=transport)

    assert client.has_credentials
    assert client.demo_trading
    assert client.timeout == 7.0


def test_from_config_rejects_invalid_base_url():
    with pytest.raises(ConfigError):
        UTAClient.from_config(UTAConfig(base_url="http://api.bitget.com"))


def test_invalid_timeout_rejected():
    with pytest.raises(ValueError):
        UTAClient(timeout=0)


def test_close_does_not_close_injected_transport(client, transport):
    with client:
        pass
    assert transport.closed is False


def test_service_factory_and_endpoint_listing(client):
    names = client.endpoints()
    assert "place_order" in names
    assert "tickers" in names
    assert names == sorted(names)

    service = client.service("tickers")
    assert service.spec.path == "/api/v3/market/tickers"
    assert client.service("tickers") is not service

    with pytest.raises(KeyError):
        client.service("no_such_endpoint")


def test_close_withdraws_secrets_from_shared_redaction():
    logger = logging.getLogger("tests.client.redaction")
    logger.filters.clear()
    try:
        first = UTAClient("key-first-0001", SECRET_KEY, PASSPHRASE, transport=FakeTransport(), logger=logger)
        second = UTAClient("key-second-0002", SECRET_KEY, PASSPHRASE, transport=FakeTransport(), logger=logger)

        redactor = logger.filters[0]
        assert len(logger.filters) == 1
        assert {"key-first-0001", "key-second-0002", SECRET_KEY} <= redactor.secrets

        first.close()
        first.close()
        assert "key-first-0001" not in redactor.secrets
        # still registered by the open client
        assert SECRET_KEY in redactor.secrets

        second.close()
        assert not redactor.secrets
    finally:
        logger.filters.clear()
