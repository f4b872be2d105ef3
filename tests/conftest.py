#!/usr/bin/env python3
"""
Shared fixtures for bitget-uta tests

No test touches the network: HTTP goes through FakeTransport, which
records every request and replays canned responses.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bitget_uta.rest.client import UTAClient
from bitget_uta.rest.transport import RawResponse

API_KEY = "bg_test_api_key_0001"
SECRET_KEY = "test_secret_key"
PASSPHRASE = "test_passphrase"


def envelope(data=None, code="00000", msg="success", request_time=1700000000000) -> bytes:
    return json.dumps(
        {"code": code, "msg": msg, "requestTime": request_time, "data": data}
    ).encode("utf-8")


class FakeTransport:
    """Records send() calls and returns queued responses in order"""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def queue(self, status_code=200, body=b"", headers=None):
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.responses.append(RawResponse(status_code, body, headers or {}))
        return self

    def queue_data(self, data=None, code="00000", msg="success", headers=None):
        return self.queue(200, envelope(data, code=code, msg=msg), headers)

    def send(self, method, url, headers, body=None, timeout=30.0, cancel=None):
        self.calls.append(
            {
                "method": method,
                "url": url,
                "headers": dict(headers),
                "body": body,
                "timeout": timeout,
                "cancel": cancel,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return UTAClient(
        api_key=API_KEY,
        secret_key=SECRET_KEY,
        passphrase=PASSPHRASE,
        transport=transport,
    )


@pytest.fixture
def public_client(transport):
    return UTAClient(transport=transport)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no BITGET_* variables and an empty working directory"""
    for name in (
        "BITGET_API_KEY",
        "BITGET_SECRET_KEY",
        "BITGET_API_SECRET",
        "BITGET_PASSPHRASE",
        "BITGET_BASE_URL",
        "BITGET_DEMO_TRADING",
        "BITGET_TIMEOUT",
        "BITGET_LOG_LEVEL",
    ):
        # setenv first so variables loaded from dotenv files are undone too
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path
