#!/usr/bin/env python3
"""
Tests for the HTTP transport

Most tests replace requests.Session with a mock. Deadline and
cancellation tests run against a real socket server on 127.0.0.1.
"""

import socket
import threading
import time
from unittest.mock import MagicMock

import pytest
import requests

from bitget_uta.rest.errors import CallCancelledError, RequestTimeoutError, TransportError
from bitget_uta.rest.transport import HttpTransport, RawResponse


def _response(chunks, status_code=200, headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {"Content-Type": "application/json"}
    response.iter_content.side_effect = lambda chunk_size: iter(chunks)
    return response


def _session(response=None, error=None):
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.request.side_effect = error
    else:
        session.request.return_value = response
    return session


def test_send_returns_status_body_and_headers():
    response = _response([b'{"code":', b'"00000"}'], headers={"x-mbx": "1"})
    session = _session(response)
    transport = HttpTransport(session=session)

    raw = transport.send("GET", "https://api.bitget.com/x", {"A": "b"}, None, timeout=5)

    assert raw == RawResponse(200, b'{"code":"00000"}', {"x-mbx": "1"})
    assert raw.ok
    session.request.assert_called_once()
    _, kwargs = session.request.call_args
    assert kwargs["stream"] is True
    connect_timeout, read_timeout = kwargs["timeout"]
    assert 4 < connect_timeout <= 5
    assert read_timeout == connect_timeout
    assert kwargs["headers"] == {"A": "b"}
    response.close.assert_called_once()


def test_non_2xx_is_returned_not_raised():
    transport = HttpTransport(session=_session(_response([b"server error"], status_code=500)))
    raw = transport.send("GET", "https://api.bitget.com/x", {})
    assert raw.status_code == 500
    assert raw.text == "server error"
    assert not raw.ok


def test_requests_timeout_maps_to_request_timeout_error():
    transport = HttpTransport(session=_session(error=requests.ReadTimeout("slow")))
    with pytest.raises(RequestTimeoutError) as exc_info:
        transport.send("GET", "https://api.bitget.com/x", {}, timeout=2)
    assert isinstance(exc_info.value, TransportError)
    assert isinstance(exc_info.value.cause, requests.ReadTimeout)
    assert exc_info.value.timeout == 2


def test_connection_error_maps_to_transport_error():
    transport = HttpTransport(session=_session(error=requests.ConnectionError("refused")))
    with pytest.raises(TransportError) as exc_info:
        transport.send("GET", "https://api.bitget.com/x", {})
    assert not isinstance(exc_info.value, RequestTimeoutError)
    assert "refused" in str(exc_info.value)
    assert exc_info.value.__cause__ is exc_info.value.cause


def test_cancel_before_dispatch_skips_request():
    session = _session(_response([b"{}"]))
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(CallCancelledError):
        HttpTransport(session=session).send("GET", "https://api.bitget.com/x", {}, cancel=cancel)
    session.request.assert_not_called()


def test_cancel_while_reading_closes_response():
    cancel = threading.Event()

    def chunks():
        yield b'{"code":'
        cancel.set()
        yield b'"00000"}'

    response = _response(None)
    response.iter_content.side_effect = lambda chunk_size: chunks()
    transport = HttpTransport(session=_session(response))

    with pytest.raises(CallCancelledError):
        transport.send("GET", "https://api.bitget.com/x", {}, cancel=cancel)
    response.close.assert_called_once()


def test_error_while_reading_body_maps_to_transport_error():
    response = _response(None)
    response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("broken")
    transport = HttpTransport(session=_session(response))

    with pytest.raises(TransportError, match="broken"):
        transport.send("GET", "https://api.bitget.com/x", {})
    response.close.assert_called_once()


def test_close_only_closes_owned_session():
    external = _session(_response([]))
    HttpTransport(session=external).close()
    external.close.assert_not_called()

    owned = HttpTransport()
    owned.session.close = MagicMock()
    with owned:
        pass
    owned.session.close.assert_called_once()


# ---------------------------------------------------------------------------
# Real sockets
# ---------------------------------------------------------------------------

BODY = b'{"code":"00000"}'


@pytest.fixture
def slow_server():
    """
    Start a one-shot HTTP server on 127.0.0.1.

    Returns a factory: slow_server(header_delay, body_delay) -> url.
    """
    listeners = []

    def start(header_delay=0.0, body_delay=0.0):
        listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        listeners.append(listener)

        def serve():
            try:
                conn, _ = listener.accept()
            except OSError:
                return
            with conn:
                try:
                    request = b""
                    while b"\r\n\r\n" not in request:
                        data = conn.recv(4096)
                        if not data:
                            return
                        request += data
                    time.sleep(header_delay)
                    conn.sendall(
                        b"HTTP/1.1 200 OK\r\n"
                        b"Content-Type: application/json\r\n"
                        b"Content-Length: " + str(len(BODY)).encode() + b"\r\n"
                        b"Connection: close\r\n\r\n"
                    )
                    time.sleep(body_delay)
                    conn.sendall(BODY)
                except OSError:
                    # client gave up
                    return

        threading.Thread(target=serve, daemon=True).start()
        host, port = listener.getsockname()
        return f"http://{host}:{port}/api/v3/market/tickers"

    yield start

    for listener in listeners:
        listener.close()


def _local_transport():
    session = requests.Session()
    # ignore proxy settings from the environment
    session.trust_env = False
    return HttpTransport(session=session)


def test_real_socket_round_trip(slow_server):
    url = slow_server()
    with _local_transport() as transport:
        raw = transport.send("GET", url, {}, timeout=5)
    assert raw.status_code == 200
    assert raw.body == BODY
    assert raw.headers["Content-Type"] == "application/json"


def test_cancel_aborts_call_waiting_for_headers(slow_server):
    url = slow_server(header_delay=3.0)
    cancel = threading.Event()
    timer = threading.Timer(0.2, cancel.set)
    timer.start()

    started = time.monotonic()
    try:
        with pytest.raises(CallCancelledError):
            _local_transport().send("GET", url, {}, timeout=10, cancel=cancel)
    finally:
        timer.cancel()
    assert time.monotonic() - started < 1.0


def test_deadline_bounds_header_wait(slow_server):
    url = slow_server(header_delay=3.0)

    started = time.monotonic()
    with pytest.raises(RequestTimeoutError):
        _local_transport().send("GET", url, {}, timeout=0.5)
    assert time.monotonic() - started < 1.0


def test_deadline_covers_headers_and_body_together(slow_server):
    url = slow_server(header_delay=0.9, body_delay=0.9)

    started = time.monotonic()
    with pytest.raises(RequestTimeoutError) as exc_info:
        _local_transport().send("GET", url, {}, timeout=1.0)
    assert time.monotonic() - started < 1.3
    assert exc_info.value.timeout == 1.0
