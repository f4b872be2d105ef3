#!/usr/bin/env python3
"""
UTA HTTP Transport
==================================================
Executes one HTTP request with a bounded wall-clock timeout.

- No retries: any failure is terminal for the call
- Connection pooling is left to requests.Session
- The request runs on a worker thread; the caller returns as soon as
  the deadline passes or the cancel event is set, whatever the socket
  is doing
- Socket timeouts are taken from the remaining budget, so an abandoned
  worker does not linger
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests

from bitget_uta.rest.errors import CallCancelledError, RequestTimeoutError, TransportError
from bitget_uta.shared.config import DEFAULT_TIMEOUT


CHUNK_SIZE = 16 * 1024


@dataclass(frozen=True)
class RawResponse:
    """Status, body and headers exactly as received"""

    status_code: int
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class _InFlight:
    """State shared between send() and the worker running one request"""

    def __init__(self):
        self.done = threading.Event()
        self.result: Optional[RawResponse] = None
        self.error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self._response: Optional[requests.Response] = None
        self._abandoned = False
        self._closed = False

    @property
    def abandoned(self) -> bool:
        return self._abandoned

    def attach(self, response: requests.Response) -> bool:
        """Register the live response; False if the caller already gave up"""
        with self._lock:
            self._response = response
            if self._abandoned:
                self._close_locked()
                return False
            return True

    def abandon(self) -> None:
        """Give up on the call and close whatever connection is open"""
        with self._lock:
            self._abandoned = True
            self._close_locked()

    def close(self) -> None:
        with self._lock:
            self._close_locked()

    def _close_locked(self) -> None:
        if self._response is not None and not self._closed:
            self._closed = True
            self._response.close()


class HttpTransport:
    """
    requests-based transport.

    Thread-safe for concurrent send() calls as far as requests.Session is;
    the transport itself keeps no per-call state.
    """

    # How often the waiting caller looks at the cancel event
    POLL_INTERVAL = 0.02
    # Lower bound for socket timeouts once the budget is nearly spent
    MIN_SOCKET_TIMEOUT = 0.001

    def __init__(self, session: Optional[requests.Session] = None, chunk_size: int = CHUNK_SIZE):
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._chunk_size = chunk_size

    @property
    def session(self) -> requests.Session:
        return self._session

    def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes] = None,
        timeout: float = DEFAULT_TIMEOUT,
        cancel: Optional[threading.Event] = None,
    ) -> RawResponse:
        """
        Send one request.

        Args:
            method: HTTP method
            url: Full URL including query string
            headers: Request headers
            body: Raw request body
            timeout: Wall-clock budget in seconds for the whole call
            cancel: Set by the caller to abort the call

        Returns:
            RawResponse (any status code)

        Raises:
            RequestTimeoutError: Budget exhausted
            CallCancelledError: cancel was set
            TransportError: DNS, connection or protocol failure
        """
        deadline = time.monotonic() + timeout
        self._check_cancel(cancel)

        call = _InFlight()
        worker = threading.Thread(
            target=self._run,
            args=(call, method, url, headers, body, deadline, cancel),
            name="bitget-uta-http",
            daemon=True,
        )
        worker.start()

        while True:
            remaining = deadline - time.monotonic()
            if call.done.wait(max(min(self.POLL_INTERVAL, remaining), 0)):
                break
            if cancel is not None and cancel.is_set():
                call.abandon()
                raise CallCancelledError()
            if time.monotonic() >= deadline:
                call.abandon()
                raise RequestTimeoutError(timeout)

        if call.error is not None:
            raise self._map_error(call.error, timeout)
        return call.result

    def _run(
        self,
        call: _InFlight,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[bytes],
        deadline: float,
        cancel: Optional[threading.Event],
    ) -> None:
        try:
            socket_timeout = self._remaining(deadline)
            response = self._session.request(
                method,
                url,
                headers=headers,
                data=body,
                timeout=(socket_timeout, socket_timeout),
                stream=True,
            )
            if not call.attach(response):
                return

            chunks = []
            for chunk in response.iter_content(chunk_size=self._chunk_size):
                if call.abandoned:
                    return
                self._check_cancel(cancel)
                if chunk:
                    chunks.append(chunk)

            call.result = RawResponse(
                status_code=response.status_code,
                body=b"".join(chunks),
                headers=dict(response.headers),
            )
        except Exception as e:
            call.error = e
        finally:
            call.close()
            call.done.set()

    def _remaining(self, deadline: float) -> float:
        return max(deadline - time.monotonic(), self.MIN_SOCKET_TIMEOUT)

    @staticmethod
    def _map_error(error: BaseException, timeout: float) -> BaseException:
        if isinstance(error, requests.Timeout):
            mapped = RequestTimeoutError(timeout, cause=error)
        elif isinstance(error, requests.RequestException):
            mapped = TransportError(f"HTTP request failed: {error}", cause=error)
        else:
            return error
        mapped.__cause__ = error
        return mapped

    @staticmethod
    def _check_cancel(cancel: Optional[threading.Event]) -> None:
        if cancel is not None and cancel.is_set():
            raise CallCancelledError()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
