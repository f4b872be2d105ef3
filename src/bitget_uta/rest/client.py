#!/usr/bin/env python3
"""
Bitget UTA API Client
==================================================
Single choke point every service call goes through:

    build → dispatch → interpret status → decode → check application code

Features:
- HMAC-SHA256 signing over the exact query and body that are sent
- Demo-trading header when enabled
- Bounded wall-clock timeout and caller cancellation
- Typed errors for validation, transport, decoding and API failures
- Structured logging with credentials redacted
"""

import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from bitget_uta.rest.credentials import Credentials
from bitget_uta.rest.errors import APIError, DecodeError, TransportError
from bitget_uta.rest.request import Body, QueryParams, RequestDescriptor, build_request
from bitget_uta.rest.response import ApiResponse, decode_response
from bitget_uta.rest.transport import HttpTransport
from bitget_uta.shared.config import BASE_URL, DEFAULT_TIMEOUT, ConfigError, UTAConfig, load_config
from bitget_uta.shared.logging import SecretRedactingFilter, StructuredLogger
from bitget_uta.shared.time import format_timestamp_ms


def _redaction_filter(target: logging.Logger) -> SecretRedactingFilter:
    """Return the redaction filter installed on target, adding one if needed"""
    for existing in target.filters:
        if isinstance(existing, SecretRedactingFilter):
            return existing
    redactor = SecretRedactingFilter()
    target.addFilter(redactor)
    return redactor


class UTAClient:
    """
    Bitget Unified Trading Account REST client.

    Credentials are fixed at construction. Base URL, demo mode and transport
    may be changed through the set_* methods before the client is shared
    between threads; after that the client is read-only and call_api() is
    safe to use concurrently.
    """

    def __init__(
        self,
        api_key: str = "",
        secret_key: str = "",
        passphrase: str = "",
        base_url: str = BASE_URL,
        demo_trading: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[HttpTransport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize API client.

        Args:
            api_key: API key (empty for public endpoints only)
            secret_key: API secret used for signing
            passphrase: API passphrase
            base_url: Scheme and host of the REST API
            demo_trading: Send the paper-trading header on every request
            timeout: Default wall-clock timeout per call in seconds
            transport: HTTP transport (a new HttpTransport if None)
            logger: Logger for request/response events
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        self._credentials = Credentials(api_key, secret_key, passphrase)
        self._base_url = base_url.rstrip("/")
        self._demo_trading = demo_trading
        self._timeout = timeout
        self._owns_transport = transport is None
        self._transport = transport or HttpTransport()

        target = logger or logging.getLogger(__name__)
        self._redactor = _redaction_filter(target)
        self._closed = False
        for secret in self._credentials.secrets():
            self._redactor.add_secret(secret)
        self._log = StructuredLogger(target)

    def __repr__(self) -> str:
        return (
            f"UTAClient(base_url={self._base_url!r}, demo_trading={self._demo_trading}, "
            f"credentials={self._credentials!r})"
        )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_config(
        cls, config: UTAConfig, transport: Optional[HttpTransport] = None
    ) -> "UTAClient":
        """
        Create a client from a UTAConfig.

        Credentials are optional so public market data can be read without
        keys; everything else must pass validation.

        Raises:
            ConfigError: Invalid base URL or timeout
        """
        valid, error = config.validate(require_credentials=False)
        if not valid:
            raise ConfigError("config", error)

        return cls(
            api_key=config.api_key,
            secret_key=config.secret_key,
            passphrase=config.passphrase,
            base_url=config.base_url,
            demo_trading=config.demo_trading,
            timeout=config.timeout,
            transport=transport,
        )

    @classmethod
    def from_env(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        transport: Optional[HttpTransport] = None,
    ) -> "UTAClient":
        """Create a client from environment variables (see load_config)"""
        return cls.from_config(load_config(env_file), transport=transport)

    def set_base_url(self, base_url: str) -> "UTAClient":
        self._base_url = base_url.rstrip("/")
        return self

    def set_demo_trading(self, enabled: bool = True) -> "UTAClient":
        self._demo_trading = enabled
        return self

    def set_transport(self, transport: HttpTransport) -> "UTAClient":
        if self._owns_transport:
            self._transport.close()
        self._transport = transport
        self._owns_transport = False
        return self

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def demo_trading(self) -> bool:
        return self._demo_trading

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def has_credentials(self) -> bool:
        return self._credentials.is_complete

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    def call_api(
        self,
        method: str,
        endpoint: str,
        query: Optional[QueryParams] = None,
        body: Optional[Body] = None,
        signed: bool = False,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[ApiResponse, Dict[str, str]]:
        """
        Perform one API call.

        Args:
            method: HTTP method
            endpoint: Path, e.g. "/api/v3/account/settings"
            query: Query parameters (None values dropped, keys sorted)
            body: Raw JSON body, or a mapping serialized as compact JSON
            signed: Add authentication headers
            cancel: Set to abort the call while in flight
            timeout: Override the client's default timeout

        Returns:
            (envelope, response headers)

        Raises:
            ValidationError: Signed call without complete credentials
            TransportError: Connection failure, timeout, cancellation or non-2xx
            DecodeError: Malformed response envelope
            APIError: Envelope code other than "00000"
        """
        descriptor = RequestDescriptor.create(method, endpoint, query, body, signed)
        return self.execute(descriptor, cancel=cancel, timeout=timeout)

    def execute(
        self,
        descriptor: RequestDescriptor,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[ApiResponse, Dict[str, str]]:
        """Run a prebuilt RequestDescriptor through the pipeline (see call_api)"""
        prepared = build_request(
            self._base_url,
            descriptor,
            self._credentials,
            format_timestamp_ms(),
            demo_trading=self._demo_trading,
        )

        self._log.debug(
            "API request",
            method=prepared.method,
            url=prepared.url,
            signed=descriptor.signed,
            body_bytes=len(prepared.body or b""),
        )

        try:
            raw = self._transport.send(
                prepared.method,
                prepared.url,
                prepared.headers,
                prepared.body,
                timeout=timeout if timeout is not None else self._timeout,
                cancel=cancel,
            )
        except TransportError as e:
            self._log.error("API transport failure", method=prepared.method, url=prepared.url, error=e)
            raise

        try:
            envelope = decode_response(raw.status_code, raw.body, raw.headers)
        except APIError as e:
            self._log.error(
                "API error",
                method=prepared.method,
                url=prepared.url,
                code=e.code,
                msg=e.message,
            )
            raise
        except (TransportError, DecodeError) as e:
            self._log.error(
                "API response rejected",
                method=prepared.method,
                url=prepared.url,
                status=raw.status_code,
                error=e,
            )
            raise

        self._log.debug(
            "API response",
            status=raw.status_code,
            code=envelope.code,
            msg=envelope.msg,
            request_time=envelope.request_time,
        )
        return envelope, raw.headers

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    def service(self, name: str):
        """
        Create a fresh service for a registered endpoint.

        Args:
            name: Endpoint name, e.g. "place_order" (see endpoints())

        Returns:
            Service bound to this client

        Raises:
            KeyError: Unknown endpoint name
        """
        from bitget_uta.services.endpoints import get_endpoint
        from bitget_uta.services.service import Service

        return Service(self, get_endpoint(name))

    @staticmethod
    def endpoints() -> List[str]:
        """Names accepted by service()"""
        from bitget_uta.services.endpoints import REGISTRY

        return sorted(REGISTRY)

    def close(self) -> None:
        """Close an owned transport and withdraw this client's secrets from log redaction"""
        if self._closed:
            return
        self._closed = True
        for secret in self._credentials.secrets():
            self._redactor.remove_secret(secret)
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "UTAClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
