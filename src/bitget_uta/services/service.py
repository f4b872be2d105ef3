#!/usr/bin/env python3
"""
Generic UTA Service
==================================================
One builder for every registered endpoint: describe, then execute.

    order = (
        client.service("place_order")
        .symbol("BTCUSDT")
        .category(Category.SPOT)
        .side(Side.BUY)
        .order_type(OrderType.LIMIT)
        .size("0.001")
        .price("30000")
        .do()
    )

Setters exist for every declared parameter, under both the camelCase
name and its snake_case form. Validation runs locally before any
network call; a missing parameter never reaches the transport.
"""

import threading
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from bitget_uta.rest.errors import DecodeError, MissingParameterError, ValidationError
from bitget_uta.rest.request import RequestDescriptor
from bitget_uta.rest.response import ApiResponse
from bitget_uta.services.endpoints import EndpointSpec, Param
from bitget_uta.shared.time import to_epoch_ms

if TYPE_CHECKING:
    from bitget_uta.rest.client import UTAClient


def wire_value(value: Any) -> Any:
    """
    Convert a caller-supplied value to its wire representation.

    Enums send their value, booleans "true"/"false", datetimes epoch
    milliseconds and numbers their decimal string. Lists and dicts pass
    through for JSON bodies.
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return str(to_epoch_ms(value))
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return value


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, str) and value.isdigit())


def check_kind(param: Param, value: Any) -> None:
    """
    Reject values that cannot be sent for a typed parameter.

    int parameters take ints or digit strings; datetime parameters also
    take epoch milliseconds in either form.

    Raises:
        ValidationError: Value of the wrong type
    """
    if param.kind is str or _is_missing(value):
        return
    if param.kind is int:
        ok = _is_integral(value)
    elif param.kind is datetime:
        ok = isinstance(value, datetime) or _is_integral(value)
    else:
        ok = isinstance(value, param.kind)
    if not ok:
        raise ValidationError(
            f"{param.name} expects {param.kind.__name__}, got {type(value).__name__} {value!r}"
        )


class Service:
    """Parameter builder and executor for one endpoint"""

    def __init__(self, client: "UTAClient", spec: EndpointSpec):
        self._client = client
        self._spec = spec
        self._values: Dict[str, Any] = {}
        self._extra: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"Service({self._spec.name!r}, set={sorted(self._values)})"

    def __getattr__(self, attr: str):
        if attr.startswith("_"):
            raise AttributeError(attr)

        param = self._spec.lookup(attr)
        if param is None:
            raise AttributeError(f"{self._spec.name} has no parameter {attr!r}")

        def setter(value: Any) -> "Service":
            return self._assign(param, value)

        setter.__name__ = param.setter
        return setter

    @property
    def spec(self) -> EndpointSpec:
        return self._spec

    def _assign(self, param: Param, value: Any) -> "Service":
        if value is None:
            self._values.pop(param.name, None)
        else:
            check_kind(param, value)
            self._values[param.name] = value
        return self

    def set(self, **kwargs: Any) -> "Service":
        """
        Set several declared parameters at once.

        Raises:
            AttributeError: Undeclared parameter name
        """
        for key, value in kwargs.items():
            param = self._spec.lookup(key)
            if param is None:
                raise AttributeError(f"{self._spec.name} has no parameter {key!r}")
            self._assign(param, value)
        return self

    def param(self, wire: str, value: Any) -> "Service":
        """Send an extra parameter under its exact wire name (not validated)"""
        if value is None:
            self._extra.pop(wire, None)
        else:
            self._extra[wire] = value
        return self

    def validate(self) -> None:
        """
        Check required parameters in declared order, then any-of groups.

        Raises:
            MissingParameterError: First missing parameter or group
        """
        for param in self._spec.params:
            if param.required and _is_missing(self._values.get(param.name)):
                raise MissingParameterError(param.name)

        for group in self._spec.any_of:
            if all(_is_missing(self._values.get(name)) for name in group):
                raise MissingParameterError(" or ".join(group))

    def params(self) -> Dict[str, Any]:
        """Wire-named parameters in declared order, extras last"""
        encoded: Dict[str, Any] = {}
        for param in self._spec.params:
            value = self._values.get(param.name)
            if not _is_missing(value):
                encoded[param.wire_name] = wire_value(value)
        for key, value in self._extra.items():
            encoded[key] = wire_value(value)
        return encoded

    def describe(self) -> RequestDescriptor:
        """
        Validate and build the request without sending it.

        GET parameters go to the query string; other methods send them
        as a compact JSON body.
        """
        self.validate()
        params = self.params()

        if self._spec.method == "GET":
            return RequestDescriptor.create(
                self._spec.method, self._spec.path, query=params, signed=self._spec.signed
            )
        return RequestDescriptor.create(
            self._spec.method, self._spec.path, body=params or None, signed=self._spec.signed
        )

    def do_raw(
        self,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[ApiResponse, Dict[str, str]]:
        """Execute and return the envelope and response headers"""
        return self._client.execute(self.describe(), cancel=cancel, timeout=timeout)

    def do(
        self,
        cancel: Optional[threading.Event] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Execute and decode `data`.

        Returns:
            Model instance, list of models, or the raw data when the
            endpoint has no model

        Raises:
            MissingParameterError: Before any network call
            TransportError, DecodeError, APIError: From the client
        """
        envelope, _ = self.do_raw(cancel=cancel, timeout=timeout)
        return self._decode(envelope)

    def _decode(self, envelope: ApiResponse) -> Any:
        model = self._spec.model
        data = envelope.data
        if model is None:
            return data

        try:
            if self._spec.many:
                if data is None:
                    return []
                if not isinstance(data, list):
                    raise TypeError(f"expected a JSON array, got {type(data).__name__}")
                return [model.decode(item) for item in data]

            if data is None:
                return model()
            return model.decode(data)

        except (TypeError, ValueError) as e:
            raise DecodeError(f"{self._spec.name}: {e}", raw=envelope.raw, cause=e) from e
