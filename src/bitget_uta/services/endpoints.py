#!/usr/bin/env python3
"""
UTA Endpoint Registry
==================================================
Declarative description of every supported endpoint: method, path,
signing, parameter schema and result model. The generic Service reads
these to validate, encode and decode calls.

Required parameters are checked in the order they are declared here,
so the first missing one is the one reported.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Tuple

from bitget_uta.services import models

# Account
ACCOUNT_SETTINGS = "/api/v3/account/settings"
ACCOUNT_ASSETS = "/api/v3/account/assets"
ACCOUNT_FUNDING_ASSETS = "/api/v3/account/funding-assets"
ACCOUNT_FEE_RATE = "/api/v3/account/fee-rate"
ACCOUNT_SET_HOLDING_MODE = "/api/v3/account/set-hold-mode"
ACCOUNT_SET_LEVERAGE = "/api/v3/account/set-leverage"
ACCOUNT_SWITCH_STATUS = "/api/v3/account/switch-status"
ACCOUNT_TRANSFER = "/api/v3/account/transfer"
ACCOUNT_SUB_TRANSFER_RECORD = "/api/v3/account/sub-transfer-record"
ACCOUNT_TRANSFERABLE_COINS = "/api/v3/account/transferable-coins"
ACCOUNT_FINANCIAL_RECORDS = "/api/v3/account/financial-records"
ACCOUNT_CONVERT_RECORDS = "/api/v3/account/convert-records"
ACCOUNT_DEDUCT_INFO = "/api/v3/account/deduct-info"
ACCOUNT_PAYMENT_COINS = "/api/v3/account/payment-coins"
ACCOUNT_REPAYABLE_COINS = "/api/v3/account/repayable-coins"

# Trade
TRADE_PLACE_ORDER = "/api/v3/trade/place-order"
TRADE_CANCEL_ORDER = "/api/v3/trade/cancel-order"
TRADE_MODIFY_ORDER = "/api/v3/trade/modify-order"
TRADE_UNFILLED_ORDERS = "/api/v3/trade/unfilled-orders"
TRADE_ORDER_INFO = "/api/v3/trade/order-info"
TRADE_HISTORY_ORDERS = "/api/v3/trade/history-orders"
TRADE_FILLS = "/api/v3/trade/fills"
TRADE_UNFILLED_STRATEGY = "/api/v3/trade/unfilled-strategy-orders"
TRADE_HISTORY_STRATEGY = "/api/v3/trade/history-strategy-orders"

# Position
POSITION_CURRENT = "/api/v3/position/current-position"
POSITION_HISTORY = "/api/v3/position/history-position"

# Market
MARKET_TICKERS = "/api/v3/market/tickers"
MARKET_CANDLES = "/api/v3/market/candles"
MARKET_HISTORY_CANDLES = "/api/v3/market/history-candles"
MARKET_ORDERBOOK = "/api/v3/market/orderbook"
MARKET_CURRENT_FUND_RATE = "/api/v3/market/current-fund-rate"
MARKET_HISTORY_FUND_RATE = "/api/v3/market/history-fund-rate"
MARKET_INSTRUMENTS = "/api/v3/market/instruments"
MARKET_DISCOUNT_RATE = "/api/v3/market/discount-rate"
MARKET_MARGIN_LOANS = "/api/v3/market/margin-loans"
MARKET_OPEN_INTEREST = "/api/v3/market/open-interest"
MARKET_OI_LIMIT = "/api/v3/market/oi-limit"
MARKET_PROOF_OF_RESERVES = "/api/v3/market/proof-of-reserves"
MARKET_RISK_RESERVE = "/api/v3/market/risk-reserve"
MARKET_POSITION_TIER = "/api/v3/market/position-tier"
MARKET_FILLS = "/api/v3/market/fills"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def snake_case(name: str) -> str:
    """orderType -> order_type"""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class Param:
    """
    One request parameter.

    name is what callers set and what validation errors report; wire is
    the key actually sent (defaults to name).
    """

    name: str
    wire: Optional[str] = None
    required: bool = False
    kind: type = str

    @property
    def wire_name(self) -> str:
        return self.wire or self.name

    @property
    def setter(self) -> str:
        return snake_case(self.name)


@dataclass(frozen=True)
class EndpointSpec:
    """How to call one endpoint and what it returns"""

    name: str
    method: str
    path: str
    signed: bool
    params: Tuple[Param, ...] = ()
    any_of: Tuple[Tuple[str, ...], ...] = ()
    model: Optional[type] = None
    many: bool = False
    description: str = ""

    def lookup(self, name: str) -> Optional[Param]:
        """Find a parameter by name or snake_case setter name"""
        for param in self.params:
            if name in (param.name, param.setter):
                return param
        return None

    @property
    def required(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.params if p.required)


def _req(name: str, wire: Optional[str] = None, kind: type = str) -> Param:
    return Param(name, wire=wire, required=True, kind=kind)


def _opt(name: str, wire: Optional[str] = None, kind: type = str) -> Param:
    return Param(name, wire=wire, kind=kind)


_PAGINATION = (
    _opt("startTime", kind=datetime),
    _opt("endTime", kind=datetime),
    _opt("limit", kind=int),
    _opt("cursor"),
)

REGISTRY: Dict[str, EndpointSpec] = {}


def register(spec: EndpointSpec) -> EndpointSpec:
    if spec.name in REGISTRY:
        raise ValueError(f"duplicate endpoint name: {spec.name}")
    known = {p.name for p in spec.params}
    for group in spec.any_of:
        unknown = set(group) - known
        if unknown:
            raise ValueError(f"{spec.name}: any_of references undeclared {sorted(unknown)}")
    REGISTRY[spec.name] = spec
    return spec


def get_endpoint(name: str) -> EndpointSpec:
    """
    Look up an endpoint by name.

    Raises:
        KeyError: Unknown endpoint
    """
    try:
        return REGISTRY[name]
    except KeyError:
        raise KeyError(f"unknown endpoint: {name!r}") from None


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

register(EndpointSpec(
    "account_info", "GET", ACCOUNT_SETTINGS, signed=True,
    model=models.AccountInfo,
    description="Account settings (asset mode, holding mode, leverage)",
))

register(EndpointSpec(
    "account_assets", "GET", ACCOUNT_ASSETS, signed=True,
    model=models.AccountAssets,
    description="Unified account equity and balances",
))

register(EndpointSpec(
    "funding_assets", "GET", ACCOUNT_FUNDING_ASSETS, signed=True,
    params=(_opt("coin"),),
    model=models.FundingAsset, many=True,
    description="Funding account balances",
))

register(EndpointSpec(
    "fee_rate", "GET", ACCOUNT_FEE_RATE, signed=True,
    params=(_req("symbol"), _req("category")),
    model=models.FeeRate,
    description="Maker/taker fee rate for a symbol",
))

register(EndpointSpec(
    "set_holding_mode", "POST", ACCOUNT_SET_HOLDING_MODE, signed=True,
    params=(_req("holdingMode", wire="holdMode"),),
    description="Switch between one-way and hedge mode",
))

register(EndpointSpec(
    "set_leverage", "POST", ACCOUNT_SET_LEVERAGE, signed=True,
    params=(
        _req("category"),
        _req("leverage"),
        _opt("symbol"),
        _opt("coin"),
        _opt("posSide"),
    ),
    description="Set leverage for a symbol or coin",
))

register(EndpointSpec(
    "transfer", "POST", ACCOUNT_TRANSFER, signed=True,
    params=(
        _req("fromType"),
        _req("toType"),
        _req("amount"),
        _req("coin"),
        _opt("symbol"),
    ),
    model=models.TransferResult,
    description="Transfer between own accounts",
))

register(EndpointSpec(
    "switch_status", "GET", ACCOUNT_SWITCH_STATUS, signed=True,
    model=models.SwitchStatus,
    description="Progress of the switch to the unified account",
))

register(EndpointSpec(
    "transfer_records", "GET", ACCOUNT_SUB_TRANSFER_RECORD, signed=True,
    params=(_opt("coin"), _opt("subUid"), _opt("role")) + _PAGINATION,
    model=models.TransferRecord, many=True,
    description="Sub-account transfer history",
))

register(EndpointSpec(
    "transferable_coins", "GET", ACCOUNT_TRANSFERABLE_COINS, signed=True,
    params=(_req("fromType"), _req("toType")),
    description="Coins that can move between two account types",
))

register(EndpointSpec(
    "financial_records", "GET", ACCOUNT_FINANCIAL_RECORDS, signed=True,
    params=(_opt("category"), _opt("coin"), _opt("type")) + _PAGINATION,
    description="Account ledger",
))

register(EndpointSpec(
    "convert_records", "GET", ACCOUNT_CONVERT_RECORDS, signed=True,
    params=(_opt("fromCoin"), _opt("toCoin")) + _PAGINATION,
    description="Small-balance convert history",
))

register(EndpointSpec(
    "deduct_info", "GET", ACCOUNT_DEDUCT_INFO, signed=True,
    description="Whether BGB fee deduction is on",
))

register(EndpointSpec(
    "payment_coins", "GET", ACCOUNT_PAYMENT_COINS, signed=True,
    description="Coins usable to repay liabilities",
))

register(EndpointSpec(
    "repayable_coins", "GET", ACCOUNT_REPAYABLE_COINS, signed=True,
    description="Coins with outstanding liabilities",
))

# ---------------------------------------------------------------------------
# Trade
# ---------------------------------------------------------------------------

register(EndpointSpec(
    "place_order", "POST", TRADE_PLACE_ORDER, signed=True,
    params=(
        _req("symbol"),
        _req("category"),
        _req("side"),
        _req("orderType"),
        _req("size", wire="qty"),
        _opt("price"),
        _opt("clientOid"),
        _opt("timeInForce"),
        _opt("reduceOnly"),
        _opt("positionSide", wire="posSide"),
        _opt("stp"),
    ),
    model=models.Order,
    description="Place an order",
))

register(EndpointSpec(
    "cancel_order", "POST", TRADE_CANCEL_ORDER, signed=True,
    params=(_req("symbol"), _req("category"), _opt("orderId"), _opt("clientOid")),
    any_of=(("orderId", "clientOid"),),
    model=models.Order,
    description="Cancel an order by orderId or clientOid",
))

register(EndpointSpec(
    "modify_order", "POST", TRADE_MODIFY_ORDER, signed=True,
    params=(
        _req("symbol"),
        _req("category"),
        _opt("orderId"),
        _opt("clientOid"),
        _opt("newSize", wire="qty"),
        _opt("newPrice", wire="price"),
        _opt("newClientOid"),
    ),
    any_of=(("orderId", "clientOid"), ("newSize", "newPrice")),
    model=models.Order,
    description="Change size and/or price of an open order",
))

register(EndpointSpec(
    "open_orders", "GET", TRADE_UNFILLED_ORDERS, signed=True,
    params=(_opt("category"), _opt("symbol")) + _PAGINATION,
    model=models.Order, many=True,
    description="Open orders",
))

register(EndpointSpec(
    "order_info", "GET", TRADE_ORDER_INFO, signed=True,
    params=(_opt("orderId"), _opt("clientOid")),
    any_of=(("orderId", "clientOid"),),
    model=models.Order,
    description="Details of one order",
))

register(EndpointSpec(
    "order_history", "GET", TRADE_HISTORY_ORDERS, signed=True,
    params=(_req("category"), _opt("symbol")) + _PAGINATION,
    model=models.Order, many=True,
    description="Closed orders",
))

register(EndpointSpec(
    "fills", "GET", TRADE_FILLS, signed=True,
    params=(_req("category"), _opt("symbol"), _opt("orderId")) + _PAGINATION,
    model=models.Fill, many=True,
    description="Own trade executions",
))

register(EndpointSpec(
    "open_strategy_orders", "GET", TRADE_UNFILLED_STRATEGY, signed=True,
    params=(_req("category"), _opt("symbol")) + _PAGINATION,
    model=models.StrategyOrder, many=True,
    description="Active take-profit / stop-loss orders",
))

register(EndpointSpec(
    "strategy_order_history", "GET", TRADE_HISTORY_STRATEGY, signed=True,
    params=(_req("category"), _opt("symbol")) + _PAGINATION,
    model=models.StrategyOrder, many=True,
    description="Finished take-profit / stop-loss orders",
))

# ---------------------------------------------------------------------------
# Position
# ---------------------------------------------------------------------------

register(EndpointSpec(
    "positions", "GET", POSITION_CURRENT, signed=True,
    params=(_req("category"), _opt("symbol"), _opt("posSide")),
    model=models.Position, many=True,
    description="Open positions",
))

register(EndpointSpec(
    "position_history", "GET", POSITION_HISTORY, signed=True,
    params=(_req("category"), _opt("symbol")) + _PAGINATION,
    model=models.Position, many=True,
    description="Closed positions",
))

# ---------------------------------------------------------------------------
# Market data (public)
# ---------------------------------------------------------------------------

register(EndpointSpec(
    "tickers", "GET", MARKET_TICKERS, signed=False,
    params=(_req("category"), _opt("symbol")),
    model=models.Ticker, many=True,
    description="24h tickers",
))

_CANDLE_PARAMS = (
    _req("category"),
    _req("symbol"),
    _req("interval"),
    _opt("startTime", kind=datetime),
    _opt("endTime", kind=datetime),
    _opt("type"),
    _opt("limit", kind=int),
)

register(EndpointSpec(
    "candles", "GET", MARKET_CANDLES, signed=False,
    params=_CANDLE_PARAMS,
    model=models.Candlestick, many=True,
    description="Recent candlesticks",
))

register(EndpointSpec(
    "history_candles", "GET", MARKET_HISTORY_CANDLES, signed=False,
    params=_CANDLE_PARAMS,
    model=models.Candlestick, many=True,
    description="Older candlesticks",
))

register(EndpointSpec(
    "orderbook", "GET", MARKET_ORDERBOOK, signed=False,
    params=(_req("symbol"), _req("category"), _opt("limit", kind=int)),
    model=models.OrderBook,
    description="Order book depth",
))

register(EndpointSpec(
    "instruments", "GET", MARKET_INSTRUMENTS, signed=False,
    params=(_req("category"), _opt("symbol")),
    description="Instrument specifications",
))

register(EndpointSpec(
    "current_funding_rate", "GET", MARKET_CURRENT_FUND_RATE, signed=False,
    params=(_req("symbol"),),
    description="Current funding rate",
))

register(EndpointSpec(
    "funding_rate_history", "GET", MARKET_HISTORY_FUND_RATE, signed=False,
    params=(_req("category"), _req("symbol"), _opt("cursor"), _opt("limit", kind=int)),
    description="Funding rate history",
))

register(EndpointSpec(
    "open_interest", "GET", MARKET_OPEN_INTEREST, signed=False,
    params=(_req("category"), _opt("symbol")),
    description="Open interest",
))

register(EndpointSpec(
    "oi_limit", "GET", MARKET_OI_LIMIT, signed=False,
    params=(_req("category"), _opt("symbol")),
    description="Open interest limits",
))

register(EndpointSpec(
    "position_tier", "GET", MARKET_POSITION_TIER, signed=False,
    params=(_req("category"), _opt("symbol"), _opt("coin")),
    description="Risk tiers",
))

register(EndpointSpec(
    "discount_rate", "GET", MARKET_DISCOUNT_RATE, signed=False,
    description="Collateral discount rates",
))

register(EndpointSpec(
    "margin_loans", "GET", MARKET_MARGIN_LOANS, signed=False,
    params=(_req("coin"),),
    description="Margin borrowing rates and limits",
))

register(EndpointSpec(
    "proof_of_reserves", "GET", MARKET_PROOF_OF_RESERVES, signed=False,
    description="Proof of reserves",
))

register(EndpointSpec(
    "risk_reserve", "GET", MARKET_RISK_RESERVE, signed=False,
    params=(_req("category"), _opt("symbol")),
    description="Risk reserve fund",
))

register(EndpointSpec(
    "recent_fills", "GET", MARKET_FILLS, signed=False,
    params=(_req("category"), _req("symbol"), _opt("limit", kind=int)),
    description="Recent public trades",
))
