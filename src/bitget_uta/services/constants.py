#!/usr/bin/env python3
"""
UTA Enumerations
==================================================
Wire values for the enumerated request fields. Services accept either
the enum member or its plain string value.
"""

from enum import Enum


class Category(str, Enum):
    """Product category"""

    SPOT = "SPOT"
    MARGIN = "MARGIN"
    USDT_FUTURES = "USDT-FUTURES"
    COIN_FUTURES = "COIN-FUTURES"
    USDC_FUTURES = "USDC-FUTURES"


class Side(str, Enum):
    BUY = "buy"
    SELL = "sell"


class OrderType(str, Enum):
    LIMIT = "limit"
    MARKET = "market"


class TimeInForce(str, Enum):
    GTC = "gtc"
    IOC = "ioc"
    FOK = "fok"
    POST_ONLY = "post_only"


class PositionSide(str, Enum):
    """Position side for hedge mode"""

    LONG = "long"
    SHORT = "short"


class STP(str, Enum):
    """Self-trade prevention mode"""

    NONE = "none"
    CANCEL_TAKER = "cancel_taker"
    CANCEL_MAKER = "cancel_maker"
    CANCEL_BOTH = "cancel_both"


class OrderStatus(str, Enum):
    LIVE = "live"
    NEW = "new"
    PARTIALLY_FILLED = "partially_filled"
    FILLED = "filled"
    CANCELLED = "cancelled"


class AccountType(str, Enum):
    """Transfer source/target account"""

    SPOT = "spot"
    P2P = "p2p"
    USDT_FUTURES = "usdt_futures"
    COIN_FUTURES = "coin_futures"
    USDC_FUTURES = "usdc_futures"
    CROSSED_MARGIN = "crossed_margin"
    ISOLATED_MARGIN = "isolated_margin"
    UTA = "uta"


class HoldingMode(str, Enum):
    ONE_WAY = "one_way_mode"
    HEDGE = "hedge_mode"


class Interval(str, Enum):
    """Candlestick interval"""

    MIN_1 = "1m"
    MIN_3 = "3m"
    MIN_5 = "5m"
    MIN_15 = "15m"
    MIN_30 = "30m"
    HOUR_1 = "1H"
    HOUR_4 = "4H"
    HOUR_6 = "6H"
    HOUR_12 = "12H"
    DAY_1 = "1D"
    DAY_3 = "3D"


class CandlestickType(str, Enum):
    MARKET = "MARKET"
    MARK = "MARK"
    INDEX = "INDEX"
