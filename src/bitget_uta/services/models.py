#!/usr/bin/env python3
"""
UTA Result Models
==================================================
Typed views of the `data` member of response envelopes.

Each field declares its wire name in metadata; from_dict() maps wire
keys to attributes, ignores unknown keys and fills missing ones with
"" (scalars) or [] (lists). Numeric values are kept as the exchange's
decimal strings so no precision is lost.
"""

from dataclasses import MISSING, dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, TypeVar

T = TypeVar("T", bound="WireModel")


def wire(name: str, model: Optional[type] = None, many: bool = False):
    """
    Declare a model field.

    Args:
        name: Key in the JSON object
        model: Nested WireModel type for objects / lists of objects
        many: Field is a list; without a model, elements are kept as-is
    """
    metadata = {"wire": name, "model": model}
    if many:
        return field(default_factory=list, metadata=metadata)
    return field(default="", metadata=metadata)


def _scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class WireModel:
    """Base for dataclass models decoded from wire JSON"""

    @classmethod
    def from_dict(cls: Type[T], data: Mapping[str, Any]) -> T:
        """
        Build an instance from a decoded JSON object.

        Raises:
            TypeError: data is not a JSON object
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for f in fields(cls):
            key = f.metadata.get("wire", f.name)
            if key not in data or data[key] is None:
                continue
            value = data[key]
            nested = f.metadata.get("model")

            if f.default is MISSING:
                # list field
                if not isinstance(value, list):
                    raise TypeError(f"{cls.__name__}.{f.name} expects a list")
                values[f.name] = [nested.decode(v) if nested else v for v in value]
            elif nested:
                values[f.name] = nested.decode(value)
            else:
                values[f.name] = _scalar(value)

        return cls(**values)

    @classmethod
    def decode(cls: Type[T], item: Any) -> T:
        """Decode one element of `data`"""
        return cls.from_dict(item)


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------

@dataclass
class SymbolConfig(WireModel):
    symbol: str = wire("symbol")
    category: str = wire("category")
    leverage: str = wire("leverage")
    margin_mode: str = wire("marginMode")


@dataclass
class CoinConfig(WireModel):
    coin: str = wire("coin")
    category: str = wire("category")
    leverage: str = wire("leverage")
    margin_mode: str = wire("marginMode")


@dataclass
class AccountInfo(WireModel):
    """Account settings: asset mode, holding mode and per-symbol/coin leverage"""

    asset_mode: str = wire("assetMode")
    holding_mode: str = wire("holdingMode")
    stp_mode: str = wire("stpMode")
    symbol_config: List[SymbolConfig] = wire("symbolConfig", model=SymbolConfig, many=True)
    coin_config: List[CoinConfig] = wire("coinConfig", model=CoinConfig, many=True)


@dataclass
class AssetInfo(WireModel):
    coin: str = wire("coin")
    available: str = wire("available")
    frozen: str = wire("frozen")
    balance: str = wire("balance")
    unrealized_pnl: str = wire("unrealizedPNL")
    cross_margin_assets: str = wire("crossMarginAssets")
    isolated_balance: str = wire("isolatedBalance")
    borrow_amount: str = wire("borrowAmount")
    accrued_interest: str = wire("accruedInterest")
    net_assets: str = wire("netAssets")
    net_assets_usd: str = wire("netAssetsUSD")


@dataclass
class AccountAssets(WireModel):
    """Unified account equity and per-coin balances"""

    account_equity: str = wire("accountEquity")
    unrealized_pnl: str = wire("unrealizedPNL")
    effective_equity: str = wire("effectiveEquity")
    cross_margin_ratio: str = wire("crossMarginRatio")
    isolated_margin_ratio: str = wire("isolatedMarginRatio")
    cross_maintenance_ratio: str = wire("crossMaintenanceRatio")
    assets: List[AssetInfo] = wire("assets", model=AssetInfo, many=True)

    def get_asset(self, coin: str) -> Optional[AssetInfo]:
        for asset in self.assets:
            if asset.coin == coin:
                return asset
        return None


@dataclass
class FundingAsset(WireModel):
    coin: str = wire("coin")
    available: str = wire("available")
    frozen: str = wire("frozen")
    balance: str = wire("balance")


@dataclass
class FeeRate(WireModel):
    symbol: str = wire("symbol")
    category: str = wire("category")
    maker_rate: str = wire("makerRate")
    taker_rate: str = wire("takerRate")


@dataclass
class TransferResult(WireModel):
    transfer_id: str = wire("transferId")
    client_oid: str = wire("clientOid")


@dataclass
class TransferRecord(WireModel):
    transfer_id: str = wire("transferId")
    client_oid: str = wire("clientOid")
    from_type: str = wire("fromType")
    to_type: str = wire("toType")
    amount: str = wire("amount")
    coin: str = wire("coin")
    symbol: str = wire("symbol")
    status: str = wire("status")
    timestamp: str = wire("timestamp")


@dataclass
class SwitchStatus(WireModel):
    """Progress of a switch to the unified account: process, success or fail"""

    status: str = wire("status")


# ---------------------------------------------------------------------------
# Trading
# ---------------------------------------------------------------------------

@dataclass
class Order(WireModel):
    order_id: str = wire("orderId")
    client_oid: str = wire("clientOid")
    symbol: str = wire("symbol")
    category: str = wire("category")
    side: str = wire("side")
    order_type: str = wire("orderType")
    price: str = wire("price")
    size: str = wire("size")
    filled_size: str = wire("filledSize")
    filled_amount: str = wire("filledAmount")
    avg_price: str = wire("avgPrice")
    status: str = wire("status")
    time_in_force: str = wire("timeInForce")
    reduce_only: str = wire("reduceOnly")
    position_side: str = wire("positionSide")
    stp: str = wire("stp")
    created_time: str = wire("createdTime")
    updated_time: str = wire("updatedTime")


@dataclass
class Fill(WireModel):
    fill_id: str = wire("fillId")
    order_id: str = wire("orderId")
    client_oid: str = wire("clientOid")
    symbol: str = wire("symbol")
    category: str = wire("category")
    side: str = wire("side")
    fill_price: str = wire("fillPrice")
    fill_size: str = wire("fillSize")
    fill_amount: str = wire("fillAmount")
    fee: str = wire("fee")
    fee_coin: str = wire("feeCoin")
    trade_role: str = wire("tradeRole")
    timestamp: str = wire("timestamp")


@dataclass
class Position(WireModel):
    symbol: str = wire("symbol")
    category: str = wire("category")
    side: str = wire("side")
    size: str = wire("size")
    avg_price: str = wire("avgPrice")
    mark_price: str = wire("markPrice")
    unrealized_pnl: str = wire("unrealizedPNL")
    leverage: str = wire("leverage")
    margin_mode: str = wire("marginMode")
    position_margin: str = wire("positionMargin")
    liquidation_price: str = wire("liquidationPrice")
    created_time: str = wire("createdTime")
    updated_time: str = wire("updatedTime")


@dataclass
class StrategyOrder(WireModel):
    """Take-profit / stop-loss order"""

    order_id: str = wire("orderId")
    client_oid: str = wire("clientOid")
    symbol: str = wire("symbol")
    category: str = wire("category")
    strategy_type: str = wire("strategyType")
    trigger_price: str = wire("triggerPrice")
    trigger_type: str = wire("triggerType")
    order_type: str = wire("orderType")
    price: str = wire("price")
    size: str = wire("size")
    side: str = wire("side")
    position_side: str = wire("positionSide")
    status: str = wire("status")
    created_time: str = wire("createdTime")
    updated_time: str = wire("updatedTime")


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------

@dataclass
class Ticker(WireModel):
    symbol: str = wire("symbol")
    category: str = wire("category")
    last_price: str = wire("lastPrice")
    open_price_24h: str = wire("openPrice24h")
    high_price_24h: str = wire("highPrice24h")
    low_price_24h: str = wire("lowPrice24h")
    ask1_price: str = wire("ask1Price")
    bid1_price: str = wire("bid1Price")
    bid1_size: str = wire("bid1Size")
    ask1_size: str = wire("ask1Size")
    price_24h_pcnt: str = wire("price24hPcnt")
    volume_24h: str = wire("volume24h")
    turnover_24h: str = wire("turnover24h")
    index_price: str = wire("indexPrice")
    mark_price: str = wire("markPrice")
    funding_rate: str = wire("fundingRate")
    open_interest: str = wire("openInterest")
    delivery_start_time: str = wire("deliveryStartTime")
    delivery_time: str = wire("deliveryTime")
    delivery_status: str = wire("deliveryStatus")
    timestamp: str = wire("ts")


@dataclass
class Candlestick(WireModel):
    """
    OHLCV bar.

    The exchange sends each bar as a 7-element array:
    [timestamp, open, high, low, close, volume, turnover]
    """

    timestamp: str = ""
    open: str = ""
    high: str = ""
    low: str = ""
    close: str = ""
    volume: str = ""
    turnover: str = ""

    @classmethod
    def from_list(cls, values: Sequence[Any]) -> "Candlestick":
        """Build from the wire array; arrays shorter than 7 give an empty bar"""
        if not isinstance(values, (list, tuple)):
            raise TypeError(f"Candlestick expects an array, got {type(values).__name__}")
        if len(values) < 7:
            return cls()
        return cls(*(_scalar(v) for v in values[:7]))

    @classmethod
    def decode(cls, item: Any) -> "Candlestick":
        return cls.from_list(item)

    @property
    def is_empty(self) -> bool:
        return not self.timestamp


@dataclass
class OrderBook(WireModel):
    """Bids and asks as [price, size] string pairs, best first"""

    symbol: str = wire("symbol")
    category: str = wire("category")
    bids: List[List[str]] = wire("bids", many=True)
    asks: List[List[str]] = wire("asks", many=True)
    timestamp: str = wire("ts")

    def best_bid(self) -> Optional[List[str]]:
        return self.bids[0] if self.bids else None

    def best_ask(self) -> Optional[List[str]]:
        return self.asks[0] if self.asks else None
