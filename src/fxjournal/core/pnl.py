"""Pip and P&L arithmetic for journal trades.

Every function here is pure and total: degenerate input (missing prices, open
trades, unknown symbols) yields a neutral number instead of an exception, so
callers never have to guard these calls.
"""
from __future__ import annotations

import math
import re

from ..models.trade import Trade, TradeResult, TradeType

DEFAULT_PIP_UNIT = 0.0001
DEFAULT_PIP_VALUE_PER_LOT = 10.0

# (substrings, pip unit), first match wins.
_PIP_UNITS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("JPY",), 0.01),
    (("XAU", "GOLD"), 0.1),
    (("XAG", "SILVER"), 0.001),
    (("BTC", "ETH"), 1.0),
)

_USD_QUOTED = re.compile(r"(EUR|GBP|AUD|NZD)USD")
_USD_BASED = re.compile(r"USD(CHF|CAD)")
_CROSS_PAIR = re.compile(r"(EUR|GBP|AUD|NZD)(CHF|CAD|JPY)")
_SEPARATORS = re.compile(r"[/\-_\s]")


def _half_up(value: float, places: int) -> float:
    # Halves go towards +infinity; NaN and inf pass through.
    factor = 10**places
    scaled = value * factor
    if not math.isfinite(scaled):
        return scaled / factor
    return math.floor(scaled + 0.5) / factor


def _missing(value: object) -> bool:
    return value is None or value == 0 or value == ""


def _as_float(value: object) -> float:
    # Unparseable input becomes NaN rather than an error.
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _contains_any(symbol: str, needles: tuple[str, ...]) -> bool:
    return any(needle in symbol for needle in needles)


def pip_unit(instrument: str | None) -> float:
    """Smallest standard price increment for ``instrument``."""
    if not instrument:
        return DEFAULT_PIP_UNIT
    symbol = instrument.upper()
    for needles, unit in _PIP_UNITS:
        if _contains_any(symbol, needles):
            return unit
    return DEFAULT_PIP_UNIT


def pip_value_per_lot(instrument: str | None) -> float:
    """Approximate account-currency value of one pip on one standard lot.

    Static table, not a live-rate conversion. Pattern rules compare the
    symbol with separators stripped, so "EUR/USD" and "EURUSD" classify alike.
    """
    if not instrument:
        return DEFAULT_PIP_VALUE_PER_LOT
    symbol = instrument.upper()
    compact = _SEPARATORS.sub("", symbol)
    if _USD_QUOTED.fullmatch(compact):
        return 10.0
    if _USD_BASED.fullmatch(compact):
        return 10.0
    if "JPY" in symbol:
        return 9.3
    if _contains_any(symbol, ("XAU", "GOLD")):
        return 10.0
    if _contains_any(symbol, ("XAG", "SILVER")):
        return 50.0
    if _contains_any(symbol, ("BTC", "ETH")):
        return 10.0
    if _CROSS_PAIR.fullmatch(compact):
        return 10.0
    return DEFAULT_PIP_VALUE_PER_LOT


def compute_pips(
    instrument: str | None,
    entry_price: float | None,
    exit_price: float | None,
    trade_type: TradeType | str | None,
) -> float:
    """Signed pip movement, positive when the trade moved in its favour.

    Rounded half-up to one decimal. Open trades (no exit price) return 0.
    """
    if not instrument or _missing(entry_price) or _missing(exit_price):
        return 0.0
    price_diff = _as_float(exit_price) - _as_float(entry_price)
    if trade_type == TradeType.SELL:
        price_diff = -price_diff
    return _half_up(price_diff / pip_unit(instrument), 1)


def compute_pnl(
    instrument: str | None,
    entry_price: float | None,
    exit_price: float | None,
    trade_type: TradeType | str | None,
    lot_size: float | None,
) -> float:
    """Monetary P&L: pips x pip value per lot x lots, rounded half-up to cents."""
    if not instrument or _missing(entry_price) or _missing(exit_price) or _missing(lot_size):
        return 0.0
    pips = compute_pips(instrument, entry_price, exit_price, trade_type)
    return _half_up(pips * pip_value_per_lot(instrument) * _as_float(lot_size), 2)


def trade_result(trade: Trade) -> TradeResult:
    return TradeResult(
        trade_id=trade.id,
        pips=compute_pips(trade.instrument, trade.entry_price, trade.exit_price, trade.trade_type),
        pnl=compute_pnl(
            trade.instrument,
            trade.entry_price,
            trade.exit_price,
            trade.trade_type,
            trade.lot_size,
        ),
    )
