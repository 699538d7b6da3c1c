from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class TradeType(StrEnum):
    BUY = "buy"
    SELL = "sell"


class Timeframe(StrEnum):
    M1 = "M1"
    M5 = "M5"
    M15 = "M15"
    M30 = "M30"
    H1 = "H1"
    H4 = "H4"
    D1 = "D1"
    W1 = "W1"


FOREX_PAIRS: tuple[str, ...] = (
    "EUR/USD", "GBP/USD", "USD/JPY", "USD/CHF", "AUD/USD", "USD/CAD", "NZD/USD",
    "EUR/GBP", "EUR/JPY", "GBP/JPY", "CHF/JPY", "EUR/CHF", "AUD/JPY", "GBP/CHF",
    "XAU/USD", "XAG/USD", "WTI/USD", "BTC/USD", "ETH/USD",
)


class _CamelModel(BaseModel):
    # Persisted blob keeps the camelCase keys of the mobile app.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TradeInput(_CamelModel):
    instrument: str
    trade_type: TradeType = TradeType.BUY
    entry_price: float
    exit_price: float | None = None
    stop_loss: float | None = None
    lot_size: float
    timeframe: Timeframe = Timeframe.H1
    entry_date: str
    entry_time: str
    notes: str = ""
    strategy: str = ""


class Trade(TradeInput):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps (imports, older blobs) are read as UTC so history can sort them.
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value

    @property
    def is_open(self) -> bool:
        return self.exit_price is None

    def to_record(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)


class TradeResult(BaseModel):
    trade_id: str
    pips: float
    pnl: float
