from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from logging import Logger

from pydantic import ValidationError

from ..core.clock import Clock, to_local
from ..core.pnl import trade_result
from ..core.policies import HistorySort
from ..core.stats import compute_history_stats
from ..models.stats import HistoryStats
from ..models.trade import Timeframe, Trade, TradeInput, TradeResult, TradeType
from ..storage.trade_repository import TradeRepository


class TradeValidationError(ValueError):
    """Raised when a trade entry form is incomplete or malformed."""


REQUIRED_FIELDS = ("instrument", "entry_price", "lot_size")


@dataclass(slots=True)
class HistoryEntry:
    trade: Trade
    result: TradeResult


@dataclass(slots=True)
class HistoryView:
    sort: HistorySort
    entries: list[HistoryEntry]
    stats: HistoryStats


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_number(name: str, value: object, *, required: bool) -> float | None:
    if _blank(value):
        if required:
            raise TradeValidationError(f"{name} is required")
        return None
    try:
        return float(str(value).strip())
    except ValueError as exc:
        raise TradeValidationError(f"{name} must be a number, got {value!r}") from exc


def parse_trade_form(fields: Mapping[str, object], *, now: datetime) -> TradeInput:
    """Turn raw entry-form strings into a validated ``TradeInput``.

    Instrument, entry price and lot size are required; an empty exit price
    records an open trade. Date and time default to ``now``.
    """
    missing = [name for name in REQUIRED_FIELDS if _blank(fields.get(name))]
    if missing:
        raise TradeValidationError(f"Please fill in all required fields: {', '.join(missing)}")

    entry_date = str(fields.get("entry_date") or now.date().isoformat()).strip()
    entry_time = str(fields.get("entry_time") or now.strftime("%H:%M")).strip()
    try:
        date.fromisoformat(entry_date)
    except ValueError as exc:
        raise TradeValidationError(f"entry_date must be YYYY-MM-DD, got {entry_date!r}") from exc
    try:
        entry_time = time.fromisoformat(entry_time).strftime("%H:%M")
    except ValueError as exc:
        raise TradeValidationError(f"entry_time must be HH:MM, got {entry_time!r}") from exc

    entry_price = _parse_number("entry_price", fields.get("entry_price"), required=True)
    exit_price = _parse_number("exit_price", fields.get("exit_price"), required=False)
    stop_loss = _parse_number("stop_loss", fields.get("stop_loss"), required=False)
    lot_size = _parse_number("lot_size", fields.get("lot_size"), required=True)
    try:
        return TradeInput(
            instrument=str(fields["instrument"]).strip().upper(),
            trade_type=str(fields.get("trade_type") or TradeType.BUY).strip().lower(),
            entry_price=entry_price,
            exit_price=exit_price,
            stop_loss=stop_loss,
            lot_size=lot_size,
            timeframe=str(fields.get("timeframe") or Timeframe.H1).strip().upper(),
            entry_date=entry_date,
            entry_time=entry_time,
            notes=str(fields.get("notes") or ""),
            strategy=str(fields.get("strategy") or ""),
        )
    except ValidationError as exc:
        raise TradeValidationError(str(exc)) from exc


def sort_trades(entries: list[HistoryEntry], order: HistorySort) -> list[HistoryEntry]:
    if order == HistorySort.EARLIEST:
        return sorted(entries, key=lambda e: e.trade.entry_date)
    if order == HistorySort.PROFIT:
        return sorted(entries, key=lambda e: e.result.pnl, reverse=True)
    if order == HistorySort.LOSS:
        return sorted(entries, key=lambda e: e.result.pnl)
    return sorted(entries, key=lambda e: e.trade.created_at, reverse=True)


class JournalService:
    def __init__(self, *, repository: TradeRepository, clock: Clock, logger: Logger, timezone: str = "UTC") -> None:
        self.repository = repository
        self.clock = clock
        self.logger = logger
        self.timezone = timezone

    def add_trade(self, fields: Mapping[str, object]) -> Trade:
        local_now = to_local(self.clock.now(), self.timezone)
        trade_input = parse_trade_form(fields, now=local_now)
        return self.repository.add(trade_input)

    def delete_trade(self, trade_id: str) -> bool:
        return self.repository.delete(trade_id)

    def trade_detail(self, trade_id: str) -> HistoryEntry | None:
        trade = self.repository.get(trade_id)
        if trade is None:
            return None
        return HistoryEntry(trade=trade, result=trade_result(trade))

    def history(self, order: HistorySort = HistorySort.DATE) -> HistoryView:
        trades = self.repository.all()
        entries = [HistoryEntry(trade=t, result=trade_result(t)) for t in trades]
        return HistoryView(sort=order, entries=sort_trades(entries, order), stats=compute_history_stats(trades))
