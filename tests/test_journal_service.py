from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from fxjournal.core.policies import HistorySort
from fxjournal.models.trade import Timeframe, TradeType
from fxjournal.services.journal_service import TradeValidationError, parse_trade_form

NOW = datetime(2026, 3, 2, 10, 0, tzinfo=UTC)


def _form(**overrides: object) -> dict[str, object]:
    fields: dict[str, object] = {
        "instrument": "eur/usd",
        "trade_type": "buy",
        "entry_price": "1.1000",
        "exit_price": "1.1050",
        "stop_loss": "",
        "lot_size": "1",
        "timeframe": "h4",
        "entry_date": "2026-03-01",
        "entry_time": "08:15",
        "notes": "retest",
        "strategy": "",
    }
    fields.update(overrides)
    return fields


def test_parse_form_converts_numbers_and_enums() -> None:
    parsed = parse_trade_form(_form(), now=NOW)
    assert parsed.instrument == "EUR/USD"
    assert parsed.trade_type is TradeType.BUY
    assert parsed.entry_price == 1.1
    assert parsed.exit_price == 1.105
    assert parsed.stop_loss is None
    assert parsed.lot_size == 1.0
    assert parsed.timeframe is Timeframe.H4


def test_empty_exit_price_records_open_trade() -> None:
    parsed = parse_trade_form(_form(exit_price=""), now=NOW)
    assert parsed.exit_price is None


def test_date_and_time_default_to_now() -> None:
    parsed = parse_trade_form(_form(entry_date=None, entry_time=None), now=NOW)
    assert parsed.entry_date == "2026-03-02"
    assert parsed.entry_time == "10:00"


@pytest.mark.parametrize("missing", ["instrument", "entry_price", "lot_size"])
def test_required_fields(missing: str) -> None:
    with pytest.raises(TradeValidationError, match="required"):
        parse_trade_form(_form(**{missing: "  "}), now=NOW)


@pytest.mark.parametrize(
    "overrides",
    [
        {"entry_price": "abc"},
        {"exit_price": "1,1050"},
        {"trade_type": "hold"},
        {"timeframe": "H2"},
        {"entry_date": "03/01/2026"},
        {"entry_time": "8pm"},
    ],
)
def test_malformed_fields_are_rejected(overrides: dict[str, object]) -> None:
    with pytest.raises(TradeValidationError):
        parse_trade_form(_form(**overrides), now=NOW)


def test_add_and_detail(journal) -> None:
    trade = journal.add_trade(_form())
    entry = journal.trade_detail(trade.id)
    assert entry is not None
    assert entry.result.pips == 50.0
    assert entry.result.pnl == 500.0
    assert journal.trade_detail("nope") is None


def test_history_sorting_and_stats(journal, clock) -> None:
    win = journal.add_trade(_form(entry_date="2026-02-20"))
    clock.advance(timedelta(minutes=1))
    loss = journal.add_trade(_form(trade_type="sell", entry_date="2026-02-25"))
    clock.advance(timedelta(minutes=1))
    small = journal.add_trade(_form(instrument="USD/JPY", entry_price="110", exit_price="110.1", entry_date="2026-02-10"))
    clock.advance(timedelta(minutes=1))
    open_trade = journal.add_trade(_form(exit_price="", entry_date="2026-03-01"))

    def ids(order: HistorySort) -> list[str]:
        return [e.trade.id for e in journal.history(order).entries]

    assert ids(HistorySort.DATE) == [open_trade.id, small.id, loss.id, win.id]
    assert ids(HistorySort.EARLIEST) == [small.id, win.id, loss.id, open_trade.id]
    assert ids(HistorySort.PROFIT) == [win.id, small.id, open_trade.id, loss.id]
    assert ids(HistorySort.LOSS) == [loss.id, open_trade.id, small.id, win.id]

    view = journal.history()
    assert view.stats.win_count == 3
    assert view.stats.loss_count == 1
    assert view.stats.win_rate == pytest.approx(75.0)
    assert view.stats.total_pnl == pytest.approx(500.0 - 500.0 + 93.0)


def test_delete_trade(journal) -> None:
    trade = journal.add_trade(_form())
    assert journal.delete_trade(trade.id) is True
    assert journal.history().entries == []


def test_history_sorts_blob_with_naive_and_aware_timestamps(journal, store) -> None:
    base = {
        "instrument": "EUR/USD",
        "tradeType": "buy",
        "entryPrice": 1.1,
        "exitPrice": 1.105,
        "lotSize": 1.0,
        "entryDate": "2026-03-01",
        "entryTime": "09:00",
    }
    store.set_json(
        "forexTrades",
        [
            {**base, "id": "aware", "createdAt": "2026-03-01T09:00:00.000Z"},
            {**base, "id": "naive", "createdAt": "2026-03-01T10:00:00"},
        ],
    )
    journal.repository.load()

    assert [e.trade.id for e in journal.history(HistorySort.DATE).entries] == ["naive", "aware"]
