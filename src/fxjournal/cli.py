from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from typing import Iterator, NoReturn

import typer

from .config import resolve_env_file
from .core.formatting import format_pips, format_signed_currency
from .core.pnl import compute_pips, compute_pnl, pip_unit, pip_value_per_lot, trade_result
from .core.policies import DayOfWeek, HistorySort
from .models.reminder import ReminderPreferences
from .models.trade import FOREX_PAIRS, Timeframe, Trade, TradeType
from .notifications.reminder_service import ReminderConfigError
from .runtime.app import RuntimeContainer, build_runtime
from .runtime.worker import ReminderWorker
from .services.journal_service import HistoryEntry, TradeValidationError
from .storage.db import StorageError
from .storage.snapshot_store import JsonSnapshotStore


app = typer.Typer(add_completion=False, help="fxjournal: forex/CFD trade journal with pip and P&L statistics")


def _json_print(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


@contextmanager
def _runtime(*, console_logging: bool = False) -> Iterator[RuntimeContainer]:
    try:
        runtime = build_runtime(console_logging=console_logging)
    except StorageError as exc:
        _storage_failure(exc)
    try:
        yield runtime
    except StorageError as exc:
        _storage_failure(exc)
    finally:
        runtime.close()


def _storage_failure(exc: StorageError) -> NoReturn:
    typer.echo(f"Error: journal storage failed: {exc}", err=True)
    raise typer.Exit(code=1) from exc


def _entry_payload(entry: HistoryEntry) -> dict[str, object]:
    return {
        **entry.trade.to_record(),
        "status": "open" if entry.trade.is_open else "closed",
        "pips": entry.result.pips,
        "pnl": entry.result.pnl,
        "pips_display": format_pips(entry.result.pips),
        "pnl_display": format_signed_currency(entry.result.pnl),
    }


@app.command()
def add(
    instrument: str = typer.Option(..., "--instrument", "-i", help="Symbol, e.g. EUR/USD"),
    trade_type: TradeType = typer.Option(TradeType.BUY, "--type", "-t", help="buy or sell"),
    entry_price: str = typer.Option(..., "--entry", help="Entry price"),
    lot_size: str = typer.Option(..., "--lots", help="Lot size (standard lots)"),
    exit_price: str | None = typer.Option(None, "--exit", help="Exit price; omit for an open trade"),
    stop_loss: str | None = typer.Option(None, "--stop-loss", help="Stop loss (informational)"),
    timeframe: Timeframe = typer.Option(Timeframe.H1, "--timeframe"),
    entry_date: str | None = typer.Option(None, "--date", help="Entry date YYYY-MM-DD (default today)"),
    entry_time: str | None = typer.Option(None, "--time", help="Entry time HH:MM (default now)"),
    notes: str = typer.Option("", "--notes"),
    strategy: str = typer.Option("", "--strategy"),
) -> None:
    with _runtime() as runtime:
        try:
            trade = runtime.journal_service.add_trade(
                {
                    "instrument": instrument,
                    "trade_type": trade_type.value,
                    "entry_price": entry_price,
                    "exit_price": exit_price,
                    "stop_loss": stop_loss,
                    "lot_size": lot_size,
                    "timeframe": timeframe.value,
                    "entry_date": entry_date,
                    "entry_time": entry_time,
                    "notes": notes,
                    "strategy": strategy,
                }
            )
        except TradeValidationError as exc:
            raise typer.BadParameter(str(exc)) from exc
        _json_print({"added": _entry_payload(HistoryEntry(trade=trade, result=trade_result(trade)))})


@app.command()
def delete(trade_id: str = typer.Argument(..., help="Trade id to delete")) -> None:
    with _runtime() as runtime:
        if not runtime.journal_service.delete_trade(trade_id):
            raise typer.BadParameter(f"No trade with id {trade_id!r}")
        _json_print({"deleted": trade_id})


@app.command()
def show(trade_id: str = typer.Argument(..., help="Trade id to show")) -> None:
    with _runtime() as runtime:
        entry = runtime.journal_service.trade_detail(trade_id)
        if entry is None:
            raise typer.BadParameter(f"No trade with id {trade_id!r}")
        _json_print(_entry_payload(entry))


@app.command()
def history(
    sort: HistorySort = typer.Option(HistorySort.DATE, "--sort", help="date, earliest, profit or loss"),
    limit: int | None = typer.Option(None, min=1, help="Show only the first N trades"),
) -> None:
    with _runtime() as runtime:
        view = runtime.journal_service.history(sort)
        entries = view.entries[:limit] if limit else view.entries
        _json_print(
            {
                "sort": view.sort.label,
                "stats": view.stats.model_dump(),
                "trades": [_entry_payload(e) for e in entries],
            }
        )


@app.command()
def stats() -> None:
    with _runtime() as runtime:
        _json_print(runtime.metrics_service.analyze_summary())


@app.command()
def calc(
    instrument: str = typer.Argument(..., help="Symbol, e.g. USD/JPY"),
    entry_price: float = typer.Argument(...),
    exit_price: float = typer.Argument(...),
    trade_type: TradeType = typer.Option(TradeType.BUY, "--type", "-t"),
    lot_size: float = typer.Option(1.0, "--lots"),
) -> None:
    """Pip and P&L calculation without recording a trade."""
    pips = compute_pips(instrument, entry_price, exit_price, trade_type)
    pnl = compute_pnl(instrument, entry_price, exit_price, trade_type, lot_size)
    _json_print(
        {
            "instrument": instrument.upper(),
            "pip_unit": pip_unit(instrument),
            "pip_value_per_lot": pip_value_per_lot(instrument),
            "pips": pips,
            "pnl": pnl,
            "pips_display": format_pips(pips),
            "pnl_display": format_signed_currency(pnl),
        }
    )


@app.command()
def instruments() -> None:
    _json_print(
        [
            {"instrument": pair, "pip_unit": pip_unit(pair), "pip_value_per_lot": pip_value_per_lot(pair)}
            for pair in FOREX_PAIRS
        ]
    )


@app.command("export")
def export_cmd(
    out: Path | None = typer.Option(None, help="Output JSON file (default: storage export dir)"),
) -> None:
    with _runtime() as runtime:
        now = datetime.now(tz=UTC)
        target = out or runtime.settings.storage.export_dir / f"fxjournal_{now.strftime('%Y%m%d_%H%M%S')}.json"
        trades = runtime.trades.all()
        path = JsonSnapshotStore(target).save(
            {
                "key": runtime.settings.storage.trades_key,
                "exported_at": now.isoformat(),
                "trades": [t.to_record() for t in trades],
            }
        )
        _json_print({"export": str(path), "trades": len(trades)})


@app.command("import")
def import_cmd(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Snapshot written by 'export'"),
    yes: bool = typer.Option(False, "--yes", help="Confirm replacing the current journal"),
) -> None:
    if not yes:
        raise typer.BadParameter("Refusing to replace the journal without --yes")
    try:
        payload = JsonSnapshotStore(source).load() or {}
        records = payload.get("trades", [])
        trades = [Trade.model_validate(r) for r in records]
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid snapshot: {exc}") from exc
    with _runtime() as runtime:
        try:
            runtime.trades.replace_all(trades)
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
        _json_print({"imported": len(trades), "source": str(source)})


def _parse_days(days: list[str]) -> list[int]:
    parsed: list[int] = []
    for raw in days:
        value = raw.strip()
        if value.isdigit():
            parsed.append(int(value))
            continue
        try:
            parsed.append(int(DayOfWeek[value.upper()]))
        except KeyError as exc:
            raise typer.BadParameter(f"Unknown day {raw!r}; use 0-6 (0=Sunday) or a day name") from exc
    return parsed


@app.command("reminders-set")
def reminders_set(
    day: list[str] = typer.Option(
        ["1", "2", "3", "4", "5"],
        "--day",
        "-d",
        help="Day of week, repeatable: 0-6 (0=Sunday) or name",
    ),
    hour: int = typer.Option(17, min=0, max=23),
    minute: int = typer.Option(0, min=0, max=59),
    message: str | None = typer.Option(None, help="Reminder text"),
    enabled: bool = typer.Option(True, "--enable/--disable", help="Disable to turn all reminders off"),
) -> None:
    with _runtime() as runtime:
        try:
            prefs = ReminderPreferences(
                enabled=enabled,
                days=_parse_days(day),
                hour=hour,
                minute=minute,
                message=message or runtime.settings.reminders.message,
            )
            result = runtime.reminder_service.schedule(prefs)
        except ReminderConfigError as exc:
            raise typer.BadParameter(str(exc)) from exc
        except ValueError as exc:
            raise typer.BadParameter(str(exc)) from exc
        _json_print(
            {
                "enabled": result.enabled,
                "summary": result.summary,
                "scheduled": [r.model_dump(mode="json") for r in result.scheduled],
            }
        )


@app.command("reminders-status")
def reminders_status() -> None:
    with _runtime() as runtime:
        state = runtime.reminder_service.state()
        _json_print(
            {
                "preferences": state.preferences.model_dump(),
                "scheduled": [r.model_dump(mode="json") for r in state.scheduled],
                "next_due": runtime.reminder_service.next_due(),
                "ntfy_configured": runtime.notifier.configured,
            }
        )


@app.command("reminders-cancel")
def reminders_cancel() -> None:
    with _runtime() as runtime:
        _json_print({"cancelled": runtime.reminder_service.cancel()})


@app.command("reminders-run")
def reminders_run(
    one_shot: bool = typer.Option(False, help="Dispatch due reminders once and exit"),
    iterations: int | None = typer.Option(None, min=1, help="Run a fixed number of polls (testing)"),
) -> None:
    with _runtime(console_logging=True) as runtime:
        sent = ReminderWorker(runtime).run(one_shot=one_shot, max_iterations=iterations)
        _json_print({"sent": sent})


@app.command()
def doctor() -> None:
    with _runtime() as runtime:
        env_file = resolve_env_file()
        _json_print(
            {
                "db_path": str(runtime.settings.storage.db_path),
                "trades_key": runtime.settings.storage.trades_key,
                "trades": len(runtime.trades.all()),
                "config_env_file": str(env_file) if env_file else None,
                "log_path": str(runtime.settings.logging.log_path),
                "timezone": runtime.settings.timezone,
                "notifications": {
                    "enabled": runtime.settings.notifications.enabled,
                    "topic": runtime.settings.notifications.topic,
                    "url": runtime.settings.notifications.ntfy_url,
                },
            }
        )


if __name__ == "__main__":
    app()
