from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fxjournal.cli import _parse_days, app
from fxjournal.config import AppSettings

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FXJOURNAL_ENV_FILE", raising=False)
    monkeypatch.setenv("STORAGE__DB_PATH", str(tmp_path / "data" / "journal.sqlite3"))
    monkeypatch.setenv("STORAGE__EXPORT_DIR", str(tmp_path / "exports"))
    monkeypatch.setenv("LOGGING__LOG_DIR", str(tmp_path / "logs"))


def _invoke(*args: str) -> dict:
    result = runner.invoke(app, list(args))
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def _add(*extra: str) -> dict:
    return _invoke("add", "--instrument", "EUR/USD", "--entry", "1.1000", "--lots", "1", *extra)["added"]


def test_add_history_stats_and_delete() -> None:
    win = _add("--exit", "1.1050")
    assert win["pips"] == 50.0
    assert win["pnl"] == 500.0
    assert win["pnl_display"] == "+$500.00"
    assert win["status"] == "closed"
    assert win["tradeType"] == "buy"

    loss = _add("--exit", "1.1050", "--type", "sell", "--lots", "0.5")
    assert loss["pnl"] == -250.0

    history = _invoke("history", "--sort", "loss")
    assert history["sort"] == "Highest Loss"
    assert [t["id"] for t in history["trades"]] == [loss["id"], win["id"]]
    assert history["stats"]["win_count"] == 1

    stats = _invoke("stats")
    assert stats["stats"]["total_trades"] == 2
    assert stats["display"]["total_pnl"] == "$250.00"
    assert stats["display"]["win_rate"] == "50.0%"
    assert stats["display"]["profit_factor"] == "2.00"

    assert _invoke("delete", loss["id"]) == {"deleted": loss["id"]}
    assert [t["id"] for t in _invoke("history")["trades"]] == [win["id"]]


def test_open_trade_is_recorded_with_zero_result() -> None:
    trade = _add()
    assert trade["status"] == "open"
    assert trade["exitPrice"] is None
    assert trade["pnl"] == 0
    shown = _invoke("show", trade["id"])
    assert shown["id"] == trade["id"]


def test_add_rejects_malformed_price() -> None:
    result = runner.invoke(app, ["add", "--instrument", "EUR/USD", "--entry", "abc", "--lots", "1"])
    assert result.exit_code != 0


def test_unknown_trade_id_is_an_error() -> None:
    assert runner.invoke(app, ["delete", "123"]).exit_code != 0
    assert runner.invoke(app, ["show", "123"]).exit_code != 0


def test_calc_does_not_touch_journal() -> None:
    result = _invoke("calc", "USD/JPY", "110.00", "110.50")
    assert result["pips"] == 50.0
    assert result["pnl"] == 465.0
    assert result["pip_unit"] == 0.01
    assert _invoke("history")["trades"] == []


def test_instruments_lists_picker_pairs() -> None:
    pairs = _invoke("instruments")
    assert pairs[0]["instrument"] == "EUR/USD"
    assert {p["instrument"] for p in pairs} >= {"XAU/USD", "BTC/USD"}


def test_export_then_import_round_trip(tmp_path: Path) -> None:
    trade = _add("--exit", "1.1050")
    exported = _invoke("export", "--out", str(tmp_path / "snap.json"))
    assert exported["trades"] == 1

    _invoke("delete", trade["id"])
    assert runner.invoke(app, ["import", str(tmp_path / "snap.json")]).exit_code != 0
    assert _invoke("import", str(tmp_path / "snap.json"), "--yes")["imported"] == 1
    assert [t["id"] for t in _invoke("history")["trades"]] == [trade["id"]]


def test_reminders_set_status_cancel() -> None:
    result = _invoke("reminders-set", "--day", "monday", "--day", "3", "--hour", "18", "--minute", "30")
    assert result["enabled"] is True
    assert result["summary"].endswith("Monday, Wednesday at 18:30!")
    assert len(result["scheduled"]) == 2

    status = _invoke("reminders-status")
    assert status["preferences"]["days"] == [1, 3]
    assert status["ntfy_configured"] is False

    assert _invoke("reminders-cancel") == {"cancelled": 2}
    assert _invoke("reminders-set", "--disable")["enabled"] is False


def test_reminders_set_rejects_unknown_day() -> None:
    assert runner.invoke(app, ["reminders-set", "--day", "someday"]).exit_code != 0


def test_parse_days_accepts_numbers_and_names() -> None:
    assert _parse_days(["0", "friday", "Saturday"]) == [0, 5, 6]


def test_ntfy_prefixed_env_keys_are_supported(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NOTIFICATIONS__NTFY_ENABLED", "true")
    monkeypatch.setenv("NOTIFICATIONS__NTFY_TOPIC", "fx-reminders")
    monkeypatch.setenv("NOTIFICATIONS__NTFY_URL", "https://ntfy.sh")
    monkeypatch.setenv("REMINDERS__HOUR", "8")

    settings = AppSettings(_env_file=None)

    assert settings.notifications.enabled is True
    assert settings.notifications.topic == "fx-reminders"
    assert settings.reminders.hour == 8
