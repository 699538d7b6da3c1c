from __future__ import annotations

from fxjournal.core.formatting import (
    format_currency,
    format_percent,
    format_pips,
    format_risk_reward,
    format_signed_currency,
)


def test_currency_and_percent() -> None:
    assert format_currency(500) == "$500.00"
    assert format_currency(-12.5) == "$-12.50"
    assert format_percent(66.666) == "66.7%"
    assert format_percent(0) == "0.0%"


def test_signed_values() -> None:
    assert format_signed_currency(37.75) == "+$37.75"
    assert format_signed_currency(-250) == "-$250.00"
    assert format_signed_currency(0) == "+$0.00"
    assert format_pips(50) == "+50.0"
    assert format_pips(-12.34) == "-12.3"
    assert format_pips(0) == "0.0"


def test_risk_reward() -> None:
    assert format_risk_reward(300.0, -150.0) == "1:2.00"
    assert format_risk_reward(300.0, 0.0) == "N/A"
