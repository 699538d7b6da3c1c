from __future__ import annotations


def format_currency(value: float) -> str:
    return f"${value:.2f}"


def format_signed_currency(value: float) -> str:
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):.2f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_pips(value: float) -> str:
    prefix = "+" if value > 0 else ""
    return f"{prefix}{value:.1f}"


def format_risk_reward(avg_win: float, avg_loss: float) -> str:
    if avg_loss >= 0:
        return "N/A"
    return f"1:{avg_win / abs(avg_loss):.2f}"
