from __future__ import annotations

from collections.abc import Iterable

from ..models.stats import HistoryStats, TradeStats
from ..models.trade import Trade
from .pnl import trade_result


def compute_stats(trades: Iterable[Trade]) -> TradeStats:
    """Fold a trade snapshot into journal statistics.

    A break-even trade (pnl == 0) counts as a winner; open trades therefore
    land on the winning side too.
    """
    results = [trade_result(trade) for trade in trades]
    if not results:
        return TradeStats()

    wins = [r.pnl for r in results if r.pnl >= 0]
    losses = [r.pnl for r in results if r.pnl < 0]
    total = len(results)
    total_pnl = sum(r.pnl for r in results)
    total_pips = sum(r.pips for r in results)
    gross_profit = sum(wins)
    gross_loss = abs(sum(losses))

    if gross_loss > 0:
        profit_factor = gross_profit / gross_loss
    elif gross_profit > 0:
        profit_factor = gross_profit
    else:
        profit_factor = 0.0

    return TradeStats(
        total_trades=total,
        total_pnl=total_pnl,
        total_pips=total_pips,
        win_rate=len(wins) / total * 100.0,
        winning_trades=len(wins),
        losing_trades=len(losses),
        avg_win=gross_profit / len(wins) if wins else 0.0,
        avg_loss=sum(losses) / len(losses) if losses else 0.0,
        best_trade=max(wins, default=0.0),
        worst_trade=min(losses, default=0.0),
        profit_factor=profit_factor,
        avg_pips=total_pips / total,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
    )


def compute_history_stats(trades: Iterable[Trade]) -> HistoryStats:
    stats = compute_stats(trades)
    return HistoryStats(
        win_rate=stats.win_rate,
        total_pnl=stats.total_pnl,
        win_count=stats.winning_trades,
        loss_count=stats.losing_trades,
    )
