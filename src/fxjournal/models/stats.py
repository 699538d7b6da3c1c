from __future__ import annotations

from pydantic import BaseModel


class TradeStats(BaseModel):
    total_trades: int = 0
    total_pnl: float = 0.0
    total_pips: float = 0.0
    win_rate: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    profit_factor: float = 0.0
    avg_pips: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0


class HistoryStats(BaseModel):
    win_rate: float = 0.0
    total_pnl: float = 0.0
    win_count: int = 0
    loss_count: int = 0
