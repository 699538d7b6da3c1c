from __future__ import annotations

from dataclasses import dataclass

from ..core.formatting import format_currency, format_percent, format_pips, format_risk_reward
from ..core.stats import compute_stats
from ..storage.trade_repository import TradeRepository


@dataclass(slots=True)
class MetricsService:
    repository: TradeRepository

    def analyze_summary(self) -> dict[str, object]:
        trades = self.repository.all()
        stats = compute_stats(trades)
        return {
            "stats": stats.model_dump(),
            "open_trades": sum(1 for t in trades if t.is_open),
            "display": {
                "total_pnl": format_currency(stats.total_pnl),
                "total_pips": f"{format_pips(stats.total_pips)} pips total",
                "win_rate": format_percent(stats.win_rate),
                "winning_trades": str(stats.winning_trades),
                "losing_trades": str(stats.losing_trades),
                "profit_factor": f"{stats.profit_factor:.2f}",
                "avg_pips": format_pips(stats.avg_pips),
                "best_trade": format_currency(stats.best_trade),
                "worst_trade": format_currency(stats.worst_trade),
                "avg_win": format_currency(stats.avg_win),
                "avg_loss": format_currency(stats.avg_loss),
                "risk_reward": format_risk_reward(stats.avg_win, stats.avg_loss),
            },
        }
