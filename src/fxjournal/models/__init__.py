from .reminder import ReminderPreferences, ReminderState, ScheduledReminder
from .stats import HistoryStats, TradeStats
from .trade import FOREX_PAIRS, Timeframe, Trade, TradeInput, TradeResult, TradeType

__all__ = [
    "FOREX_PAIRS",
    "HistoryStats",
    "ReminderPreferences",
    "ReminderState",
    "ScheduledReminder",
    "Timeframe",
    "Trade",
    "TradeInput",
    "TradeResult",
    "TradeStats",
    "TradeType",
]
