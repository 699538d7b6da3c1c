from __future__ import annotations

from enum import IntEnum, StrEnum


class HistorySort(StrEnum):
    DATE = "date"
    EARLIEST = "earliest"
    PROFIT = "profit"
    LOSS = "loss"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]


_SORT_LABELS = {
    HistorySort.DATE: "Latest First",
    HistorySort.EARLIEST: "Earliest First",
    HistorySort.PROFIT: "Highest Profit",
    HistorySort.LOSS: "Highest Loss",
}


class DayOfWeek(IntEnum):
    # Sunday-based numbering, as stored in reminder preferences.
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_python_weekday(cls, weekday: int) -> "DayOfWeek":
        # datetime.weekday() counts Monday as 0.
        return cls((weekday + 1) % 7)
