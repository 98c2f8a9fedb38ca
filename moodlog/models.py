# moodlog/models.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union


@dataclass(frozen=True)
class MoodDefinition:
    symbol: str
    score: int
    label: str = ""


@dataclass(frozen=True)
class Entry:
    """
    One logged mood record, as read from the store.

    `timestamp` may be a datetime (naive = UTC) or ISO text; anything the
    aggregator cannot parse keeps the entry out of day-based views.
    """
    id: str
    timestamp: Union[datetime, str, None]
    mood: Optional[str] = None
    note: str = ""
    photo_ref: Optional[str] = None


# YYYY-MM-DD (UTC) -> entries observed that day
DayBuckets = Dict[str, List[Entry]]


@dataclass(frozen=True)
class TrendPoint:
    day: str      # YYYY-MM-DD
    label: str    # M/D, chart axis label
    value: float


@dataclass
class TrendWindow:
    points: List[TrendPoint] = field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [p.label for p in self.points]

    @property
    def values(self) -> List[float]:
        return [p.value for p in self.points]

    @property
    def mean(self) -> Optional[float]:
        if not self.points:
            return None
        return sum(self.values) / len(self.points)


@dataclass(frozen=True)
class DayExtreme:
    label: str
    day: str
    value: float


@dataclass
class Streaks:
    current: int
    best: int
    days_active_30: int


@dataclass
class InsightSummary:
    best_day: DayExtreme
    worst_day: DayExtreme
    most_frequent_symbol: Optional[str]
    streak_length_days: int
    qualitative_text: str


@dataclass
class StatsView:
    window: TrendWindow
    summary: str
    insights: InsightSummary
    streaks: Streaks
