# moodlog/services/trends.py
from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Iterable, Mapping, Optional, Sequence, Set, Tuple, Union

from moodlog.config import STREAK_MAX_DAYS, TREND_WINDOW_DAYS
from moodlog.models import (
    DayExtreme,
    Entry,
    InsightSummary,
    MoodDefinition,
    StatsView,
    Streaks,
    TrendPoint,
    TrendWindow,
)
from moodlog.services.analytics import average_per_day, day_key, group_by_utc_day
from moodlog.services.moods import effective_vocabulary

logger = logging.getLogger(__name__)

# Fixed 5-level table used for "most frequent mood", independent of the
# user's vocabulary. Order is the tie-break order.
CANONICAL_SYMBOLS = {5: "😄", 4: "😊", 3: "😐", 2: "😢", 1: "😡"}
CANONICAL_ORDER = ["😄", "😊", "😐", "😢", "😡"]

SUMMARY_TEXT = {
    "amazing": "😄 You’ve been feeling amazing this week!",
    "mostly good": "😊 You’ve had a mostly good week!",
    "okay": "😐 It’s been an okay week. Stay mindful.",
    "tough": "😢 This week’s been tough. Take care of yourself.",
    "rough": "😡 It seems like a rough week. Try to take some time to relax.",
}

DayLike = Union[date, datetime]


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _day_label(day: str) -> str:
    _, m, d = day.split("-")
    return f"{int(m)}/{int(d)}"  # e.g. 8/10


def _as_utc_date(today: DayLike) -> date:
    if isinstance(today, datetime):
        if today.tzinfo is not None:
            today = today.astimezone(timezone.utc)
        return today.date()
    return today


# ---------- Window ----------
def trailing_window(day_averages: Mapping[str, float], n: int = TREND_WINDOW_DAYS) -> Optional[TrendWindow]:
    """
    The `n` chronologically latest days that have data, oldest first.
    Returns None ("not enough data") when nothing is left or every value is 0.
    """
    if not day_averages or n <= 0:
        return None
    days = sorted(day_averages)[-n:]  # YYYY-MM-DD sorts chronologically
    points = [TrendPoint(day=d, label=_day_label(d), value=float(day_averages[d])) for d in days]
    if all(p.value == 0 for p in points):
        return None
    return TrendWindow(points=points)


def summary_bucket(mean: float) -> str:
    if mean >= 4.5:
        return "amazing"
    if mean >= 3.5:
        return "mostly good"
    if mean >= 2.5:
        return "okay"
    if mean >= 1.5:
        return "tough"
    return "rough"


def summary_text(mean: float) -> str:
    return SUMMARY_TEXT[summary_bucket(mean)]


# ---------- Insights ----------
def best_and_worst(window: TrendWindow) -> Optional[Tuple[DayExtreme, DayExtreme]]:
    """(best, worst) day of the window; the earlier day wins ties."""
    if not window.points:
        return None
    values = window.values
    hi = max(range(len(values)), key=values.__getitem__)
    lo = min(range(len(values)), key=values.__getitem__)

    def _extreme(i: int) -> DayExtreme:
        p = window.points[i]
        return DayExtreme(label=p.label, day=p.day, value=p.value)

    return _extreme(hi), _extreme(lo)


def most_frequent_mood_symbol(
    window: TrendWindow,
    rounding_fn: Callable[[float], int] = round_half_up,
) -> Optional[str]:
    """
    Round each day's value to a 1..5 score, tally the canonical symbols and
    return the most common one. Ties go to the earlier symbol in
    CANONICAL_ORDER.
    """
    counts: Counter = Counter()
    for v in window.values:
        sym = CANONICAL_SYMBOLS.get(int(rounding_fn(v)))
        if sym:
            counts[sym] += 1
    if not counts:
        return None
    return max(CANONICAL_ORDER, key=lambda s: counts[s])


def _active_days(day_buckets: Union[Mapping[str, Sequence[Entry]], Iterable]) -> Set[str]:
    """Day keys with at least one entry. Accepts buckets, day keys or raw entries."""
    if isinstance(day_buckets, Mapping):
        return {k for k, items in day_buckets.items() if items}
    out: Set[str] = set()
    for item in day_buckets:
        key = day_key(item.timestamp) if isinstance(item, Entry) else item
        if key:
            out.add(str(key))
    return out


def current_streak(day_buckets, today: DayLike, max_days: int = STREAK_MAX_DAYS) -> int:
    """
    Consecutive days with an entry, walking back from `today` (UTC).
    No entry yet today means a streak of 0.
    """
    active = _active_days(day_buckets)
    start = _as_utc_date(today)
    streak = 0
    for i in range(max_days):
        if (start - timedelta(days=i)).isoformat() in active:
            streak += 1
        else:
            break
    return streak


def compute_streaks(day_buckets, today: DayLike) -> Streaks:
    """
    Current streak (ending today), best streak overall,
    and count of active days in the last 30 days.
    """
    active = _active_days(day_buckets)
    udates = sorted(date.fromisoformat(k) for k in active)
    if not udates:
        return Streaks(current=0, best=0, days_active_30=0)

    best = 1
    cur = 1
    for i in range(1, len(udates)):
        if udates[i] == udates[i - 1] + timedelta(days=1):
            cur += 1
            best = max(best, cur)
        else:
            cur = 1

    end = _as_utc_date(today)
    window_start = end - timedelta(days=29)
    days_active_30 = sum(1 for d in udates if window_start <= d <= end)

    return Streaks(current=current_streak(active, end), best=best, days_active_30=days_active_30)


def build_insights(window: TrendWindow, day_buckets, today: DayLike) -> InsightSummary:
    best, worst = best_and_worst(window)
    return InsightSummary(
        best_day=best,
        worst_day=worst,
        most_frequent_symbol=most_frequent_mood_symbol(window),
        streak_length_days=current_streak(day_buckets, today),
        qualitative_text=summary_text(window.mean),
    )


# ---------- Full pipeline ----------
def build_stats(
    entries: Sequence[Entry],
    vocabulary: Optional[Sequence[MoodDefinition]],
    today: DayLike,
    n: int = TREND_WINDOW_DAYS,
) -> Optional[StatsView]:
    """
    entries -> day buckets / day averages -> trailing window -> insights.
    Recomputed from scratch on every snapshot; None means "not enough data".
    """
    vocab = effective_vocabulary(vocabulary)
    buckets = group_by_utc_day(entries)
    window = trailing_window(average_per_day(entries, vocab), n)
    if window is None:
        logger.debug("not enough data for trends (%d entries)", len(entries))
        return None

    insights = build_insights(window, buckets, today)
    return StatsView(
        window=window,
        summary=insights.qualitative_text,
        insights=insights,
        streaks=compute_streaks(buckets, today),
    )
