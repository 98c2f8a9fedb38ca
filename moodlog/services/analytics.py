# moodlog/services/analytics.py
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from moodlog.config import NEUTRAL_SCORE
from moodlog.models import DayBuckets, Entry, MoodDefinition
from moodlog.services.moods import effective_vocabulary, score_map

logger = logging.getLogger(__name__)

# Day boundaries are UTC midnight everywhere (buckets, calendar, streaks).
# Two people logging at the same instant land on the same day even if their
# local calendars disagree; that is a known limitation.


def to_utc(value: Any) -> Optional[pd.Timestamp]:
    """datetime / ISO text -> tz-aware UTC Timestamp. Naive values are taken as UTC."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        ts = pd.to_datetime(value, utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    return ts


def day_key(value: Any) -> Optional[str]:
    ts = to_utc(value)
    return ts.strftime("%Y-%m-%d") if ts is not None else None


def utc_today(now: Optional[datetime] = None) -> date:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date()


def group_by_utc_day(entries: Iterable[Entry]) -> DayBuckets:
    """
    Bucket entries by UTC calendar day, keeping input order inside each bucket.
    Entries without a usable timestamp are skipped.
    """
    buckets: DayBuckets = {}
    for e in entries:
        key = day_key(e.timestamp)
        if key is None:
            logger.debug("entry %s has no usable timestamp; skipped", e.id)
            continue
        buckets.setdefault(key, []).append(e)
    return buckets


def latest_per_day(entries: Iterable[Entry], require_mood: bool = False) -> Dict[str, Entry]:
    """
    Most recent entry per UTC day.

    Entries are sorted by timestamp (newest first) here, so caller order does
    not matter; equal timestamps keep their input order.
    """
    stamped = []
    for e in entries:
        if require_mood and not e.mood:
            continue
        ts = to_utc(e.timestamp)
        if ts is None:
            continue
        stamped.append((ts, e))
    stamped.sort(key=lambda p: p[0], reverse=True)

    out: Dict[str, Entry] = {}
    for ts, e in stamped:
        key = ts.strftime("%Y-%m-%d")
        if key not in out:
            out[key] = e
    return out


def day_symbol_map(entries: Iterable[Entry]) -> Dict[str, str]:
    """YYYY-MM-DD -> mood symbol of that day's latest mood-bearing entry (calendar decoration)."""
    return {k: e.mood for k, e in latest_per_day(entries, require_mood=True).items()}


def _scored_rows(entries: Iterable[Entry], vocabulary: Optional[Sequence[MoodDefinition]]) -> List[Dict[str, Any]]:
    scores = score_map(effective_vocabulary(vocabulary))
    rows = []
    for e in entries:
        if not e.mood:
            continue
        key = day_key(e.timestamp)
        if key is None:
            continue
        rows.append({"day": key, "score": scores.get(e.mood, NEUTRAL_SCORE)})
    return rows


def average_per_day(entries: Iterable[Entry], vocabulary: Optional[Sequence[MoodDefinition]] = None) -> Dict[str, float]:
    """
    Mean valence score per UTC day. Entries without a mood do not count;
    days with no scored entry are left out (never zero-filled).
    """
    rows = _scored_rows(entries, vocabulary)
    if not rows:
        return {}
    df = pd.DataFrame(rows)
    means = df.groupby("day")["score"].mean()
    return {str(day): float(avg) for day, avg in means.items()}


def entries_by_day(entries: Iterable[Entry]) -> Dict[str, int]:
    return {day: len(items) for day, items in group_by_utc_day(entries).items()}


def entries_frame(entries: Iterable[Entry], vocabulary: Optional[Sequence[MoodDefinition]] = None) -> pd.DataFrame:
    """
    Flat DataFrame view (id, ts, day, mood, score, note, photo_ref), newest first.
    `score` is empty for entries without a mood; `ts`/`day` are empty when
    the timestamp is unusable.
    """
    cols = ["id", "ts", "day", "mood", "score", "note", "photo_ref"]
    scores = score_map(effective_vocabulary(vocabulary))
    rows = []
    for e in entries:
        ts = to_utc(e.timestamp)
        rows.append({
            "id": e.id,
            "ts": ts,
            "day": ts.strftime("%Y-%m-%d") if ts is not None else None,
            "mood": e.mood,
            "score": scores.get(e.mood, NEUTRAL_SCORE) if e.mood else None,
            "note": e.note or "",
            "photo_ref": e.photo_ref,
        })
    if not rows:
        return pd.DataFrame(columns=cols)
    df = pd.DataFrame(rows, columns=cols)
    return df.sort_values("ts", ascending=False, na_position="last", kind="stable").reset_index(drop=True)
