# moodlog/services/journal.py
from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence, Tuple

from moodlog.models import Entry
from moodlog.services.analytics import to_utc

OTHER_GROUP = "Other"


def filter_entries(entries: Iterable[Entry], search: str = "", symbols: Sequence[str] = ()) -> List[Entry]:
    """Case-insensitive note search AND mood filter; empty filters let everything through."""
    q = (search or "").strip().lower()
    active = set(symbols or ())
    out = []
    for e in entries:
        mood_pass = not active or e.mood in active
        search_pass = not q or q in (e.note or "").lower()
        if mood_pass and search_pass:
            out.append(e)
    return out


def group_label(day: date, today: date) -> str:
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day:%B} {day.day}, {day.year}"


def group_entries(entries: Iterable[Entry], today: date) -> List[Tuple[str, List[Entry]]]:
    """
    Journal list sections: newest UTC day first, newest entry first inside a
    day. Entries without a usable timestamp end up in a trailing "Other".
    """
    stamped = []
    undated: List[Entry] = []
    for e in entries:
        ts = to_utc(e.timestamp)
        if ts is None:
            undated.append(e)
        else:
            stamped.append((ts, e))
    stamped.sort(key=lambda p: p[0], reverse=True)

    groups: Dict[date, List[Entry]] = {}
    for ts, e in stamped:
        groups.setdefault(ts.date(), []).append(e)

    out = [(group_label(d, today), items) for d, items in groups.items()]
    if undated:
        out.append((OTHER_GROUP, undated))
    return out


def shift_month(month_of: date, months: int) -> date:
    """First day of the month `months` away from `month_of` (calendar navigation)."""
    idx = month_of.year * 12 + (month_of.month - 1) + months
    return date(idx // 12, idx % 12 + 1, 1)
