from datetime import datetime, timedelta, timezone

import pandas as pd

from moodlog.models import MoodDefinition
from moodlog.services.analytics import (
    average_per_day,
    day_key,
    day_symbol_map,
    entries_by_day,
    entries_frame,
    group_by_utc_day,
    latest_per_day,
    to_utc,
    utc_today,
)
from moodlog.services.moods import DEFAULT_MOODS


def test_to_utc_handles_naive_aware_text_and_garbage():
    assert to_utc(datetime(2024, 3, 1, 12)) == pd.Timestamp("2024-03-01T12:00:00Z")
    tz = timezone(timedelta(hours=-5))
    assert to_utc(datetime(2024, 3, 1, 22, tzinfo=tz)) == pd.Timestamp("2024-03-02T03:00:00Z")
    assert to_utc("2024-03-01T12:00:00.000Z") == pd.Timestamp("2024-03-01T12:00:00Z")
    assert to_utc(None) is None
    assert to_utc("") is None
    assert to_utc("not a date") is None


def test_day_key_uses_utc_calendar_day():
    assert day_key("2024-03-01T23:30:00-05:00") == "2024-03-02"
    assert day_key("2024-03-02T01:00:00+09:00") == "2024-03-01"


def test_group_by_utc_day_same_instant_different_offsets(make_entry):
    a = make_entry("2024-03-02T04:00:00+00:00")
    b = make_entry("2024-03-01T23:00:00-05:00")  # same instant as a
    c = make_entry("2024-03-02T13:00:00+09:00")  # 04:00Z as well
    buckets = group_by_utc_day([a, b, c])
    assert list(buckets) == ["2024-03-02"]
    assert buckets["2024-03-02"] == [a, b, c]


def test_group_by_utc_day_skips_missing_timestamps(make_entry):
    good = make_entry("2024-03-01T10:00:00Z")
    buckets = group_by_utc_day([make_entry(None), good, make_entry("garbage")])
    assert buckets == {"2024-03-01": [good]}


def test_latest_per_day_keeps_most_recent(make_entry):
    newer = make_entry("2024-03-01T18:00:00Z", mood="😄")
    older = make_entry("2024-03-01T08:00:00Z", mood="😡")
    assert latest_per_day([newer, older])["2024-03-01"] is newer


def test_latest_per_day_does_not_trust_caller_order(make_entry):
    older = make_entry("2024-03-01T08:00:00Z", mood="😡")
    newer = make_entry("2024-03-01T18:00:00Z", mood="😄")
    other = make_entry("2024-03-02T09:00:00Z", mood="😐")
    latest = latest_per_day([older, other, newer])
    assert latest == {"2024-03-02": other, "2024-03-01": newer}


def test_day_symbol_map_ignores_entries_without_mood(make_entry):
    entries = [
        make_entry("2024-03-01T20:00:00Z", mood=None, note="just a note"),
        make_entry("2024-03-01T09:00:00Z", mood="😢"),
        make_entry("2024-03-03T09:00:00Z", mood=None),
    ]
    assert day_symbol_map(entries) == {"2024-03-01": "😢"}


def test_average_per_day_mean_of_scores(make_entry):
    entries = [
        make_entry("2024-03-01T09:00:00Z", mood="😄"),
        make_entry("2024-03-01T19:00:00Z", mood="😐"),
    ]
    assert average_per_day(entries, DEFAULT_MOODS) == {"2024-03-01": 4.0}


def test_average_per_day_unknown_symbol_is_neutral_and_null_excluded(make_entry):
    entries = [
        make_entry("2024-03-01T09:00:00Z", mood="🦄"),
        make_entry("2024-03-01T10:00:00Z", mood="😄"),
        make_entry("2024-03-01T11:00:00Z", mood=None),
        make_entry("2024-03-02T11:00:00Z", mood=None),
    ]
    # (3 + 5) / 2; the mood-less day is left out entirely
    assert average_per_day(entries, DEFAULT_MOODS) == {"2024-03-01": 4.0}


def test_average_per_day_uses_custom_vocabulary(make_entry):
    vocab = [MoodDefinition("🤩", 5), MoodDefinition("🥱", 2)]
    entries = [make_entry("2024-03-01T09:00:00Z", mood="🥱"), make_entry("2024-03-01T10:00:00Z", mood="😄")]
    assert average_per_day(entries, vocab) == {"2024-03-01": 2.5}


def test_average_per_day_empty():
    assert average_per_day([], DEFAULT_MOODS) == {}


def test_entries_by_day(make_entry):
    entries = [make_entry("2024-03-01T09:00:00Z"), make_entry("2024-03-01T10:00:00Z"), make_entry("2024-03-04T10:00:00Z")]
    assert entries_by_day(entries) == {"2024-03-01": 2, "2024-03-04": 1}


def test_entries_frame_newest_first(make_entry):
    entries = [
        make_entry("2024-03-01T09:00:00Z", mood="😄", id="old"),
        make_entry(None, mood=None, id="undated"),
        make_entry("2024-03-05T09:00:00Z", mood="😢", note="meh", id="new"),
    ]
    df = entries_frame(entries, DEFAULT_MOODS)
    assert list(df.columns) == ["id", "ts", "day", "mood", "score", "note", "photo_ref"]
    assert df["id"].tolist() == ["new", "old", "undated"]
    assert df.loc[0, "score"] == 2
    assert entries_frame([]).empty


def test_utc_today_converts_aware_now():
    tz = timezone(timedelta(hours=10))
    assert utc_today(datetime(2024, 3, 2, 5, 0, tzinfo=tz)).isoformat() == "2024-03-01"
