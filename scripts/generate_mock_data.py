#!/usr/bin/env python3
# scripts/generate_mock_data.py
from __future__ import annotations

import argparse
import os, sys, random
from datetime import timedelta
from typing import List, Tuple

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from moodlog.logging_setup import setup_logging
from moodlog.services.analytics import utc_today
from moodlog.services.moods import effective_vocabulary, symbol_nearest_to
from moodlog.services.storage import init_db, insert_entry, load_moods, reset_user_data, timestamp_for_day

# A week of student-flavored highs/lows; score picks the closest mood
SAMPLES_STUDENT: List[Tuple[str, int]] = [
    ("Mondays are brutal. Missed the early bus and spilled coffee before my 8am lecture.", 2),
    ("Study group totally clicked today. Finally understand dynamic programming.", 5),
    ("Group presentation day… nerves were high and one teammate bailed last minute.", 1),
    ("Squeezed in a quick run before lab. Our CS project milestone passed all the tests!", 4),
    ("Part-time shift ran long and I missed the robotics club meeting. Exhausted.", 2),
    ("Movie night with friends was perfect. A little homesick, but mostly grateful.", 4),
    ("Sunday reset: laundry, cleaned my desk, mapped next week’s deadlines.", 3),
]

def seed_days(user_id: str, days: int = 7, wipe: bool = False, end_offset_days: int = 1, seed: int | None = None) -> None:
    """
    Seed one entry per day for `days` days ending `end_offset_days` before today (UTC).
    By default end_offset_days=1 → last entry is *yesterday*.
    """
    rng = random.Random(seed)
    init_db()  # ensure tables exist
    if wipe:
        reset_user_data(user_id)

    vocab = effective_vocabulary(load_moods(user_id))
    end_day = utc_today() - timedelta(days=end_offset_days)

    # repeat pattern if days > samples
    data = (SAMPLES_STUDENT * ((days + len(SAMPLES_STUDENT) - 1) // len(SAMPLES_STUDENT)))[:days]

    for idx, (note, score) in enumerate(data):
        # spread backward so first entry is oldest, last is exactly at `end_day`
        day = end_day - timedelta(days=(days - 1 - idx))
        jitter = rng.choice([-1, 0, 0, 1])
        target = max(1, min(5, score + jitter))
        mood = symbol_nearest_to(target, vocab)
        ts = timestamp_for_day(day) + timedelta(hours=rng.randint(-4, 8))
        insert_entry(user_id, ts, mood=mood, note=note)
        print(f"[OK] {ts.isoformat(timespec='minutes')}  {mood}  {note[:48]}")

def main():
    ap = argparse.ArgumentParser(description="Seed mock mood entries into a journal.")
    ap.add_argument("--user", type=str, required=True, help="Journal name (user id) to seed.")
    ap.add_argument("--days", type=int, default=7, help="How many days to seed (default 7).")
    ap.add_argument("--wipe", action="store_true", help="Delete this user's existing entries first.")
    ap.add_argument("--end-offset-days", type=int, default=1,
                    help="How many days before today the last entry should be (default 1=yesterday; use 0 for today).")
    ap.add_argument("--seed", type=int, default=None, help="Random seed for reproducible moods.")
    args = ap.parse_args()

    setup_logging("WARNING")
    user = args.user.strip()
    if not user:
        print("A non-empty --user is required.")
        sys.exit(1)

    print(f"Seeding {args.days} day(s) into user={user}  (wipe={args.wipe})  end_offset_days={args.end_offset_days}")
    seed_days(user, days=max(1, args.days), wipe=bool(args.wipe),
              end_offset_days=max(0, args.end_offset_days), seed=args.seed)
    print("Done.")

if __name__ == "__main__":
    main()
