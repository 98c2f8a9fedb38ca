#!/usr/bin/env python3
# scripts/list_users.py
from __future__ import annotations

import os, sys
from textwrap import shorten

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from moodlog.config import DB_PATH
from moodlog.services.storage import list_users

def main():
    if not os.path.exists(DB_PATH):
        print(f"No DB found at {DB_PATH}. Open the app once so it initializes the DB.")
        return
    rows = list_users()
    if not rows:
        print("No entries in DB yet. Log a mood through the app first.")
        return
    print(f"{'user':<24} | {'entries':>7} | last entry")
    print("-" * 64)
    for r in rows:
        print(f"{shorten(r['user_id'], 24):<24} | {r['entries']:>7} | {r['last_ts']}")

if __name__ == "__main__":
    main()
