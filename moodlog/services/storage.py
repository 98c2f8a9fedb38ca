# moodlog/services/storage.py
import json
import logging
import os
import sqlite3
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional, Sequence

from moodlog.config import DB_PATH
from moodlog.models import Entry, MoodDefinition
from moodlog.services.analytics import to_utc
from moodlog.services.moods import moods_from_records, moods_to_records

logger = logging.getLogger(__name__)


def _connect():
    return sqlite3.connect(DB_PATH, check_same_thread=False)

def init_db():
    folder = os.path.dirname(DB_PATH)
    if folder:
        os.makedirs(folder, exist_ok=True)
    with _connect() as conn:
        conn.execute("""
        CREATE TABLE IF NOT EXISTS entries (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            ts TEXT NOT NULL,
            mood TEXT,
            note TEXT NOT NULL DEFAULT '',
            photo_ref TEXT,
            created_at TEXT DEFAULT (datetime('now'))
        )
        """)
        conn.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            user_id TEXT PRIMARY KEY,
            moods TEXT
        )
        """)
        conn.execute("CREATE INDEX IF NOT EXISTS idx_entries_user_ts ON entries(user_id, ts)")
        conn.commit()

# ---------- Helpers ----------
def _require_user(user_id: str) -> str:
    uid = (user_id or "").strip()
    if not uid:
        raise ValueError("user_id must not be empty")
    return uid

def _iso_utc(ts: Any) -> str:
    parsed = to_utc(ts)
    if parsed is None:
        raise ValueError(f"unusable timestamp: {ts!r}")
    return parsed.to_pydatetime().isoformat(timespec="seconds")

def timestamp_for_day(day: date) -> datetime:
    """Entries logged for a picked calendar day are stamped at 12:00 UTC that day."""
    return datetime.combine(day, time(12, 0), tzinfo=timezone.utc)

def _row_to_entry(row) -> Entry:
    return Entry(id=row[0], timestamp=row[1], mood=row[2], note=row[3] or "", photo_ref=row[4])

# ---------- Entries ----------
def insert_entry(user_id: str, ts: Any, mood: Optional[str] = None, note: str = "", photo_ref: Optional[str] = None) -> str:
    uid = _require_user(user_id)
    mood = (mood or "").strip() or None
    note = note or ""
    if mood is None and not note.strip() and not photo_ref:
        raise ValueError("nothing to save: pick a mood, write a note or attach a photo")
    entry_id = uuid.uuid4().hex
    with _connect() as conn:
        conn.execute(
            "INSERT INTO entries (id, user_id, ts, mood, note, photo_ref) VALUES (?, ?, ?, ?, ?, ?)",
            (entry_id, uid, _iso_utc(ts), mood, note, photo_ref),
        )
        conn.commit()
    logger.info("saved entry %s for user %s", entry_id, uid)
    return entry_id

def moved_timestamp(current: Any, new_day: date) -> Optional[datetime]:
    """
    New timestamp for an edited entry, or None when its UTC day is unchanged
    (the stored time of day is kept so same-day ordering does not move).
    """
    parsed = to_utc(current)
    if parsed is not None and parsed.date() == new_day:
        return None
    return timestamp_for_day(new_day)

def update_entry(user_id: str, entry_id: str, *, ts: Any = None, mood: Optional[str] = None, note: Optional[str] = None) -> bool:
    """
    Edit mood/note/date in place. Returns False when the entry does not exist.
    Raises ValueError if the edit would leave no mood, note or photo.
    """
    uid = _require_user(user_id)
    fields: Dict[str, Any] = {}
    if ts is not None:
        fields["ts"] = _iso_utc(ts)
    if mood is not None:
        fields["mood"] = mood.strip() or None
    if note is not None:
        fields["note"] = note
    if not fields:
        return False
    assignments = ", ".join(f"{k} = ?" for k in fields)
    with _connect() as conn:
        row = conn.execute(
            "SELECT mood, note, photo_ref FROM entries WHERE id = ? AND user_id = ?",
            (entry_id, uid),
        ).fetchone()
        if row is None:
            return False
        mood_after = fields.get("mood", row[0])
        note_after = fields.get("note", row[1]) or ""
        if mood_after is None and not note_after.strip() and not row[2]:
            raise ValueError("nothing left to save: keep a mood, a note or a photo")
        conn.execute(
            f"UPDATE entries SET {assignments} WHERE id = ? AND user_id = ?",
            (*fields.values(), entry_id, uid),
        )
        conn.commit()
    logger.info("updated entry %s (%s)", entry_id, ", ".join(fields))
    return True

def delete_entry(user_id: str, entry_id: str) -> bool:
    uid = _require_user(user_id)
    with _connect() as conn:
        cur = conn.execute("DELETE FROM entries WHERE id = ? AND user_id = ?", (entry_id, uid))
        conn.commit()
    if cur.rowcount:
        logger.info("deleted entry %s", entry_id)
    return cur.rowcount > 0

def load_entries(user_id: str) -> List[Entry]:
    """Full snapshot of a user's entries, newest first."""
    uid = _require_user(user_id)
    with _connect() as conn:
        rows = conn.execute(
            "SELECT id, ts, mood, note, photo_ref FROM entries WHERE user_id = ? ORDER BY ts DESC",
            (uid,),
        ).fetchall()
    return [_row_to_entry(r) for r in rows]

def list_users() -> List[Dict[str, Any]]:
    with _connect() as conn:
        rows = conn.execute(
            "SELECT user_id, COUNT(*), MAX(ts) FROM entries GROUP BY user_id ORDER BY MAX(ts) DESC"
        ).fetchall()
    return [{"user_id": r[0], "entries": int(r[1]), "last_ts": r[2]} for r in rows]

# ---------- Mood vocabulary ----------
def load_moods(user_id: str) -> List[MoodDefinition]:
    """The user's custom vocabulary, or [] when none is saved (callers fall back to defaults)."""
    uid = _require_user(user_id)
    with _connect() as conn:
        row = conn.execute("SELECT moods FROM settings WHERE user_id = ?", (uid,)).fetchone()
    if not row or not row[0]:
        return []
    try:
        return moods_from_records(json.loads(row[0]))
    except json.JSONDecodeError:
        logger.warning("stored moods for %s are not valid JSON; using defaults", uid)
        return []

def save_moods(user_id: str, moods: Sequence[MoodDefinition]) -> None:
    uid = _require_user(user_id)
    payload = json.dumps(moods_to_records(moods), ensure_ascii=False)
    with _connect() as conn:
        conn.execute(
            "INSERT INTO settings (user_id, moods) VALUES (?, ?) "
            "ON CONFLICT(user_id) DO UPDATE SET moods = excluded.moods",
            (uid, payload),
        )
        conn.commit()
    logger.info("saved %d moods for %s", len(moods), uid)

# ---------- Danger zone ----------
def reset_user_data(user_id: str) -> None:
    uid = _require_user(user_id)
    with _connect() as conn:
        conn.execute("DELETE FROM entries WHERE user_id = ?", (uid,))
        conn.commit()
    logger.info("deleted all entries for %s", uid)

def full_reset_db() -> None:
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)
    init_db()
