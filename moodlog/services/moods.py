# moodlog/services/moods.py
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from moodlog.config import MAX_SCORE, MIN_SCORE, NEUTRAL_SCORE
from moodlog.models import MoodDefinition

logger = logging.getLogger(__name__)

DEFAULT_MOODS: List[MoodDefinition] = [
    MoodDefinition("😄", 5, "Great"),
    MoodDefinition("😊", 4, "Good"),
    MoodDefinition("😐", 3, "Okay"),
    MoodDefinition("😢", 2, "Sad"),
    MoodDefinition("😡", 1, "Angry"),
]


# ---------- Lookup ----------
def effective_vocabulary(user_override: Optional[Sequence[MoodDefinition]]) -> List[MoodDefinition]:
    if user_override:
        return list(user_override)
    return list(DEFAULT_MOODS)


def score_map(vocabulary: Iterable[MoodDefinition]) -> Dict[str, int]:
    return {m.symbol: m.score for m in vocabulary}


def score_of(symbol: Optional[str], vocabulary: Iterable[MoodDefinition]) -> int:
    """
    Score for an exact symbol match. Entries can reference a symbol the user
    has since removed, so a miss is neutral rather than an error.
    """
    if symbol is None:
        return NEUTRAL_SCORE
    return score_map(vocabulary).get(symbol, NEUTRAL_SCORE)


def symbol_nearest_to(score: float, vocabulary: Sequence[MoodDefinition]) -> str:
    """Symbol whose score is closest to `score`; the earliest entry wins ties."""
    moods = effective_vocabulary(vocabulary)
    best = moods[0]
    diff = abs(best.score - score)
    for m in moods:
        d = abs(m.score - score)
        if d < diff:
            diff = d
            best = m
    return best.symbol


# ---------- Boundary validation (user input) ----------
def clamp_score(value: Any) -> int:
    """Parse a user-typed score; blank/garbage -> neutral, then clamp to 1..5."""
    text = "" if value is None else str(value).strip()
    try:
        sc = int(float(text)) if text else NEUTRAL_SCORE
    except (ValueError, OverflowError):
        sc = NEUTRAL_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, sc))


def make_mood(symbol: str, score: Any = NEUTRAL_SCORE, label: str = "") -> MoodDefinition:
    sym = (symbol or "").strip()
    if not sym:
        raise ValueError("mood symbol must not be empty")
    return MoodDefinition(symbol=sym, score=clamp_score(score), label=(label or "").strip())


# ---------- Editing (all return new lists) ----------
def add_mood(vocabulary: Sequence[MoodDefinition], symbol: str, score: Any = NEUTRAL_SCORE, label: str = "") -> List[MoodDefinition]:
    mood = make_mood(symbol, score, label)
    if any(m.symbol == mood.symbol for m in vocabulary):
        raise ValueError(f"mood {mood.symbol} already exists")
    return [*vocabulary, mood]


def remove_mood(vocabulary: Sequence[MoodDefinition], symbol: str) -> List[MoodDefinition]:
    return [m for m in vocabulary if m.symbol != symbol]


def update_mood(vocabulary: Sequence[MoodDefinition], symbol: str, *, score: Any = None, label: Optional[str] = None) -> List[MoodDefinition]:
    out: List[MoodDefinition] = []
    for m in vocabulary:
        if m.symbol == symbol:
            m = MoodDefinition(
                symbol=m.symbol,
                score=clamp_score(score) if score is not None else m.score,
                label=label.strip() if label is not None else m.label,
            )
        out.append(m)
    return out


# ---------- (De)serialization for the settings store ----------
def moods_to_records(vocabulary: Iterable[MoodDefinition]) -> List[Dict[str, Any]]:
    return [{"emoji": m.symbol, "score": m.score, "label": m.label} for m in vocabulary]


def moods_from_records(records: Any) -> List[MoodDefinition]:
    """
    Rebuild a vocabulary from stored records ({emoji, score, label}).
    Malformed records and duplicate symbols are dropped.
    """
    if not isinstance(records, list):
        return []
    out: List[MoodDefinition] = []
    seen = set()
    for rec in records:
        if not isinstance(rec, dict):
            continue
        try:
            mood = make_mood(rec.get("emoji") or rec.get("symbol") or "", rec.get("score"), rec.get("label") or "")
        except ValueError:
            logger.debug("skipping mood record without symbol: %r", rec)
            continue
        if mood.symbol in seen:
            continue
        seen.add(mood.symbol)
        out.append(mood)
    return out
