import pytest

from moodlog.models import MoodDefinition
from moodlog.services.moods import (
    DEFAULT_MOODS,
    add_mood,
    clamp_score,
    effective_vocabulary,
    make_mood,
    moods_from_records,
    moods_to_records,
    remove_mood,
    score_of,
    symbol_nearest_to,
    update_mood,
)


def test_effective_vocabulary_falls_back_to_defaults():
    assert effective_vocabulary(None) == DEFAULT_MOODS
    assert effective_vocabulary([]) == DEFAULT_MOODS
    custom = [MoodDefinition("🤩", 5, "Thrilled")]
    assert effective_vocabulary(custom) == custom


def test_default_vocabulary_scores():
    assert [(m.symbol, m.score) for m in DEFAULT_MOODS] == [
        ("😄", 5), ("😊", 4), ("😐", 3), ("😢", 2), ("😡", 1),
    ]


def test_score_of_known_and_unknown():
    assert score_of("😄", DEFAULT_MOODS) == 5
    assert score_of("😡", DEFAULT_MOODS) == 1
    assert score_of("🦄", DEFAULT_MOODS) == 3
    assert score_of(None, DEFAULT_MOODS) == 3


def test_symbol_nearest_to():
    assert symbol_nearest_to(3.4, DEFAULT_MOODS) == "😐"
    assert symbol_nearest_to(4.6, DEFAULT_MOODS) == "😄"
    assert symbol_nearest_to(0, DEFAULT_MOODS) == "😡"


def test_symbol_nearest_to_tie_goes_to_first_entry():
    vocab = [MoodDefinition("A", 2), MoodDefinition("B", 4)]
    assert symbol_nearest_to(3, vocab) == "A"
    assert symbol_nearest_to(3, list(reversed(vocab))) == "B"


def test_symbol_nearest_to_empty_vocabulary_uses_defaults():
    assert symbol_nearest_to(5, []) == "😄"


@pytest.mark.parametrize("raw,expected", [
    ("4", 4), (" 2 ", 2), ("9", 5), ("-3", 1), ("", 3), (None, 3), ("abc", 3), (4.7, 4), (0, 1),
])
def test_clamp_score(raw, expected):
    assert clamp_score(raw) == expected


def test_make_mood_rejects_blank_symbol():
    with pytest.raises(ValueError):
        make_mood("  ", 4)
    assert make_mood(" 🤩 ", "7", " Wow ") == MoodDefinition("🤩", 5, "Wow")


def test_add_remove_update_return_new_lists():
    vocab = list(DEFAULT_MOODS)
    grown = add_mood(vocab, "🤩", 5, "Thrilled")
    assert len(grown) == 6 and len(vocab) == 5
    assert grown[-1] == MoodDefinition("🤩", 5, "Thrilled")

    with pytest.raises(ValueError):
        add_mood(grown, "🤩", 4)

    shrunk = remove_mood(grown, "😡")
    assert "😡" not in [m.symbol for m in shrunk]

    edited = update_mood(shrunk, "😐", score=2, label="Meh")
    assert MoodDefinition("😐", 2, "Meh") in edited
    assert update_mood(shrunk, "😐", score=99)[2].score == 5


def test_records_round_trip_drops_bad_rows():
    records = moods_to_records(DEFAULT_MOODS[:2])
    assert records[0] == {"emoji": "😄", "score": 5, "label": "Great"}

    messy = records + [{"score": 3}, "junk", {"emoji": "😄", "score": 1}, {"emoji": "🤩", "score": 12}]
    moods = moods_from_records(messy)
    assert [m.symbol for m in moods] == ["😄", "😊", "🤩"]
    assert moods[-1].score == 5
    assert moods_from_records(None) == []
