from datetime import date

import pytest

from moodlog.models import Entry


@pytest.fixture
def make_entry():
    counter = {"n": 0}

    def _make(ts, mood="😊", note="", photo_ref=None, id=None):
        counter["n"] += 1
        return Entry(id=id or f"e{counter['n']}", timestamp=ts, mood=mood, note=note, photo_ref=photo_ref)

    return _make


@pytest.fixture
def today():
    return date(2024, 3, 15)
