from moodlog.config import TREND_WINDOW_DAYS, int_env


def test_int_env_reads_positive_ints(monkeypatch):
    monkeypatch.setenv("MOODLOG_TREND_DAYS", "14")
    assert int_env("MOODLOG_TREND_DAYS", 7) == 14


def test_int_env_falls_back_on_bad_values(monkeypatch):
    monkeypatch.delenv("MOODLOG_TREND_DAYS", raising=False)
    assert int_env("MOODLOG_TREND_DAYS", 7) == 7
    for bad in ["abc", "0", "-3", "2.5"]:
        monkeypatch.setenv("MOODLOG_TREND_DAYS", bad)
        assert int_env("MOODLOG_TREND_DAYS", 7) == 7


def test_default_window_is_positive():
    assert TREND_WINDOW_DAYS > 0
