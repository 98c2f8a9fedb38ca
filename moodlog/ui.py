# moodlog/ui.py
from __future__ import annotations

import calendar
from datetime import date

import altair as alt
import pandas as pd
import streamlit as st

from .config import APP_TITLE, TREND_WINDOW_DAYS
from .services.storage import (
    load_entries,
    insert_entry,
    update_entry,
    delete_entry,
    load_moods,
    save_moods,
    reset_user_data,
    timestamp_for_day,
    moved_timestamp,
)
from .services.moods import effective_vocabulary, symbol_nearest_to, add_mood, remove_mood
from .services.analytics import day_symbol_map, entries_frame, to_utc, utc_today
from .services.trends import build_stats
from .services.journal import filter_entries, group_entries, shift_month


def _mood_option_label(vocab, symbol) -> str:
    if symbol is None:
        return "—"
    for m in vocab:
        if m.symbol == symbol:
            return f"{m.symbol} {m.label}".strip()
    return symbol


# ---------- Calendar decoration ----------
def _set_month(d: date) -> None:
    st.session_state.calendar_month = d

def _render_month(day_symbols: dict, month_of: date) -> None:
    st.markdown(f"#### {month_of:%B %Y}")
    cols = st.columns(7)
    for i, name in enumerate(["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]):
        cols[i].caption(name)
    for week in calendar.Calendar(firstweekday=0).monthdatescalendar(month_of.year, month_of.month):
        cols = st.columns(7)
        for i, d in enumerate(week):
            if d.month != month_of.month:
                cols[i].write("")
                continue
            sym = day_symbols.get(d.isoformat(), "")
            cols[i].markdown(f"**{d.day}** {sym}")


# ---------- Tabs ----------
def _render_write(user_id: str, vocab, entries, today: date) -> None:
    st.subheader("How are you feeling?")
    with st.form("new_entry", clear_on_submit=True):
        mood = st.radio(
            "Mood",
            options=[None] + [m.symbol for m in vocab],
            format_func=lambda s: _mood_option_label(vocab, s),
            horizontal=True,
        )
        note = st.text_area("Note", placeholder="What are you grateful for today?")
        day = st.date_input("Day", value=today)
        if st.form_submit_button("Save entry", type="primary", use_container_width=True):
            try:
                insert_entry(user_id, timestamp_for_day(day), mood=mood, note=note)
            except ValueError as e:
                st.error(str(e))
            else:
                st.success("Saved.")
                st.rerun()

    st.divider()
    this_month = today.replace(day=1)
    month_of = st.session_state.get("calendar_month", this_month)
    cprev, _, cnext = st.columns([1, 6, 1])
    with cprev:
        st.button("◀ Prev", on_click=_set_month, args=(shift_month(month_of, -1),), use_container_width=True)
    with cnext:
        st.button("Next ▶", on_click=_set_month, args=(shift_month(month_of, 1),),
                  disabled=month_of >= this_month, use_container_width=True)
    _render_month(day_symbol_map(entries), month_of)


def _render_trends(entries, vocab, today: date) -> None:
    st.subheader("Mood over time")
    stats = build_stats(entries, vocab, today, n=TREND_WINDOW_DAYS)
    if stats is None:
        st.info("Not enough data to show mood trends yet.")
        return

    chart_df = pd.DataFrame(
        {"day": [p.day for p in stats.window.points],
         "label": stats.window.labels,
         "mood": stats.window.values}
    )
    line = (
        alt.Chart(chart_df)
        .mark_line(point=True)
        .encode(
            x=alt.X("label:N", sort=None, title="Day"),
            y=alt.Y("mood:Q", title="Mood (1–5)", scale=alt.Scale(domain=[0, 5])),
            tooltip=[alt.Tooltip("day:N", title="Date"), alt.Tooltip("mood:Q", title="Average", format=".2f")],
        )
        .properties(height=260)
    )
    st.altair_chart(line, use_container_width=True)
    st.success(stats.summary)

    ins = stats.insights
    m1, m2, m3, m4 = st.columns(4)
    with m1:
        st.metric("Best day", f"{ins.best_day.label} {symbol_nearest_to(ins.best_day.value, vocab)}")
    with m2:
        st.metric("Toughest day", f"{ins.worst_day.label} {symbol_nearest_to(ins.worst_day.value, vocab)}")
    with m3:
        st.metric("Most frequent", ins.most_frequent_symbol or "—")
    with m4:
        st.metric("Streak", f"{ins.streak_length_days}d")
    st.caption(f"Best streak: **{stats.streaks.best}** days · Active last 30d: **{stats.streaks.days_active_30}** days")

    st.divider()
    out = entries_frame(entries, vocab)
    csv = out.to_csv(index=False).encode("utf-8")
    st.download_button("Download CSV", data=csv, file_name="moodlog_export.csv", mime="text/csv", use_container_width=True)


def _render_journal(user_id: str, entries, vocab, today: date) -> None:
    st.subheader("Entries")
    c1, c2 = st.columns([3, 2])
    with c1:
        search = st.text_input("Search notes…", value="")
    with c2:
        picked = st.multiselect("Moods", options=[m.symbol for m in vocab])

    shown = filter_entries(entries, search, picked)
    if not shown:
        st.info("No entries match." if entries else "No entries yet.")
        return

    for title, items in group_entries(shown, today):
        st.markdown(f"### {title}")
        for e in items:
            ts = to_utc(e.timestamp)
            with st.container(border=True):
                top = st.columns([1, 4, 1])
                top[0].markdown(f"## {e.mood or '·'}")
                with top[1]:
                    st.markdown(e.note or "_(no note)_")
                    if e.photo_ref:
                        st.caption(f"📎 {e.photo_ref}")
                if top[2].button("Delete", key=f"del_{e.id}"):
                    delete_entry(user_id, e.id)
                    st.rerun()
                with st.expander("Edit"):
                    symbols = [m.symbol for m in vocab]
                    if e.mood and e.mood not in symbols:
                        symbols.append(e.mood)  # keep moods removed from the vocabulary editable
                    new_mood = st.selectbox(
                        "Mood", options=[""] + symbols,
                        index=([""] + symbols).index(e.mood or ""),
                        key=f"mood_{e.id}",
                    )
                    new_note = st.text_area("Note", value=e.note, key=f"note_{e.id}")
                    new_day = st.date_input("Day", value=ts.date() if ts is not None else today, key=f"day_{e.id}")
                    if st.button("Save changes", key=f"save_{e.id}"):
                        try:
                            update_entry(user_id, e.id, ts=moved_timestamp(e.timestamp, new_day), mood=new_mood, note=new_note)
                        except ValueError as err:
                            st.error(str(err))
                        else:
                            st.rerun()


def _render_settings(user_id: str, custom) -> None:
    st.subheader("Custom moods")
    vocab = effective_vocabulary(custom)
    if not custom:
        st.caption("Using the default moods.")
    for m in vocab:
        c1, c2, c3 = st.columns([1, 4, 1])
        c1.markdown(f"### {m.symbol}")
        c2.markdown(f"**{m.label or '—'}** · score {m.score}")
        if c3.button("×", key=f"rm_{m.symbol}"):
            save_moods(user_id, remove_mood(vocab, m.symbol))
            st.rerun()

    with st.form("add_mood", clear_on_submit=True):
        c1, c2, c3 = st.columns([1, 1, 2])
        symbol = c1.text_input("Emoji", max_chars=2)
        score = c2.text_input("Score 1-5", value="")
        label = c3.text_input("Label")
        if st.form_submit_button("Add"):
            try:
                save_moods(user_id, add_mood(vocab, symbol, score, label))
            except ValueError as e:
                st.error(str(e))
            else:
                st.rerun()
    st.caption("Tip: score maps to how “positive” the mood is (5 = best).")

    if custom and st.button("Reset to default moods"):
        save_moods(user_id, [])
        st.rerun()


# ---------- Main render ----------
def render_app():
    st.title(f"📓 {APP_TITLE}")

    with st.sidebar:
        user_id = st.text_input("Journal name", value=st.session_state.get("user_id", ""), placeholder="e.g., alex")
        st.session_state.user_id = user_id.strip()
        st.divider()
        with st.expander("⚠️ Danger zone", expanded=False):
            if st.session_state.user_id and st.button("Delete **my** entries", type="secondary"):
                reset_user_data(st.session_state.user_id)
                st.success("All your entries were deleted.")
                st.rerun()

    user_id = st.session_state.user_id
    if not user_id:
        st.info("Enter a journal name in the sidebar to start.")
        return

    # Every rerun reloads a full snapshot and recomputes all views from it.
    entries = load_entries(user_id)
    custom = load_moods(user_id)
    vocab = effective_vocabulary(custom)
    today = utc_today()

    tab_write, tab_trends, tab_journal, tab_settings = st.tabs(["✍️ Write", "📈 Trends", "🗂️ Journal", "⚙️ Settings"])
    with tab_write:
        _render_write(user_id, vocab, entries, today)
    with tab_trends:
        _render_trends(entries, vocab, today)
    with tab_journal:
        _render_journal(user_id, entries, vocab, today)
    with tab_settings:
        _render_settings(user_id, custom)
