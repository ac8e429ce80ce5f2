# modules/home.py
"""
Home view: weather, today's progress, quote, history and quick stats.
"""

import html

import streamlit as st
from datetime import date

from core.planner import completed_today, dashboard_stats, progress_fraction, schedule_progress

st.markdown(
    """
    <style>
    .brief-card {
        padding: 1rem;
        border-radius: 12px;
        background: #111827;
        margin-bottom: 1rem;
    }
    .brief-title {
        font-size: 1.2rem;
        font-weight: 600;
    }
    .brief-muted {
        color: #9ca3af;
        font-size: 0.9rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)


def weather_card_html(weather) -> str:
    # model text may carry markup from grounded search results
    condition = html.escape(weather.condition)
    location = html.escape(weather.location)
    description = html.escape(weather.description)
    return f"""
        <div class="brief-card">
            <div class="brief-title">{weather.temp:.0f}°C · {condition}</div>
            <div class="brief-muted">{location}</div>
            <div>{description}</div>
        </div>
        """


def _source_links(sources):
    if not sources:
        return
    st.caption(" · ".join(f"[{s.title}]({s.uri})" for s in sources))


# ==================================================
# MAIN RENDER
# ==================================================
def render_home(controller):
    today = date.today()
    state = controller.state

    st.subheader(f"☀️ {today.strftime('%A, %d %B %Y')}")

    # --------------------------------------------------
    # Weather
    # --------------------------------------------------
    weather = controller.weather
    if weather:
        st.markdown(weather_card_html(weather), unsafe_allow_html=True)
        _source_links(weather.sources)
    else:
        st.info("Weather is unavailable right now.")

    # --------------------------------------------------
    # Today's schedule progress
    # --------------------------------------------------
    st.markdown("### ✅ Today")

    done = completed_today(state, today)
    percent = schedule_progress(state, today)

    st.write(f"**{done} / {len(state.schedules)}** tasks completed")
    st.progress(progress_fraction(percent))

    # --------------------------------------------------
    # Quote
    # --------------------------------------------------
    quote = controller.quote
    if quote:
        st.markdown("---")
        st.markdown(f"> *“{quote.text}”*\n>\n> — {quote.author}")

    # --------------------------------------------------
    # On this day
    # --------------------------------------------------
    history = controller.history
    if history:
        st.markdown("---")
        st.markdown(f"### 📜 On this day · {history.year}")
        st.markdown(f"**{history.event}**")
        st.write(history.description)
        _source_links(history.sources)

    # --------------------------------------------------
    # Stats
    # --------------------------------------------------
    st.markdown("---")
    stats = dashboard_stats(state)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("📅 Schedules", stats["schedules"])
    c2.metric("🗒️ Memos", stats["memos"])
    c3.metric("🎯 Active goals", stats["goals"])
    c4.metric("🏆 Goals reached", stats["completed_goals"])
