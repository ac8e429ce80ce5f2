import streamlit as st

from core.config import load_settings
from core.controller import Status, build_controller
from modules.home import render_home
from modules.schedule import render_schedule
from modules.memos import render_memos
from modules.goals import render_goals
from utils.logger import setup_logging

st.set_page_config(page_title="Daybrief", layout="wide")

try:
    settings = load_settings()
except ValueError as e:
    st.error(str(e))
    st.stop()

setup_logging(settings.log_level, settings.log_file)

if "controller" not in st.session_state:
    controller = build_controller(settings)
    with st.spinner("Preparing today's briefing..."):
        controller.start()
    st.session_state["controller"] = controller

controller = st.session_state["controller"]

# ==================================================
# SIDEBAR
# ==================================================
st.sidebar.title("Daybrief")

PAGES = {
    "🏠 Home": "home",
    "📅 Schedule": "schedule",
    "🗒️ Memos": "memo",
    "🎯 Goals": "goals",
}

page = st.sidebar.radio("Navigate", list(PAGES.keys()))
controller.set_view(PAGES[page])

if st.sidebar.button("🔄 Refresh briefing", disabled=controller.loading):
    with st.spinner("Fetching today's briefing..."):
        controller.refresh()

if not settings.insights_enabled:
    st.sidebar.caption("Set GEMINI_API_KEY to enable weather, quotes and history.")

# ==================================================
# MAIN
# ==================================================
if controller.status == Status.ERRORED:
    st.error(controller.error)
    if st.button("Try again"):
        with st.spinner("Fetching today's briefing..."):
            controller.refresh()
        st.rerun()
    st.stop()

if controller.active_view == "home":
    render_home(controller)
elif controller.active_view == "schedule":
    render_schedule(controller)
elif controller.active_view == "memo":
    render_memos(controller)
elif controller.active_view == "goals":
    render_goals(controller)
