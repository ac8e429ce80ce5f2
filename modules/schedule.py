import streamlit as st
from datetime import date

from core.models import RECURRENCES
from utils.dates import today_str

RECURRENCE_LABELS = {
    "none": "Once",
    "daily": "Daily",
    "weekly": "Weekly",
    "monthly": "Monthly",
}


# ==================================================
# MAIN UI
# ==================================================
def render_schedule(controller):
    st.subheader("📅 Schedule")

    # ==================================================
    # ➕ ADD SCHEDULE
    # ==================================================
    with st.form("add_schedule_form", clear_on_submit=True):
        c1, c2, c3 = st.columns([3, 1, 1])

        with c1:
            title = st.text_input("What are you doing? *")
        with c2:
            time = st.time_input("Time", value=None)
        with c3:
            recurrence = st.selectbox(
                "Repeat",
                RECURRENCES,
                format_func=lambda r: RECURRENCE_LABELS[r],
            )

        submitted = st.form_submit_button("Add")

        if submitted:
            if not title.strip():
                st.error("Please enter a title.")
            else:
                controller.add_schedule(
                    title.strip(),
                    time.strftime("%H:%M") if time else "",
                    recurrence,
                )
                st.rerun()

    # ==================================================
    # 📋 LIST
    # ==================================================
    items = controller.state.schedules

    if not items:
        st.info("Nothing scheduled yet.")
        return

    day = today_str(date.today())

    for item in items:
        c1, c2 = st.columns([6, 1])

        label = item.title
        if item.time:
            label = f"{item.time} · {label}"
        if item.recurrence != "none":
            label = f"{label}  _({RECURRENCE_LABELS[item.recurrence]})_"

        c1.checkbox(
            label,
            value=item.is_done_on(day),
            key=f"schedule_done_{item.id}",
            on_change=controller.toggle_schedule,
            args=(item.id,),
        )

        if c2.button("🗑️", key=f"schedule_delete_{item.id}"):
            controller.remove_schedule(item.id)
            st.rerun()
