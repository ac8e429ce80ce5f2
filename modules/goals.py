# modules/goals.py
"""
Goals view: numeric trackers with a short history chart.
"""

import streamlit as st
import pandas as pd

from core.planner import goal_history, goal_percent, goal_total, progress_fraction


# ==================================================
# MAIN RENDER
# ==================================================
def render_goals(controller):
    st.subheader("🎯 Goals")

    # --------------------------------------------------
    # New goal
    # --------------------------------------------------
    with st.expander("➕ New goal"):
        with st.form("add_goal_form", clear_on_submit=True):
            title = st.text_input("Goal *")
            c1, c2 = st.columns(2)
            target = c1.number_input("Target *", min_value=0.0, step=1.0)
            unit = c2.text_input("Unit", placeholder="count")

            submitted = st.form_submit_button("Create goal")

            if submitted:
                if not title.strip() or target <= 0:
                    st.error("Please enter a title and a positive target.")
                else:
                    controller.add_goal(title.strip(), target, unit)
                    st.rerun()

    goals = controller.state.goals

    if not goals:
        st.info("No goals yet. Start with something small.")
        return

    # --------------------------------------------------
    # Goal cards
    # --------------------------------------------------
    for goal in goals:
        st.markdown("---")
        total = goal_total(goal)
        percent = goal_percent(goal)

        c1, c2 = st.columns([5, 1])
        c1.markdown(f"### {goal.title}")
        c1.write(f"**{total:g}** / {goal.target:g} {goal.unit} · {percent}%")
        if c2.button("🗑️", key=f"goal_delete_{goal.id}"):
            controller.remove_goal(goal.id)
            st.rerun()

        st.progress(progress_fraction(percent))

        history = goal_history(goal)
        if history:
            df = pd.DataFrame(history).set_index("date")
            st.line_chart(df["value"], height=160)

        c1, c2 = st.columns([3, 1])
        value = c1.number_input(
            f"Log progress ({goal.unit})",
            value=None,
            step=1.0,
            key=f"goal_value_{goal.id}",
        )
        if c2.button("Add", key=f"goal_add_{goal.id}"):
            if value is None:
                st.error("Enter a number.")
            else:
                controller.update_goal(goal.id, value)
                st.rerun()
