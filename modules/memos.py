import streamlit as st
from datetime import datetime


def render_memos(controller):
    st.subheader("🗒️ Memos")

    with st.form("add_memo_form", clear_on_submit=True):
        content = st.text_area("New memo")
        submitted = st.form_submit_button("Save memo")

        if submitted:
            if not content.strip():
                st.error("Memo is empty.")
            else:
                controller.add_memo(content.strip())
                st.rerun()

    memos = controller.state.memos

    if not memos:
        st.info("No memos yet.")
        return

    for memo in memos:
        stamp = datetime.fromtimestamp(memo.updated_at / 1000).strftime("%d %b %Y, %H:%M")

        c1, c2 = st.columns([6, 1])
        with c1:
            st.caption(stamp)
            st.write(memo.content)
        if c2.button("🗑️", key=f"memo_delete_{memo.id}"):
            controller.remove_memo(memo.id)
            st.rerun()
        st.markdown("---")
