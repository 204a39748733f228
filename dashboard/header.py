import streamlit as st

from dashboard.auth import get_display_name


def render_global_header(controller, on_logout):
    email = controller.session.email if controller.session else None
    cols = st.columns([4, 1])
    with cols[0]:
        st.markdown("<span class='pivot-badge'><span class='dot'></span>Daily Pivot</span>", unsafe_allow_html=True)
        if email:
            st.markdown(f"### Hi, {get_display_name(email)}")
            st.caption(f"Logged in as: {email}")
        else:
            st.caption("Checking session...")
    with cols[1]:
        st.button("Logout", key="header.logout", on_click=on_logout)
