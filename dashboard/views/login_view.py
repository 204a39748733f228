import logging

import streamlit as st

from dashboard.auth import credentials_problem
from dashboard.errors import AuthError

logger = logging.getLogger(__name__)

SIGNUP_SUCCESS_MESSAGE = "Signup successful. Check your email to confirm, then login."
CONFIRMED_MESSAGE = "Email confirmed. You can login now."


def _mode():
    if "login.mode" not in st.session_state:
        st.session_state["login.mode"] = "login"
    return st.session_state["login.mode"]


def _reset_messages():
    st.session_state["login.error"] = ""
    st.session_state["login.info"] = ""


def _toggle_mode():
    _reset_messages()
    st.session_state["login.mode"] = "signup" if _mode() == "login" else "login"


def handle_auth(account_service, mode, email, password):
    """Run one login/sign-up attempt; returns ``(session, error, info)``."""
    problem = credentials_problem(email, password)
    if problem:
        return None, problem, ""
    try:
        if mode == "signup":
            result = account_service.sign_up(email, password) or {}
            if result.get("confirmation_required"):
                return None, "", SIGNUP_SUCCESS_MESSAGE
            return None, "", "Signup successful. You can login now."
        return account_service.sign_in_with_password(email, password), "", ""
    except AuthError as exc:
        logger.info("Authentication failed for %s: %s", email, exc.message)
        return None, exc.message, ""


def handle_confirmation(account_service, code):
    """Redeem a confirmation code; returns ``(error, info)``."""
    code = str(code or "").strip()
    if not code:
        return "Please enter the confirmation code.", ""
    try:
        account_service.confirm_email(code)
    except AuthError as exc:
        logger.info("Confirmation failed: %s", exc.message)
        return exc.message, ""
    return "", CONFIRMED_MESSAGE


def _render_confirmation(account_service):
    with st.expander("Have a confirmation code?"):
        st.caption("The code is sent when you sign up. Without a mail service it is written to the API server log.")
        code = st.text_input("Confirmation code", key="login.confirmation_code")
        if st.button("Confirm email", key="login.confirm"):
            error, info = handle_confirmation(account_service, code)
            st.session_state["login.error"] = error
            st.session_state["login.info"] = info
            st.rerun()


def render_login_view(account_service, on_signed_in):
    mode = _mode()
    st.markdown("<span class='pivot-badge'><span class='dot'></span>Daily Pivot</span>", unsafe_allow_html=True)
    st.markdown(f"## {'Welcome back' if mode == 'login' else 'Create your account'}")
    st.caption("Login to write today’s entry." if mode == "login" else "Sign up to start tracking daily.")

    if st.session_state.get("login.error"):
        st.error(st.session_state["login.error"])
    if st.session_state.get("login.info"):
        st.success(st.session_state["login.info"])

    with st.form("login.form", clear_on_submit=False):
        email = st.text_input("Email", key="login.email", placeholder="Email address")
        password = st.text_input("Password", key="login.password", type="password")
        st.caption("Minimum 6 characters.")
        label = "Login" if mode == "login" else "Sign up"
        submitted = st.form_submit_button(label, use_container_width=True)

    if submitted:
        with st.spinner("Logging in…" if mode == "login" else "Creating account…"):
            session, error, info = handle_auth(account_service, mode, email, password)
        st.session_state["login.error"] = error
        st.session_state["login.info"] = info
        if info and mode == "signup":
            st.session_state["login.mode"] = "login"
        if session is not None:
            _reset_messages()
            on_signed_in(session)
        st.rerun()

    cols = st.columns([3, 1])
    with cols[0]:
        st.caption("No account yet?" if mode == "login" else "Already have an account?")
    with cols[1]:
        st.button("Sign up" if mode == "login" else "Login", key="login.toggle", on_click=_toggle_mode)

    _render_confirmation(account_service)
