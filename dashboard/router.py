import streamlit as st

from dashboard import controller as journal_controller
from dashboard.auth import get_timezone_name
from dashboard.data.journal_store import JournalStore
from dashboard.header import render_global_header
from dashboard.services.account_service import AccountService
from dashboard.state import session_slices
from dashboard.views.journal_view import render_journal_view
from dashboard.views.login_view import render_login_view

ROUTE_KEY = "ui.route"
LOGIN_ROUTE = "login"
APP_ROUTE = "app"


def _account_service():
    return AccountService(session_slices.get_slice(session_slices.AUTH_SLICE))


def _controller(account_service):
    tz_name = get_timezone_name()
    return session_slices.get_or_create(
        session_slices.JOURNAL_SLICE,
        "controller",
        lambda: journal_controller.JournalController(account_service, JournalStore, tz_name=tz_name),
    )


def _go(route):
    st.session_state[ROUTE_KEY] = route


def _on_signed_in(_session):
    session_slices.clear_slice(session_slices.JOURNAL_SLICE)
    _go(APP_ROUTE)


def _on_logout(controller):
    controller.logout()
    session_slices.clear_slice(session_slices.JOURNAL_SLICE)
    _go(LOGIN_ROUTE)


def render_router():
    account_service = _account_service()
    route = st.session_state.get(ROUTE_KEY, APP_ROUTE)

    if route == LOGIN_ROUTE:
        return render_login_view(account_service, _on_signed_in)

    controller = _controller(account_service)
    if controller.phase == journal_controller.CHECKING_SESSION:
        with st.spinner("Checking session..."):
            controller.check_session()
    if controller.phase == journal_controller.REDIRECT_TO_LOGIN:
        session_slices.clear_slice(session_slices.JOURNAL_SLICE)
        _go(LOGIN_ROUTE)
        st.rerun()
    if controller.phase == journal_controller.LOADING_ENTRIES:
        with st.spinner("Loading your entries..."):
            controller.load_entries()

    render_global_header(controller, on_logout=lambda: _on_logout(controller))
    _render_journal(controller)


@st.fragment
def _render_journal(controller):
    render_journal_view(controller)
