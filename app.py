import streamlit as st

from dashboard.auth import get_secret, load_local_env
from dashboard.data import api_client
from dashboard.logging_config import configure_logging
from dashboard.router import render_router
from dashboard.theme import inject_theme_css


st.set_page_config(page_title="Daily Pivot", page_icon="🔥", layout="wide")

load_local_env()
configure_logging()
api_client.configure(get_secret, token_getter=None)

inject_theme_css()

if not api_client.is_enabled():
    st.error("API_BASE_URL is not configured.")
    st.code("[app]\nAPI_BASE_URL = \"http://localhost:8000\"", language="toml")
    st.stop()

render_router()
