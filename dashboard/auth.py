from __future__ import annotations

import os

import streamlit as st

ENV_PATH = os.path.join(os.path.dirname(__file__), "..", ".env")

ENV_FALLBACK_KEYS = {
    ("app", "API_BASE_URL"): "API_BASE_URL",
    ("app", "API_TIMEOUT_SECONDS"): "API_TIMEOUT_SECONDS",
    ("app", "timezone"): "DAILY_PIVOT_TIMEZONE",
}

MIN_PASSWORD_LENGTH = 6


def load_local_env():
    if not os.path.exists(ENV_PATH):
        return
    with open(ENV_PATH, "r", encoding="utf-8") as env_file:
        for raw_line in env_file:
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


def get_secret(path, default=None):
    env_key = ENV_FALLBACK_KEYS.get(tuple(path))
    if env_key:
        env_value = os.getenv(env_key)
        if env_value:
            return env_value
    try:
        current = st.secrets
        for key in path:
            if key not in current:
                return default
            current = current[key]
    except Exception:
        return default
    return current


def get_timezone_name():
    value = get_secret(("app", "timezone")) or os.getenv("DAILY_PIVOT_TIMEZONE") or ""
    return str(value).strip() or None


def credentials_problem(email, password):
    """Client-side check mirroring the backend rules; ``None`` when fine."""
    if not str(email or "").strip() or not password:
        return "Please enter email and password."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    return None


def get_display_name(email):
    local = (email or "").split("@")[0].replace(".", " ").strip()
    return local.title() if local else "User"
