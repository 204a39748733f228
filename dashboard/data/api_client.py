import os
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_TIMEOUT = 10

_SECRET_GETTER = None
_TOKEN_GETTER = None


class ApiError(Exception):
    def __init__(self, message, status_code=None, detail=None):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def _build_session():
    session = requests.Session()
    # Writes are never retried; a failed save is reported to the user instead.
    retry = Retry(
        total=2,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=4)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


_SESSION = _build_session()


def configure(secret_getter, token_getter):
    global _SECRET_GETTER, _TOKEN_GETTER
    _SECRET_GETTER = secret_getter
    _TOKEN_GETTER = token_getter


def _get_secret(path, default=None):
    if _SECRET_GETTER is None:
        return default
    return _SECRET_GETTER(path, default)


def api_base_url():
    return (
        _get_secret(("app", "API_BASE_URL"))
        or _get_secret(("API_BASE_URL",))
        or os.getenv("API_BASE_URL")
        or ""
    )


def request_timeout():
    raw = (
        _get_secret(("app", "API_TIMEOUT_SECONDS"))
        or os.getenv("API_TIMEOUT_SECONDS")
        or DEFAULT_TIMEOUT
    )
    try:
        return float(raw)
    except (TypeError, ValueError):
        return float(DEFAULT_TIMEOUT)


def is_enabled():
    return bool(api_base_url())


def _error_detail(response):
    try:
        payload = response.json()
    except ValueError:
        return response.text
    if isinstance(payload, dict) and "detail" in payload:
        return payload["detail"]
    return payload


def request(
    method: str,
    path: str,
    params: dict | None = None,
    json: dict | None = None,
    token: str | None = None,
    timeout: float | None = None,
) -> Any:
    base = api_base_url().rstrip("/")
    if not base:
        raise ApiError("API_BASE_URL not configured")
    if token is None and _TOKEN_GETTER is not None:
        token = _TOKEN_GETTER()
    headers = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    url = f"{base}{path}"
    try:
        response = _SESSION.request(
            method,
            url,
            params=params,
            json=json,
            headers=headers,
            timeout=timeout or request_timeout(),
        )
    except requests.RequestException as exc:
        raise ApiError(f"Request to {path} failed: {exc}") from exc
    if not response.ok:
        detail = _error_detail(response)
        raise ApiError(
            f"API error {response.status_code} {response.reason}: {detail}",
            status_code=response.status_code,
            detail=detail,
        )
    if response.status_code == 204:
        return None
    try:
        return response.json()
    except ValueError as exc:
        raise ApiError(
            f"API returned a non-JSON body for {path}",
            status_code=response.status_code,
        ) from exc
