import logging

from dashboard.context import SessionContext
from dashboard.data import api_client
from dashboard.errors import AuthError

logger = logging.getLogger(__name__)

TOKEN_KEY = "access_token"


def _auth_error(exc):
    detail = exc.detail if exc.detail else str(exc)
    return AuthError(str(detail), status_code=exc.status_code)


class AccountService:
    """Email/password accounts backed by the Daily Pivot API.

    ``token_state`` is any mutable mapping that outlives a single rerun
    (a Streamlit session slice in the app, a plain dict in tests).
    """

    def __init__(self, token_state, client=api_client):
        self._state = token_state
        self._client = client

    @property
    def access_token(self):
        return self._state.get(TOKEN_KEY) or ""

    def _forget_token(self):
        self._state.pop(TOKEN_KEY, None)

    def get_session(self):
        token = self.access_token
        if not token:
            return None
        try:
            payload = self._client.request("GET", "/v1/auth/session", token=token)
        except api_client.ApiError as exc:
            if exc.status_code == 401:
                self._forget_token()
                return None
            raise _auth_error(exc) from exc
        return SessionContext.from_payload(payload, access_token=token)

    def sign_in_with_password(self, email, password):
        try:
            payload = self._client.request(
                "POST",
                "/v1/auth/signin",
                json={"email": str(email or "").strip(), "password": password or ""},
                token="",
            )
        except api_client.ApiError as exc:
            raise _auth_error(exc) from exc
        self._state[TOKEN_KEY] = payload["access_token"]
        logger.info("Signed in as %s", payload.get("email"))
        return SessionContext.from_payload(payload, access_token=payload["access_token"])

    def sign_up(self, email, password):
        try:
            return self._client.request(
                "POST",
                "/v1/auth/signup",
                json={"email": str(email or "").strip(), "password": password or ""},
                token="",
            )
        except api_client.ApiError as exc:
            raise _auth_error(exc) from exc

    def confirm_email(self, confirmation_token):
        try:
            self._client.request(
                "POST",
                "/v1/auth/confirm",
                json={"token": str(confirmation_token or "").strip()},
                token="",
            )
        except api_client.ApiError as exc:
            raise _auth_error(exc) from exc

    def sign_out(self):
        token = self.access_token
        self._forget_token()
        if not token:
            return
        try:
            self._client.request("POST", "/v1/auth/signout", token=token)
        except api_client.ApiError as exc:
            logger.warning("Sign-out request failed; local session cleared anyway: %s", exc)
