import os
import tempfile
import unittest
from unittest import mock

from fastapi.testclient import TestClient

from backend import settings as backend_settings
from backend.main import create_app
from dashboard.auth import credentials_problem, get_display_name
from dashboard.context import SessionContext
from dashboard.data import api_client
from dashboard.errors import AuthError
from dashboard.services.account_service import TOKEN_KEY, AccountService
from dashboard.views.login_view import CONFIRMED_MESSAGE, SIGNUP_SUCCESS_MESSAGE, handle_auth, handle_confirmation


class FakeAccounts:
    def __init__(self, sign_in_error=None, confirmation_required=True):
        self.sign_in_error = sign_in_error
        self.confirmation_required = confirmation_required
        self.calls = []

    def sign_in_with_password(self, email, password):
        self.calls.append(("signin", email))
        if self.sign_in_error:
            raise self.sign_in_error
        return SessionContext(user_id="u1", email=email, access_token="tok")

    def sign_up(self, email, password):
        self.calls.append(("signup", email))
        return {"confirmation_required": self.confirmation_required}

    def confirm_email(self, code):
        self.calls.append(("confirm", code))
        if code != "good-code":
            raise AuthError("Invalid or already used confirmation token", status_code=400)


class TestClientTransport:
    """Routes ``api_client.request`` calls into an in-process FastAPI app."""

    def __init__(self, client):
        self.client = client

    def request(self, method, path, params=None, json=None, token=None, timeout=None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        response = self.client.request(method, path, params=params, json=json, headers=headers)
        if response.status_code >= 400:
            detail = response.json().get("detail")
            raise api_client.ApiError(str(detail), status_code=response.status_code, detail=detail)
        return response.json()


class TestLoginFlow(unittest.TestCase):
    def test_credentials_checked_before_any_call(self):
        accounts = FakeAccounts()
        session, error, _ = handle_auth(accounts, "login", "ana@example.com", "12345")
        self.assertIsNone(session)
        self.assertEqual(error, "Password must be at least 6 characters.")
        self.assertEqual(accounts.calls, [])
        self.assertEqual(credentials_problem("", "secret1"), "Please enter email and password.")

    def test_login_returns_session(self):
        session, error, info = handle_auth(FakeAccounts(), "login", "ana@example.com", "secret1")
        self.assertEqual(session.email, "ana@example.com")
        self.assertEqual((error, info), ("", ""))

    def test_login_failure_message(self):
        accounts = FakeAccounts(sign_in_error=AuthError("Email not confirmed", status_code=403))
        session, error, _ = handle_auth(accounts, "login", "ana@example.com", "secret1")
        self.assertIsNone(session)
        self.assertEqual(error, "Email not confirmed")

    def test_signup_asks_for_confirmation(self):
        session, error, info = handle_auth(FakeAccounts(), "signup", "ana@example.com", "secret1")
        self.assertIsNone(session)
        self.assertEqual(error, "")
        self.assertEqual(info, SIGNUP_SUCCESS_MESSAGE)

    def test_confirmation_messages(self):
        accounts = FakeAccounts()
        self.assertEqual(handle_confirmation(accounts, "  "), ("Please enter the confirmation code.", ""))
        self.assertEqual(accounts.calls, [])
        self.assertEqual(handle_confirmation(accounts, " good-code "), ("", CONFIRMED_MESSAGE))
        self.assertEqual(accounts.calls, [("confirm", "good-code")])
        error, info = handle_confirmation(accounts, "stale")
        self.assertEqual(error, "Invalid or already used confirmation token")
        self.assertEqual(info, "")

    def test_display_name(self):
        self.assertEqual(get_display_name("ana.maria@example.com"), "Ana Maria")
        self.assertEqual(get_display_name(""), "User")


class TestSignUpThroughSignIn(unittest.TestCase):
    """Login view helpers against the real API with confirmation required."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        db_path = os.path.join(self._tmp.name, "daily_pivot_login.db")
        self._env = mock.patch.dict(
            os.environ,
            {"DATABASE_URL": f"sqlite+aiosqlite:///{db_path}", "REQUIRE_EMAIL_CONFIRMATION": "true", "ALLOWED_EMAILS": ""},
        )
        self._env.start()
        backend_settings.reset_settings()
        self._client_cm = TestClient(create_app())
        client = self._client_cm.__enter__()
        self.token_state = {}
        self.accounts = AccountService(self.token_state, client=TestClientTransport(client))

    def tearDown(self):
        self._client_cm.__exit__(None, None, None)
        self._env.stop()
        backend_settings.reset_settings()
        self._tmp.cleanup()

    def test_sign_up_confirm_then_sign_in(self):
        with self.assertLogs("backend.routes.auth", level="INFO") as captured:
            session, error, info = handle_auth(self.accounts, "signup", "ana@example.com", "secret1")
        self.assertEqual((session, error, info), (None, "", SIGNUP_SUCCESS_MESSAGE))
        codes = [record.args[1] for record in captured.records if record.getMessage().startswith("Confirmation code")]
        self.assertEqual(len(codes), 1)

        session, error, _ = handle_auth(self.accounts, "login", "ana@example.com", "secret1")
        self.assertIsNone(session)
        self.assertEqual(error, "Email not confirmed")

        self.assertEqual(handle_confirmation(self.accounts, codes[0]), ("", CONFIRMED_MESSAGE))

        session, error, _ = handle_auth(self.accounts, "login", "ana@example.com", "secret1")
        self.assertEqual(error, "")
        self.assertEqual(session.email, "ana@example.com")
        self.assertEqual(self.token_state[TOKEN_KEY], session.access_token)
        self.assertEqual(self.accounts.get_session().user_id, session.user_id)


if __name__ == "__main__":
    unittest.main()
