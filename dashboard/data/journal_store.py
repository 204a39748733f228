import logging

from dashboard.data import api_client
from dashboard.dates import to_iso, parse_iso
from dashboard.entry_map import ENTRY_FIELDS, Entry
from dashboard.errors import StoreError

logger = logging.getLogger(__name__)


def _store_error(exc):
    detail = exc.detail if exc.detail else str(exc)
    return StoreError(str(detail), status_code=exc.status_code)


class JournalStore:
    """Per-user journal rows, one per calendar date.

    Rows are scoped server-side by the bearer token of ``session``; ``user_id``
    is checked against it so a stale context cannot write under another user.
    """

    def __init__(self, session, client=api_client):
        self._session = session
        self._client = client

    def _check_user(self, user_id):
        if user_id != self._session.user_id:
            raise StoreError("Entry belongs to a different session")

    def fetch_entry(self, user_id, iso_date):
        self._check_user(user_id)
        day = to_iso(parse_iso(iso_date))
        try:
            payload = self._client.request("GET", f"/v1/entries/{day}", token=self._session.access_token)
        except api_client.ApiError as exc:
            if exc.status_code == 404:
                return None
            raise _store_error(exc) from exc
        return Entry.from_row(payload)

    def fetch_all_entries(self, user_id):
        self._check_user(user_id)
        try:
            payload = self._client.request("GET", "/v1/entries", token=self._session.access_token)
        except api_client.ApiError as exc:
            raise _store_error(exc) from exc
        return [Entry.from_row(row) for row in (payload or {}).get("items", [])]

    def upsert_entry(self, user_id, iso_date, fields, updated_at):
        self._check_user(user_id)
        day = to_iso(parse_iso(iso_date))
        body = {key: str(fields.get(key) or "") for key in ENTRY_FIELDS}
        body["updated_at"] = updated_at
        try:
            payload = self._client.request("PUT", f"/v1/entries/{day}", json=body, token=self._session.access_token)
        except api_client.ApiError as exc:
            raise _store_error(exc) from exc
        logger.debug("Saved entry for %s", day)
        return Entry.from_row(payload)
