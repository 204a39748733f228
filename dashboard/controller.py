"""Session and form orchestration for the journal page.

Phases run ``checking-session`` to either ``redirect-to-login`` or
``loading-entries``, then ``idle`` and ``submitting`` alternate for each save.
The controller never touches Streamlit; views read its state and call its
methods.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from dashboard.calendar_status import CalendarState
from dashboard.dates import local_today, to_iso
from dashboard.entry_map import ENTRY_FIELDS, EntryMap
from dashboard.errors import AuthError, EntryValidationError, StoreError

logger = logging.getLogger(__name__)

CHECKING_SESSION = "checking-session"
REDIRECT_TO_LOGIN = "redirect-to-login"
LOADING_ENTRIES = "loading-entries"
IDLE = "idle"
SUBMITTING = "submitting"

FIELD_LABELS = {
    "reflection": "Reflection",
    "plan_tomorrow": "Plan for tomorrow",
    "outfit": "Outfit",
}


def validate_fields(fields) -> dict:
    clean = {key: str((fields or {}).get(key) or "") for key in ENTRY_FIELDS}
    missing = [key for key in ENTRY_FIELDS if not clean[key].strip()]
    if missing:
        labels = ", ".join(FIELD_LABELS[key] for key in missing)
        raise EntryValidationError(f"Please fill in all fields ({labels}).", missing_fields=missing)
    return clean


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class JournalController:
    def __init__(self, account_service, store_factory, tz_name=None, clock=None):
        self.account_service = account_service
        self.store_factory = store_factory
        self._clock = clock or (lambda: local_today(tz_name))

        self.phase = CHECKING_SESSION
        self.session = None
        self.store = None
        self.entry_map = EntryMap()
        self.calendar = CalendarState(self._clock())
        self.form = {key: "" for key in ENTRY_FIELDS}
        self.already_submitted = False
        self.load_warning = ""
        self.last_error = ""

    @property
    def today(self):
        return self.calendar.today

    @property
    def today_iso(self) -> str:
        return to_iso(self.calendar.today)

    @property
    def is_ready(self) -> bool:
        return self.phase in (LOADING_ENTRIES, IDLE, SUBMITTING)

    @property
    def can_submit(self) -> bool:
        return self.phase == IDLE

    def refresh_today(self) -> bool:
        """Move "today" forward when the clock has crossed midnight.

        A change while idle reloads entries so the form and the submitted
        flag describe the new day. Returns whether the date changed.
        """
        today = self._clock()
        previous = self.calendar.today
        if today == previous:
            return False
        logger.info("Day changed from %s to %s", to_iso(previous), to_iso(today))
        self.calendar.set_today(today)
        if self.session is not None and self.phase == IDLE:
            self.load_entries()
        return True

    def check_session(self):
        """One-shot session lookup; no retry on failure."""
        self.phase = CHECKING_SESSION
        try:
            session = self.account_service.get_session()
        except AuthError as exc:
            logger.warning("Session check failed: %s", exc)
            session = None
        if session is None:
            self.session = None
            self.phase = REDIRECT_TO_LOGIN
            return None
        self.session = session
        self.store = self.store_factory(session)
        self.phase = LOADING_ENTRIES
        return session

    def load_entries(self):
        if self.session is None:
            raise AuthError("Not signed in")
        self.phase = LOADING_ENTRIES
        self.refresh_today()
        today_iso = self.today_iso
        self.load_warning = ""
        try:
            self.entry_map.load(self.store.fetch_all_entries(self.session.user_id))
        except StoreError as exc:
            logger.warning("Could not load entries for %s: %s", self.session.email, exc)
            self.entry_map.clear()
            self.load_warning = "Could not load your past entries. The calendar may be incomplete."

        try:
            today_entry = self.store.fetch_entry(self.session.user_id, today_iso)
        except StoreError as exc:
            logger.warning("Could not load today's entry: %s", exc)
            today_entry = self.entry_map.get(today_iso)
        if today_entry is not None:
            self.entry_map.upsert(today_entry)
            self.form = today_entry.fields()
            self.already_submitted = True
        else:
            self.form = {key: "" for key in ENTRY_FIELDS}
            self.already_submitted = False
        self.calendar.show_today()
        self.phase = IDLE
        return self.entry_map

    def submit(self, fields, form_day=None):
        """Save today's entry.

        ``form_day`` is the ISO date the form was shown for; a save is refused
        when the date has moved on since, instead of landing on the new day.
        """
        if self.session is None:
            raise AuthError("Not signed in")
        if self.phase == SUBMITTING:
            raise StoreError("A save is already in progress.")
        self.refresh_today()
        today_iso = self.today_iso
        if form_day is not None and form_day != today_iso:
            self.last_error = f"The day changed to {today_iso}; the form was reloaded for today."
            raise StoreError(self.last_error)
        clean = validate_fields(fields)

        self.phase = SUBMITTING
        self.last_error = ""
        try:
            saved = self.store.upsert_entry(self.session.user_id, today_iso, clean, _utc_timestamp())
        except StoreError as exc:
            self.last_error = exc.message
            raise
        finally:
            self.phase = IDLE

        self.entry_map.upsert(saved)
        self.form = saved.fields()
        self.already_submitted = True
        self.calendar.select_date(today_iso)
        return saved

    def select_date(self, iso_date):
        return self.calendar.select_date(iso_date)

    def selected_entry(self):
        return self.calendar.selected_entry(self.entry_map)

    def calendar_cells(self):
        return self.calendar.cells(self.entry_map)

    def logout(self):
        try:
            self.account_service.sign_out()
        finally:
            self.session = None
            self.store = None
            self.entry_map.clear()
            self.calendar = CalendarState(self._clock())
            self.form = {key: "" for key in ENTRY_FIELDS}
            self.already_submitted = False
            self.load_warning = ""
            self.phase = REDIRECT_TO_LOGIN
