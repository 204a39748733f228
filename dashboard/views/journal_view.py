import streamlit as st

from dashboard.calendar_status import DayStatus
from dashboard.controller import FIELD_LABELS
from dashboard.entry_map import ENTRY_FIELDS
from dashboard.errors import EntryValidationError, StoreError
from dashboard.views.calendar_view import render_calendar_panel

HISTORY_LIMIT = 14


def _sync_form_state(controller):
    # Reload widget values only when the day or the saved row changes.
    saved = controller.entry_map.get(controller.today_iso)
    loaded_key = f"{controller.today_iso}:{saved.updated_at if saved else ''}"
    if st.session_state.get("journal.loaded_key") == loaded_key:
        return
    for key in ENTRY_FIELDS:
        st.session_state[f"journal.{key}"] = controller.form.get(key, "")
    st.session_state["journal.loaded_key"] = loaded_key
    st.session_state["journal.form_day"] = controller.today_iso


def _render_status_banner(controller):
    if controller.already_submitted:
        st.markdown(
            f"<div class='status-banner done'>✅ Submitted for {controller.today_iso}. You can still edit it today.</div>",
            unsafe_allow_html=True,
        )
    else:
        st.markdown(
            f"<div class='status-banner pending'>⏳ Not submitted yet for {controller.today_iso}.</div>",
            unsafe_allow_html=True,
        )


def _render_today_form(controller, form_day):
    _sync_form_state(controller)
    st.markdown("<div class='section-title'>Today</div>", unsafe_allow_html=True)
    _render_status_banner(controller)
    with st.form("journal.form", clear_on_submit=False):
        for key in ENTRY_FIELDS:
            st.text_area(FIELD_LABELS[key], key=f"journal.{key}", height=110)
        label = "Update entry" if controller.already_submitted else "Submit entry"
        submitted = st.form_submit_button(label, disabled=not controller.can_submit)

    if not submitted:
        return
    fields = {key: st.session_state.get(f"journal.{key}", "") for key in ENTRY_FIELDS}
    try:
        with st.spinner("Saving…"):
            controller.submit(fields, form_day=form_day)
    except EntryValidationError as exc:
        st.warning(exc.message)
        return
    except StoreError as exc:
        st.error(f"Could not save your entry: {exc.message}")
        return
    st.toast("Entry saved")
    st.rerun()


def _render_selected_day(controller):
    selected_iso = controller.calendar.selected_iso_date
    st.markdown(f"<div class='section-title'>{selected_iso}</div>", unsafe_allow_html=True)
    entry = controller.selected_entry()
    if entry is None:
        status = controller.calendar.selected_status(controller.entry_map)
        if status is DayStatus.FUTURE:
            st.caption("This day hasn't happened yet.")
        else:
            st.caption("No entry for this day.")
        return
    for key in ENTRY_FIELDS:
        st.markdown(f"<div class='entry-field-label'>{FIELD_LABELS[key]}</div>", unsafe_allow_html=True)
        st.write(getattr(entry, key) or "-")
    if entry.updated_at:
        st.caption(f"Last updated {entry.updated_at}")


def _render_history(controller):
    entries = controller.entry_map.entries_sorted(reverse=True)[:HISTORY_LIMIT]
    st.markdown("<div class='section-title'>Recent entries</div>", unsafe_allow_html=True)
    if not entries:
        st.caption("No entries yet.")
        return
    for entry in entries:
        preview = entry.reflection.strip().splitlines()[0] if entry.reflection.strip() else ""
        st.markdown(f"**{entry.entry_date}** • {preview[:80]}")


def render_journal_view(controller):
    form_day = st.session_state.get("journal.form_day")
    if controller.refresh_today():
        st.info(f"A new day has started ({controller.today_iso}). Today's form was reloaded.")
    if controller.load_warning:
        st.warning(controller.load_warning)

    left, right = st.columns([1.1, 0.9])
    with left:
        _render_today_form(controller, form_day)
    with right:
        render_calendar_panel(controller)
        st.divider()
        _render_selected_day(controller)
    st.divider()
    _render_history(controller)
