import streamlit as st

from dashboard.calendar_status import DayStatus, month_weeks, status_counts
from dashboard.dates import month_label

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def _cell_classes(cell):
    classes = ["day-cell"]
    if cell.status is not DayStatus.FUTURE:
        classes.append(cell.status.value)
    if cell.is_today:
        classes.append("today")
    if cell.is_selected:
        classes.append("selected")
    return " ".join(classes)


def _select(controller, iso):
    controller.select_date(iso)


def _render_month_nav(controller):
    cols = st.columns([1, 3, 1, 1])
    with cols[0]:
        st.button("‹", key="calendar.prev", on_click=controller.calendar.previous_month)
    with cols[1]:
        st.markdown(f"<div class='section-title'>{month_label(controller.calendar.displayed_month)}</div>", unsafe_allow_html=True)
    with cols[2]:
        st.button("›", key="calendar.next", on_click=controller.calendar.next_month)
    with cols[3]:
        st.button("Today", key="calendar.today", on_click=controller.calendar.show_today)


def render_calendar_panel(controller):
    st.markdown("<div class='section-title'>Calendar</div>", unsafe_allow_html=True)
    st.markdown("<div class='small-label'>🔥 done • 😔 missed • click a day to view</div>", unsafe_allow_html=True)
    _render_month_nav(controller)

    cells = controller.calendar_cells()
    header = st.columns(7)
    for idx, label in enumerate(WEEKDAY_LABELS):
        header[idx].markdown(f"<div class='small-label' style='text-align:center'>{label}</div>", unsafe_allow_html=True)

    for week in month_weeks(cells):
        cols = st.columns(7)
        for idx, cell in enumerate(week):
            if cell is None:
                continue
            with cols[idx]:
                st.markdown(
                    f"<div class='{_cell_classes(cell)}'>{cell.marker or '&nbsp;'}</div>",
                    unsafe_allow_html=True,
                )
                st.button(
                    str(cell.day.day),
                    key=f"calendar.day.{cell.iso}",
                    on_click=_select,
                    args=(controller, cell.iso),
                    type="primary" if cell.is_selected else "secondary",
                    use_container_width=True,
                )

    counts = status_counts(cells)
    st.caption(f"{counts['done']} done • {counts['missed']} missed • {counts['future']} to go")
