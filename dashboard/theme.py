import streamlit as st

THEME = {
    "bg_main": "#09090b",
    "bg_card": "rgba(24, 24, 27, 0.4)",
    "border": "#27272a",
    "text_main": "#f4f4f5",
    "text_soft": "#a1a1aa",
    "done_bg": "rgba(16, 185, 129, 0.18)",
    "missed_bg": "rgba(244, 63, 94, 0.12)",
    "today_border": "#60a5fa",
    "selected_border": "#f4f4f5",
    "info_bg": "rgba(6, 78, 59, 0.35)",
    "error_bg": "rgba(76, 5, 25, 0.35)",
}


def inject_theme_css():
    theme_vars_css = "\n".join(
        f"    --{name.replace('_', '-')}: {value};" for name, value in THEME.items()
    )
    st.markdown(
        "<style>\n:root {\n"
        + theme_vars_css
        + "\n}\n"
        + """
.stApp { background: var(--bg-main); color: var(--text-main); }
.section-title { font-size: 0.95rem; font-weight: 500; color: var(--text-main); margin-bottom: 4px; }
.small-label { font-size: 0.75rem; color: var(--text-soft); }
.pivot-badge {
    display: inline-flex; align-items: center; gap: 6px;
    border: 1px solid var(--border); border-radius: 999px;
    padding: 2px 10px; font-size: 0.75rem; color: var(--text-soft);
}
.pivot-badge .dot { width: 8px; height: 8px; border-radius: 999px; background: rgba(52, 211, 153, 0.8); }
.panel { border: 1px solid var(--border); border-radius: 16px; background: var(--bg-card); padding: 16px; }
.status-banner { border-radius: 12px; padding: 10px 14px; font-size: 0.85rem; }
.status-banner.done { background: var(--info-bg); }
.status-banner.pending { background: var(--error-bg); }
.day-cell { text-align: center; border-radius: 10px; padding: 2px 0; }
.day-cell.done { background: var(--done-bg); }
.day-cell.missed { background: var(--missed-bg); }
.day-cell.today { outline: 1px solid var(--today-border); }
.day-cell.selected { outline: 1px solid var(--selected-border); }
.entry-field-label { font-size: 0.75rem; color: var(--text-soft); margin-top: 8px; }
</style>
""",
        unsafe_allow_html=True,
    )
