"""
Streamlit Frontend for Allowance Ledger

A thin collaborator around LedgerSession. It owns only transient view
state (form field values, flash messages); every record it shows comes
from a snapshot and every change goes through a session operation.

DESIGN PRINCIPLES:
1. One screen: total on top, records below, entry form at the bottom
2. Click a row to edit it, tick it to mark it for deletion
3. Rejected input is explained, never silently fixed
"""

import streamlit as st

from allowance_ledger.audit import configure_logging
from allowance_ledger.config import get_settings, validate_all_settings
from allowance_ledger.models.record import SignState
from allowance_ledger.services.storage import StorageError
from allowance_ledger.session import LedgerSession, create_session
from allowance_ledger.rendering import row_label


# Page configuration
st.set_page_config(
    page_title="Allowance Ledger",
    page_icon="💴",
    layout="centered",
)

NEGATIVE_COLOR = "#d62728"
DEFAULT_COLOR = "#000000"


def get_session() -> LedgerSession:
    """Get or create the ledger session for this browser tab."""
    if "ledger_session" not in st.session_state:
        settings = get_settings()
        configure_logging(settings.app.log_level)
        st.session_state.ledger_session = create_session(settings)
        st.session_state.date_field = st.session_state.ledger_session.default_date()
        st.session_state.amount_field = ""
        st.session_state.memo_field = ""
        st.session_state.flash = None
    return st.session_state.ledger_session


def _flash(kind: str, message: str) -> None:
    st.session_state.flash = (kind, message)


def on_select(session: LedgerSession, index: int) -> None:
    draft = session.select(index)
    st.session_state.date_field = draft.date
    st.session_state.amount_field = draft.amount
    st.session_state.memo_field = draft.memo


def on_toggle_mark(session: LedgerSession, index: int) -> None:
    session.toggle_mark(index)


def on_add(session: LedgerSession) -> None:
    try:
        result = session.submit_new(
            st.session_state.date_field,
            st.session_state.amount_field,
            st.session_state.memo_field,
        )
    except StorageError as e:
        _flash("error", f"Could not save: {e}")
        return
    if result.is_valid:
        st.session_state.amount_field = ""
        st.session_state.memo_field = ""
        _flash("success", "Added.")
    else:
        _flash("error", result.issue.message)


def on_save(session: LedgerSession) -> None:
    try:
        result = session.save_selected(
            st.session_state.date_field,
            st.session_state.amount_field,
            st.session_state.memo_field,
        )
    except (IndexError, StorageError) as e:
        _flash("error", f"Could not save: {e}")
        return
    if result.is_valid:
        _flash("success", "Saved.")
    else:
        _flash("error", result.issue.message)


def on_delete(session: LedgerSession) -> None:
    try:
        removed = session.request_delete_marked()
    except StorageError as e:
        _flash("error", f"Could not delete: {e}")
        return
    _flash("success", f"Deleted {removed} records.")


def render_ledger_page(session: LedgerSession) -> None:
    """Render the ledger list and entry form."""
    snapshot = session.get_snapshot()
    summary = snapshot.summary
    color = NEGATIVE_COLOR if summary.sign_state == SignState.NEGATIVE else DEFAULT_COLOR
    st.markdown(
        f"<h2 style='color:{color}'>{summary.label}</h2>",
        unsafe_allow_html=True,
    )
    if summary.skipped_count:
        st.warning(f"{summary.skipped_count} records have an unreadable amount and are not counted.")

    if st.session_state.flash:
        kind, message = st.session_state.flash
        (st.error if kind == "error" else st.success)(message)
        st.session_state.flash = None

    for index, row in enumerate(session.render_rows()):
        selected = snapshot.selection.selected_index == index
        col1, col2 = st.columns([1, 8])
        with col1:
            st.checkbox(
                "Delete",
                value=index in snapshot.selection.marked,
                key=f"mark_{index}_{len(snapshot)}",
                label_visibility="collapsed",
                on_change=on_toggle_mark,
                args=(session, index),
            )
        with col2:
            st.button(
                row_label(row),
                key=f"row_{index}_{len(snapshot)}",
                type="primary" if selected else "secondary",
                on_click=on_select,
                args=(session, index),
                use_container_width=True,
            )

    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        st.text_input("Date", key="date_field")
    with col2:
        st.text_input(f"Amount ({get_settings().display.currency_symbol})", key="amount_field")
    st.text_input("Memo", key="memo_field")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.button("➕ Add", type="primary", on_click=on_add, args=(session,))
    with col2:
        st.button(
            "🗑️ Delete",
            disabled=not snapshot.can_delete,
            on_click=on_delete,
            args=(session,),
        )
    with col3:
        st.button(
            "💾 Save",
            disabled=not snapshot.can_save,
            on_click=on_save,
            args=(session,),
        )


def render_activity_page() -> None:
    """Render recent audit events."""
    st.title("📜 Activity")
    logger = st.session_state.ledger_session.audit_logger
    if logger is None:
        st.info("Activity logging is not enabled.")
        return
    for event in logger.recent_events(limit=50):
        st.markdown(
            f"**{event.timestamp:%Y-%m-%d %H:%M:%S}** · "
            f"`{event.event_type.value}` · {event.description}"
        )


def render_settings_page() -> None:
    """Render the settings page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()
    for name in ("storage", "display", "app"):
        if status.get(name, False):
            st.success(f"✅ {name} settings OK")
        else:
            st.error(f"❌ {name} - {status.get(f'{name}_error', 'Not configured')}")

    settings = get_settings()
    st.markdown("### Storage")
    st.markdown(f"**Backend:** {settings.storage.backend.value}")
    st.markdown(f"**Ledger file:** `{settings.storage.ledger_path}`")
    st.markdown(
        "Settings are read from `ALLOWANCE_*` environment variables or a `.env` file."
    )


def main():
    """Main application entry point."""
    session = get_session()

    st.sidebar.title("💴 Allowance Ledger")
    page = st.sidebar.radio(
        "Navigate to:",
        ["📒 Ledger", "📜 Activity", "⚙️ Settings"],
        index=0,
    )

    if page == "📒 Ledger":
        render_ledger_page(session)
    elif page == "📜 Activity":
        render_activity_page()
    elif page == "⚙️ Settings":
        render_settings_page()


if __name__ == "__main__":
    main()
