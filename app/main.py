"""
Streamlit Frontend for Kantor

Screens:
1. Login
2. Register
3. Exchange (currency conversion + transaction history), or
   Note (current note + form), depending on the app variant

DESIGN PRINCIPLES:
1. The UI holds no business logic - every button calls one controller
   operation and every render reads one controller snapshot
2. Errors from the backend are shown exactly as reported
3. Each browser session gets its own controller
"""

import asyncio
from datetime import datetime

import streamlit as st

from kantor.components import create_app_components
from kantor.config import get_settings
from kantor.exchange import SUPPORTED_CURRENCIES
from kantor.models.records import format_transaction
from kantor.session import ExchangeController, NoteController


# Page configuration
st.set_page_config(
    page_title="Kantor",
    page_icon="💱",
    layout="centered",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .brand-title {
        text-align: center;
        color: #6750A4;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """
    Run a controller coroutine on this session's event loop.

    The loop is kept for the whole browser session because the HTTP
    client's connection pool is bound to the loop it first ran on.
    """
    if "event_loop" not in st.session_state:
        st.session_state.event_loop = asyncio.new_event_loop()
    return st.session_state.event_loop.run_until_complete(coro)


def get_controller():
    """Get or create this browser session's controller."""
    if "components" not in st.session_state:
        st.session_state.components = create_app_components()
    return st.session_state.components.controller


def render_status(controller) -> None:
    """Loading indicator and last error, shared by every screen."""
    snapshot = controller.snapshot()
    if snapshot.is_loading:
        st.info("Working...")
    if snapshot.last_error:
        st.error(snapshot.last_error)


def render_login_page(controller) -> None:
    st.markdown("<h2 class='brand-title'>Sign in</h2>", unsafe_allow_html=True)

    with st.form("login"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", type="primary")

    if submitted and run_async(controller.sign_in(email, password)):
        st.rerun()

    if st.button("No account? Register"):
        st.session_state.auth_page = "register"
        st.rerun()

    render_status(controller)


def render_register_page(controller) -> None:
    st.markdown("<h2 class='brand-title'>Register</h2>", unsafe_allow_html=True)

    with st.form("register"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Register", type="primary")

    if submitted and run_async(controller.sign_up(email, password)):
        st.rerun()

    if st.button("Already have an account? Sign in"):
        st.session_state.auth_page = "login"
        st.rerun()

    render_status(controller)


def render_exchange_page(controller: ExchangeController) -> None:
    st.title("💱 Currency exchange")

    col_from, col_to = st.columns(2)
    from_currency = col_from.selectbox("From", SUPPORTED_CURRENCIES, index=0)
    to_currency = col_to.selectbox("To", SUPPORTED_CURRENCIES, index=1)
    amount = st.number_input("Amount", min_value=0.0, step=1.0, format="%.2f")

    if st.button("Exchange", type="primary", disabled=amount <= 0):
        run_async(controller.create_record(from_currency, to_currency, amount))
        st.rerun()

    st.subheader("Transaction history")
    for transaction in controller.transactions:
        summary, rate_line = format_transaction(transaction)
        with st.container(border=True):
            st.markdown(summary)
            st.caption(rate_line)


def render_note_page(controller: NoteController) -> None:
    st.title("📝 Note")

    note = controller.note
    if note is None:
        st.info("No note saved yet.")
    else:
        saved_at = datetime.fromtimestamp(note.timestamp / 1000)
        with st.container(border=True):
            st.markdown(f"**{note.title}**")
            st.markdown(note.description)
            st.caption(f"Saved {saved_at:%Y-%m-%d %H:%M}")

    with st.form("note", clear_on_submit=True):
        title = st.text_input("Title")
        description = st.text_area("Description")
        submitted = st.form_submit_button("Save", type="primary")

    if submitted:
        run_async(controller.create_record(title, description))
        st.rerun()


def render_connection_status() -> None:
    """Sidebar panel listing which settings groups are configured."""
    from kantor.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Firebase (Auth + Firestore)", "firebase"),
        ("Google Sheets (Storage)", "google_sheets"),
        ("App settings", "app"),
    ]

    with st.sidebar.expander("Connection status"):
        for name, key in services:
            if status.get(key, False):
                st.success(f"✅ {name}")
            else:
                error = status.get(f"{key}_error", "Not configured")
                st.error(f"❌ {name} - {error}")


def main():
    """Main application entry point."""
    controller = get_controller()

    if get_settings().app.debug_mode:
        render_connection_status()

    if not controller.is_logged_in:
        st.session_state.records_requested = False
        if st.session_state.get("auth_page", "login") == "register":
            render_register_page(controller)
        else:
            render_login_page(controller)
        return

    # Load once when the main screen is first shown after sign-in
    if not st.session_state.get("records_requested"):
        st.session_state.records_requested = True
        run_async(controller.load_records())

    identity = controller.identity
    if identity is not None:
        st.sidebar.markdown(f"Signed in as **{identity.email or identity.uid}**")
    if st.sidebar.button("Sign out"):
        controller.sign_out()
        st.session_state.auth_page = "login"
        st.rerun()

    if isinstance(controller, ExchangeController):
        render_exchange_page(controller)
    else:
        render_note_page(controller)

    render_status(controller)


if __name__ == "__main__":
    main()
