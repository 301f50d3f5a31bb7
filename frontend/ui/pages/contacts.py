"""Contacts page for Spinet.

Displays the contacts of the active profile in a searchable, filterable,
paginated table with selection and bulk delete.
"""

import logging
from typing import Any, Dict

import streamlit as st

from frontend.config.settings import config, CONTACT_TYPES, CONTACT_SORT_OPTIONS
from frontend.core import CONTACTS_TABLE, ScreenState, TableScreen, ViewParameters
from frontend.models.schemas import Contact
from frontend.services import (
    ContactsGateway,
    contacts_to_dataframe,
    export_filename,
    get_api_client,
    to_csv_bytes,
)
from frontend.ui.components.confirmation import render_confirmation, request_confirmation
from frontend.ui.components.data_table import default_params, render_data_table, show_notifications
from frontend.utils import SessionState, SCREEN_CONTACTS

logger = logging.getLogger(__name__)

TABLE_KEY = "contacts"


def get_contacts_screen() -> TableScreen:
    """Get the contacts screen controller for this session."""
    return SessionState.get_screen(SCREEN_CONTACTS, lambda: TableScreen(
        scope_id=SessionState.get_profile(),
        gateway=ContactsGateway(get_api_client()),
        table_config=CONTACTS_TABLE,
        params=default_params(ViewParameters(
            sort_key=CONTACTS_TABLE.default_sort_key,
            sort_direction=CONTACTS_TABLE.default_sort_direction,
        )),
        noun="contact",
        bulk_delete_mode=config.BULK_DELETE_MODE,
    ))


def ensure_loaded(screen: TableScreen) -> None:
    """Point the screen at the active profile and fetch if needed."""
    screen.change_scope(SessionState.get_profile())
    if screen.state is ScreenState.IDLE:
        with st.spinner(f"Loading {screen.noun}s..."):
            screen.load()


def contact_row(contact: Contact) -> Dict[str, Any]:
    """Displayed columns of one contact."""
    return {
        "Name": contact.display_name,
        "Company": contact.profile.company_name or "",
        "Position": contact.profile.position or "",
        "Source": (contact.type or "").capitalize(),
        "E-mail": contact.profile.email or "",
    }


def render_contacts_page() -> None:
    """Render the contacts page."""
    screen = get_contacts_screen()
    ensure_loaded(screen)

    col1, col2, col3 = st.columns([4, 1, 1])
    with col1:
        st.title("Contacts")
        st.caption(f"{len(screen.records)} contact(s)")
    with col2:
        if st.button("🔄 Refresh", key="contacts_refresh", width='stretch'):
            screen.load()
            st.rerun()
    with col3:
        if st.button("+ Add contact", type="primary", key="contacts_add", width='stretch'):
            SessionState.navigate_to_add_contact()
            st.rerun()

    if not screen.scope_id:
        st.info("Select a profile in the sidebar to see its contacts.")
        show_notifications(screen)
        return

    if screen.last_error is not None and not screen.records:
        st.error(f"Could not load contacts: {screen.last_error}")

    render_data_table(
        screen,
        TABLE_KEY,
        to_row=contact_row,
        filter_options=CONTACT_TYPES,
        sort_options=CONTACT_SORT_OPTIONS,
        filter_label=str.capitalize,
    )

    st.divider()
    render_row_actions(screen)
    render_export(screen)


def render_row_actions(screen: TableScreen) -> None:
    """Edit or delete one contact from the current page."""
    visible = screen.view.visible_records
    if not visible:
        return

    st.markdown("#### Contact actions")
    ids = [c.id for c in visible]
    labels = {c.id: c.display_name for c in visible}
    col1, col2, col3 = st.columns([3, 1, 1])
    with col1:
        contact_id = st.selectbox(
            "Contact",
            ids,
            format_func=lambda cid: labels.get(cid, cid),
            key="contacts_row_pick",
            label_visibility="collapsed",
        )
    with col2:
        if st.button("✏️ Edit", key="contacts_row_edit", width='stretch'):
            SessionState.navigate_to_add_contact(contact_id)
            st.rerun()
    with col3:
        if st.button("🗑️ Delete", key="contacts_row_delete", width='stretch', disabled=screen.is_mutating):
            request_confirmation(f"contacts_row_{contact_id}")
            st.rerun()

    decision = render_confirmation(
        f"contacts_row_{contact_id}",
        f"Delete **{labels.get(contact_id, contact_id)}**?",
    )
    if decision:
        screen.delete_record(contact_id)
        st.rerun()
    elif decision is False:
        st.rerun()


def render_export(screen: TableScreen) -> None:
    """Offer the filtered contacts as a CSV download."""
    filtered = screen.view.filtered_records
    if not filtered:
        return
    st.download_button(
        f"⬇️ Export {len(filtered)} contact(s) as CSV",
        data=to_csv_bytes(contacts_to_dataframe(filtered)),
        file_name=export_filename("contacts"),
        mime="text/csv",
        key="contacts_export",
    )
