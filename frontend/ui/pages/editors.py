"""Add/edit pages for contacts and leads."""

import logging

import streamlit as st

from frontend.ui.components.contact_form import render_contact_form
from frontend.ui.components.lead_form import render_lead_form
from frontend.ui.pages.contacts import ensure_loaded, get_contacts_screen
from frontend.ui.pages.leads import get_leads_screen
from frontend.utils import SessionState

logger = logging.getLogger(__name__)


def render_contact_editor_page() -> None:
    """Render the add/edit contact page."""
    screen = get_contacts_screen()
    ensure_loaded(screen)

    contact_id = SessionState.get('editing_contact_id')
    contact = screen.find(contact_id) if contact_id else None

    if st.button("← Back to contacts", key="contact_editor_back"):
        SessionState.navigate_to_contacts()
        st.rerun()

    st.title("Edit contact" if contact else "Add contact")
    if contact_id and contact is None:
        st.warning("This contact is no longer available. A new contact will be created.")

    payload = render_contact_form(contact)
    if payload is None:
        return

    if contact:
        result = screen.update_record(contact.id, payload.to_payload())
    else:
        result = screen.add_record(payload)

    if result is not None and result.success:
        SessionState.navigate_to_contacts()
        st.rerun()
    elif result is not None:
        st.error(result.detail)
    else:
        st.error("Select a profile in the sidebar first.")


def render_lead_editor_page() -> None:
    """Render the add/edit lead page."""
    screen = get_leads_screen()
    ensure_loaded(screen)
    contacts_screen = get_contacts_screen()
    ensure_loaded(contacts_screen)

    lead_id = SessionState.get('editing_lead_id')
    lead = screen.find(lead_id) if lead_id else None

    if st.button("← Back to leads", key="lead_editor_back"):
        SessionState.navigate_to_leads()
        st.rerun()

    st.title("Edit lead" if lead else "Add lead")
    if lead_id and lead is None:
        st.warning("This lead is no longer available. A new lead will be created.")

    payload = render_lead_form(lead, contacts=contacts_screen.records)
    if payload is None:
        return

    if lead:
        result = screen.update_record(lead.id, payload.to_payload())
    else:
        result = screen.add_record(payload)

    if result is not None and result.success:
        SessionState.navigate_to_leads()
        st.rerun()
    elif result is not None:
        st.error(result.detail)
    else:
        st.error("Select a profile in the sidebar first.")
