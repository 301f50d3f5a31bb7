"""Add/edit lead form, status update and notes."""

import logging
from typing import Any, Dict, Optional, Sequence

import streamlit as st

from frontend.config.settings import LEAD_PRIORITIES, LEAD_STATUSES
from frontend.models.schemas import Contact, Lead, LeadInput, LeadLifeTime
from frontend.ui.components.contact_form import parse_tags
from frontend.utils import LeadFormValidator

logger = logging.getLogger(__name__)


def status_label(status: str) -> str:
    """'offer-sent' -> 'Offer sent'."""
    return (status or '').replace('-', ' ').capitalize()


def lead_to_form_data(lead: Optional[Lead]) -> Dict[str, Any]:
    """Flatten a lead into the form's field values."""
    if lead is None:
        return {'status': 'pending', 'priority': 'none', 'contacts': [], 'tags': [], 'life_time': {}}
    return {
        'name': lead.name,
        'description': lead.description,
        'amount': lead.amount,
        'status': lead.status,
        'priority': lead.priority or 'none',
        'contacts': list(lead.contacts),
        'main_contact': lead.main_contact,
        'tags': list(lead.tags),
        'life_time': lead.life_time.model_dump() if lead.life_time else {},
    }


def build_lead_input(data: Dict[str, Any]) -> LeadInput:
    """Build the request body from validated form values."""
    life_time = data.get('life_time') or {}
    begins = (life_time.get('begins') or '').strip() or None
    ends = (life_time.get('ends') or '').strip() or None
    amount = data.get('amount')
    return LeadInput(
        name=data['name'].strip(),
        description=(data.get('description') or '').strip() or None,
        contacts=list(data.get('contacts') or []) or None,
        main_contact=data.get('main_contact') or None,
        amount=float(amount) if amount not in (None, '') else None,
        status=data.get('status') or None,
        priority=data.get('priority') or None,
        life_time=LeadLifeTime(begins=begins, ends=ends) if begins or ends else None,
        tags=parse_tags(', '.join(data.get('tags') or [])) or None,
    )


def render_lead_form(
    lead: Optional[Lead] = None,
    contacts: Sequence[Contact] = (),
    key: str = "lead_form"
) -> Optional[LeadInput]:
    """Render the lead form.

    Args:
        lead: Lead being edited, or None to add a new one
        contacts: Contacts of the active profile, offered for linking
        key: Form key

    Returns:
        LeadInput when submitted and valid, otherwise None
    """
    initial = lead_to_form_data(lead)
    contact_names = {c.id: c.display_name for c in contacts}
    life_time = initial.get('life_time') or {}

    with st.form(key):
        name = st.text_input("Lead name *", value=initial.get('name') or '')
        description = st.text_area("Description", value=initial.get('description') or '')

        col1, col2, col3 = st.columns(3)
        with col1:
            amount = st.number_input(
                "Amount", min_value=0.0, value=float(initial.get('amount') or 0.0), step=100.0
            )
        with col2:
            status = st.selectbox(
                "Status",
                LEAD_STATUSES,
                index=LEAD_STATUSES.index(initial['status']) if initial['status'] in LEAD_STATUSES else 0,
                format_func=status_label,
            )
        with col3:
            priority = st.selectbox(
                "Priority",
                LEAD_PRIORITIES,
                index=LEAD_PRIORITIES.index(initial['priority']) if initial['priority'] in LEAD_PRIORITIES else 0,
                format_func=str.capitalize,
            )

        dcol1, dcol2 = st.columns(2)
        with dcol1:
            begins = st.text_input("Start date (YYYY-MM-DD)", value=life_time.get('begins') or '')
        with dcol2:
            ends = st.text_input("End date (YYYY-MM-DD)", value=life_time.get('ends') or '')

        linked = st.multiselect(
            "Contacts",
            list(contact_names),
            default=[c for c in initial['contacts'] if c in contact_names],
            format_func=lambda cid: contact_names.get(cid, cid),
        )
        main_options = [None] + list(contact_names)
        main_contact = st.selectbox(
            "Main contact",
            main_options,
            index=main_options.index(initial.get('main_contact')) if initial.get('main_contact') in main_options else 0,
            format_func=lambda cid: "None" if cid is None else contact_names.get(cid, cid),
        )
        tags = st.text_input("Tags (comma separated)", value=', '.join(initial['tags']))

        submitted = st.form_submit_button(
            "Save lead" if lead else "Add lead", type="primary", width='stretch'
        )

    if not submitted:
        return None

    data = {
        'name': name,
        'description': description,
        'amount': amount if amount else None,
        'status': status,
        'priority': priority,
        'life_time': {'begins': begins, 'ends': ends},
        'contacts': linked,
        'main_contact': main_contact,
        'tags': parse_tags(tags),
    }
    result = LeadFormValidator.validate(data)
    for warning in result.warnings:
        st.warning(warning)
    if not result:
        for error in result.errors:
            st.error(error)
        return None
    return build_lead_input(data)


def render_status_update(lead: Lead, key: str) -> Optional[str]:
    """Render a status picker for one lead; returns the new status on change."""
    col1, col2 = st.columns([3, 1])
    with col1:
        new_status = st.selectbox(
            "Status",
            LEAD_STATUSES,
            index=LEAD_STATUSES.index(lead.status) if lead.status in LEAD_STATUSES else 0,
            format_func=status_label,
            key=f"{key}_status_{lead.id}",
        )
    with col2:
        st.write("")
        clicked = st.button("Update", key=f"{key}_status_btn_{lead.id}", width='stretch',
                            disabled=new_status == lead.status)
    return new_status if clicked and new_status != lead.status else None


def render_note_form(lead: Lead, key: str) -> Optional[str]:
    """Render existing notes and the add-note form; returns a valid new note."""
    for note in lead.notes:
        st.caption(f"{note.date or ''} {note.content}")

    with st.form(f"{key}_note_{lead.id}", clear_on_submit=True):
        note = st.text_area("Add a note", key=f"{key}_note_text_{lead.id}")
        submitted = st.form_submit_button("Add note")

    if not submitted:
        return None
    result = LeadFormValidator.validate_note(note)
    if not result:
        for error in result.errors:
            st.error(error)
        return None
    return note.strip()
