"""Add/edit contact form."""

import logging
from typing import Any, Dict, List, Optional

import streamlit as st

from frontend.config.settings import CONTACT_TYPES
from frontend.models.schemas import (
    Contact,
    ContactInput,
    ContactProfile,
    LeadCaptions,
    ProfileLink,
)
from frontend.utils import ContactFormValidator

logger = logging.getLogger(__name__)

_MAX_LINKS = 5


def parse_tags(raw: str) -> List[str]:
    """Split a comma-separated tag string, dropping blanks and duplicates."""
    tags = []
    seen = set()
    for tag in (raw or '').split(','):
        tag = tag.strip()
        if tag and tag.casefold() not in seen:
            seen.add(tag.casefold())
            tags.append(tag)
    return tags


def _or_none(value: Any) -> Optional[str]:
    value = (value or '').strip() if isinstance(value, str) else value
    return value or None


def contact_to_form_data(contact: Optional[Contact]) -> Dict[str, Any]:
    """Flatten a contact into the form's field values."""
    if contact is None:
        return {'type': 'manual', 'links': [], 'lead_captions': {}}
    profile = contact.profile
    captions = contact.lead_captions
    return {
        'name': contact.name,
        'description': contact.description,
        'type': contact.type or 'manual',
        'full_name': profile.full_name,
        'first_name': profile.first_name,
        'last_name': profile.last_name,
        'company_name': profile.company_name,
        'position': profile.position,
        'email': profile.email,
        'phone_number': profile.phone_number,
        'birth_date': profile.birth_date,
        'bio': profile.bio,
        'links': [link.model_dump() for link in profile.links],
        'lead_captions': captions.model_dump() if captions else {},
    }


def build_contact_input(data: Dict[str, Any]) -> ContactInput:
    """Build the request body from validated form values."""
    full_name = data['full_name'].strip()
    captions = data.get('lead_captions') or {}
    lead_captions = None
    if any(captions.get(k) for k in ('met_in', 'date', 'tags', 'next_action', 'date_of_next_action', 'notes')):
        lead_captions = LeadCaptions(
            met_in=_or_none(captions.get('met_in')),
            date=_or_none(captions.get('date')),
            tags=list(captions.get('tags') or []),
            next_action=_or_none(captions.get('next_action')),
            date_of_next_action=_or_none(captions.get('date_of_next_action')),
            notes=_or_none(captions.get('notes')),
        )
    return ContactInput(
        name=_or_none(data.get('name')) or full_name,
        description=_or_none(data.get('description')),
        type=data.get('type') or 'manual',
        profile=ContactProfile(
            full_name=full_name,
            first_name=_or_none(data.get('first_name')),
            last_name=_or_none(data.get('last_name')),
            company_name=_or_none(data.get('company_name')),
            position=_or_none(data.get('position')),
            email=_or_none(data.get('email')),
            phone_number=_or_none(data.get('phone_number')),
            birth_date=_or_none(data.get('birth_date')),
            bio=_or_none(data.get('bio')),
            links=[
                ProfileLink(title=link['title'].strip(), link=link['link'].strip())
                for link in data.get('links') or []
            ],
        ),
        lead_captions=lead_captions,
    )


def render_contact_form(contact: Optional[Contact] = None, key: str = "contact_form") -> Optional[ContactInput]:
    """Render the contact form.

    Args:
        contact: Contact being edited, or None to add a new one
        key: Form key

    Returns:
        ContactInput when submitted and valid, otherwise None
    """
    initial = contact_to_form_data(contact)
    captions = initial.get('lead_captions') or {}

    with st.form(key):
        st.markdown("#### Profile")
        col1, col2 = st.columns(2)
        with col1:
            full_name = st.text_input("Full name *", value=initial.get('full_name') or '')
            company_name = st.text_input("Company", value=initial.get('company_name') or '')
            email = st.text_input("E-mail", value=initial.get('email') or '')
        with col2:
            contact_type = st.selectbox(
                "Source",
                CONTACT_TYPES,
                index=CONTACT_TYPES.index(initial['type']) if initial['type'] in CONTACT_TYPES else 1,
                format_func=str.capitalize,
            )
            position = st.text_input("Position", value=initial.get('position') or '')
            phone_number = st.text_input("Phone", value=initial.get('phone_number') or '')
        bio = st.text_area("Bio", value=initial.get('bio') or '')

        st.markdown("#### Links")
        existing_links = initial.get('links') or []
        links = []
        for i in range(_MAX_LINKS):
            current = existing_links[i] if i < len(existing_links) else {}
            lcol1, lcol2 = st.columns([1, 2])
            with lcol1:
                title = st.text_input(f"Title {i + 1}", value=current.get('title', ''), key=f"{key}_lt{i}")
            with lcol2:
                url = st.text_input(f"URL {i + 1}", value=current.get('link', ''), key=f"{key}_lu{i}")
            if title.strip() or url.strip():
                links.append({'title': title, 'link': url})

        st.markdown("#### Meeting")
        mcol1, mcol2 = st.columns(2)
        with mcol1:
            met_in = st.text_input("Met in", value=captions.get('met_in') or '')
            meeting_date = st.text_input("Date (YYYY-MM-DD)", value=captions.get('date') or '')
            next_action = st.text_input("Next action", value=captions.get('next_action') or '')
        with mcol2:
            tags = st.text_input("Tags (comma separated)", value=', '.join(captions.get('tags') or []))
            next_action_date = st.text_input(
                "Next action date (YYYY-MM-DD)", value=captions.get('date_of_next_action') or ''
            )
        notes = st.text_area("Notes", value=captions.get('notes') or '')

        submitted = st.form_submit_button(
            "Save contact" if contact else "Add contact", type="primary", width='stretch'
        )

    if not submitted:
        return None

    data = {
        'name': initial.get('name'),
        'description': initial.get('description'),
        'type': contact_type,
        'full_name': full_name,
        'company_name': company_name,
        'position': position,
        'email': email,
        'phone_number': phone_number,
        'bio': bio,
        'links': links,
        'lead_captions': {
            'met_in': met_in,
            'date': meeting_date,
            'tags': parse_tags(tags),
            'next_action': next_action,
            'date_of_next_action': next_action_date,
            'notes': notes,
        },
    }
    result = ContactFormValidator.validate(data)
    for warning in result.warnings:
        st.warning(warning)
    if not result:
        for error in result.errors:
            st.error(error)
        return None
    return build_contact_input(data)
