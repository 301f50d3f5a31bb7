"""Insights page for Spinet.

Summary charts over the contacts and leads of the active profile. Both
collections are fetched concurrently when neither is loaded yet.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait

import streamlit as st

from frontend.config.settings import config
from frontend.core import ScreenState
from frontend.ui.components.charts import (
    amount_by_status,
    contacts_by_type,
    create_bar_chart,
    leads_by_status,
)
from frontend.ui.pages.contacts import get_contacts_screen
from frontend.ui.pages.leads import get_leads_screen
from frontend.utils import SessionState

logger = logging.getLogger(__name__)


def _load_all(screens) -> None:
    """Fetch every idle screen in parallel."""
    idle = [s for s in screens if s.state is ScreenState.IDLE]
    if not idle:
        return
    with ThreadPoolExecutor(max_workers=config.FETCH_WORKERS) as executor:
        futures = [s.load_in_background(executor) for s in idle]
        wait(futures)
    logger.debug(f"Loaded {len(idle)} collection(s) for insights")


def render_insights_page() -> None:
    """Render the insights page."""
    st.title("Insights")

    profile_id = SessionState.get_profile()
    if not profile_id:
        st.info("Select a profile in the sidebar to see insights.")
        return

    contacts_screen = get_contacts_screen()
    leads_screen = get_leads_screen()
    for screen in (contacts_screen, leads_screen):
        screen.change_scope(profile_id)

    with st.spinner("Loading..."):
        _load_all((contacts_screen, leads_screen))

    contacts = contacts_screen.records
    leads = leads_screen.records

    col1, col2, col3 = st.columns(3)
    col1.metric("Contacts", len(contacts))
    col2.metric("Leads", len(leads))
    col3.metric("Pipeline value", f"{sum(lead.amount or 0.0 for lead in leads):,.0f}")

    col1, col2 = st.columns(2)
    with col1:
        if contacts:
            fig = create_bar_chart(contacts_by_type(contacts), 'type', 'count', title="Contacts by source")
            st.plotly_chart(fig, width='stretch', key="insights_contacts_chart")
        else:
            st.caption("No contacts yet")
    with col2:
        if leads:
            fig = create_bar_chart(leads_by_status(leads), 'status', 'count', title="Leads by status")
            st.plotly_chart(fig, width='stretch', key="insights_leads_chart")
        else:
            st.caption("No leads yet")

    if any(lead.amount for lead in leads):
        fig = create_bar_chart(amount_by_status(leads), 'status', 'amount', title="Pipeline value by status")
        st.plotly_chart(fig, width='stretch', key="insights_amount_chart")

    for screen in (contacts_screen, leads_screen):
        for note in screen.drain_notifications():
            if note.level == 'error':
                st.error(note.message)
