"""Leads page for Spinet.

Displays the sales opportunities of the active profile with status
filtering, amount sorting, status updates and notes.
"""

import logging
from typing import Any, Dict

import streamlit as st

from frontend.config.settings import config, LEAD_STATUSES, LEAD_SORT_OPTIONS
from frontend.core import LEADS_TABLE, TableScreen, ViewParameters
from frontend.models.schemas import Lead
from frontend.services import (
    LeadsGateway,
    export_filename,
    get_api_client,
    leads_to_dataframe,
    to_csv_bytes,
)
from frontend.ui.components.confirmation import render_confirmation, request_confirmation
from frontend.ui.components.data_table import default_params, render_data_table, show_notifications
from frontend.ui.components.lead_form import render_note_form, render_status_update, status_label
from frontend.ui.pages.contacts import ensure_loaded
from frontend.utils import SessionState, SCREEN_LEADS

logger = logging.getLogger(__name__)

TABLE_KEY = "leads"


def get_leads_screen() -> TableScreen:
    """Get the leads screen controller for this session."""
    return SessionState.get_screen(SCREEN_LEADS, lambda: TableScreen(
        scope_id=SessionState.get_profile(),
        gateway=LeadsGateway(get_api_client()),
        table_config=LEADS_TABLE,
        params=default_params(ViewParameters(
            sort_key=LEADS_TABLE.default_sort_key,
            sort_direction=LEADS_TABLE.default_sort_direction,
        )),
        noun="lead",
        bulk_delete_mode=config.BULK_DELETE_MODE,
    ))


def format_amount(amount) -> str:
    if amount is None:
        return "-"
    return f"{amount:,.2f}"


def lead_row(lead: Lead) -> Dict[str, Any]:
    """Displayed columns of one lead."""
    return {
        "Name": lead.name,
        "Status": status_label(lead.status),
        "Priority": (lead.priority or "").capitalize(),
        "Amount": format_amount(lead.amount),
        "Contacts": len(lead.contacts),
        "Tags": ", ".join(lead.tags),
    }


def render_leads_page() -> None:
    """Render the leads page."""
    screen = get_leads_screen()
    ensure_loaded(screen)

    col1, col2, col3 = st.columns([4, 1, 1])
    with col1:
        st.title("Leads")
        total = sum(lead.amount or 0.0 for lead in screen.records)
        st.caption(f"{len(screen.records)} lead(s) · total {format_amount(total)}")
    with col2:
        if st.button("🔄 Refresh", key="leads_refresh", width='stretch'):
            screen.load()
            st.rerun()
    with col3:
        if st.button("+ Add lead", type="primary", key="leads_add", width='stretch'):
            SessionState.navigate_to_add_lead()
            st.rerun()

    if not screen.scope_id:
        st.info("Select a profile in the sidebar to see its leads.")
        show_notifications(screen)
        return

    if screen.last_error is not None and not screen.records:
        st.error(f"Could not load leads: {screen.last_error}")

    render_data_table(
        screen,
        TABLE_KEY,
        to_row=lead_row,
        filter_options=LEAD_STATUSES,
        sort_options=LEAD_SORT_OPTIONS,
        filter_label=status_label,
    )

    st.divider()
    render_lead_details(screen)

    filtered = screen.view.filtered_records
    if filtered:
        st.download_button(
            f"⬇️ Export {len(filtered)} lead(s) as CSV",
            data=to_csv_bytes(leads_to_dataframe(filtered)),
            file_name=export_filename("leads"),
            mime="text/csv",
            key="leads_export",
        )


def render_lead_details(screen: TableScreen) -> None:
    """Status update, notes, edit and delete for one lead of the current page."""
    visible = screen.view.visible_records
    if not visible:
        return

    st.markdown("#### Lead details")
    labels = {lead.id: lead.name for lead in visible}
    lead_id = st.selectbox(
        "Lead",
        list(labels),
        format_func=lambda lid: labels.get(lid, lid),
        key="leads_row_pick",
        label_visibility="collapsed",
    )
    lead = screen.find(lead_id)
    if lead is None:
        return

    if lead.description:
        st.markdown(lead.description)
    if lead.life_time and (lead.life_time.begins or lead.life_time.ends):
        st.caption(f"{lead.life_time.begins or '?'} → {lead.life_time.ends or '?'}")

    new_status = render_status_update(lead, TABLE_KEY)
    if new_status:
        screen.update_record(lead.id, {"status": new_status}, local_update={"status": new_status})
        st.rerun()

    with st.expander(f"Notes ({len(lead.notes)})"):
        note = render_note_form(lead, TABLE_KEY)
        if note:
            result = get_api_client().add_note(screen.scope_id, lead.id, note)
            if result.success:
                st.toast("Note added", icon="✅")
                screen.load()
                st.rerun()
            else:
                st.error(f"Failed to add note: {result.detail}")

    col1, col2 = st.columns(2)
    with col1:
        if st.button("✏️ Edit lead", key="leads_row_edit", width='stretch'):
            SessionState.navigate_to_add_lead(lead.id)
            st.rerun()
    with col2:
        if st.button("🗑️ Delete lead", key="leads_row_delete", width='stretch', disabled=screen.is_mutating):
            request_confirmation(f"leads_row_{lead.id}")
            st.rerun()

    decision = render_confirmation(f"leads_row_{lead.id}", f"Delete **{lead.name}**?")
    if decision:
        screen.delete_record(lead.id)
        st.rerun()
    elif decision is False:
        st.rerun()
