"""Sidebar component for Spinet.

Navigation, active profile selection and backend status.
"""

import logging

import streamlit as st

from frontend.services import get_api_client
from frontend.utils import SessionState, VIEW_CONTACTS, VIEW_LEADS, VIEW_INSIGHTS
from frontend.config.settings import config

logger = logging.getLogger(__name__)


def render_sidebar() -> None:
    """Render the sidebar with navigation and profile selection."""
    with st.sidebar:
        st.markdown(f"## {config.APP_ICON} {config.APP_NAME}")
        st.caption(f"v{config.APP_VERSION}")

        st.divider()

        current_view = SessionState.get_current_view()
        for label, view, navigate in (
            ("Contacts", VIEW_CONTACTS, SessionState.navigate_to_contacts),
            ("Leads", VIEW_LEADS, SessionState.navigate_to_leads),
            ("Insights", VIEW_INSIGHTS, SessionState.navigate_to_insights),
        ):
            if st.button(
                label,
                key=f"nav_{view}",
                type="primary" if current_view == view else "secondary",
                width='stretch',
            ):
                navigate()
                st.rerun()

        st.divider()

        render_profile_selector()

        st.divider()

        render_backend_status()


def render_profile_selector() -> None:
    """Render the active profile picker.

    Switching profile drops both screen controllers so the next render
    fetches the new profile's collections.
    """
    st.markdown("### Profile")
    known = SessionState.get_known_profiles()
    current = SessionState.get_profile()

    if known:
        index = known.index(current) if current in known else 0
        selected = st.selectbox("Active profile", known, index=index, key="profile_select")
        if selected != current:
            SessionState.set_profile(selected)
            SessionState.reset_screens()
            st.rerun()
    else:
        st.caption("No profile selected")

    with st.expander("Use another profile"):
        new_profile = st.text_input("Profile ID", key="profile_new", placeholder="Profile ID")
        if st.button("Switch", key="profile_switch", width='stretch', disabled=not new_profile.strip()):
            SessionState.set_profile(new_profile)
            SessionState.reset_screens()
            st.rerun()


def render_backend_status() -> None:
    """Render backend health status."""
    client = get_api_client()

    if client.health_check():
        st.caption("🟢 Backend connected")
    else:
        st.caption("🔴 Backend unavailable")
