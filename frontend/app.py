"""Spinet Frontend Application.

Streamlit app that routes between the contacts, leads and insights pages.
"""

import logging
import sys
from pathlib import Path

# Load environment variables from .env file BEFORE any other imports
# so the frozen config sees them
from dotenv import load_dotenv
load_dotenv(Path(__file__).parent.parent / ".env")

import streamlit as st

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from frontend.config.settings import config
from frontend.utils import (
    SessionState,
    VIEW_CONTACTS,
    VIEW_LEADS,
    VIEW_INSIGHTS,
    VIEW_ADD_CONTACT,
    VIEW_ADD_LEAD,
)
from frontend.ui.components import render_sidebar
from frontend.ui.pages import (
    render_contacts_page,
    render_leads_page,
    render_insights_page,
    render_contact_editor_page,
    render_lead_editor_page,
)
from frontend.services import set_session_token

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.DEBUG else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

_PAGES = {
    VIEW_CONTACTS: render_contacts_page,
    VIEW_LEADS: render_leads_page,
    VIEW_INSIGHTS: render_insights_page,
    VIEW_ADD_CONTACT: render_contact_editor_page,
    VIEW_ADD_LEAD: render_lead_editor_page,
}


def main():
    """Main application entry point."""
    # Page configuration - must be first Streamlit command
    st.set_page_config(
        page_title=config.APP_NAME,
        page_icon=config.APP_ICON,
        layout="wide",
        initial_sidebar_state="expanded",
    )

    _apply_custom_css()

    # Initialize session state with defaults
    SessionState.init_defaults()

    # Forward the browser's auth cookie to the backend client
    session_token = st.context.cookies.get(config.SESSION_COOKIE_NAME)
    if session_token != SessionState.get('session_token'):
        SessionState.set('session_token', session_token)
        set_session_token(session_token)

    render_sidebar()

    # Route to appropriate page based on current view
    current_view = SessionState.get_current_view()
    render_page = _PAGES.get(current_view)
    if render_page is None:
        SessionState.navigate_to_contacts()
        render_page = render_contacts_page
    render_page()


def _apply_custom_css():
    """Apply custom CSS styling."""
    st.markdown("""
        <style>
        /* Better sidebar styling */
        section[data-testid="stSidebar"] > div {
            padding-top: 1rem;
        }

        /* Improve button consistency */
        .stButton > button {
            font-size: 0.875rem;
        }

        /* Metric styling */
        div[data-testid="stMetricValue"] {
            font-size: 1.5rem;
        }

        /* Hide Streamlit footer only (keep menu for theme settings) */
        footer {visibility: hidden;}
        </style>
    """, unsafe_allow_html=True)


if __name__ == "__main__":
    main()
