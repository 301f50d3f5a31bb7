"""Confirmation prompt driven by a session state flag."""

from typing import Optional

import streamlit as st

from frontend.utils import SessionState


def request_confirmation(key: str) -> None:
    """Show the confirmation prompt for key on the next render."""
    SessionState.set('show_delete_confirmation', key)


def render_confirmation(key: str, message: str) -> Optional[bool]:
    """Render the prompt if it was requested for key.

    Returns:
        True when confirmed, False when cancelled, None when not shown
        or still waiting for a choice
    """
    if SessionState.get('show_delete_confirmation') != key:
        return None

    st.warning(message)
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Cancel", key=f"{key}_cancel", width='stretch'):
            SessionState.set('show_delete_confirmation', None)
            return False
    with col2:
        if st.button("Delete", key=f"{key}_confirm", type="primary", width='stretch'):
            SessionState.set('show_delete_confirmation', None)
            return True
    return None
