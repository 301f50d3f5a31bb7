"""Session state management for Spinet frontend.

This module provides centralized session state management for Streamlit,
with features like:
- Default value initialization
- View management
- Active profile (scope) selection
- Per-screen controller storage
"""

import copy
import logging
from typing import Any, Optional, Dict, List, Callable

from frontend.config.settings import config

logger = logging.getLogger(__name__)


def _default_factory(value: Any) -> Callable[[], Any]:
    """Create a factory function that returns a deep copy of the value.

    This prevents mutable default values from being shared across sessions.
    """
    if isinstance(value, (list, dict, set)):
        return lambda: copy.deepcopy(value)
    return lambda: value


# View constants
VIEW_CONTACTS = "contacts"
VIEW_LEADS = "leads"
VIEW_INSIGHTS = "insights"
VIEW_ADD_CONTACT = "add_contact"
VIEW_ADD_LEAD = "add_lead"

ALL_VIEWS = (VIEW_CONTACTS, VIEW_LEADS, VIEW_INSIGHTS, VIEW_ADD_CONTACT, VIEW_ADD_LEAD)

# Screen storage keys
SCREEN_CONTACTS = "contacts_screen"
SCREEN_LEADS = "leads_screen"


class SessionState:
    """Centralized session state management for Spinet.

    Example:
        >>> from frontend.utils import SessionState
        >>> SessionState.init_defaults()
        >>> SessionState.set_profile('65f1c2')
        >>> SessionState.get_profile()
        '65f1c2'
    """

    # Default value factories for session state keys
    _DEFAULT_FACTORIES: Dict[str, Callable[[], Any]] = {
        # Navigation state
        'current_view': _default_factory(VIEW_CONTACTS),
        'editing_contact_id': _default_factory(None),
        'editing_lead_id': _default_factory(None),

        # Active profile (scope)
        'selected_profile_id': lambda: config.DEFAULT_PROFILE_ID or None,
        'known_profile_ids': lambda: [config.DEFAULT_PROFILE_ID] if config.DEFAULT_PROFILE_ID else [],

        # Auth
        'session_token': _default_factory(None),

        # UI state
        'show_delete_confirmation': _default_factory(None),
        'query_params_loaded': _default_factory(set()),

        # Error state
        'last_error': _default_factory(None),
    }

    # Keys associated with each mode/view
    MODE_KEYS: Dict[str, List[str]] = {
        'contacts': [
            'editing_contact_id',
            'show_delete_confirmation',
        ],
        'leads': [
            'editing_lead_id',
            'show_delete_confirmation',
        ],
    }

    @classmethod
    def _get_session_state(cls):
        """Get Streamlit session state (lazy import for testing)."""
        import streamlit as st
        return st.session_state

    @classmethod
    def init_defaults(cls) -> None:
        """Initialize default session state values.

        Call this at the start of your Streamlit app to ensure
        all expected keys exist with sensible defaults.
        """
        session_state = cls._get_session_state()

        for key, factory in cls._DEFAULT_FACTORIES.items():
            if key not in session_state:
                session_state[key] = factory()
                logger.debug(f"Initialized session state key: {key}")

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get a value from session state."""
        session_state = cls._get_session_state()
        return session_state.get(key, default)

    @classmethod
    def set(cls, key: str, value: Any) -> None:
        """Set a value in session state."""
        session_state = cls._get_session_state()
        session_state[key] = value
        logger.debug(f"Set session state: {key} = {type(value).__name__}")

    @classmethod
    def clear(cls, key: str) -> None:
        """Clear a session state key."""
        session_state = cls._get_session_state()
        if key in session_state:
            del session_state[key]
            logger.debug(f"Cleared session state key: {key}")

    @classmethod
    def clear_mode(cls, mode: str) -> None:
        """Clear all state associated with a specific mode."""
        for key in cls.MODE_KEYS.get(mode, []):
            cls.clear(key)
        logger.debug(f"Cleared session state for mode: {mode}")

    @classmethod
    def has(cls, key: str) -> bool:
        """Check if a key exists in session state."""
        return key in cls._get_session_state()

    # View management helpers
    @classmethod
    def get_current_view(cls) -> str:
        """Get the current view."""
        return cls.get('current_view', VIEW_CONTACTS)

    @classmethod
    def set_view(cls, view: str) -> None:
        """Set the current view (unknown views fall back to contacts)."""
        if view not in ALL_VIEWS:
            logger.warning(f"Unknown view '{view}', showing contacts")
            view = VIEW_CONTACTS
        cls.set('current_view', view)

    @classmethod
    def navigate_to_contacts(cls) -> None:
        cls.set_view(VIEW_CONTACTS)
        cls.set('editing_contact_id', None)

    @classmethod
    def navigate_to_leads(cls) -> None:
        cls.set_view(VIEW_LEADS)
        cls.set('editing_lead_id', None)

    @classmethod
    def navigate_to_insights(cls) -> None:
        cls.set_view(VIEW_INSIGHTS)

    @classmethod
    def navigate_to_add_contact(cls, contact_id: str = None) -> None:
        """Open the contact form, in edit mode when contact_id is given."""
        cls.set('editing_contact_id', contact_id)
        cls.set_view(VIEW_ADD_CONTACT)

    @classmethod
    def navigate_to_add_lead(cls, lead_id: str = None) -> None:
        """Open the lead form, in edit mode when lead_id is given."""
        cls.set('editing_lead_id', lead_id)
        cls.set_view(VIEW_ADD_LEAD)

    # Profile (scope) helpers
    @classmethod
    def get_profile(cls) -> Optional[str]:
        """Get the active profile ID, or None when none is selected."""
        return cls.get('selected_profile_id') or None

    @classmethod
    def set_profile(cls, profile_id: Optional[str]) -> None:
        """Select the active profile and remember it for the selector."""
        profile_id = (profile_id or '').strip() or None
        cls.set('selected_profile_id', profile_id)
        if profile_id:
            known = cls.get('known_profile_ids', [])
            if profile_id not in known:
                cls.set('known_profile_ids', known + [profile_id])
        logger.info(f"Active profile: {profile_id}")

    @classmethod
    def get_known_profiles(cls) -> List[str]:
        return list(cls.get('known_profile_ids', []))

    # Screen controller helpers
    @classmethod
    def get_screen(cls, key: str, factory: Callable[[], Any]) -> Any:
        """Get the controller stored under key, creating it on first use.

        Args:
            key: Session key (SCREEN_CONTACTS or SCREEN_LEADS)
            factory: Zero-argument callable building a new controller

        Returns:
            The stored controller instance
        """
        session_state = cls._get_session_state()
        if key not in session_state:
            session_state[key] = factory()
            logger.debug(f"Created screen controller: {key}")
        return session_state[key]

    @classmethod
    def reset_screens(cls) -> None:
        """Drop all screen controllers (e.g. after a profile switch)."""
        for key in (SCREEN_CONTACTS, SCREEN_LEADS):
            cls.clear(key)

    # Query param bookkeeping
    @classmethod
    def consume_query_params(cls, view: str) -> bool:
        """Return True the first time a view reads the URL in this session."""
        loaded = cls.get('query_params_loaded', set())
        if view in loaded:
            return False
        cls.set('query_params_loaded', loaded | {view})
        return True
