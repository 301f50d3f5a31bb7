"""
Unit tests for SessionState.

Streamlit's session state is replaced with a plain dict.
"""
from unittest.mock import patch

import pytest

from frontend.utils.session_state import (
    SCREEN_CONTACTS,
    SCREEN_LEADS,
    VIEW_ADD_CONTACT,
    VIEW_CONTACTS,
    VIEW_INSIGHTS,
    VIEW_LEADS,
    SessionState,
)


@pytest.fixture
def state():
    store = {}
    with patch.object(SessionState, "_get_session_state", return_value=store):
        yield store


class TestDefaults:
    """Tests for default initialization."""

    def test_init_defaults(self, state):
        SessionState.init_defaults()

        assert state["current_view"] == VIEW_CONTACTS
        assert state["show_delete_confirmation"] is None
        assert state["query_params_loaded"] == set()

    def test_init_does_not_overwrite(self, state):
        state["current_view"] = VIEW_LEADS
        SessionState.init_defaults()
        assert state["current_view"] == VIEW_LEADS

    def test_mutable_defaults_not_shared(self, state):
        SessionState.init_defaults()
        state["query_params_loaded"].add("contacts")

        other = {}
        with patch.object(SessionState, "_get_session_state", return_value=other):
            SessionState.init_defaults()
        assert other["query_params_loaded"] == set()


class TestNavigation:
    """Tests for view helpers."""

    def test_navigate(self, state):
        SessionState.navigate_to_leads()
        assert SessionState.get_current_view() == VIEW_LEADS

        SessionState.navigate_to_insights()
        assert SessionState.get_current_view() == VIEW_INSIGHTS

    def test_edit_contact_sets_id(self, state):
        SessionState.navigate_to_add_contact("c1")

        assert state["current_view"] == VIEW_ADD_CONTACT
        assert state["editing_contact_id"] == "c1"

        SessionState.navigate_to_contacts()
        assert state["editing_contact_id"] is None

    def test_unknown_view_falls_back(self, state):
        SessionState.set_view("nowhere")
        assert state["current_view"] == VIEW_CONTACTS

    def test_clear_mode(self, state):
        state["editing_lead_id"] = "l1"
        SessionState.clear_mode("leads")
        assert "editing_lead_id" not in state


class TestProfile:
    """Tests for active profile helpers."""

    def test_set_profile_remembers(self, state):
        SessionState.set_profile(" p1 ")
        SessionState.set_profile("p2")
        SessionState.set_profile("p1")

        assert SessionState.get_profile() == "p1"
        assert SessionState.get_known_profiles() == ["p1", "p2"]

    def test_blank_profile_is_none(self, state):
        SessionState.set_profile("   ")
        assert SessionState.get_profile() is None


class TestScreens:
    """Tests for screen controller storage."""

    def test_get_screen_creates_once(self, state):
        calls = []

        def factory():
            calls.append(1)
            return object()

        first = SessionState.get_screen(SCREEN_CONTACTS, factory)
        second = SessionState.get_screen(SCREEN_CONTACTS, factory)

        assert first is second
        assert len(calls) == 1

    def test_reset_screens(self, state):
        SessionState.get_screen(SCREEN_CONTACTS, object)
        SessionState.get_screen(SCREEN_LEADS, object)

        SessionState.reset_screens()

        assert SCREEN_CONTACTS not in state
        assert SCREEN_LEADS not in state

    def test_consume_query_params_once(self, state):
        assert SessionState.consume_query_params("contacts") is True
        assert SessionState.consume_query_params("contacts") is False
        assert SessionState.consume_query_params("leads") is True
