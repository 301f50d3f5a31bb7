"""
Unit tests for the Spinet backend client.

HTTP is mocked at the requests.Session level; no network is used.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from frontend.config.settings import config
from frontend.models.schemas import ContactInput, ContactProfile, LeadFilters
from frontend.services.backend_client import (
    ContactsGateway,
    LeadsGateway,
    RecordListResponse,
    SpinetAPIClient,
)
from frontend.utils.exceptions import BackendUnavailableError, RemoteFetchError


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    response.content = b"{}" if json_data is not None else b""
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def client():
    return SpinetAPIClient(base_url="http://api.test/api/", timeout=5, max_retries=1)


class TestClientSetup:
    """Tests for client construction."""

    def test_base_url_trailing_slash_stripped(self, client):
        assert client.base_url == "http://api.test/api"

    def test_default_timeout_from_config(self):
        assert SpinetAPIClient(base_url="http://api.test").timeout == config.API_TIMEOUT

    def test_session_token_sets_cookie(self, client):
        client.session_token = "tok123"
        assert client.session.cookies.get("spinet-session") == "tok123"

        client.session_token = None
        assert client.session.cookies.get("spinet-session") is None


class TestContacts:
    """Tests for contact endpoints."""

    def test_list_contacts_validates_records(self, client, contact_payload):
        bad = {"name": "no id"}
        with patch.object(client.session, "request", return_value=_response(200, [contact_payload, bad])) as mock_request:
            response = client.list_contacts("p1")

        assert response.success
        assert [c.id for c in response.records] == ["c1"]
        assert response.total == 1
        args, kwargs = mock_request.call_args
        assert args == ("GET", "http://api.test/api/profile/p1/contacts")
        assert kwargs["timeout"] == 5

    def test_list_contacts_http_error(self, client):
        with patch.object(client.session, "request", return_value=_response(500, {"message": "Server exploded"})):
            response = client.list_contacts("p1")

        assert not response.success
        assert response.error == "Server exploded"
        assert response.status_code == 500

    def test_list_contacts_transport_error(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.ConnectionError("refused")):
            response = client.list_contacts("p1")

        assert not response.success
        assert response.unreachable

    def test_missing_profile_makes_no_request(self, client):
        with patch.object(client.session, "request") as mock_request:
            listing = client.list_contacts("")
            deletion = client.delete_contact(None, "c1")

        assert listing.error == "Profile ID is missing"
        assert deletion.error == "Profile ID is missing"
        mock_request.assert_not_called()

    def test_add_contact_sends_wire_payload(self, client):
        contact = ContactInput(name="Bob", profile=ContactProfile(full_name="Bob Stone", company_name="Acme"))
        with patch.object(client.session, "request", return_value=_response(201, {"message": "Created"})) as mock_request:
            result = client.add_contact("p1", contact)

        assert result.success
        assert result.message == "Created"
        body = mock_request.call_args.kwargs["json"]
        assert body["profile"]["fullName"] == "Bob Stone"
        assert body["profile"]["companyName"] == "Acme"
        assert body["type"] == "manual"

    def test_delete_contact_not_found(self, client):
        with patch.object(client.session, "request", return_value=_response(404, {"message": "nope"})):
            result = client.delete_contact("p1", "c9")

        assert not result.success
        assert result.error == "Contact not found"

    def test_delete_contacts_posts_ids(self, client):
        with patch.object(client.session, "request", return_value=_response(204)) as mock_request:
            result = client.delete_contacts("p1", ("c1", "c2"))

        assert result.success
        args, kwargs = mock_request.call_args
        assert args == ("POST", "http://api.test/api/profile/p1/contacts/delete")
        assert kwargs["json"] == ["c1", "c2"]

    def test_delete_contacts_empty(self, client):
        assert not client.delete_contacts("p1", []).success


class TestLeads:
    """Tests for opportunity endpoints."""

    def test_filter_leads_posts_filters(self, client, lead_payload):
        filters = LeadFilters(search="web", status=["negotiation"])
        with patch.object(client.session, "request", return_value=_response(200, {"data": [lead_payload], "total": 7})) as mock_request:
            response = client.filter_leads("p1", filters)

        assert response.success
        assert response.records[0].name == "Website redesign"
        assert response.total == 7
        args, kwargs = mock_request.call_args
        assert args == ("POST", "http://api.test/api/profile/p1/opportunities/filter")
        assert kwargs["json"] == {"search": "web", "status": ["negotiation"], "skip": 0}

    def test_get_lead(self, client, lead_payload):
        with patch.object(client.session, "request", return_value=_response(200, lead_payload)):
            lead = client.get_lead("p1", "l1")

        assert lead.id == "l1"
        assert lead.amount == 1200.5

    def test_get_lead_missing(self, client):
        with patch.object(client.session, "request", return_value=_response(404, {"message": "Not found"})):
            assert client.get_lead("p1", "l9") is None

    def test_update_lead_patch(self, client):
        with patch.object(client.session, "request", return_value=_response(200, {"message": "ok"})) as mock_request:
            result = client.update_lead("p1", "l1", {"status": "done"})

        assert result.success
        args, kwargs = mock_request.call_args
        assert args == ("PATCH", "http://api.test/api/profile/p1/opportunities/l1")
        assert kwargs["json"] == {"status": "done"}

    def test_delete_lead_requires_id(self, client):
        with patch.object(client.session, "request") as mock_request:
            result = client.delete_lead("p1", "")
        assert not result.success
        mock_request.assert_not_called()

    def test_add_note(self, client):
        with patch.object(client.session, "request", return_value=_response(201, {"message": "Note added"})) as mock_request:
            result = client.add_note("p1", "l1", "  Call on Monday ")

        assert result.success
        assert mock_request.call_args.kwargs["json"] == {"content": "Call on Monday"}

    def test_add_empty_note_rejected(self, client):
        assert not client.add_note("p1", "l1", "   ").success

    def test_mutation_transport_error(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.Timeout("slow")):
            result = client.delete_lead("p1", "l1")

        assert not result.success
        assert "slow" in result.error


class TestHealthCheck:
    """Tests for health check."""

    def test_healthy(self, client):
        with patch.object(client.session, "request", return_value=_response(200, {"status": "ok"})):
            assert client.health_check()

    def test_unreachable(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.ConnectionError()):
            assert not client.health_check()


class TestGateways:
    """Tests for the RecordGateway adapters."""

    def test_contacts_gateway_returns_records(self):
        client = MagicMock()
        client.list_contacts.return_value = RecordListResponse(success=True, records=["r1"])

        assert ContactsGateway(client).fetch_records("p1") == ["r1"]

    def test_contacts_gateway_raises_fetch_error(self):
        client = MagicMock()
        client.list_contacts.return_value = RecordListResponse(success=False, error="HTTP 500", status_code=500)

        with pytest.raises(RemoteFetchError) as exc_info:
            ContactsGateway(client).fetch_records("p1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.endpoint == "/profile/p1/contacts"

    def test_leads_gateway_raises_unavailable(self):
        client = MagicMock()
        client.filter_leads.return_value = RecordListResponse(success=False, error="refused", unreachable=True)

        with pytest.raises(BackendUnavailableError):
            LeadsGateway(client).fetch_records("p1")

    def test_leads_gateway_passes_filters(self):
        client = MagicMock()
        client.filter_leads.return_value = RecordListResponse(success=True)
        filters = LeadFilters(search="x")

        LeadsGateway(client, filters).fetch_records("p1")

        client.filter_leads.assert_called_once_with("p1", filters)

    def test_delete_many_delegates(self):
        client = MagicMock()
        ContactsGateway(client).delete_many("p1", ["a"])
        client.delete_contacts.assert_called_once_with("p1", ["a"])
