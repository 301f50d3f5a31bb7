"""
Backend API Client for Spinet Frontend.

Provides type-safe access to the CRM backend with retry logic and error
handling, plus gateways that expose the contacts and opportunities
endpoints to the table engine.
"""

import json
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Dict, List, Any, Sequence

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from frontend.config.settings import config
from frontend.core.collaborators import MutationResult
from frontend.models.schemas import (
    Contact,
    ContactInput,
    Lead,
    LeadFilters,
    LeadInput,
    parse_records,
)
from frontend.utils.exceptions import BackendUnavailableError, RemoteFetchError

logger = logging.getLogger(__name__)

MISSING_PROFILE = "Profile ID is missing"


@dataclass
class RecordListResponse:
    """Response from a collection listing API."""
    success: bool
    records: List[Any] = None
    total: int = 0
    error: Optional[str] = None
    status_code: Optional[int] = None
    unreachable: bool = False

    def __post_init__(self):
        if self.records is None:
            self.records = []


def _error_detail(response: requests.Response) -> str:
    """Extract a readable error message from a failed response."""
    try:
        body = response.json()
    except (json.JSONDecodeError, ValueError):
        return f"HTTP {response.status_code}: {response.text[:100] if response.text else 'Unknown error'}"
    if isinstance(body, dict):
        return body.get('message') or body.get('detail') or f"HTTP {response.status_code}"
    return f"HTTP {response.status_code}"


class SpinetAPIClient:
    """Client for the Spinet CRM backend with retry logic."""

    def __init__(
        self,
        base_url: str = None,
        timeout: int = None,
        max_retries: int = None,
        session_token: str = None
    ):
        """Initialize API client.

        Args:
            base_url: Backend API URL (default from config)
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts
            session_token: Auth session cookie value
        """
        self.base_url = (base_url or config.API_BASE_URL).rstrip('/')
        self.timeout = timeout or config.API_TIMEOUT
        self.max_retries = max_retries or config.MAX_RETRY_ATTEMPTS

        # Configure session with retry
        self.session = requests.Session()
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=frozenset({'GET', 'HEAD', 'OPTIONS'}),
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self._session_token = None
        if session_token:
            self.session_token = session_token

    @property
    def session_token(self) -> Optional[str]:
        """Get current auth session token."""
        return self._session_token

    @session_token.setter
    def session_token(self, value: Optional[str]):
        """Set the auth session cookie sent with every request."""
        self._session_token = value
        if value:
            self.session.cookies.set(config.SESSION_COOKIE_NAME, value)
        else:
            self.session.cookies.pop(config.SESSION_COOKIE_NAME, None)

    def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> requests.Response:
        """Make HTTP request with error handling."""
        url = f"{self.base_url}{endpoint}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
            return response
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {method} {url} - {e}")
            raise

    def _mutate(
        self,
        method: str,
        endpoint: str,
        success_message: str,
        not_found_message: str = None,
        **kwargs
    ) -> MutationResult:
        """Run a create/update/delete call and normalize the outcome."""
        try:
            response = self._request(method, endpoint, **kwargs)
        except requests.exceptions.RequestException as e:
            return MutationResult(success=False, error=str(e))

        if response.status_code in (200, 201, 204):
            if response.status_code == 204 or not response.content:
                return MutationResult(success=True, message=success_message)
            try:
                data = response.json()
            except (json.JSONDecodeError, ValueError):
                return MutationResult(success=True, message=success_message)
            message = data.get('message', success_message) if isinstance(data, dict) else success_message
            return MutationResult(
                success=True,
                message=message,
                data=data if isinstance(data, dict) else {"result": data},
            )
        if response.status_code == 404 and not_found_message:
            return MutationResult(success=False, error=not_found_message)
        return MutationResult(success=False, error=_error_detail(response))

    def _list(self, method: str, endpoint: str, model, **kwargs) -> RecordListResponse:
        """Fetch and validate a record collection."""
        try:
            response = self._request(method, endpoint, **kwargs)
        except requests.exceptions.RequestException as e:
            return RecordListResponse(success=False, error=str(e), unreachable=True)

        if response.status_code != 200:
            return RecordListResponse(
                success=False,
                error=_error_detail(response),
                status_code=response.status_code,
            )
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(f"Invalid JSON in {endpoint} response: {e}")
            return RecordListResponse(success=False, error="Invalid response from server")

        records = parse_records(model, data)
        total = data.get('total', len(records)) if isinstance(data, dict) else len(records)
        return RecordListResponse(success=True, records=records, total=total)

    # Health check
    def health_check(self) -> bool:
        """Check if backend is healthy."""
        try:
            response = self._request('GET', '/health')
            return response.status_code == 200
        except requests.exceptions.RequestException:
            return False

    # Contacts
    def list_contacts(self, profile_id: str) -> RecordListResponse:
        """Get all contacts of a profile.

        Args:
            profile_id: Owning profile

        Returns:
            RecordListResponse with validated Contact records
        """
        if not profile_id:
            return RecordListResponse(success=False, error=MISSING_PROFILE)
        return self._list('GET', f'/profile/{profile_id}/contacts', Contact)

    def add_contact(self, profile_id: str, contact: ContactInput) -> MutationResult:
        """Create a contact."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        return self._mutate(
            'POST', f'/profile/{profile_id}/contacts',
            "Contact added successfully",
            json=contact.to_payload(),
        )

    def update_contact(self, profile_id: str, contact_id: str, patch: Dict[str, Any]) -> MutationResult:
        """Update a contact with a partial payload."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        return self._mutate(
            'PATCH', f'/profile/{profile_id}/contacts/{contact_id}',
            "Contact updated",
            not_found_message="Contact not found",
            json=patch,
        )

    def delete_contact(self, profile_id: str, contact_id: str) -> MutationResult:
        """Delete one contact."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        return self._mutate(
            'DELETE', f'/profile/{profile_id}/contacts/{contact_id}',
            "Contact deleted",
            not_found_message="Contact not found",
        )

    def delete_contacts(self, profile_id: str, contact_ids: Sequence[str]) -> MutationResult:
        """Delete several contacts in one call."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        if not contact_ids:
            return MutationResult(success=False, error="No contacts to delete")
        return self._mutate(
            'POST', f'/profile/{profile_id}/contacts/delete',
            "Contacts deleted",
            json=list(contact_ids),
        )

    # Leads (opportunities)
    def filter_leads(self, profile_id: str, filters: Optional[LeadFilters] = None) -> RecordListResponse:
        """Get the leads of a profile matching server-side filters.

        Args:
            profile_id: Owning profile
            filters: Server-side filters (all leads if omitted)

        Returns:
            RecordListResponse with validated Lead records
        """
        if not profile_id:
            return RecordListResponse(success=False, error=MISSING_PROFILE)
        filters = filters or LeadFilters()
        return self._list(
            'POST', f'/profile/{profile_id}/opportunities/filter', Lead,
            json=filters.to_payload(),
        )

    def get_lead(self, profile_id: str, lead_id: str) -> Optional[Lead]:
        """Get one lead, or None if it cannot be loaded."""
        if not profile_id:
            return None
        try:
            response = self._request('GET', f'/profile/{profile_id}/opportunities/{lead_id}')
        except requests.exceptions.RequestException:
            return None
        if response.status_code != 200:
            logger.warning(f"Lead {lead_id} not loaded: HTTP {response.status_code}")
            return None
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError):
            logger.error(f"Invalid JSON for lead {lead_id}")
            return None
        records = parse_records(Lead, [data])
        return records[0] if records else None

    def add_lead(self, profile_id: str, lead: LeadInput) -> MutationResult:
        """Create a lead."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        return self._mutate(
            'POST', f'/profile/{profile_id}/opportunities',
            "Lead added successfully",
            json=lead.to_payload(),
        )

    def update_lead(self, profile_id: str, lead_id: str, patch: Dict[str, Any]) -> MutationResult:
        """Update a lead with a partial payload."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        return self._mutate(
            'PATCH', f'/profile/{profile_id}/opportunities/{lead_id}',
            "Lead updated",
            not_found_message="Lead not found",
            json=patch,
        )

    def delete_lead(self, profile_id: str, lead_id: str) -> MutationResult:
        """Delete one lead."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        if not lead_id:
            return MutationResult(success=False, error=f"Invalid leadId: {lead_id}")
        return self._mutate(
            'DELETE', f'/profile/{profile_id}/opportunities/{lead_id}',
            "Lead deleted",
            not_found_message="Lead not found",
        )

    def delete_leads(self, profile_id: str, lead_ids: Sequence[str]) -> MutationResult:
        """Delete several leads in one call."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        if not lead_ids:
            return MutationResult(success=False, error="No leads to delete")
        return self._mutate(
            'POST', f'/profile/{profile_id}/opportunities/delete',
            "Leads deleted",
            json=list(lead_ids),
        )

    def add_note(self, profile_id: str, lead_id: str, note: str) -> MutationResult:
        """Attach a note to a lead."""
        if not profile_id:
            return MutationResult(success=False, error=MISSING_PROFILE)
        if not note or not note.strip():
            return MutationResult(success=False, error="Note cannot be empty")
        return self._mutate(
            'POST', f'/profile/{profile_id}/opportunities/{lead_id}/notes',
            "Note added",
            not_found_message="Lead not found",
            json={"content": note.strip()},
        )


def _raise_for_listing(response: RecordListResponse, endpoint: str, fallback: str) -> None:
    """Turn an unsuccessful listing into the matching exception."""
    if response.success:
        return
    if response.unreachable:
        raise BackendUnavailableError(f"Cannot reach backend: {response.error}")
    raise RemoteFetchError(
        response.error or fallback,
        endpoint=endpoint,
        status_code=response.status_code,
    )


class ContactsGateway:
    """RecordGateway over the contacts endpoints."""

    def __init__(self, client: SpinetAPIClient):
        self.client = client

    def fetch_records(self, scope_id: str) -> List[Contact]:
        response = self.client.list_contacts(scope_id)
        _raise_for_listing(response, f"/profile/{scope_id}/contacts", "Failed to load contacts")
        return response.records

    def delete_one(self, scope_id: str, record_id: str) -> MutationResult:
        return self.client.delete_contact(scope_id, record_id)

    def delete_many(self, scope_id: str, record_ids: Sequence[str]) -> MutationResult:
        return self.client.delete_contacts(scope_id, record_ids)

    def update_one(self, scope_id: str, record_id: str, patch: Dict[str, Any]) -> MutationResult:
        return self.client.update_contact(scope_id, record_id, patch)

    def create_one(self, scope_id: str, payload: ContactInput) -> MutationResult:
        return self.client.add_contact(scope_id, payload)


class LeadsGateway:
    """RecordGateway over the opportunities endpoints."""

    def __init__(self, client: SpinetAPIClient, filters: Optional[LeadFilters] = None):
        self.client = client
        self.filters = filters

    def fetch_records(self, scope_id: str) -> List[Lead]:
        response = self.client.filter_leads(scope_id, self.filters)
        _raise_for_listing(response, f"/profile/{scope_id}/opportunities/filter", "Failed to load leads")
        return response.records

    def delete_one(self, scope_id: str, record_id: str) -> MutationResult:
        return self.client.delete_lead(scope_id, record_id)

    def delete_many(self, scope_id: str, record_ids: Sequence[str]) -> MutationResult:
        return self.client.delete_leads(scope_id, record_ids)

    def update_one(self, scope_id: str, record_id: str, patch: Dict[str, Any]) -> MutationResult:
        return self.client.update_lead(scope_id, record_id, patch)

    def create_one(self, scope_id: str, payload: LeadInput) -> MutationResult:
        return self.client.add_lead(scope_id, payload)


# Singleton pattern with thread-safe initialization
_api_client: Optional[SpinetAPIClient] = None
_api_client_lock = threading.Lock()


def get_api_client() -> SpinetAPIClient:
    """Get singleton API client instance (thread-safe)."""
    global _api_client
    if _api_client is None:
        with _api_client_lock:
            if _api_client is None:
                _api_client = SpinetAPIClient()
    return _api_client


def set_session_token(session_token: Optional[str]) -> None:
    """Set the auth session token on the singleton API client.

    Call this early in the app lifecycle with the user's session cookie.

    Args:
        session_token: Session cookie value (None to clear)
    """
    client = get_api_client()
    client.session_token = session_token
    if session_token:
        logger.debug(f"API client session token set: {session_token[:8]}...")
