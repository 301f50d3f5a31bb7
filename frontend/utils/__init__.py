"""Utilities for Spinet frontend."""
from frontend.utils.session_state import (
    SessionState,
    VIEW_CONTACTS,
    VIEW_LEADS,
    VIEW_INSIGHTS,
    VIEW_ADD_CONTACT,
    VIEW_ADD_LEAD,
    SCREEN_CONTACTS,
    SCREEN_LEADS,
)
from frontend.utils.exceptions import (
    SpinetError,
    InvalidParameterError,
    StaleResponseError,
    MissingScopeError,
    APIError,
    RemoteFetchError,
    RemoteMutationError,
    BackendUnavailableError,
)
from frontend.utils.validators import (
    ValidationResult,
    InputValidator,
    ContactFormValidator,
    LeadFormValidator,
)

__all__ = [
    # Session state
    "SessionState",
    "VIEW_CONTACTS",
    "VIEW_LEADS",
    "VIEW_INSIGHTS",
    "VIEW_ADD_CONTACT",
    "VIEW_ADD_LEAD",
    "SCREEN_CONTACTS",
    "SCREEN_LEADS",
    # Exceptions
    "SpinetError",
    "InvalidParameterError",
    "StaleResponseError",
    "MissingScopeError",
    "APIError",
    "RemoteFetchError",
    "RemoteMutationError",
    "BackendUnavailableError",
    # Validators
    "ValidationResult",
    "InputValidator",
    "ContactFormValidator",
    "LeadFormValidator",
]
