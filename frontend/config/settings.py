"""
Spinet Frontend Configuration.

Frozen dataclass for immutable configuration with environment overrides.
All magic numbers and configuration values should be defined here.

Environment variables can override defaults (read at module import time):
- API_BASE_URL: Backend API URL
- API_TIMEOUT_SECONDS: Override API timeout
- APP_VERSION: Override version string
- DEFAULT_PROFILE_ID: Profile preselected in the sidebar
- DEFAULT_ROWS_PER_PAGE: Rows shown per table page
- BULK_DELETE_MODE: 'per_item' or 'batch'
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet


def _get_int_env(name: str, default: int) -> int:
    """Get integer environment variable or return default."""
    val = os.getenv(name)
    if val is not None:
        try:
            return int(val)
        except ValueError:
            pass
    return default


def _get_str_env(name: str, default: str) -> str:
    """Get string environment variable or return default."""
    return os.getenv(name, default)


def _get_bool_env(name: str, default: bool) -> bool:
    """Get boolean environment variable or return default."""
    val = os.getenv(name)
    if val is not None:
        return val.lower() in ('true', '1', 'yes')
    return default


@dataclass(frozen=True)
class SpinetConfig:
    """Immutable Spinet configuration.

    frozen=True ensures config values cannot be accidentally modified.
    Environment variables are read at module import time.
    """

    # Application
    APP_NAME: str = "Spinet"
    APP_ICON: str = "📇"
    APP_VERSION: str = field(
        default_factory=lambda: _get_str_env('APP_VERSION', "1.0.0")
    )
    DEBUG: bool = field(
        default_factory=lambda: _get_bool_env('DEBUG', False)
    )

    # Backend API
    API_BASE_URL: str = field(
        default_factory=lambda: _get_str_env('API_BASE_URL', 'http://localhost:3001/api')
    )
    API_TIMEOUT_SECONDS: int = field(
        default_factory=lambda: _get_int_env('API_TIMEOUT_SECONDS', 30)
    )
    MAX_RETRY_ATTEMPTS: int = 3
    SESSION_COOKIE_NAME: str = "spinet-session"

    # Active profile (scope) used when nothing is selected yet
    DEFAULT_PROFILE_ID: str = field(
        default_factory=lambda: _get_str_env('DEFAULT_PROFILE_ID', '')
    )

    # Table settings
    DEFAULT_ROWS_PER_PAGE: int = field(
        default_factory=lambda: _get_int_env('DEFAULT_ROWS_PER_PAGE', 10)
    )
    MIN_ROWS_PER_PAGE: int = 5
    MAX_ROWS_PER_PAGE: int = 20
    ROWS_PER_PAGE_OPTIONS: tuple = (5, 10, 15, 20)

    # "Select all" checkbox scope per screen: 'page' or 'filtered'
    CONTACTS_SELECT_ALL_SCOPE: str = field(
        default_factory=lambda: _get_str_env('CONTACTS_SELECT_ALL_SCOPE', 'filtered')
    )
    LEADS_SELECT_ALL_SCOPE: str = field(
        default_factory=lambda: _get_str_env('LEADS_SELECT_ALL_SCOPE', 'page')
    )

    # 'per_item' deletes one record per call, 'batch' uses the bulk endpoint
    BULK_DELETE_MODE: str = field(
        default_factory=lambda: _get_str_env('BULK_DELETE_MODE', 'per_item')
    )

    # Background fetch pool
    FETCH_WORKERS: int = 2

    # Input validation
    MAX_NAME_LENGTH: int = 200
    MAX_NOTES_LENGTH: int = 2000
    MAX_TAGS: int = 20
    DATE_FORMAT: str = "%Y-%m-%d"

    # Export
    EXPORT_FILENAME_PREFIX: str = "spinet"
    ALLOWED_EXPORT_FORMATS: FrozenSet[str] = frozenset({'csv'})

    # Chart defaults
    DEFAULT_CHART_HEIGHT: int = 400

    @property
    def API_TIMEOUT(self) -> float:
        """Get request timeout as float seconds."""
        return float(self.API_TIMEOUT_SECONDS)


# Global immutable config instance
config = SpinetConfig()

# Contact source types, in the order the filter tabs show them
CONTACT_TYPES = [
    'scan',
    'manual',
    'exchange',
    'spinet',
    'phone',
]

# Lead pipeline statuses, in pipeline order
LEAD_STATUSES = [
    'pending',
    'prospecting',
    'offer-sent',
    'negotiation',
    'administrative-validation',
    'done',
    'failed',
    'canceled',
]

LEAD_PRIORITIES = [
    'none',
    'low',
    'medium',
    'high',
    'critical',
]

# Sort options shown in the sort dropdowns
CONTACT_SORT_OPTIONS = {
    'name-asc': 'Name (A-Z)',
    'name-desc': 'Name (Z-A)',
    'date-desc': 'Newest',
    'date-asc': 'Oldest',
}

LEAD_SORT_OPTIONS = {
    'name-asc': 'Name (A-Z)',
    'name-desc': 'Name (Z-A)',
    'date-desc': 'Newest',
    'date-asc': 'Oldest',
    'amount-desc': 'Amount (high to low)',
    'amount-asc': 'Amount (low to high)',
}
