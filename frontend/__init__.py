"""Spinet Frontend Package.

Streamlit CRM frontend with:
- Frozen dataclass configuration
- Backend API client with retry logic
- UI-agnostic table engine (filter, sort, paginate, select, bulk delete)
- Session state management
- Page-based routing
"""

__version__ = "1.0.0"
