"""Services for Spinet frontend."""
from frontend.services.backend_client import (
    SpinetAPIClient,
    ContactsGateway,
    LeadsGateway,
    RecordListResponse,
    get_api_client,
    set_session_token,
)
from frontend.services.export import (
    records_to_dataframe,
    contacts_to_dataframe,
    leads_to_dataframe,
    to_csv_bytes,
    export_filename,
)

__all__ = [
    # Backend client
    "SpinetAPIClient",
    "ContactsGateway",
    "LeadsGateway",
    "RecordListResponse",
    "get_api_client",
    "set_session_token",
    # Export
    "records_to_dataframe",
    "contacts_to_dataframe",
    "leads_to_dataframe",
    "to_csv_bytes",
    "export_filename",
]
