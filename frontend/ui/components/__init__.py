"""Reusable UI components for Spinet."""
from frontend.ui.components.charts import (
    count_by,
    contacts_by_type,
    leads_by_status,
    amount_by_status,
    create_bar_chart,
)
from frontend.ui.components.confirmation import (
    request_confirmation,
    render_confirmation,
)
from frontend.ui.components.contact_form import (
    render_contact_form,
    build_contact_input,
    contact_to_form_data,
    parse_tags,
)
from frontend.ui.components.lead_form import (
    render_lead_form,
    render_status_update,
    render_note_form,
    build_lead_input,
    lead_to_form_data,
    status_label,
)
from frontend.ui.components.data_table import (
    render_data_table,
    clamp_rows_per_page,
    changed_selection,
)
from frontend.ui.components.sidebar import (
    render_sidebar,
    render_profile_selector,
    render_backend_status,
)

__all__ = [
    # Charts
    "count_by",
    "contacts_by_type",
    "leads_by_status",
    "amount_by_status",
    "create_bar_chart",
    # Confirmation
    "request_confirmation",
    "render_confirmation",
    # Contact form
    "render_contact_form",
    "build_contact_input",
    "contact_to_form_data",
    "parse_tags",
    # Lead form
    "render_lead_form",
    "render_status_update",
    "render_note_form",
    "build_lead_input",
    "lead_to_form_data",
    "status_label",
    # Data table
    "render_data_table",
    "clamp_rows_per_page",
    "changed_selection",
    # Sidebar
    "render_sidebar",
    "render_profile_selector",
    "render_backend_status",
]
