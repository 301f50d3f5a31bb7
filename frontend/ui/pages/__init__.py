"""Page components for Spinet."""
from frontend.ui.pages.contacts import render_contacts_page
from frontend.ui.pages.leads import render_leads_page
from frontend.ui.pages.insights import render_insights_page
from frontend.ui.pages.editors import render_contact_editor_page, render_lead_editor_page

__all__ = [
    "render_contacts_page",
    "render_leads_page",
    "render_insights_page",
    "render_contact_editor_page",
    "render_lead_editor_page",
]
