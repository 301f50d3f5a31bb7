"""Record schemas for Spinet frontend."""
from frontend.models.schemas import (
    Contact,
    ContactInput,
    ContactProfile,
    ContactType,
    Lead,
    LeadCaptions,
    LeadFilters,
    LeadInput,
    LeadLifeTime,
    LeadNote,
    LeadPriority,
    LeadStatus,
    ProfileLink,
    parse_records,
)

__all__ = [
    "Contact",
    "ContactInput",
    "ContactProfile",
    "ContactType",
    "Lead",
    "LeadCaptions",
    "LeadFilters",
    "LeadInput",
    "LeadLifeTime",
    "LeadNote",
    "LeadPriority",
    "LeadStatus",
    "ProfileLink",
    "parse_records",
]
