"""
Pydantic schemas for CRM records exchanged with the backend.

Records are validated once, when a collection is fetched. Everything
downstream (table engine, pages) can rely on the typed fields instead of
probing optional nested keys.
"""
import logging
from enum import Enum
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


# Enums
class ContactType(str, Enum):
    SCAN = "scan"
    MANUAL = "manual"
    EXCHANGE = "exchange"
    SPINET = "spinet"
    PHONE = "phone"


class LeadStatus(str, Enum):
    PENDING = "pending"
    PROSPECTING = "prospecting"
    OFFER_SENT = "offer-sent"
    NEGOTIATION = "negotiation"
    ADMINISTRATIVE_VALIDATION = "administrative-validation"
    DONE = "done"
    FAILED = "failed"
    CANCELED = "canceled"


class LeadPriority(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SpinetModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )

    def to_payload(self) -> dict:
        """Serialize for the backend (wire names, no unset optionals)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _coerce_id(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


# Contact Schemas
class ProfileLink(SpinetModel):
    """A titled link on a contact profile."""

    title: str = Field(..., min_length=1)
    link: str = Field(..., min_length=1)


class ProfileTheme(SpinetModel):
    color: Optional[str] = None


class ContactProfile(SpinetModel):
    """Public profile data attached to a contact."""

    full_name: str
    theme: Optional[ProfileTheme] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    birth_date: Optional[str] = None
    gender: Optional[str] = None
    company_name: Optional[str] = None
    activity_sector: Optional[str] = None
    position: Optional[str] = None
    profile_picture: Optional[str] = None
    profile_cover: Optional[str] = None
    bio: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    links: List[ProfileLink] = Field(default_factory=list)


class LeadCaptions(SpinetModel):
    """Context captured when a contact was met."""

    met_in: Optional[str] = None
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    date: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    next_action: Optional[str] = None
    date_of_next_action: Optional[str] = None
    notes: Optional[str] = None


class Contact(SpinetModel):
    """Contact as returned by GET /profile/{id}/contacts."""

    id: str = Field(..., alias="_id", min_length=1)
    name: str = ""
    description: Optional[str] = None
    type: Optional[ContactType] = None
    profile: ContactProfile = Field(..., alias="Profile")
    lead_captions: Optional[LeadCaptions] = None

    normalize_id = field_validator("id", mode="before")(_coerce_id)

    @property
    def display_name(self) -> str:
        return self.profile.full_name or self.name

    @property
    def email(self) -> Optional[str]:
        """Profile e-mail, or the link titled "email" when none is set."""
        if self.profile.email:
            return self.profile.email
        for link in self.profile.links:
            if link.title.lower() == "email":
                return link.link
        return None

    @property
    def tags(self) -> List[str]:
        return self.lead_captions.tags if self.lead_captions else []


class ContactInput(SpinetModel):
    """Request body for creating or updating a contact."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    type: ContactType = ContactType.MANUAL
    profile: ContactProfile
    lead_captions: Optional[LeadCaptions] = None


# Lead Schemas
class LeadLifeTime(SpinetModel):
    begins: Optional[str] = None
    ends: Optional[str] = None


class LeadNote(SpinetModel):
    id: Optional[str] = Field(None, alias="_id")
    content: str = ""
    date: Optional[str] = None

    normalize_id = field_validator("id", mode="before")(_coerce_id)


class Lead(SpinetModel):
    """Lead (sales opportunity) as returned by the opportunities endpoints."""

    id: str = Field(..., alias="_id", min_length=1)
    name: str
    description: Optional[str] = None
    contacts: List[str] = Field(default_factory=list, alias="Contacts")
    main_contact: Optional[str] = None
    amount: Optional[float] = None
    status: LeadStatus = Field(LeadStatus.PENDING, validate_default=True)
    priority: Optional[LeadPriority] = None
    life_time: Optional[LeadLifeTime] = None
    tags: List[str] = Field(default_factory=list, alias="Tags")
    notes: List[LeadNote] = Field(default_factory=list)

    normalize_id = field_validator("id", mode="before")(_coerce_id)

    @field_validator("status", mode="before")
    @classmethod
    def default_missing_status(cls, v: Any) -> Any:
        """A lead without status is pending."""
        return LeadStatus.PENDING if v is None else v

    @field_validator("contacts", "tags", "notes", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class LeadInput(SpinetModel):
    """Request body for creating or updating a lead."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    contacts: Optional[List[str]] = Field(None, alias="Contacts")
    main_contact: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0)
    status: Optional[LeadStatus] = None
    priority: Optional[LeadPriority] = None
    life_time: Optional[LeadLifeTime] = None
    tags: Optional[List[str]] = Field(None, alias="Tags")


class LeadFilters(SpinetModel):
    """Request body for POST /profile/{id}/opportunities/filter."""

    search: str = ""
    types: Optional[List[str]] = None
    status: Optional[List[LeadStatus]] = None
    priority: Optional[List[LeadPriority]] = None
    tags: Optional[List[str]] = None
    contacts: Optional[List[str]] = None
    limit: Optional[int] = Field(None, gt=0)
    skip: int = Field(0, ge=0)


def parse_records(model: Type[T], payload: Any) -> List[T]:
    """Validate a fetched collection.

    Accepts a bare list or a {"data": [...]} envelope. Items that fail
    validation are dropped and logged; the rest are returned in order.

    Args:
        model: Schema to validate each item against
        payload: Decoded JSON response body

    Returns:
        List of validated records
    """
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        logger.warning(f"Expected a list of {model.__name__} records, got {type(payload).__name__}")
        return []

    records = []
    for index, item in enumerate(payload):
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(
                f"Skipping invalid {model.__name__} at index {index}: {e.error_count()} error(s)"
            )
    if len(records) != len(payload):
        logger.warning(f"Dropped {len(payload) - len(records)} invalid {model.__name__} record(s)")
    return records
