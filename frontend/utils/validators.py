"""Input validation utilities.

This module provides validation for user input on the CRM forms:
- Contact forms (profile, links, lead captions)
- Lead forms (amount, lifetime, tags, notes)
- Free text (HTML sanitization, injection checks)

All validators return ValidationResult objects for consistent error handling.
"""

import re
import html
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from frontend.config.settings import config

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        errors: List of error messages (empty if valid)
        warnings: List of warning messages (non-fatal issues)

    Example:
        >>> result = ValidationResult(is_valid=True)
        >>> if result.is_valid:
        ...     submit_form()
    """
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.is_valid

    def add_error(self, error: str) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class InputValidator:
    """Validates free-text inputs.

    Provides date parsing, e-mail checks, and HTML sanitization shared by
    the form validators.
    """

    EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
    PHONE_PATTERN = re.compile(r'^\+?[0-9 ()\-.]{6,20}$')
    URL_PATTERN = re.compile(r'^(https?://|mailto:|tel:)\S+$', re.IGNORECASE)

    @classmethod
    def parse_date(cls, value: str) -> Optional[datetime]:
        """Parse a yyyy-MM-dd date, returning None when malformed."""
        if not value or not isinstance(value, str):
            return None
        try:
            return datetime.strptime(value.strip(), config.DATE_FORMAT)
        except ValueError:
            return None

    @classmethod
    def validate_date(cls, value: str, label: str) -> ValidationResult:
        """Validate an optional date field.

        Args:
            value: Date string (empty allowed)
            label: Field label used in error messages

        Returns:
            ValidationResult with is_valid flag and any errors
        """
        result = ValidationResult(is_valid=True)
        if value and cls.parse_date(value) is None:
            result.add_error(f"{label} must be a date in YYYY-MM-DD format")
        return result

    @classmethod
    def is_valid_email(cls, email: str) -> bool:
        return bool(email) and bool(cls.EMAIL_PATTERN.match(email.strip()))

    @classmethod
    def is_valid_phone(cls, phone: str) -> bool:
        return bool(phone) and bool(cls.PHONE_PATTERN.match(phone.strip()))

    @classmethod
    def sanitize_html(cls, text: str) -> str:
        """Sanitize string to prevent XSS attacks.

        Escapes HTML special characters to prevent script injection.

        Args:
            text: Text to sanitize

        Returns:
            HTML-escaped string safe for display

        Example:
            >>> InputValidator.sanitize_html('<script>alert("xss")</script>')
            '&lt;script&gt;alert(&quot;xss&quot;)&lt;/script&gt;'
        """
        if not isinstance(text, str):
            text = str(text)
        return html.escape(text)

    @classmethod
    def is_safe_input(cls, text: str) -> bool:
        """Check if input is safe (no script injection attempts).

        Args:
            text: Text to check

        Returns:
            True if input appears safe
        """
        if not isinstance(text, str):
            return False
        lowered = text.lower()
        if '<script' in lowered or 'javascript:' in lowered:
            return False
        # Inline event handlers, e.g. <img onerror=...>
        if re.search(r'<[^>]+\son\w+\s*=', lowered):
            return False
        return True


def _check_text(result: ValidationResult, value: Optional[str], label: str, max_length: int) -> None:
    if not value:
        return
    if len(value) > max_length:
        result.add_error(f"{label} is too long ({len(value)} characters). Maximum: {max_length}")
    if not InputValidator.is_safe_input(value):
        result.add_error(f"{label} contains unsafe content")


def _check_tags(result: ValidationResult, tags: Optional[List[str]]) -> None:
    if not tags:
        return
    if len(tags) > config.MAX_TAGS:
        result.add_error(f"Too many tags ({len(tags)}). Maximum: {config.MAX_TAGS}")
    seen = set()
    for tag in tags:
        if not str(tag).strip():
            result.add_error("Tags cannot be empty")
            continue
        key = str(tag).strip().casefold()
        if key in seen:
            result.add_warning(f"Duplicate tag '{tag}' will be ignored")
        seen.add(key)


class ContactFormValidator:
    """Validates the add/edit contact form."""

    @classmethod
    def validate(cls, data: Dict[str, Any]) -> ValidationResult:
        """Validate contact form data.

        Checks:
        1. Full name is present and within length limits
        2. E-mail and phone are well formed when given
        3. Every link has both a title and a URL
        4. Dates are YYYY-MM-DD and tags are within limits

        Args:
            data: Form values keyed by snake_case field name. Profile
                fields are at the top level; lead captions under
                'lead_captions'.

        Returns:
            ValidationResult with is_valid flag and any errors/warnings
        """
        result = ValidationResult(is_valid=True)

        full_name = (data.get('full_name') or '').strip()
        if not full_name:
            result.add_error("Full name is required")
        _check_text(result, full_name, "Full name", config.MAX_NAME_LENGTH)

        for key, label in (('company_name', "Company"), ('position', "Position")):
            _check_text(result, data.get(key), label, config.MAX_NAME_LENGTH)
        _check_text(result, data.get('bio'), "Bio", config.MAX_NOTES_LENGTH)

        email = (data.get('email') or '').strip()
        if email and not InputValidator.is_valid_email(email):
            result.add_error(f"Invalid e-mail address: {email}")

        phone = (data.get('phone_number') or '').strip()
        if phone and not InputValidator.is_valid_phone(phone):
            result.add_error(f"Invalid phone number: {phone}")

        for index, link in enumerate(data.get('links') or [], start=1):
            title = (link.get('title') or '').strip()
            url = (link.get('link') or '').strip()
            if not title or not url:
                result.add_error(f"Link {index} needs both a title and a URL")
            elif not InputValidator.URL_PATTERN.match(url):
                result.add_warning(f"Link {index} does not look like a URL: {url}")

        result_date = InputValidator.validate_date(data.get('birth_date'), "Birth date")
        for error in result_date.errors:
            result.add_error(error)

        captions = data.get('lead_captions') or {}
        for key, label in (('date', "Meeting date"), ('date_of_next_action', "Next action date")):
            for error in InputValidator.validate_date(captions.get(key), label).errors:
                result.add_error(error)
        _check_text(result, captions.get('notes'), "Notes", config.MAX_NOTES_LENGTH)
        _check_tags(result, captions.get('tags'))

        if not result.is_valid:
            logger.debug(f"Contact form rejected: {result.errors}")
        return result


class LeadFormValidator:
    """Validates the add/edit lead form and notes."""

    @classmethod
    def validate(cls, data: Dict[str, Any]) -> ValidationResult:
        """Validate lead form data.

        Args:
            data: Form values keyed by snake_case field name

        Returns:
            ValidationResult with is_valid flag and any errors/warnings
        """
        result = ValidationResult(is_valid=True)

        name = (data.get('name') or '').strip()
        if not name:
            result.add_error("Lead name is required")
        _check_text(result, name, "Lead name", config.MAX_NAME_LENGTH)
        _check_text(result, data.get('description'), "Description", config.MAX_NOTES_LENGTH)

        amount = data.get('amount')
        if amount not in (None, ''):
            try:
                if float(amount) < 0:
                    result.add_error("Amount cannot be negative")
            except (TypeError, ValueError):
                result.add_error(f"Amount must be a number, got '{amount}'")

        life_time = data.get('life_time') or {}
        begins = InputValidator.parse_date(life_time.get('begins'))
        ends = InputValidator.parse_date(life_time.get('ends'))
        for key, label in (('begins', "Start date"), ('ends', "End date")):
            for error in InputValidator.validate_date(life_time.get(key), label).errors:
                result.add_error(error)
        if begins and ends and begins > ends:
            result.add_error("Start date must be on or before end date")

        contacts = data.get('contacts') or []
        main_contact = data.get('main_contact')
        if main_contact and contacts and main_contact not in contacts:
            result.add_warning("Main contact is not among the lead's contacts")

        _check_tags(result, data.get('tags'))
        return result

    @classmethod
    def validate_note(cls, note: str) -> ValidationResult:
        """Validate a note before it is attached to a lead."""
        result = ValidationResult(is_valid=True)
        text = (note or '').strip()
        if not text:
            result.add_error("Note cannot be empty")
            return result
        _check_text(result, text, "Note", config.MAX_NOTES_LENGTH)
        return result
