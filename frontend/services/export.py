"""Tabular export of contacts and leads.

Builds flat pandas DataFrames from validated records, used for the CSV
download buttons and for the insights charts.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from frontend.config.settings import config
from frontend.models.schemas import Contact, Lead

logger = logging.getLogger(__name__)

CONTACT_COLUMNS = [
    'id', 'full_name', 'type', 'company_name', 'position',
    'email', 'phone_number', 'met_in', 'tags',
]
LEAD_COLUMNS = [
    'id', 'name', 'status', 'priority', 'amount',
    'begins', 'ends', 'contacts', 'tags',
]


def _contact_row(contact: Contact) -> Dict[str, Any]:
    profile = contact.profile
    captions = contact.lead_captions
    return {
        'id': contact.id,
        'full_name': contact.display_name,
        'type': contact.type,
        'company_name': profile.company_name,
        'position': profile.position,
        'email': contact.email,
        'phone_number': profile.phone_number,
        'met_in': captions.met_in if captions else None,
        'tags': ', '.join(contact.tags),
    }


def _lead_row(lead: Lead) -> Dict[str, Any]:
    return {
        'id': lead.id,
        'name': lead.name,
        'status': lead.status,
        'priority': lead.priority,
        'amount': lead.amount,
        'begins': lead.life_time.begins if lead.life_time else None,
        'ends': lead.life_time.ends if lead.life_time else None,
        'contacts': len(lead.contacts),
        'tags': ', '.join(lead.tags),
    }


def records_to_dataframe(rows: List[Dict[str, Any]], columns: List[str]) -> pd.DataFrame:
    """Build a DataFrame with a fixed column order (empty input keeps the columns)."""
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)


def contacts_to_dataframe(contacts: Sequence[Contact]) -> pd.DataFrame:
    return records_to_dataframe([_contact_row(c) for c in contacts], CONTACT_COLUMNS)


def leads_to_dataframe(leads: Sequence[Lead]) -> pd.DataFrame:
    return records_to_dataframe([_lead_row(lead) for lead in leads], LEAD_COLUMNS)


def to_csv_bytes(df: pd.DataFrame) -> bytes:
    """Encode a DataFrame as UTF-8 CSV without the index."""
    return df.to_csv(index=False).encode('utf-8')


def export_filename(kind: str, fmt: str = 'csv', now: Optional[datetime] = None) -> str:
    """Build a download file name like 'spinet_contacts_20240131.csv'.

    Raises:
        ValueError: If the format is not an allowed export format
    """
    if fmt not in config.ALLOWED_EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")
    stamp = (now or datetime.now()).strftime('%Y%m%d')
    return f"{config.EXPORT_FILENAME_PREFIX}_{kind}_{stamp}.{fmt}"
