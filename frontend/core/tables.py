"""Table configurations for the contacts and leads screens."""

from frontend.config.settings import config
from frontend.core.table_engine import (
    SORT_ASC,
    SelectAllScope,
    TableConfig,
    collection_order,
    number_sort,
    text_sort,
)

CONTACTS_TABLE = TableConfig(
    type_field="type",
    search_fields=(
        "profile.full_name",
        "name",
        "email",
        "profile.company_name",
        "profile.position",
    ),
    sorts={
        "name": text_sort("name", "Name"),
        # No creation timestamp is exposed; fetch order stands in for it.
        "date": collection_order("Date added"),
    },
    default_sort_key="name",
    default_sort_direction=SORT_ASC,
    select_all_scope=SelectAllScope(config.CONTACTS_SELECT_ALL_SCOPE),
)

LEADS_TABLE = TableConfig(
    type_field="status",
    search_fields=(
        "name",
        "description",
        "tags",
    ),
    sorts={
        "name": text_sort("name", "Name"),
        "date": collection_order("Date added"),
        "amount": number_sort("amount", "Amount"),
    },
    default_sort_key="name",
    default_sort_direction=SORT_ASC,
    select_all_scope=SelectAllScope(config.LEADS_SELECT_ALL_SCOPE),
)
