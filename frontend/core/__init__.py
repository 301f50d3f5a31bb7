"""Table engine and screen controller for Spinet."""
from frontend.core.collaborators import MutationResult, RecordGateway
from frontend.core.table_engine import (
    ALL_TYPES,
    SORT_ASC,
    SORT_DESC,
    VIEW_QUERY_PARAMS,
    BulkResult,
    DerivedView,
    SelectAllScope,
    SelectionSet,
    SortSpec,
    TableConfig,
    ViewParameters,
    bulk_delete,
    bulk_delete_many,
    collection_order,
    compute_view,
    number_sort,
    parse_sort,
    format_sort,
    reconcile_after_mutation,
    resolve_field,
    select_all_targets,
    select_all_visible,
    text_sort,
    toggle_selection,
)
from frontend.core.table_screen import (
    BULK_DELETE_BATCH,
    BULK_DELETE_PER_ITEM,
    Notification,
    ScreenState,
    TableScreen,
)
from frontend.core.tables import CONTACTS_TABLE, LEADS_TABLE

__all__ = [
    # Collaborators
    "MutationResult",
    "RecordGateway",
    # Engine
    "ALL_TYPES",
    "SORT_ASC",
    "SORT_DESC",
    "VIEW_QUERY_PARAMS",
    "BulkResult",
    "DerivedView",
    "SelectAllScope",
    "SelectionSet",
    "SortSpec",
    "TableConfig",
    "ViewParameters",
    "bulk_delete",
    "bulk_delete_many",
    "collection_order",
    "compute_view",
    "number_sort",
    "parse_sort",
    "format_sort",
    "reconcile_after_mutation",
    "resolve_field",
    "select_all_targets",
    "select_all_visible",
    "text_sort",
    "toggle_selection",
    # Screen controller
    "BULK_DELETE_BATCH",
    "BULK_DELETE_PER_ITEM",
    "Notification",
    "ScreenState",
    "TableScreen",
    # Table configurations
    "CONTACTS_TABLE",
    "LEADS_TABLE",
]
