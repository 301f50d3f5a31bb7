"""Tabular data engine for Spinet record tables.

Derives what a table shows from a raw record collection and a set of
view parameters, and provides the selection and bulk-delete commands that
keep row selection consistent with the collection.

Pipeline:
    records -> filter (type + free-text search) -> stable sort
            -> paginate -> page + selection

Everything here is a pure function over immutable values. The module does
not import Streamlit and never reads session state; callers pass the scope,
parameters and collaborators in explicitly.

Example:
    >>> params = ViewParameters(type_filter="manual", page_size=2)
    >>> view = compute_view(contacts, params, CONTACTS_TABLE)
    >>> [c.name for c in view.visible_records]
"""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from frontend.core.collaborators import MutationResult
from frontend.utils.exceptions import InvalidParameterError, RemoteMutationError

logger = logging.getLogger(__name__)

ALL_TYPES = "all"
SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)

# Query string keys for view state
QUERY_PARAM = "query"
FILTER_PARAM = "filter"
SORT_PARAM = "sort"
PAGE_PARAM = "page"
ROWS_PER_PAGE_PARAM = "rowsPerPage"
VIEW_QUERY_PARAMS = (QUERY_PARAM, FILTER_PARAM, SORT_PARAM, PAGE_PARAM, ROWS_PER_PAGE_PARAM)


class SelectAllScope(str, Enum):
    """Which rows the header "select all" checkbox acts on."""
    PAGE = "page"
    FILTERED = "filtered"


def resolve_field(record: Any, path: str) -> Any:
    """Read a dotted field path from a model or a mapping.

    Missing segments resolve to None instead of raising, so a record
    without an optional nested block simply does not match.
    """
    value = record
    for part in path.split('.'):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    if isinstance(value, Enum):
        value = value.value
    return value


def _searchable_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set)):
        return " ".join(str(item) for item in value if item is not None)
    return str(value)


# =============================================================================
# Sorting
# =============================================================================

@dataclass(frozen=True)
class SortSpec:
    """How one sort key orders records.

    A spec without a key function means "collection order": ascending keeps
    the order records arrived in and descending reverses it.
    """
    key: Optional[Callable[[Any], Any]] = None
    label: str = ""


def text_sort(path: str, label: str = "") -> SortSpec:
    """Case-insensitive text ordering on a field; missing values sort as ''."""
    return SortSpec(
        key=lambda record: _searchable_text(resolve_field(record, path)).casefold(),
        label=label,
    )


def number_sort(path: str, label: str = "") -> SortSpec:
    """Numeric ordering on a field; missing values sort lowest."""
    def _key(record: Any) -> float:
        value = resolve_field(record, path)
        try:
            return float(value)
        except (TypeError, ValueError):
            return float('-inf')
    return SortSpec(key=_key, label=label)


def collection_order(label: str = "") -> SortSpec:
    """Ordering by position in the fetched collection."""
    return SortSpec(key=None, label=label)


def parse_sort(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """Split a sort token like 'name-asc' into ('name', 'asc').

    A token without a recognised direction suffix is treated as ascending.
    Returns None for an empty token.
    """
    if not value:
        return None
    key, sep, direction = value.rpartition('-')
    if sep and key and direction in SORT_DIRECTIONS:
        return key, direction
    return value, SORT_ASC


def format_sort(key: str, direction: str) -> str:
    """Inverse of parse_sort."""
    return f"{key}-{direction}"


# =============================================================================
# Configuration and parameters
# =============================================================================

@dataclass(frozen=True)
class TableConfig:
    """Per-screen engine configuration.

    Attributes:
        type_field: Field compared against the type filter
        search_fields: Fields searched by the free-text query
        sorts: Sort registry keyed by sort key ('name', 'date', ...)
        default_sort_key: Sort used when the requested key is unknown
        default_sort_direction: Direction paired with the default sort
        select_all_scope: Rows the "select all" checkbox acts on
        id_field: Field holding the unique record ID
    """
    type_field: str = "type"
    search_fields: Tuple[str, ...] = ("name",)
    sorts: Mapping[str, SortSpec] = field(default_factory=dict)
    default_sort_key: str = "name"
    default_sort_direction: str = SORT_ASC
    select_all_scope: SelectAllScope = SelectAllScope.PAGE
    id_field: str = "id"

    def record_id(self, record: Any) -> str:
        """Get the ID of a record as a string."""
        value = resolve_field(record, self.id_field)
        if value is None:
            raise InvalidParameterError(self.id_field, None, f"Record has no '{self.id_field}' field")
        return str(value)

    def resolve_sort(self, sort_key: str, direction: str) -> Tuple[SortSpec, str]:
        """Look up a sort spec, falling back to the default sort."""
        spec = self.sorts.get(sort_key)
        if spec is not None:
            return spec, direction
        if sort_key != self.default_sort_key:
            logger.debug(f"Unknown sort key '{sort_key}', using '{self.default_sort_key}'")
        return self.sorts.get(self.default_sort_key, collection_order()), self.default_sort_direction


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _first(value: Any) -> Optional[str]:
    """Unwrap list-valued query params (as produced by urllib.parse.parse_qs)."""
    if isinstance(value, (list, tuple)):
        return str(value[0]) if value else None
    return None if value is None else str(value)


@dataclass(frozen=True)
class ViewParameters:
    """Everything that decides which rows a table shows.

    Raises:
        InvalidParameterError: On a non-positive page size, a negative page
            index or an unknown sort direction
    """
    search_query: str = ""
    type_filter: str = ALL_TYPES
    sort_key: str = "name"
    sort_direction: str = SORT_ASC
    page_index: int = 0
    page_size: int = 10

    def __post_init__(self):
        if not _is_int(self.page_size) or self.page_size <= 0:
            raise InvalidParameterError("page_size", self.page_size)
        if not _is_int(self.page_index) or self.page_index < 0:
            raise InvalidParameterError("page_index", self.page_index)
        if self.sort_direction not in SORT_DIRECTIONS:
            raise InvalidParameterError("sort_direction", self.sort_direction)

    @property
    def sort(self) -> str:
        return format_sort(self.sort_key, self.sort_direction)

    def with_changes(self, **changes: Any) -> "ViewParameters":
        """Return updated parameters.

        Changing the search query or the type filter goes back to the first
        page unless a page index is given explicitly.
        """
        narrows = (
            changes.get("search_query", self.search_query) != self.search_query
            or changes.get("type_filter", self.type_filter) != self.type_filter
        )
        if narrows and "page_index" not in changes:
            changes["page_index"] = 0
        return replace(self, **changes)

    def to_query_params(self) -> Dict[str, str]:
        """Serialize to query string values (page is 1-based)."""
        params = {}
        if self.search_query:
            params[QUERY_PARAM] = self.search_query
        if self.type_filter != ALL_TYPES:
            params[FILTER_PARAM] = self.type_filter
        params[SORT_PARAM] = self.sort
        params[PAGE_PARAM] = str(self.page_index + 1)
        params[ROWS_PER_PAGE_PARAM] = str(self.page_size)
        return params

    @classmethod
    def from_query_params(
        cls,
        query: Mapping[str, Any],
        defaults: Optional["ViewParameters"] = None
    ) -> "ViewParameters":
        """Parse view parameters from a query string map.

        Malformed values fall back to the defaults instead of raising,
        since URLs can be stale or edited by hand.
        """
        defaults = defaults or cls()

        search_query = _first(query.get(QUERY_PARAM))
        type_filter = _first(query.get(FILTER_PARAM))

        sort_key, sort_direction = defaults.sort_key, defaults.sort_direction
        parsed_sort = parse_sort(_first(query.get(SORT_PARAM)))
        if parsed_sort:
            sort_key, sort_direction = parsed_sort

        page_index = defaults.page_index
        raw_page = _first(query.get(PAGE_PARAM))
        if raw_page is not None:
            try:
                page_index = int(raw_page) - 1
            except ValueError:
                page_index = -1
            if page_index < 0:
                logger.warning(f"Ignoring invalid page in query string: {raw_page!r}")
                page_index = defaults.page_index

        page_size = defaults.page_size
        raw_size = _first(query.get(ROWS_PER_PAGE_PARAM))
        if raw_size is not None:
            try:
                page_size = int(raw_size)
            except ValueError:
                page_size = 0
            if page_size <= 0:
                logger.warning(f"Ignoring invalid rowsPerPage in query string: {raw_size!r}")
                page_size = defaults.page_size

        return cls(
            search_query=search_query if search_query is not None else defaults.search_query,
            type_filter=type_filter or defaults.type_filter,
            sort_key=sort_key,
            sort_direction=sort_direction,
            page_index=page_index,
            page_size=page_size,
        )


@dataclass(frozen=True)
class DerivedView:
    """Output of compute_view. Never mutated, always recomputed."""
    visible_records: Tuple[Any, ...]
    total_filtered_count: int
    page_count: int
    page_index: int = 0
    filtered_records: Tuple[Any, ...] = ()

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.page_count - 1

    def range_label(self, page_size: int) -> str:
        """'11-20 of 42' style label for pagination footers."""
        if not self.total_filtered_count:
            return "0 of 0"
        start = self.page_index * page_size + 1
        end = start + len(self.visible_records) - 1
        return f"{start}-{end} of {self.total_filtered_count}"


# =============================================================================
# View computation
# =============================================================================

def matches_type(record: Any, type_filter: str, config: TableConfig) -> bool:
    if type_filter == ALL_TYPES:
        return True
    return resolve_field(record, config.type_field) == type_filter


def matches_search(record: Any, search_query: str, config: TableConfig) -> bool:
    needle = search_query.strip().casefold()
    if not needle:
        return True
    return any(
        needle in _searchable_text(resolve_field(record, path)).casefold()
        for path in config.search_fields
    )


def filter_records(records: Sequence[Any], params: ViewParameters, config: TableConfig) -> List[Any]:
    return [
        record for record in records
        if matches_type(record, params.type_filter, config)
        and matches_search(record, params.search_query, config)
    ]


def sort_records(records: Sequence[Any], sort_key: str, direction: str, config: TableConfig) -> List[Any]:
    """Stable sort; ties keep collection order."""
    spec, direction = config.resolve_sort(sort_key, direction)
    items = list(records)
    if spec.key is None:
        # Collection order stands in for creation date.
        return items if direction == SORT_ASC else items[::-1]
    # sorted() stays stable with reverse=True
    return sorted(items, key=spec.key, reverse=direction == SORT_DESC)


def compute_view(records: Sequence[Any], params: ViewParameters, config: TableConfig) -> DerivedView:
    """Filter, sort and paginate a record collection.

    Pure: the input collection is never modified and the same inputs
    always give an equal DerivedView. A page index past the end clamps to
    the last page.

    Args:
        records: Full record collection for the current scope
        params: Current view parameters
        config: Table configuration for the screen

    Returns:
        DerivedView with the visible page and counts
    """
    ordered = sort_records(
        filter_records(records, params, config),
        params.sort_key,
        params.sort_direction,
        config,
    )
    total = len(ordered)
    page_count = max(1, math.ceil(total / params.page_size))
    page_index = min(params.page_index, page_count - 1)
    start = page_index * params.page_size

    return DerivedView(
        visible_records=tuple(ordered[start:start + params.page_size]),
        total_filtered_count=total,
        page_count=page_count,
        page_index=page_index,
        filtered_records=tuple(ordered),
    )


# =============================================================================
# Selection
# =============================================================================

class SelectionSet:
    """Immutable set of selected record IDs, kept in selection order.

    Selection is by ID, not row position, so it survives re-sorting and
    re-paging. Equality ignores order.
    """

    __slots__ = ("_ids", "_members")

    def __init__(self, ids: Iterable[Any] = ()):
        self._ids: Tuple[str, ...] = tuple(dict.fromkeys(str(i) for i in ids))
        self._members = frozenset(self._ids)

    @property
    def ids(self) -> Tuple[str, ...]:
        return self._ids

    def __contains__(self, record_id: Any) -> bool:
        return str(record_id) in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, SelectionSet):
            return self._members == other._members
        if isinstance(other, (set, frozenset)):
            return self._members == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._members)

    def __repr__(self) -> str:
        return f"SelectionSet({list(self._ids)!r})"


def toggle_selection(selection: SelectionSet, record_id: Any, included: bool) -> SelectionSet:
    """Add or remove one ID. Always returns a new SelectionSet."""
    record_id = str(record_id)
    if (record_id in selection) == included:
        return SelectionSet(selection.ids)
    if included:
        return SelectionSet((*selection.ids, record_id))
    return SelectionSet(i for i in selection.ids if i != record_id)


def select_all_visible(
    selection: SelectionSet,
    records: Sequence[Any],
    included: bool,
    config: TableConfig
) -> SelectionSet:
    """Add or remove exactly the IDs of the given records."""
    ids = [config.record_id(record) for record in records]
    if included:
        return SelectionSet((*selection.ids, *ids))
    removed = set(ids)
    return SelectionSet(i for i in selection.ids if i not in removed)


def select_all_targets(view: DerivedView, scope: SelectAllScope) -> Tuple[Any, ...]:
    """Rows the "select all" checkbox acts on for a given scope."""
    if SelectAllScope(scope) is SelectAllScope.FILTERED:
        return view.filtered_records
    return view.visible_records


def is_all_selected(selection: SelectionSet, records: Sequence[Any], config: TableConfig) -> bool:
    """True when every record is selected (False for an empty page)."""
    return bool(records) and all(config.record_id(r) in selection for r in records)


def reconcile_after_mutation(
    selection: SelectionSet,
    records: Sequence[Any],
    config: TableConfig
) -> SelectionSet:
    """Drop selected IDs that no longer exist in the collection."""
    present = {config.record_id(record) for record in records}
    kept = SelectionSet(i for i in selection.ids if i in present)
    if len(kept) != len(selection):
        logger.debug(f"Pruned {len(selection) - len(kept)} stale selected ID(s)")
    return kept


# =============================================================================
# Mutations
# =============================================================================

@dataclass(frozen=True)
class BulkResult:
    """Aggregate outcome of a best-effort bulk operation."""
    succeeded_ids: Tuple[str, ...] = ()
    failed_ids: Tuple[str, ...] = ()
    first_error: Optional[Exception] = None

    @property
    def all_succeeded(self) -> bool:
        return not self.failed_ids

    @property
    def is_partial(self) -> bool:
        return bool(self.succeeded_ids) and bool(self.failed_ids)

    def summary(self, noun: str = "record") -> str:
        """Human-readable count of what happened."""
        done = len(self.succeeded_ids)
        failed = len(self.failed_ids)
        if not failed:
            return f"Deleted {done} {noun}{'s' if done != 1 else ''}"
        if not done:
            return f"Failed to delete {failed} {noun}{'s' if failed != 1 else ''}"
        return f"Deleted {done}, failed to delete {failed} {noun}{'s' if failed != 1 else ''}"


def bulk_delete(selection: Iterable[str], delete_one: Callable[[str], MutationResult]) -> BulkResult:
    """Delete each selected ID with a single-delete collaborator.

    Calls are made sequentially in selection order. The operation is not
    transactional: a failure does not roll back earlier deletions, and the
    result is only built once every call has settled.

    Args:
        selection: IDs to delete
        delete_one: Callable deleting one ID; a call fails when it raises
            or returns an unsuccessful MutationResult

    Returns:
        BulkResult with succeeded and failed IDs and the first error seen
    """
    succeeded: List[str] = []
    failed: List[str] = []
    first_error: Optional[Exception] = None

    for record_id in selection:
        try:
            result = delete_one(record_id)
        except Exception as e:
            logger.error(f"Delete failed for {record_id}: {e}")
            failed.append(record_id)
            first_error = first_error or e
            continue

        if result.success:
            succeeded.append(record_id)
        else:
            logger.error(f"Delete rejected for {record_id}: {result.detail}")
            failed.append(record_id)
            first_error = first_error or RemoteMutationError(result.detail, record_id=record_id)

    return BulkResult(
        succeeded_ids=tuple(succeeded),
        failed_ids=tuple(failed),
        first_error=first_error,
    )


def bulk_delete_many(
    selection: Iterable[str],
    delete_many: Callable[[List[str]], MutationResult]
) -> BulkResult:
    """Delete all selected IDs with one batch call (all or nothing)."""
    ids = list(selection)
    if not ids:
        return BulkResult()
    try:
        result = delete_many(ids)
    except Exception as e:
        logger.error(f"Batch delete of {len(ids)} record(s) failed: {e}")
        return BulkResult(failed_ids=tuple(ids), first_error=e)

    if result.success:
        return BulkResult(succeeded_ids=tuple(ids))
    logger.error(f"Batch delete rejected: {result.detail}")
    return BulkResult(failed_ids=tuple(ids), first_error=RemoteMutationError(result.detail))


def remove_records(records: Sequence[Any], record_ids: Iterable[str], config: TableConfig) -> List[Any]:
    """Return the collection without the given IDs."""
    removed = set(record_ids)
    return [r for r in records if config.record_id(r) not in removed]


def replace_record(records: Sequence[Any], updated: Any, config: TableConfig) -> List[Any]:
    """Return the collection with one record swapped in place."""
    target = config.record_id(updated)
    return [updated if config.record_id(r) == target else r for r in records]
