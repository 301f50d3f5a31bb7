"""Data table component shared by the contacts and leads pages.

Renders a TableScreen: toolbar (search, type filter, sort, rows per page),
the current page with selection checkboxes, a bulk action bar and the
pagination footer. View parameters are mirrored to the URL query string.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd
import streamlit as st

from frontend.config.settings import config
from frontend.core import (
    ALL_TYPES,
    VIEW_QUERY_PARAMS,
    TableScreen,
    ViewParameters,
    format_sort,
    parse_sort,
)
from frontend.ui.components.confirmation import (
    render_confirmation,
    request_confirmation,
)
from frontend.utils import SessionState

logger = logging.getLogger(__name__)

SELECT_COLUMN = "Select"

_NOTIFY_ICONS = {
    'success': "✅",
    'warning': "⚠️",
    'error': "❌",
    'info': "ℹ️",
}


def clamp_rows_per_page(value: int) -> int:
    """Keep rows per page within the configured bounds."""
    return max(config.MIN_ROWS_PER_PAGE, min(config.MAX_ROWS_PER_PAGE, int(value)))


def default_params(screen_defaults: ViewParameters) -> ViewParameters:
    """Defaults for a screen, with the configured rows per page."""
    return screen_defaults.with_changes(page_size=clamp_rows_per_page(config.DEFAULT_ROWS_PER_PAGE))


def changed_selection(
    current: Mapping[str, bool],
    edited: Mapping[str, bool]
) -> List[Tuple[str, bool]]:
    """Diff checkbox states: (record_id, included) for every flipped row."""
    return [
        (record_id, bool(included))
        for record_id, included in edited.items()
        if bool(current.get(record_id, False)) != bool(included)
    ]


# =============================================================================
# URL sync
# =============================================================================

def sync_params_from_url(screen: TableScreen, view_key: str) -> None:
    """Load view parameters from the query string once per session and view."""
    if not SessionState.consume_query_params(view_key):
        return
    query = {k: st.query_params.get(k) for k in VIEW_QUERY_PARAMS if k in st.query_params}
    if not query:
        return
    params = ViewParameters.from_query_params(query, defaults=screen.params)
    screen.set_params(params.with_changes(page_size=clamp_rows_per_page(params.page_size)))
    logger.debug(f"Loaded {view_key} view parameters from URL: {query}")


def write_params_to_url(params: ViewParameters) -> None:
    """Mirror view parameters to the query string."""
    target = params.to_query_params()
    for key in VIEW_QUERY_PARAMS:
        if key not in target and key in st.query_params:
            del st.query_params[key]
    for key, value in target.items():
        if st.query_params.get(key) != value:
            st.query_params[key] = value


# =============================================================================
# Toolbar
# =============================================================================

def render_toolbar(
    screen: TableScreen,
    key: str,
    filter_options: Sequence[str],
    sort_options: Mapping[str, str],
    filter_label: Callable[[str], str] = str,
) -> None:
    """Render search, type filter, sort and rows-per-page controls.

    Args:
        screen: Table screen to drive
        key: Widget key prefix
        filter_options: Type filter values, without 'all'
        sort_options: Sort value ('name-asc') to display label
        filter_label: Formats a filter value for display
    """
    params = screen.params

    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        search_query = st.text_input(
            "Search",
            value=params.search_query,
            placeholder="Search...",
            key=f"{key}_search",
            label_visibility="collapsed",
        )
    with col2:
        sort_values = list(sort_options)
        current_sort = params.sort if params.sort in sort_options else sort_values[0]
        sort_value = st.selectbox(
            "Sort",
            sort_values,
            index=sort_values.index(current_sort),
            format_func=lambda v: sort_options[v],
            key=f"{key}_sort",
            label_visibility="collapsed",
        )
    with col3:
        size_options = list(config.ROWS_PER_PAGE_OPTIONS)
        if params.page_size not in size_options:
            size_options = sorted(size_options + [params.page_size])
        page_size = st.selectbox(
            "Rows per page",
            size_options,
            index=size_options.index(params.page_size),
            key=f"{key}_rows",
            label_visibility="collapsed",
        )

    filters = [ALL_TYPES] + list(filter_options)
    current_filter = params.type_filter if params.type_filter in filters else ALL_TYPES
    type_filter = st.radio(
        "Filter",
        filters,
        index=filters.index(current_filter),
        format_func=lambda v: "All" if v == ALL_TYPES else filter_label(v),
        horizontal=True,
        key=f"{key}_filter",
        label_visibility="collapsed",
    )

    sort_key, sort_direction = parse_sort(sort_value) or (params.sort_key, params.sort_direction)
    changes: Dict[str, Any] = {}
    if search_query != params.search_query:
        changes['search_query'] = search_query
    if type_filter != params.type_filter:
        changes['type_filter'] = type_filter
    if format_sort(sort_key, sort_direction) != params.sort:
        changes['sort_key'] = sort_key
        changes['sort_direction'] = sort_direction
    if page_size != params.page_size:
        changes['page_size'] = clamp_rows_per_page(page_size)
        changes['page_index'] = 0
    if changes:
        screen.update_params(**changes)


# =============================================================================
# Table body
# =============================================================================

def render_table(
    screen: TableScreen,
    key: str,
    to_row: Callable[[Any], Dict[str, Any]],
    empty_message: str = "No records found",
) -> None:
    """Render the current page with selection checkboxes.

    Args:
        screen: Table screen to render
        key: Widget key prefix
        to_row: Builds the displayed columns of one record
        empty_message: Shown when the filtered set is empty
    """
    view = screen.view
    if view.page_index != screen.params.page_index:
        screen.update_params(page_index=view.page_index)

    if not view.visible_records:
        st.info(empty_message)
        return

    table_config = screen.table_config
    ids = [table_config.record_id(r) for r in view.visible_records]
    selection = screen.selection

    rows = []
    for record_id, record in zip(ids, view.visible_records):
        row = {SELECT_COLUMN: record_id in selection}
        row.update(to_row(record))
        rows.append(row)
    df = pd.DataFrame(rows, index=ids)

    all_selected = screen.all_selected()
    scope_label = "all matching" if table_config.select_all_scope.value == 'filtered' else "page"
    select_all = st.checkbox(
        f"Select {scope_label}",
        value=all_selected,
        key=f"{key}_select_all_{all_selected}",
        disabled=screen.is_mutating,
    )
    if select_all != all_selected:
        screen.select_all(select_all)
        st.rerun()

    # Editor key changes with the selection so it always starts from it
    editor_key = f"{key}_editor_{view.page_index}_{hash(selection)}"
    edited = st.data_editor(
        df,
        key=editor_key,
        hide_index=True,
        width='stretch',
        disabled=True if screen.is_mutating else [c for c in df.columns if c != SELECT_COLUMN],
        column_config={
            SELECT_COLUMN: st.column_config.CheckboxColumn(SELECT_COLUMN, width="small"),
        },
    )

    current = dict(zip(ids, df[SELECT_COLUMN].tolist()))
    flipped = changed_selection(current, dict(zip(ids, edited[SELECT_COLUMN].tolist())))
    if flipped:
        for record_id, included in flipped:
            screen.toggle(record_id, included)
        st.rerun()


def render_pagination(screen: TableScreen, key: str) -> None:
    """Render previous/next buttons and the row range label."""
    view = screen.view
    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("← Previous", key=f"{key}_prev", disabled=not view.has_previous, width='stretch'):
            screen.go_to_page(view.page_index - 1)
            st.rerun()
    with col2:
        st.caption(
            f"{view.range_label(screen.params.page_size)} · "
            f"page {view.page_index + 1} of {view.page_count}"
        )
    with col3:
        if st.button("Next →", key=f"{key}_next", disabled=not view.has_next, width='stretch'):
            screen.go_to_page(view.page_index + 1)
            st.rerun()


def render_bulk_actions(screen: TableScreen, key: str) -> None:
    """Render the bulk action bar for the current selection."""
    count = len(screen.selection)
    if not count:
        return

    confirm_key = f"{key}_bulk_delete"
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        st.markdown(f"**{count} selected**")
    with col2:
        if st.button("Clear selection", key=f"{key}_clear", width='stretch'):
            screen.clear_selection()
            st.rerun()
    with col3:
        if st.button("🗑️ Delete selected", key=f"{key}_delete", type="primary",
                     width='stretch', disabled=screen.is_mutating):
            request_confirmation(confirm_key)
            st.rerun()

    decision = render_confirmation(
        confirm_key,
        f"Delete {count} {screen.noun}(s)? This cannot be undone.",
    )
    if decision:
        with st.spinner(f"Deleting {count} {screen.noun}(s)..."):
            screen.delete_selected()
        st.rerun()
    elif decision is False:
        st.rerun()


def show_notifications(screen: TableScreen) -> None:
    """Flush queued screen notifications as toasts."""
    for note in screen.drain_notifications():
        st.toast(note.message, icon=_NOTIFY_ICONS.get(note.level))


def render_data_table(
    screen: TableScreen,
    key: str,
    to_row: Callable[[Any], Dict[str, Any]],
    filter_options: Sequence[str],
    sort_options: Mapping[str, str],
    filter_label: Callable[[str], str] = str,
    empty_message: Optional[str] = None,
) -> None:
    """Render the full table: toolbar, bulk bar, rows, pagination."""
    sync_params_from_url(screen, key)
    render_toolbar(screen, key, filter_options, sort_options, filter_label)
    render_bulk_actions(screen, key)
    render_table(screen, key, to_row, empty_message or f"No {screen.noun}s found")
    render_pagination(screen, key)
    write_params_to_url(screen.params)
    show_notifications(screen)
