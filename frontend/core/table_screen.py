"""Screen controller for a record table (contacts, leads).

Owns one record collection for one profile (scope) and drives it through
the engine:

    IDLE -> LOADING -> READY -> MUTATING -> READY

Every fetch takes a monotonically increasing request token. A response
whose token is no longer the latest (the user switched profile or
reloaded meanwhile) is discarded, so a slow request can never overwrite
newer state.

Remote failures never escape: they are logged and queued as
notifications for the page to show.
"""

import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from frontend.core.collaborators import MutationResult, RecordGateway
from frontend.core.table_engine import (
    BulkResult,
    DerivedView,
    SelectAllScope,
    SelectionSet,
    TableConfig,
    ViewParameters,
    bulk_delete,
    bulk_delete_many,
    compute_view,
    is_all_selected,
    reconcile_after_mutation,
    remove_records,
    replace_record,
    select_all_targets,
    select_all_visible,
    toggle_selection,
)
from frontend.utils.exceptions import (
    MissingScopeError,
    RemoteFetchError,
    SpinetError,
    StaleResponseError,
)

logger = logging.getLogger(__name__)

BULK_DELETE_PER_ITEM = "per_item"
BULK_DELETE_BATCH = "batch"


class ScreenState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    MUTATING = "mutating"


@dataclass(frozen=True)
class Notification:
    """A message for the user ('success', 'info', 'warning' or 'error')."""
    level: str
    message: str


def _patched(record: Any, update: Dict[str, Any]) -> Any:
    if hasattr(record, "model_copy"):
        return record.model_copy(update=update)
    return {**record, **update}


class TableScreen:
    """State holder for one table screen instance.

    Args:
        scope_id: Active profile ID owning the collection
        gateway: Remote collaborator for fetch and mutations
        table_config: Engine configuration for this table
        params: Initial view parameters (defaults if omitted)
        noun: Singular record noun used in notifications
        bulk_delete_mode: 'per_item' or 'batch'
    """

    def __init__(
        self,
        scope_id: Optional[str],
        gateway: RecordGateway,
        table_config: TableConfig,
        params: Optional[ViewParameters] = None,
        noun: str = "record",
        bulk_delete_mode: str = BULK_DELETE_PER_ITEM,
    ):
        self._scope_id = scope_id
        self._gateway = gateway
        self.table_config = table_config
        self._params = params or ViewParameters(
            sort_key=table_config.default_sort_key,
            sort_direction=table_config.default_sort_direction,
        )
        self.noun = noun
        self.bulk_delete_mode = bulk_delete_mode

        self._records: Tuple[Any, ...] = ()
        self._selection = SelectionSet()
        self._state = ScreenState.IDLE
        self._request_token = 0
        self._in_flight: frozenset = frozenset()
        self._notifications: List[Notification] = []
        self._lock = threading.RLock()
        self.last_error: Optional[Exception] = None

    # -------------------------------------------------------------------------
    # Read-only state
    # -------------------------------------------------------------------------

    @property
    def scope_id(self) -> Optional[str]:
        return self._scope_id

    @property
    def state(self) -> ScreenState:
        return self._state

    @property
    def params(self) -> ViewParameters:
        return self._params

    @property
    def records(self) -> Tuple[Any, ...]:
        return self._records

    @property
    def selection(self) -> SelectionSet:
        return self._selection

    @property
    def is_loading(self) -> bool:
        return self._state is ScreenState.LOADING

    @property
    def is_mutating(self) -> bool:
        return self._state is ScreenState.MUTATING

    @property
    def view(self) -> DerivedView:
        return compute_view(self._records, self._params, self.table_config)

    def selected_records(self) -> List[Any]:
        """Selected records in collection order."""
        return [r for r in self._records if self.table_config.record_id(r) in self._selection]

    def find(self, record_id: str) -> Optional[Any]:
        for record in self._records:
            if self.table_config.record_id(record) == str(record_id):
                return record
        return None

    # -------------------------------------------------------------------------
    # Notifications
    # -------------------------------------------------------------------------

    def _notify(self, level: str, message: str) -> None:
        with self._lock:
            self._notifications.append(Notification(level, message))

    def drain_notifications(self) -> List[Notification]:
        """Return queued notifications and clear the queue."""
        with self._lock:
            pending, self._notifications = self._notifications, []
        return pending

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def change_scope(self, scope_id: Optional[str]) -> None:
        """Switch to another profile; in-flight fetches become stale."""
        with self._lock:
            if scope_id == self._scope_id:
                return
            logger.debug(f"Scope changed: {self._scope_id} -> {scope_id}")
            self._scope_id = scope_id
            self._request_token += 1
            self._records = ()
            self._selection = SelectionSet()
            self._state = ScreenState.IDLE
            self.last_error = None

    def begin_fetch(self) -> int:
        """Start a fetch and return its request token."""
        with self._lock:
            self._request_token += 1
            self._state = ScreenState.LOADING
            logger.debug(f"Fetch {self._request_token} started for scope {self._scope_id}")
            return self._request_token

    def _check_token(self, token: int) -> None:
        if token != self._request_token:
            raise StaleResponseError(token, self._request_token)

    def apply_fetch_result(self, token: int, records: Sequence[Any]) -> bool:
        """Apply a fetched collection unless a newer fetch superseded it.

        Returns:
            True if applied, False if discarded as stale
        """
        with self._lock:
            try:
                self._check_token(token)
            except StaleResponseError as e:
                logger.debug(str(e))
                return False

            self._records = tuple(records)
            self._selection = reconcile_after_mutation(self._selection, self._records, self.table_config)
            self._state = ScreenState.READY
            self.last_error = None
            logger.debug(f"Fetch {token} applied: {len(self._records)} {self.noun}(s)")
            return True

    def apply_fetch_failure(self, token: int, error: Exception) -> bool:
        """Record a failed fetch: empty collection plus an error notification."""
        with self._lock:
            try:
                self._check_token(token)
            except StaleResponseError as e:
                logger.debug(str(e))
                return False

            logger.error(f"Failed to load {self.noun}s for scope {self._scope_id}: {error}")
            self._records = ()
            self._selection = SelectionSet()
            self._state = ScreenState.READY
            self.last_error = error
            self._notify("error", f"Could not load {self.noun}s. {error}")
            return True

    def _fetch_and_apply(self, token: int, scope_id: Optional[str]) -> bool:
        if not scope_id:
            return self.apply_fetch_failure(token, MissingScopeError())
        try:
            records = self._gateway.fetch_records(scope_id)
        except Exception as e:
            error = e if isinstance(e, SpinetError) else RemoteFetchError(str(e))
            return self.apply_fetch_failure(token, error)
        return self.apply_fetch_result(token, records)

    def load(self) -> bool:
        """Fetch the collection synchronously.

        Returns:
            True if the result (or failure) was applied
        """
        token = self.begin_fetch()
        return self._fetch_and_apply(token, self._scope_id)

    def load_in_background(self, executor: Executor) -> Future:
        """Fetch the collection on an executor.

        The returned future resolves to True once the result has been
        applied, or False if it was discarded as stale.
        """
        token = self.begin_fetch()
        return executor.submit(self._fetch_and_apply, token, self._scope_id)

    # -------------------------------------------------------------------------
    # View parameters
    # -------------------------------------------------------------------------

    def update_params(self, **changes: Any) -> ViewParameters:
        """Replace view parameters (raises InvalidParameterError on bad values)."""
        with self._lock:
            self._params = self._params.with_changes(**changes)
            return self._params

    def set_params(self, params: ViewParameters) -> None:
        with self._lock:
            self._params = params

    def go_to_page(self, page_index: int) -> ViewParameters:
        page_index = max(0, min(page_index, self.view.page_count - 1))
        return self.update_params(page_index=page_index)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def toggle(self, record_id: str, included: bool) -> SelectionSet:
        with self._lock:
            self._selection = reconcile_after_mutation(
                toggle_selection(self._selection, record_id, included),
                self._records,
                self.table_config,
            )
            return self._selection

    def select_all(self, included: bool, scope: Optional[SelectAllScope] = None) -> SelectionSet:
        """Select or clear the rows covered by the "select all" scope."""
        scope = scope or self.table_config.select_all_scope
        with self._lock:
            targets = select_all_targets(self.view, scope)
            self._selection = select_all_visible(self._selection, targets, included, self.table_config)
            return self._selection

    def all_selected(self, scope: Optional[SelectAllScope] = None) -> bool:
        scope = scope or self.table_config.select_all_scope
        return is_all_selected(self._selection, select_all_targets(self.view, scope), self.table_config)

    def clear_selection(self) -> None:
        with self._lock:
            self._selection = SelectionSet()

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def _claim(self, record_ids: Sequence[str]) -> List[str]:
        """Mark IDs as in flight and return those not already being mutated."""
        with self._lock:
            claimed = [i for i in record_ids if i not in self._in_flight]
            if claimed:
                self._in_flight = self._in_flight | set(claimed)
                self._state = ScreenState.MUTATING
            return claimed

    def _release(self, record_ids: Sequence[str]) -> None:
        with self._lock:
            self._in_flight = self._in_flight - set(record_ids)
            if not self._in_flight and self._state is ScreenState.MUTATING:
                self._state = ScreenState.READY

    def _require_scope(self) -> Optional[str]:
        if not self._scope_id:
            self._notify("error", MissingScopeError().message)
        return self._scope_id

    def delete_selected(self, mode: Optional[str] = None) -> Optional[BulkResult]:
        """Delete every selected record (best effort).

        Succeeded records are removed locally, failed ones stay in the
        collection and stay selected so the user can retry.

        Args:
            mode: 'per_item' or 'batch', defaults to the screen's bulk_delete_mode

        Returns:
            BulkResult, or None if there was nothing to delete
        """
        scope_id = self._require_scope()
        if not scope_id:
            return None

        targets = self._claim(list(self._selection))
        if not targets:
            logger.debug("Bulk delete skipped: nothing selected or already in flight")
            return None

        logger.info(f"Deleting {len(targets)} {self.noun}(s) from scope {scope_id}")
        try:
            if (mode or self.bulk_delete_mode) == BULK_DELETE_BATCH:
                result = bulk_delete_many(targets, lambda ids: self._gateway.delete_many(scope_id, ids))
            else:
                result = bulk_delete(targets, lambda rid: self._gateway.delete_one(scope_id, rid))
        finally:
            self._release(targets)

        self._apply_deletions(scope_id, result.succeeded_ids)

        if result.all_succeeded:
            self._notify("success", result.summary(self.noun))
        elif result.is_partial:
            self._notify("warning", result.summary(self.noun))
        else:
            self.last_error = result.first_error
            self._notify("error", result.summary(self.noun))
        return result

    def delete_selected_batch(self) -> Optional[BulkResult]:
        """Delete the selection with a single delete_many call."""
        return self.delete_selected(mode=BULK_DELETE_BATCH)

    def _apply_deletions(self, scope_id: str, record_ids: Sequence[str]) -> None:
        with self._lock:
            if scope_id != self._scope_id:
                return
            self._records = tuple(remove_records(self._records, record_ids, self.table_config))
            self._selection = reconcile_after_mutation(self._selection, self._records, self.table_config)

    def delete_record(self, record_id: str) -> Optional[MutationResult]:
        """Delete a single record."""
        scope_id = self._require_scope()
        if not scope_id:
            return None
        if not self._claim([record_id]):
            return None

        try:
            result = self._gateway.delete_one(scope_id, record_id)
        except Exception as e:
            logger.error(f"Error deleting {self.noun} {record_id}: {e}")
            result = MutationResult(success=False, error=str(e))
        finally:
            self._release([record_id])

        if result.success:
            self._apply_deletions(scope_id, [record_id])
            self._notify("success", f"{self.noun.capitalize()} deleted successfully")
        else:
            logger.error(f"Failed to delete {self.noun} {record_id}: {result.detail}")
            self._notify("error", f"Failed to delete {self.noun}. {result.detail}")
        return result

    def update_record(
        self,
        record_id: str,
        patch: Dict[str, Any],
        local_update: Optional[Dict[str, Any]] = None
    ) -> Optional[MutationResult]:
        """Send a patch for one record.

        Args:
            record_id: Record to update
            patch: Payload for the remote collaborator
            local_update: Field updates to apply to the local copy on
                success; when omitted the collection is reloaded instead
        """
        scope_id = self._require_scope()
        if not scope_id:
            return None
        if not self._claim([record_id]):
            return None

        try:
            result = self._gateway.update_one(scope_id, record_id, patch)
        except Exception as e:
            logger.error(f"Error updating {self.noun} {record_id}: {e}")
            result = MutationResult(success=False, error=str(e))
        finally:
            self._release([record_id])

        if not result.success:
            logger.error(f"Failed to update {self.noun} {record_id}: {result.detail}")
            self._notify("error", f"Failed to update {self.noun}. {result.detail}")
            return result

        self._notify("success", f"{self.noun.capitalize()} updated successfully")
        current = self.find(record_id)
        if local_update is not None and current is not None:
            with self._lock:
                if scope_id == self._scope_id:
                    self._records = tuple(
                        replace_record(self._records, _patched(current, local_update), self.table_config)
                    )
        else:
            self.load()
        return result

    def add_record(self, payload: Any) -> Optional[MutationResult]:
        """Create a record and reload so the server-assigned ID shows up."""
        scope_id = self._require_scope()
        if not scope_id:
            return None

        try:
            result = self._gateway.create_one(scope_id, payload)
        except Exception as e:
            logger.error(f"Error adding {self.noun}: {e}")
            result = MutationResult(success=False, error=str(e))

        if result.success:
            self._notify("success", f"{self.noun.capitalize()} added successfully")
            self.load()
        else:
            logger.error(f"Failed to add {self.noun}: {result.detail}")
            self._notify("error", f"Failed to add {self.noun}. {result.detail}")
        return result
