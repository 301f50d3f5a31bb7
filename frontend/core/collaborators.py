"""Boundary contracts between the table engine and the outside world.

The engine and screen controller only talk to record sources through
these types, so they do not care whether a gateway hits HTTP, a local
mock or a test double.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence


@dataclass
class MutationResult:
    """Standardized result of a create, update or delete call."""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    data: Optional[dict] = None

    @property
    def detail(self) -> str:
        """Best human-readable description of the outcome."""
        if self.success:
            return self.message or "OK"
        return self.error or self.message or "Unknown error"


class RecordGateway(Protocol):
    """Remote collaborator owning one record collection per scope."""

    def fetch_records(self, scope_id: str) -> List[Any]:
        """Return the record collection for a scope.

        Raises:
            RemoteFetchError: If the collection could not be loaded
        """
        ...

    def delete_one(self, scope_id: str, record_id: str) -> MutationResult:
        ...

    def delete_many(self, scope_id: str, record_ids: Sequence[str]) -> MutationResult:
        ...

    def update_one(self, scope_id: str, record_id: str, patch: Dict[str, Any]) -> MutationResult:
        ...

    def create_one(self, scope_id: str, payload: Any) -> MutationResult:
        ...
