"""
Shared test fixtures for Spinet tests.
"""
import pytest

from frontend.core.collaborators import MutationResult
from frontend.core.table_engine import SelectAllScope, TableConfig, collection_order, text_sort


class FakeGateway:
    """In-memory RecordGateway that records every call."""

    def __init__(self, records=None, fail_ids=(), fetch_error=None):
        self.records = {} if records is None else {"default": list(records)}
        self.fail_ids = set(fail_ids)
        self.fetch_error = fetch_error
        self.calls = []

    def fetch_records(self, scope_id):
        self.calls.append(("fetch", scope_id))
        if self.fetch_error is not None:
            raise self.fetch_error
        return list(self.records.get(scope_id, self.records.get("default", [])))

    def delete_one(self, scope_id, record_id):
        self.calls.append(("delete_one", scope_id, record_id))
        if record_id in self.fail_ids:
            return MutationResult(success=False, error=f"Cannot delete {record_id}")
        return MutationResult(success=True, message="Deleted")

    def delete_many(self, scope_id, record_ids):
        self.calls.append(("delete_many", scope_id, list(record_ids)))
        if self.fail_ids & set(record_ids):
            return MutationResult(success=False, error="Batch rejected")
        return MutationResult(success=True, message="Deleted")

    def update_one(self, scope_id, record_id, patch):
        self.calls.append(("update_one", scope_id, record_id, patch))
        if record_id in self.fail_ids:
            return MutationResult(success=False, error="Update rejected")
        return MutationResult(success=True, message="Updated")

    def create_one(self, scope_id, payload):
        self.calls.append(("create_one", scope_id, payload))
        return MutationResult(success=True, message="Created")


@pytest.fixture
def five_records():
    """The five-record collection used by the view scenarios."""
    return [
        {"id": 1, "type": "manual", "name": "Alice"},
        {"id": 2, "type": "scan", "name": "Bob"},
        {"id": 3, "type": "manual", "name": "Carl"},
        {"id": 4, "type": "manual", "name": "Dina"},
        {"id": 5, "type": "scan", "name": "Eve"},
    ]


@pytest.fixture
def name_table():
    """Table config over plain dict records with a name and a type."""
    return TableConfig(
        type_field="type",
        search_fields=("name",),
        sorts={
            "name": text_sort("name", "Name"),
            "date": collection_order("Date added"),
        },
        default_sort_key="name",
        select_all_scope=SelectAllScope.PAGE,
    )


@pytest.fixture
def make_gateway():
    """Factory for in-memory gateways."""
    return FakeGateway


@pytest.fixture
def fake_gateway(five_records):
    return FakeGateway(five_records)


@pytest.fixture
def contact_payload():
    """A contact as the backend returns it."""
    return {
        "_id": "c1",
        "name": "Alice Martin",
        "type": "manual",
        "Profile": {
            "fullName": "Alice Martin",
            "companyName": "Acme",
            "position": "CTO",
            "email": "alice@acme.io",
            "links": [{"title": "Site", "link": "https://acme.io"}],
        },
        "leadCaptions": {"metIn": "Paris", "tags": ["vip", "tech"]},
    }


@pytest.fixture
def lead_payload():
    """A lead as the backend returns it."""
    return {
        "_id": "l1",
        "name": "Website redesign",
        "description": "Full redesign",
        "Contacts": ["c1"],
        "mainContact": "c1",
        "amount": 1200.5,
        "status": "negotiation",
        "priority": "high",
        "lifeTime": {"begins": "2024-01-01", "ends": "2024-03-01"},
        "Tags": ["web"],
        "notes": [{"_id": "n1", "content": "Call back", "date": "2024-01-05"}],
    }
