"""
Unit tests for the tabular data engine.

Tests view computation including:
- Type filter and free-text search
- Sorting (text, numeric, collection order)
- Pagination and page clamping
- Purity of compute_view
"""
import copy

import pytest

from frontend.core.table_engine import (
    ALL_TYPES,
    SORT_DESC,
    TableConfig,
    ViewParameters,
    collection_order,
    compute_view,
    format_sort,
    number_sort,
    parse_sort,
    resolve_field,
    text_sort,
)
from frontend.models.schemas import Contact
from frontend.utils.exceptions import InvalidParameterError


def _names(view):
    return [r["name"] for r in view.visible_records]


class TestScenarios:
    """The two reference scenarios over five records."""

    def test_manual_filter_name_asc_page_size_two(self, five_records, name_table):
        """Manual filter, name ascending, 2 per page: first page is Alice, Carl."""
        params = ViewParameters(type_filter="manual", sort_key="name", page_index=0, page_size=2)

        view = compute_view(five_records, params, name_table)

        assert _names(view) == ["Alice", "Carl"]
        assert view.total_filtered_count == 3
        assert view.page_count == 2

    def test_search_ar_matches_only_carl(self, five_records, name_table):
        """Substring search 'ar' only matches Carl."""
        params = ViewParameters(search_query="ar")

        view = compute_view(five_records, params, name_table)

        assert _names(view) == ["Carl"]
        assert view.total_filtered_count == 1

    def test_second_page_of_manual_filter(self, five_records, name_table):
        """The last page holds the remaining record."""
        params = ViewParameters(type_filter="manual", page_index=1, page_size=2)

        view = compute_view(five_records, params, name_table)

        assert _names(view) == ["Dina"]
        assert view.range_label(2) == "3-3 of 3"


class TestFiltering:
    """Tests for type filter and search."""

    def test_all_filter_keeps_everything(self, five_records, name_table):
        view = compute_view(five_records, ViewParameters(type_filter=ALL_TYPES), name_table)
        assert view.total_filtered_count == 5

    def test_unknown_type_gives_empty_view(self, five_records, name_table):
        view = compute_view(five_records, ViewParameters(type_filter="phone"), name_table)

        assert view.visible_records == ()
        assert view.total_filtered_count == 0
        assert view.page_count == 1

    def test_search_is_case_insensitive_and_trimmed(self, five_records, name_table):
        view = compute_view(five_records, ViewParameters(search_query="  ALI "), name_table)
        assert _names(view) == ["Alice"]

    def test_search_and_filter_combine(self, five_records, name_table):
        """Search 'e' within scan records: Eve only (Bob has no 'e')."""
        view = compute_view(five_records, ViewParameters(search_query="e", type_filter="scan"), name_table)
        assert _names(view) == ["Eve"]

    def test_every_visible_record_matches(self, five_records, name_table):
        """Filter correctness: every visible record satisfies both predicates."""
        params = ViewParameters(search_query="a", type_filter="manual", page_size=50)
        view = compute_view(five_records, params, name_table)

        for record in view.visible_records:
            assert record["type"] == "manual"
            assert "a" in record["name"].casefold()

    def test_search_over_nested_and_list_fields(self):
        """Search reads dotted paths and joins list values."""
        config = TableConfig(search_fields=("profile.company", "tags"))
        records = [
            {"id": "a", "profile": {"company": "Acme"}, "tags": ["red"]},
            {"id": "b", "profile": None, "tags": ["blue", "green"]},
        ]

        assert [r["id"] for r in compute_view(records, ViewParameters(search_query="acme"), config).visible_records] == ["a"]
        assert [r["id"] for r in compute_view(records, ViewParameters(search_query="green"), config).visible_records] == ["b"]


class TestSorting:
    """Tests for sort specs and direction."""

    def test_name_desc(self, five_records, name_table):
        params = ViewParameters(sort_key="name", sort_direction=SORT_DESC, page_size=5)
        assert _names(compute_view(five_records, params, name_table)) == ["Eve", "Dina", "Carl", "Bob", "Alice"]

    def test_date_asc_is_collection_order(self, name_table):
        records = [{"id": i, "name": n} for i, n in enumerate(["Zed", "Amy", "Kim"])]
        params = ViewParameters(sort_key="date", page_size=5)

        assert _names(compute_view(records, params, name_table)) == ["Zed", "Amy", "Kim"]

    def test_date_desc_reverses_collection_order(self, name_table):
        records = [{"id": i, "name": n} for i, n in enumerate(["Zed", "Amy", "Kim"])]
        params = ViewParameters(sort_key="date", sort_direction=SORT_DESC, page_size=5)

        assert _names(compute_view(records, params, name_table)) == ["Kim", "Amy", "Zed"]

    def test_sort_is_stable_for_ties(self, name_table):
        records = [
            {"id": 1, "name": "sam"},
            {"id": 2, "name": "Sam"},
            {"id": 3, "name": "SAM"},
        ]
        view = compute_view(records, ViewParameters(page_size=5), name_table)
        assert [r["id"] for r in view.visible_records] == [1, 2, 3]

    def test_unknown_sort_key_uses_default(self, five_records, name_table):
        params = ViewParameters(sort_key="nonexistent", sort_direction=SORT_DESC, page_size=5)
        # Falls back to the default sort and its direction (name ascending)
        assert _names(compute_view(five_records, params, name_table))[0] == "Alice"

    def test_number_sort_puts_missing_lowest(self):
        config = TableConfig(sorts={"amount": number_sort("amount")}, default_sort_key="amount")
        records = [
            {"id": "a", "name": "A", "amount": 50},
            {"id": "b", "name": "B", "amount": None},
            {"id": "c", "name": "C", "amount": 10.5},
        ]
        view = compute_view(records, ViewParameters(sort_key="amount", page_size=5), config)
        assert [r["id"] for r in view.visible_records] == ["b", "c", "a"]

    def test_text_sort_on_models(self, contact_payload):
        """Sorting reads nested attributes on pydantic models."""
        second = copy.deepcopy(contact_payload)
        second["_id"] = "c2"
        second["Profile"]["fullName"] = "aaron Blake"
        contacts = [Contact.model_validate(contact_payload), Contact.model_validate(second)]
        config = TableConfig(sorts={"name": text_sort("profile.full_name")})

        view = compute_view(contacts, ViewParameters(page_size=5), config)
        assert [c.id for c in view.visible_records] == ["c2", "c1"]


class TestPagination:
    """Tests for the pagination window."""

    @pytest.mark.parametrize("page_size", [1, 2, 3, 5, 7])
    def test_pages_cover_filtered_set_exactly_once(self, five_records, name_table, page_size):
        """Concatenating every page gives the full sorted, filtered set."""
        first = compute_view(five_records, ViewParameters(page_size=page_size), name_table)
        seen = []
        for page_index in range(first.page_count):
            view = compute_view(
                five_records, ViewParameters(page_size=page_size, page_index=page_index), name_table
            )
            assert len(view.visible_records) <= page_size
            seen.extend(_names(view))

        assert seen == ["Alice", "Bob", "Carl", "Dina", "Eve"]

    def test_page_past_end_clamps_to_last_page(self, five_records, name_table):
        view = compute_view(five_records, ViewParameters(page_index=9, page_size=2), name_table)

        assert view.page_index == 2
        assert _names(view) == ["Eve"]
        assert view.has_previous
        assert not view.has_next

    def test_range_label_on_empty_view(self, name_table):
        view = compute_view([], ViewParameters(), name_table)
        assert view.range_label(10) == "0 of 0"


class TestPurity:
    """compute_view never mutates its input and is deterministic."""

    def test_input_not_mutated(self, five_records, name_table):
        before = copy.deepcopy(five_records)
        compute_view(five_records, ViewParameters(sort_key="name", sort_direction=SORT_DESC), name_table)
        assert five_records == before

    def test_same_inputs_same_output(self, five_records, name_table):
        params = ViewParameters(search_query="a", page_size=2)
        assert compute_view(five_records, params, name_table) == compute_view(five_records, params, name_table)


class TestHelpers:
    """Tests for field resolution and sort tokens."""

    def test_resolve_field_missing_path_is_none(self):
        assert resolve_field({"a": {"b": 1}}, "a.c") is None
        assert resolve_field({"a": None}, "a.b") is None

    def test_resolve_field_on_attributes(self, contact_payload):
        contact = Contact.model_validate(contact_payload)
        assert resolve_field(contact, "profile.company_name") == "Acme"

    @pytest.mark.parametrize("token,expected", [
        ("name-asc", ("name", "asc")),
        ("date-desc", ("date", "desc")),
        ("amount", ("amount", "asc")),
        ("offer-sent", ("offer-sent", "asc")),
        ("", None),
        (None, None),
    ])
    def test_parse_sort(self, token, expected):
        assert parse_sort(token) == expected

    def test_format_sort_inverts_parse(self):
        assert format_sort(*parse_sort("name-desc")) == "name-desc"

    def test_record_without_id_raises(self, name_table):
        with pytest.raises(InvalidParameterError):
            name_table.record_id({"name": "No id"})

    def test_collection_order_has_no_key(self):
        assert collection_order().key is None
