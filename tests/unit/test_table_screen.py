"""
Unit tests for the TableScreen controller.

Tests the screen state machine including:
- Loading and fetch failures
- Stale response discarding
- Bulk delete with partial failure
- Single record mutations
"""
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock

import pytest

from frontend.core.collaborators import MutationResult
from frontend.core.table_screen import BULK_DELETE_BATCH, ScreenState, TableScreen
from frontend.utils.exceptions import MissingScopeError, RemoteFetchError


@pytest.fixture
def screen(fake_gateway, name_table):
    return TableScreen("p1", fake_gateway, name_table, noun="contact")


class TestLoading:
    """Tests for fetch and the request token guard."""

    def test_initial_state_is_idle(self, screen):
        assert screen.state is ScreenState.IDLE
        assert screen.records == ()

    def test_load_populates_records(self, screen, fake_gateway):
        assert screen.load() is True

        assert screen.state is ScreenState.READY
        assert len(screen.records) == 5
        assert fake_gateway.calls == [("fetch", "p1")]

    def test_begin_fetch_enters_loading(self, screen):
        screen.begin_fetch()
        assert screen.is_loading

    def test_stale_result_is_discarded(self, screen, five_records):
        """An older response arriving after a newer fetch never applies."""
        old_token = screen.begin_fetch()
        new_token = screen.begin_fetch()

        assert screen.apply_fetch_result(new_token, five_records[:2]) is True
        assert screen.apply_fetch_result(old_token, five_records) is False

        assert len(screen.records) == 2

    def test_scope_change_makes_in_flight_fetch_stale(self, screen, five_records):
        token = screen.begin_fetch()
        screen.change_scope("p2")

        assert screen.apply_fetch_result(token, five_records) is False
        assert screen.records == ()
        assert screen.state is ScreenState.IDLE

    def test_fetch_failure_gives_empty_ready_state(self, make_gateway, name_table):
        gateway = make_gateway([], fetch_error=RemoteFetchError("HTTP 500"))
        screen = TableScreen("p1", gateway, name_table)

        screen.load()

        assert screen.state is ScreenState.READY
        assert screen.records == ()
        assert isinstance(screen.last_error, RemoteFetchError)
        notes = screen.drain_notifications()
        assert [n.level for n in notes] == ["error"]
        assert screen.drain_notifications() == []

    def test_unexpected_exception_is_wrapped(self, make_gateway, name_table):
        gateway = make_gateway([], fetch_error=ValueError("bad json"))
        screen = TableScreen("p1", gateway, name_table)

        screen.load()

        assert isinstance(screen.last_error, RemoteFetchError)

    def test_missing_scope_fails_without_fetching(self, fake_gateway, name_table):
        screen = TableScreen(None, fake_gateway, name_table)

        screen.load()

        assert isinstance(screen.last_error, MissingScopeError)
        assert fake_gateway.calls == []

    def test_load_in_background(self, screen):
        with ThreadPoolExecutor(max_workers=1) as executor:
            future = screen.load_in_background(executor)
            assert future.result(timeout=5) is True

        assert len(screen.records) == 5

    def test_reload_prunes_selection(self, screen, fake_gateway):
        screen.load()
        screen.toggle("1", True)
        screen.toggle("2", True)
        fake_gateway.records["default"] = [r for r in fake_gateway.records["default"] if r["id"] != 1]

        screen.load()

        assert screen.selection == {"2"}


class TestParamsAndSelection:
    """Tests for view parameters and selection on the screen."""

    def test_view_uses_params(self, screen):
        screen.load()
        screen.update_params(type_filter="manual", page_size=2)

        assert [r["name"] for r in screen.view.visible_records] == ["Alice", "Carl"]

    def test_go_to_page_clamps(self, screen):
        screen.load()
        screen.update_params(page_size=2)

        assert screen.go_to_page(10).page_index == 2
        assert screen.go_to_page(-4).page_index == 0

    def test_toggle_ignores_unknown_ids(self, screen):
        screen.load()
        screen.toggle("404", True)
        assert not screen.selection

    def test_select_all_page_scope(self, screen):
        screen.load()
        screen.update_params(page_size=2)

        screen.select_all(True)

        assert screen.selection == {"1", "2"}
        assert screen.all_selected()

    def test_select_all_filtered_scope(self, screen):
        screen.load()
        screen.update_params(type_filter="manual", page_size=2)

        screen.select_all(True, scope="filtered")

        assert screen.selection == {"1", "3", "4"}

    def test_selected_records_in_collection_order(self, screen):
        screen.load()
        screen.toggle("3", True)
        screen.toggle("1", True)

        assert [r["id"] for r in screen.selected_records()] == [1, 3]


class TestBulkDelete:
    """Tests for TableScreen.delete_selected."""

    def test_partial_failure_keeps_failed_record(self, make_gateway, five_records, name_table):
        gateway = make_gateway(five_records, fail_ids={"2"})
        screen = TableScreen("p1", gateway, name_table, noun="contact")
        screen.load()
        for record_id in ("1", "2", "3"):
            screen.toggle(record_id, True)

        result = screen.delete_selected()

        assert result.succeeded_ids == ("1", "3")
        assert result.failed_ids == ("2",)
        assert [r["id"] for r in screen.records] == [2, 4, 5]
        assert screen.selection == {"2"}
        assert screen.state is ScreenState.READY
        notes = screen.drain_notifications()
        assert notes[-1].level == "warning"
        assert "failed to delete 1" in notes[-1].message

    def test_all_succeed(self, screen):
        screen.load()
        screen.toggle("5", True)

        result = screen.delete_selected()

        assert result.all_succeeded
        assert len(screen.records) == 4
        assert not screen.selection
        assert screen.drain_notifications()[-1].level == "success"

    def test_batch_mode_uses_delete_many(self, make_gateway, five_records, name_table):
        gateway = make_gateway(five_records)
        screen = TableScreen("p1", gateway, name_table, bulk_delete_mode=BULK_DELETE_BATCH)
        screen.load()
        screen.toggle("1", True)
        screen.toggle("4", True)

        screen.delete_selected()

        assert ("delete_many", "p1", ["1", "4"]) in gateway.calls
        assert len(screen.records) == 3

    def test_delete_selected_batch_rejected(self, make_gateway, five_records, name_table):
        """A rejected batch deletes nothing and keeps the selection."""
        gateway = make_gateway(five_records, fail_ids={"4"})
        screen = TableScreen("p1", gateway, name_table)
        screen.load()
        screen.toggle("1", True)
        screen.toggle("4", True)

        result = screen.delete_selected_batch()

        assert result.failed_ids == ("1", "4")
        assert ("delete_many", "p1", ["1", "4"]) in gateway.calls
        assert len(screen.records) == 5
        assert screen.selection == {"1", "4"}

    def test_nothing_selected_returns_none(self, screen):
        screen.load()
        assert screen.delete_selected() is None

    def test_without_scope_notifies(self, fake_gateway, name_table):
        screen = TableScreen(None, fake_gateway, name_table)

        assert screen.delete_selected() is None
        assert screen.drain_notifications()[0].message == "Profile ID is missing"

    def test_in_flight_ids_are_not_deleted_twice(self, screen):
        screen.load()
        screen.toggle("1", True)
        screen._claim(["1"])

        assert screen.delete_selected() is None


class TestSingleMutations:
    """Tests for single record delete, update and create."""

    def test_delete_record(self, screen):
        screen.load()
        screen.toggle("2", True)

        result = screen.delete_record("2")

        assert result.success
        assert "2" not in screen.selection
        assert all(r["id"] != 2 for r in screen.records)

    def test_delete_record_failure_keeps_record(self, make_gateway, five_records, name_table):
        screen = TableScreen("p1", make_gateway(five_records, fail_ids={"2"}), name_table)
        screen.load()

        result = screen.delete_record("2")

        assert not result.success
        assert len(screen.records) == 5
        assert screen.drain_notifications()[-1].level == "error"

    def test_update_with_local_patch(self, screen, fake_gateway):
        screen.load()

        screen.update_record("1", {"name": "Alicia"}, local_update={"name": "Alicia"})

        assert screen.find("1")["name"] == "Alicia"
        assert [c for c in fake_gateway.calls if c[0] == "fetch"] == [("fetch", "p1")]

    def test_update_without_local_patch_reloads(self, screen, fake_gateway):
        screen.load()

        screen.update_record("1", {"name": "Alicia"})

        assert len([c for c in fake_gateway.calls if c[0] == "fetch"]) == 2

    def test_add_record_reloads(self, screen, fake_gateway):
        screen.load()

        result = screen.add_record({"name": "Zoe"})

        assert result.success
        assert ("create_one", "p1", {"name": "Zoe"}) in fake_gateway.calls
        assert len([c for c in fake_gateway.calls if c[0] == "fetch"]) == 2

    def test_gateway_error_becomes_failed_result(self, screen):
        screen.load()
        screen._gateway = MagicMock()
        screen._gateway.update_one.side_effect = RemoteFetchError("down")

        result = screen.update_record("1", {"name": "x"})

        assert result == MutationResult(success=False, error="down")


class TestUnexpectedGatewayErrors:
    """Non-Spinet exceptions from a gateway become failed results."""

    @pytest.fixture
    def broken(self, screen):
        screen.load()
        screen._gateway = MagicMock()
        error = ConnectionError("network down")
        screen._gateway.delete_one.side_effect = error
        screen._gateway.update_one.side_effect = error
        screen._gateway.create_one.side_effect = error
        return screen

    def test_delete_record(self, broken):
        result = broken.delete_record("1")

        assert result == MutationResult(success=False, error="network down")
        assert len(broken.records) == 5
        assert broken.drain_notifications()[-1].level == "error"

    def test_update_record(self, broken):
        result = broken.update_record("1", {"name": "x"}, local_update={"name": "x"})

        assert not result.success
        assert broken.find("1")["name"] == "Alice"
        assert broken.drain_notifications()[-1].level == "error"

    def test_add_record(self, broken):
        result = broken.add_record({"name": "Zoe"})

        assert not result.success
        assert broken.drain_notifications()[-1].level == "error"

    def test_record_id_released_after_error(self, broken):
        broken.delete_record("1")
        broken._gateway.delete_one.side_effect = None
        broken._gateway.delete_one.return_value = MutationResult(success=True)

        assert broken.delete_record("1").success
