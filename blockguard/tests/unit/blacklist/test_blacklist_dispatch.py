"""
Unit tests for BlacklistDispatcher.

Tests the three host entry points, the destroy-hook polarity on left-click, the
permissive no-blacklist state, and atomic reload.
"""

import threading
from unittest.mock import Mock

import pytest
from structlog.testing import capture_logs

from blockguard.blacklist.dispatch import BlacklistDispatcher
from blockguard.blacklist.models import ActionKind

RULES = """
[tnt,46]
on-right=demolition
ignore-groups=admins

[flint_and_steel]
on-left=trusted

[1,2,3]
on-destroy=builders
"""


class TestNoBlacklist:
    """Without an index every entry point lets the action through."""

    @pytest.mark.parametrize("text", ["", "; only a comment\n# and another\n"])
    def test_entry_points_never_suppress(self, text, make_dispatcher, guest, audit_sink, tracker):
        dispatcher = make_dispatcher(text)

        assert dispatcher.is_configured is False
        assert dispatcher.on_right_click_attempt(guest, None, None, 46) is False
        assert dispatcher.on_left_click_attempt(guest, 259, 1) is False
        dispatcher.on_disconnect(guest)
        audit_sink.write.assert_not_called()
        assert tracker.get_snapshot() == {}


class TestRightClick:
    def test_unlisted_item_not_suppressed(self, make_dispatcher, guest):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_right_click_attempt(guest, None, None, 999) is False

    def test_non_member_suppressed_and_audited(self, make_dispatcher, guest, audit_sink, tracker):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_right_click_attempt(guest, "placed", "clicked", 46) is True

        audit_sink.write.assert_called_once()
        record = audit_sink.write.call_args[0][0]
        assert (record.actor, record.identifier, record.action) == ("Wilbur", 46, ActionKind.RIGHT_CLICK)
        assert tracker.strikes("Wilbur", 46, ActionKind.RIGHT_CLICK) == 1

    def test_exempt_group_not_suppressed(self, make_dispatcher, admin, audit_sink):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_right_click_attempt(admin, None, None, 46) is False
        audit_sink.write.assert_not_called()

    def test_only_right_click_hook_consulted(self, make_dispatcher, guest):
        """Test a left-click rule on the held item does not affect right-clicks."""
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_right_click_attempt(guest, None, None, 259) is False


class TestLeftClick:
    def test_held_item_left_click_denied(self, make_dispatcher, guest, audit_sink, tracker):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_left_click_attempt(guest, 259, 999) is True
        assert audit_sink.write.call_args[0][0].action is ActionKind.LEFT_CLICK
        assert tracker.strikes("Wilbur", action=ActionKind.LEFT_CLICK) == 1

    def test_held_item_denial_short_circuits_block_check(self, make_dispatcher, guest, audit_sink):
        """Test the block's destroy hook is not evaluated once the held item is denied."""
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_left_click_attempt(guest, 259, 1) is True
        audit_sink.write.assert_called_once()

    def test_destroy_denied_for_non_member(self, make_dispatcher, guest, audit_sink, tracker):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_left_click_attempt(guest, 0, 2) is True
        record = audit_sink.write.call_args[0][0]
        assert (record.identifier, record.action) == (2, ActionKind.DESTROY)
        assert tracker.strikes("Wilbur", 2, ActionKind.DESTROY) == 1

    def test_destroy_allowed_for_member(self, make_dispatcher, builder, audit_sink):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_left_click_attempt(builder, 0, 2) is False
        audit_sink.write.assert_not_called()

    @pytest.mark.parametrize(("destroy_allowed", "suppressed"), [(True, False), (False, True)])
    def test_destroy_result_is_read_as_allowed(self, resolver, guest, destroy_allowed, suppressed):
        """Test a block entry reporting destroy allowed lets the click through."""
        block_entry = Mock()
        block_entry.evaluate_destroy.return_value = destroy_allowed
        dispatcher = BlacklistDispatcher(resolver, audit=Mock(), index={2: block_entry})

        assert dispatcher.on_left_click_attempt(guest, 0, 2) is suppressed
        block_entry.evaluate_destroy.assert_called_once()

    def test_aliases_evaluate_identically(self, make_dispatcher, guest, builder):
        dispatcher = make_dispatcher(RULES)

        for identifier in (1, 2, 3):
            assert dispatcher.on_left_click_attempt(guest, 0, identifier) is True
            assert dispatcher.on_left_click_attempt(builder, 0, identifier) is False

    def test_unlisted_item_and_block(self, make_dispatcher, guest):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_left_click_attempt(guest, 999, 998) is False

    def test_right_click_rule_does_not_block_left_click(self, make_dispatcher, guest):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.on_left_click_attempt(guest, 46, 999) is False


class TestDisconnect:
    def test_disconnect_forgets_strikes(self, make_dispatcher, guest, tracker):
        dispatcher = make_dispatcher(RULES)
        dispatcher.on_right_click_attempt(guest, None, None, 46)
        assert tracker.strikes("Wilbur") == 1

        dispatcher.on_disconnect(guest)

        assert tracker.strikes("Wilbur") == 0

    def test_disconnect_calls_forget_with_actor_name(self, resolver, guest):
        actor_state = Mock()
        dispatcher = BlacklistDispatcher(resolver, audit=Mock(), actor_state=actor_state)

        dispatcher.on_disconnect(guest)

        actor_state.forget.assert_called_once_with("Wilbur")

    def test_disconnect_without_actor_state(self, resolver, guest):
        dispatcher = BlacklistDispatcher(resolver, audit=Mock())

        dispatcher.on_disconnect(guest)


class TestReload:
    def test_reload_replaces_rules(self, make_dispatcher, guest):
        dispatcher = make_dispatcher(RULES)
        old_index = dispatcher.index

        assert dispatcher.reload("[999]\non-right=nobody\n") is True

        assert dispatcher.index is not old_index
        assert dispatcher.on_right_click_attempt(guest, None, None, 46) is False
        assert dispatcher.on_right_click_attempt(guest, None, None, 999) is True

    def test_reload_with_empty_text_becomes_permissive(self, make_dispatcher, guest):
        dispatcher = make_dispatcher(RULES)

        assert dispatcher.reload("") is True

        assert dispatcher.is_configured is False
        assert dispatcher.on_right_click_attempt(guest, None, None, 46) is False

    def test_reload_from_path(self, make_dispatcher, guest, tmp_path):
        path = tmp_path / "blacklist.txt"
        path.write_text("[46]\non-right=demolition\n", encoding="utf-8")
        dispatcher = make_dispatcher("")

        assert dispatcher.reload_from_path(path) is True
        assert dispatcher.on_right_click_attempt(guest, None, None, 46) is True

    def test_missing_file_keeps_previous_index(self, make_dispatcher, tmp_path):
        dispatcher = make_dispatcher(RULES)
        old_index = dispatcher.index

        with capture_logs() as logs:
            assert dispatcher.reload_from_path(tmp_path / "gone.txt") is False

        assert dispatcher.index is old_index
        warnings = [entry for entry in logs if entry["log_level"] == "warning"]
        assert len(warnings) == 1
        assert warnings[0]["event"] == "Could not load blacklist, keeping previous rules"
        assert warnings[0]["reason"] == "missing"
        assert warnings[0]["previous_configured"] is True

    def test_missing_file_with_no_prior_index_stays_permissive(self, make_dispatcher, guest, tmp_path):
        dispatcher = make_dispatcher("")

        assert dispatcher.reload_from_path(tmp_path / "gone.txt") is False
        assert dispatcher.is_configured is False
        assert dispatcher.on_left_click_attempt(guest, 1, 1) is False

    def test_query_sees_one_index_while_reload_swaps(self, make_dispatcher, guest):
        """Test a left-click that consults two identifiers reads a single snapshot."""
        dispatcher = make_dispatcher("[259]\non-left=trusted\n")
        published = []

        def evaluate_and_reload(identifier, actor, *, audit=None):
            # Publish rules that would block the target block while the query is running.
            dispatcher.reload("[2]\non-destroy=builders\n")
            published.append(dispatcher.index)
            return True

        dispatcher._index = _PatchedIndex(dispatcher.index, 259, evaluate_and_reload)  # pylint: disable=protected-access

        assert dispatcher.on_left_click_attempt(guest, 259, 2) is False
        assert len(published) == 1
        assert 2 in published[0]
        assert dispatcher.on_left_click_attempt(guest, 0, 2) is True

    def test_concurrent_reloads_and_queries(self, make_dispatcher, guest):
        """Test every query observes either the old or the new rules in full."""
        old_rules = "[1,2]\non-destroy=builders\n"
        new_rules = "[1,2]\non-destroy=nobody\n[3]\non-destroy=builders\n"
        dispatcher = make_dispatcher(old_rules)
        errors = []
        stop = threading.Event()

        def reloader():
            for i in range(200):
                dispatcher.reload(new_rules if i % 2 else old_rules)
            stop.set()

        def querier():
            while not stop.is_set():
                index = dispatcher.index
                identifiers = set(index)
                if identifiers not in ({1, 2}, {1, 2, 3}):
                    errors.append(identifiers)
                if index[1] is not index[2]:
                    errors.append("aliases split")

        threads = [threading.Thread(target=reloader), threading.Thread(target=querier)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert errors == []


class _PatchedIndex:
    """Index wrapper that substitutes the rule entry for one identifier."""

    def __init__(self, index, identifier, evaluate_left_click):
        self._index = index
        self._identifier = identifier
        self._entry = Mock(evaluate_left_click=evaluate_left_click)

    def get(self, identifier):
        if identifier == self._identifier:
            return self._entry
        return self._index.get(identifier)
