"""Tests for the BlockGuard exception hierarchy."""

from blockguard.exceptions import BlacklistLoadError, BlockGuardError


def test_base_error_to_dict():
    error = BlockGuardError("something broke", details={"key": "value"})

    data = error.to_dict()

    assert data["error_type"] == "BlockGuardError"
    assert data["message"] == "something broke"
    assert data["details"] == {"key": "value"}
    assert "timestamp" in data
    assert str(error) == "something broke"


def test_mark_logged():
    error = BlockGuardError("something broke")
    assert error.already_logged is False

    error.mark_logged()

    assert error.already_logged is True


def test_load_error_carries_path_and_reason():
    error = BlacklistLoadError("missing", path="blacklist.txt", reason="missing")

    assert isinstance(error, BlockGuardError)
    assert error.path == "blacklist.txt"
    assert error.reason == "missing"
    assert error.to_dict()["details"] == {"path": "blacklist.txt", "reason": "missing"}


def test_load_error_default_reason():
    assert BlacklistLoadError("bad", path="x.txt").reason == "unreadable"
