"""Tests for the session table."""

import pytest

from mcp_boilerplate.errors import SessionLookupError
from mcp_boilerplate.sessions import SessionTable


@pytest.fixture
def table():
    return SessionTable()


def test_open_and_get(table):
    """Test a registered session can be looked up."""
    handle = object()
    table.open("s1", handle)
    assert table.get("s1") is handle
    assert "s1" in table
    assert len(table) == 1


def test_n_connects_give_n_entries(table):
    """Test one entry per connect event."""
    for i in range(5):
        table.open(f"s{i}", object())
    assert len(table) == 5
    assert sorted(table.ids()) == [f"s{i}" for i in range(5)]


def test_close_removes_exactly_one(table):
    """Test a disconnect removes only the matching entry."""
    table.open("a", object())
    table.open("b", object())

    assert table.close("a") is True
    assert table.ids() == ["b"]


def test_close_is_idempotent(table):
    """Test closing an absent session is a no-op."""
    table.open("a", object())
    table.close("a")

    assert table.close("a") is False
    assert table.close("never-existed") is False
    assert len(table) == 0


def test_duplicate_open_rejected(table):
    """Test at most one live entry per session id."""
    first = object()
    table.open("a", first)
    with pytest.raises(ValueError):
        table.open("a", object())
    assert table.get("a") is first


def test_reopen_after_close(table):
    """Test an id can be reused once its session is gone."""
    table.open("a", object())
    table.close("a")
    handle = object()
    table.open("a", handle)
    assert table.get("a") is handle


@pytest.mark.parametrize("session_id", ["unknown", "", None])
def test_lookup_of_absent_session(table, session_id):
    """Test lookups for absent ids raise without touching the table."""
    table.open("a", object())
    with pytest.raises(SessionLookupError) as exc_info:
        table.get(session_id)
    assert exc_info.value.session_id == session_id
    assert table.ids() == ["a"]


def test_lookup_after_close(table):
    """Test a closed session can no longer be routed to."""
    table.open("a", object())
    table.close("a")
    with pytest.raises(SessionLookupError):
        table.get("a")
