"""Tests for scopes and the per-connection outbound queue."""

import pytest

from models import Connection, Scope
from utilities import CONNECTION_QUEUE_SIZE


@pytest.mark.parametrize("raw", [None, "", "all"])
def test_parse_global_scope(raw) -> None:
    scope = Scope.parse(raw)

    assert scope.is_global
    assert scope.wire == "all"
    assert scope == Scope.everyone()


def test_parse_group_scope() -> None:
    scope = Scope.parse("Friends")

    assert not scope.is_global
    assert scope.group_name == "Friends"
    assert scope.wire == "Friends"
    assert scope != Scope.everyone()


def test_reserved_name_is_not_a_group_scope() -> None:
    with pytest.raises(ValueError):
        Scope.group("all")


def test_offer_keeps_order() -> None:
    conn = Connection("c1")

    conn.offer({"type": "a"})
    conn.offer({"type": "b"})

    assert [e["type"] for e in conn.drain()] == ["a", "b"]
    assert conn.drain() == []


def test_offer_on_full_queue_drops_oldest_and_flags_slow_consumer() -> None:
    conn = Connection("c1")
    for n in range(CONNECTION_QUEUE_SIZE):
        conn.offer({"type": "event", "n": n})

    conn.offer({"type": "event", "n": "last"})

    events = conn.drain()
    assert len(events) == CONNECTION_QUEUE_SIZE
    assert events[0]["n"] == 2
    assert events[-2]["type"] == "error"
    assert events[-2]["error"]["code"] == "SLOW_CONSUMER"
    assert events[-1]["n"] == "last"
    assert conn.dropped == 2


def test_offer_after_disconnect_is_ignored() -> None:
    conn = Connection("c1")
    conn.connected = False

    conn.offer({"type": "a"})

    assert conn.drain() == []
