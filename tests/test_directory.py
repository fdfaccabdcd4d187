"""Tests for the membership directory."""

import pytest

from engine import DuplicateConnection, MembershipDirectory, NotFound, ValidationError


def test_register_creates_participant_without_groups() -> None:
    directory = MembershipDirectory()

    participant = directory.register("c1", "  Ann ")

    assert participant.connection_id == "c1"
    assert participant.display_name == "Ann"
    assert list(participant.groups) == []
    assert "c1" in directory


def test_register_same_connection_twice_fails() -> None:
    directory = MembershipDirectory()
    directory.register("c1", "Ann")

    with pytest.raises(DuplicateConnection):
        directory.register("c1", "Other")

    assert directory.get("c1").display_name == "Ann"


def test_register_rejects_blank_name() -> None:
    directory = MembershipDirectory()

    with pytest.raises(ValidationError):
        directory.register("c1", "   ")

    assert len(directory) == 0


def test_display_names_need_not_be_unique() -> None:
    directory = MembershipDirectory()
    directory.register("c1", "Sam")
    directory.register("c2", "Sam")

    assert directory.snapshot() == [("c1", "Sam"), ("c2", "Sam")]


def test_unregister_returns_record_then_not_found() -> None:
    directory = MembershipDirectory()
    directory.register("c1", "Ann")
    directory.subscribe("c1", "Friends")

    gone = directory.unregister("c1")

    assert gone.display_name == "Ann"
    assert list(gone.groups) == ["Friends"]
    with pytest.raises(NotFound):
        directory.unregister("c1")


def test_subscribe_is_idempotent() -> None:
    directory = MembershipDirectory()
    directory.register("c1", "Ann")

    for _ in range(3):
        directory.subscribe("c1", "Work")
    directory.subscribe("c1", "Family")

    assert list(directory.get("c1").groups) == ["Work", "Family"]


def test_snapshot_keeps_insertion_order() -> None:
    directory = MembershipDirectory()
    for cid, name in [("b", "Bea"), ("a", "Al"), ("c", "Cy")]:
        directory.register(cid, name)
    directory.unregister("a")

    assert directory.snapshot() == [("b", "Bea"), ("c", "Cy")]
