"""Tests for the content store."""

import pytest

from engine import ContentStore, GroupRegistry, NotFound, ValidationError
from models import Scope


def _store() -> ContentStore:
    return ContentStore(GroupRegistry(["G1", "G2"]))


def test_publish_allocates_unique_increasing_ids() -> None:
    store = _store()

    ids = [store.publish("Ann", Scope.everyone(), "", None).id for _ in range(20)]

    assert len(set(ids)) == 20
    assert ids == sorted(ids)


def test_publish_records_metadata() -> None:
    store = _store()

    item = store.publish("Ann", Scope.group("G1"), None, "/uploads/a.png")

    assert item.author == "Ann"
    assert item.caption == ""
    assert item.asset_ref == "/uploads/a.png"
    assert item.timestamp
    assert item.to_dict()["scope"] == "G1"
    assert item.comments == []


def test_scope_cannot_be_reassigned() -> None:
    item = _store().publish("Ann", Scope.everyone())

    with pytest.raises(AttributeError):
        item.scope = Scope.group("G1")


def test_feed_for_mixed_scopes_round_trip() -> None:
    store = _store()
    scopes = ["all", "G1", "all", "G2", "G1", "all", "Unknown"]
    items = [store.publish("Ann", Scope.parse(s), f"#{n}") for n, s in enumerate(scopes)]

    everyone = store.feed_for(Scope.everyone())
    g1 = store.feed_for(Scope.group("G1"))

    assert [i.caption for i in everyone] == ["#0", "#2", "#5"]
    assert [i.caption for i in g1] == ["#1", "#4"]
    assert [i.id for i in store.feed_for(Scope.group("G2"))] == [items[3].id]
    # recorded even though no group carries it
    assert store.get(items[6].id).scope == Scope.group("Unknown")
    assert len(store) == 7


def test_feed_for_unknown_group_not_found() -> None:
    with pytest.raises(NotFound):
        _store().feed_for(Scope.group("Nope"))


def test_add_comment_appends_in_order() -> None:
    store = _store()
    item = store.publish("Ann", Scope.group("G2"))

    first = store.add_comment(item.id, "Bo", "nice")
    store.add_comment(item.id, "Cy", "agreed")

    assert first.author == "Bo"
    assert first.timestamp
    assert [c.text for c in item.comments] == ["nice", "agreed"]
    assert item.to_dict()["comments"][1] == item.comments[1].to_dict()


def test_add_comment_unknown_item_not_found() -> None:
    with pytest.raises(NotFound):
        _store().add_comment(12345, "Bo", "hello?")


def test_add_comment_requires_text() -> None:
    store = _store()
    item = store.publish("Ann", Scope.everyone())

    with pytest.raises(ValidationError):
        store.add_comment(item.id, "Bo", " ")

    assert item.comments == []
