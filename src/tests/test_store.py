from __future__ import annotations

import pytest

from newsfeed_tui.datamodels import Article, Page
from newsfeed_tui.store import FeedStore


def _page(number, *titles):
    return Page(
        articles=tuple(Article(t, "2020-01-01T00:00:00Z", f"http://x/{t}") for t in titles),
        page_number=number,
    )


@pytest.fixture
def store():
    return FeedStore()


def test_initial_state(store):
    assert store.items == []
    assert store.requested_page == 1
    assert not store.is_loading
    assert store.filter_section is None


def test_first_page_replaces(store):
    store.apply_page(_page(1, "A", "B"), was_first_page=True)
    store.apply_page(_page(1, "C"), was_first_page=True)
    assert [a.title for a in store.items] == ["C"]
    assert store.requested_page == 2


def test_pagination_appends_in_order(store):
    store.apply_page(_page(1, "A", "B"), was_first_page=True)
    store.apply_page(_page(2, "C"), was_first_page=False)
    store.apply_page(_page(3, "D", "E", "F"), was_first_page=False)
    assert [a.title for a in store.items] == ["A", "B", "C", "D", "E", "F"]
    assert len(store.items) == 2 + 1 + 3
    assert store.requested_page == 4


def test_requested_page_follows_server(store):
    store.apply_page(_page(7, "A"), was_first_page=False)
    assert store.requested_page == 8


def test_duplicates_across_pages_are_kept(store):
    store.apply_page(_page(1, "A"), was_first_page=True)
    store.apply_page(_page(2, "A"), was_first_page=False)
    assert len(store.items) == 2


def test_reset_is_idempotent(store):
    store.apply_page(_page(2, "A"), was_first_page=True)
    store.reset()
    once = (list(store.items), store.requested_page)
    store.reset()
    assert (list(store.items), store.requested_page) == once == ([], 1)


def test_reset_bumps_generation(store):
    before = store.generation
    store.reset()
    assert store.generation == before + 1


def test_apply_failure_keeps_state(store):
    store.apply_page(_page(1, "A"), was_first_page=True)
    store.apply_failure()
    assert [a.title for a in store.items] == ["A"]
    assert store.requested_page == 2


def test_mark_loading(store):
    store.mark_loading(True)
    assert store.is_loading
    store.mark_loading(False)
    assert not store.is_loading


def test_set_filter_resets_only_on_change(store):
    store.apply_page(_page(1, "A"), was_first_page=True)
    assert store.set_filter("sport")
    assert store.items == []
    assert store.requested_page == 1

    store.apply_page(_page(1, "B"), was_first_page=True)
    assert not store.set_filter("sport")
    assert [a.title for a in store.items] == ["B"]

    assert store.set_filter("")
    assert store.filter_section is None


def test_snapshot_is_a_copy(store):
    store.apply_page(_page(1, "A"), was_first_page=True)
    snap = store.snapshot()
    store.apply_page(_page(2, "B"), was_first_page=False)
    assert [a.title for a in snap.items] == ["A"]
    assert snap.requested_page == 2
