"""Tests des transitions d'état du tableau de bord (sans Qt)."""

import pytest

from bookdash.services.dashboard_state import (
    DashboardState,
    EditBuffer,
    FetchStatus,
    begin_edit,
    begin_fetch,
    clamp_page,
    edit_field,
    entry_to_draft,
    fetch_failed,
    fetch_succeeded,
    first_page,
    go_to_page,
    initial_state,
    last_page,
    needs_fetch,
    next_page,
    page_window,
    parse_rating,
    parse_year,
    previous_page,
    save_edit,
    set_page_size,
    set_search_query,
    split_subjects,
    total_pages,
)
from bookdash.services.types import NOT_AVAILABLE, CatalogEntry, PageResult


def _entry(i: int, **overrides) -> CatalogEntry:
    values = dict(
        key=f"/works/OL{i}W",
        title=f"Book {i}",
        first_publish_year=1950 + i,
        ratings_average=4.0,
        subject=("Science fiction", "Robots"),
        author_key=f"/authors/OL{i}A",
        author_name=f"Author {i}",
        author_birth_date="1920",
        author_top_work="Top work",
    )
    values.update(overrides)
    return CatalogEntry(**values)


def _loaded(state: DashboardState, entries=(), total_count=0) -> DashboardState:
    """Simule un chargement réussi à partir de `state`."""
    state = begin_fetch(state)
    return fetch_succeeded(state, state.epoch, PageResult(tuple(entries), total_count))


# --- Pagination ---


@pytest.mark.parametrize(
    "total, size, expected",
    [(0, 10, 0), (-5, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (47, 10, 5), (1000, 100, 10)],
)
def test_total_pages(total, size, expected):
    assert total_pages(total, size) == expected


def test_last_page_of_47_results():
    state = _loaded(DashboardState(), total_count=47)

    state = last_page(state)

    assert state.page == 5
    assert state.total_pages == 5
    assert state.can_go_back
    assert not state.can_go_forward


def test_first_page_disables_backward_navigation():
    state = _loaded(DashboardState(), total_count=47)
    assert not state.can_go_back
    assert state.can_go_forward


def test_navigation_is_clamped():
    state = _loaded(DashboardState(), total_count=47)

    assert previous_page(state).page == 1
    assert next_page(last_page(state)).page == 5
    assert go_to_page(state, 99).page == 5
    assert go_to_page(state, -3).page == 1
    assert first_page(go_to_page(state, 3)).page == 1
    assert next_page(state).page == 2


def test_empty_catalog_stays_on_page_one():
    state = _loaded(DashboardState(), total_count=0)

    for move in (first_page, previous_page, next_page, last_page):
        assert move(state).page == 1
    assert not state.can_go_back
    assert not state.can_go_forward
    assert list(state.page_window) == []


@pytest.mark.parametrize("page, pages", [(1, 0), (0, 5), (3, 5), (9, 5)])
def test_clamp_page_range(page, pages):
    assert 1 <= clamp_page(page, pages) <= max(1, pages)


@pytest.mark.parametrize(
    "page, pages, expected",
    [
        (1, 10, [1, 2, 3, 4, 5]),
        (2, 10, [1, 2, 3, 4, 5]),
        (5, 10, [3, 4, 5, 6, 7]),
        (10, 10, [8, 9, 10]),
        (1, 2, [1, 2]),
    ],
)
def test_page_window(page, pages, expected):
    assert list(page_window(page, pages)) == expected


def test_page_window_never_exceeds_five_buttons():
    for pages in range(0, 30):
        for page in range(1, max(pages, 1) + 1):
            window = page_window(page, pages)
            assert len(window) <= 5
            assert all(1 <= n <= pages for n in window)


# --- Taille de page et recherche ---


def test_page_size_change_resets_page():
    state = go_to_page(_loaded(DashboardState(), total_count=500), 4)
    assert state.page == 4

    state = set_page_size(state, 50)

    assert state.page_size == 50
    assert state.page == 1


@pytest.mark.parametrize("size", [0, 20, 25, 1000])
def test_unsupported_page_size_is_rejected(size):
    with pytest.raises(ValueError):
        set_page_size(DashboardState(), size)
    with pytest.raises(ValueError):
        initial_state(size)


def test_search_keeps_current_page_and_raw_text():
    state = go_to_page(_loaded(DashboardState(), total_count=500), 3)

    state = set_search_query(state, "  Asimov ")

    assert state.search_query == "  Asimov "
    assert state.page == 3


def test_needs_fetch_only_for_page_size_or_search():
    state = _loaded(DashboardState(), [_entry(0)], total_count=47)

    assert needs_fetch(state, next_page(state))
    assert needs_fetch(state, set_page_size(state, 50))
    assert needs_fetch(state, set_search_query(state, "le guin"))
    assert not needs_fetch(state, begin_edit(state, 0))
    assert not needs_fetch(state, set_page_size(state, 10))


# --- Cycle de chargement ---


def test_begin_fetch_clears_error_and_bumps_epoch():
    state = begin_fetch(DashboardState())
    state = fetch_failed(state, state.epoch, "boom")

    state = begin_fetch(state)

    assert state.status == FetchStatus.LOADING
    assert state.error is None
    assert state.epoch == 2


def test_fetch_success_replaces_entries_and_total():
    state = _loaded(DashboardState(), [_entry(0), _entry(1)], total_count=2)

    assert state.status == FetchStatus.READY
    assert [e.title for e in state.entries] == ["Book 0", "Book 1"]
    assert state.total_count == 2


def test_stale_result_is_ignored():
    state = begin_fetch(DashboardState())
    stale_epoch = state.epoch
    state = begin_fetch(state)

    after = fetch_succeeded(state, stale_epoch, PageResult((_entry(9),), 99))
    assert after is state

    after = fetch_failed(state, stale_epoch, "late failure")
    assert after is state


def test_out_of_order_completion_keeps_latest_page():
    state = begin_fetch(DashboardState())
    first_epoch = state.epoch
    state = begin_fetch(state)
    latest_epoch = state.epoch

    state = fetch_succeeded(state, latest_epoch, PageResult((_entry(2),), 30))
    state = fetch_succeeded(state, first_epoch, PageResult((_entry(1),), 10))

    assert [e.title for e in state.entries] == ["Book 2"]
    assert state.total_count == 30


def test_failure_clears_entries_and_edit():
    state = begin_edit(_loaded(DashboardState(), [_entry(0)], total_count=1), 0)
    state = begin_fetch(state)

    state = fetch_failed(state, state.epoch, "500 Server Error")

    assert state.status == FetchStatus.FAILED
    assert state.error == "500 Server Error"
    assert state.entries == ()
    assert state.edit is None


def test_new_page_discards_open_edit():
    state = begin_edit(_loaded(DashboardState(), [_entry(0)], total_count=47), 0)
    state = edit_field(state, "title", "Unsaved")

    state = _loaded(next_page(state), [_entry(10)], total_count=47)

    assert state.edit is None
    assert state.entries[0].title == "Book 10"


# --- Édition en ligne ---


def test_begin_edit_copies_row_as_text():
    entry = _entry(0, first_publish_year=None, ratings_average=NOT_AVAILABLE)
    state = begin_edit(_loaded(DashboardState(), [entry], total_count=1), 0)

    assert state.edit == EditBuffer(row=0, draft=entry_to_draft(entry))
    assert state.edit.draft["subject"] == "Science fiction, Robots"
    assert state.edit.draft["first_publish_year"] == ""
    assert state.edit.draft["ratings_average"] == "N/A"


def test_begin_edit_out_of_range():
    state = _loaded(DashboardState(), [_entry(0)], total_count=1)
    with pytest.raises(IndexError):
        begin_edit(state, 1)
    with pytest.raises(IndexError):
        begin_edit(state, -1)


def test_second_begin_edit_replaces_first():
    state = _loaded(DashboardState(), [_entry(0), _entry(1)], total_count=2)
    state = edit_field(begin_edit(state, 0), "title", "Discarded")

    state = begin_edit(state, 1)

    assert state.edit.row == 1
    assert state.edit.draft["title"] == "Book 1"
    assert state.entries[0].title == "Book 0"


def test_edit_then_save_updates_row():
    state = _loaded(DashboardState(), [_entry(0), _entry(1)], total_count=2)
    state = begin_edit(state, 1)
    for name, value in {
        "title": "The Left Hand of Darkness",
        "author_name": "Ursula K. Le Guin",
        "ratings_average": "4.5",
        "first_publish_year": "1969",
        "subject": "a, b, c",
        "author_birth_date": "21 October 1929",
        "author_top_work": "A Wizard of Earthsea",
    }.items():
        state = edit_field(state, name, value)

    state = save_edit(state)

    assert state.edit is None
    saved = state.entries[1]
    assert saved.title == "The Left Hand of Darkness"
    assert saved.author_name == "Ursula K. Le Guin"
    assert saved.ratings_average == 4.5
    assert saved.first_publish_year == 1969
    assert saved.subject == ("a", "b", "c")
    assert saved.author_birth_date == "21 October 1929"
    assert saved.author_top_work == "A Wizard of Earthsea"
    # Champs non éditables et autres lignes inchangés
    assert saved.key == "/works/OL1W"
    assert state.entries[0] == _entry(0)


def test_save_without_changes_keeps_row():
    entry = _entry(0)
    state = begin_edit(_loaded(DashboardState(), [entry], total_count=1), 0)

    state = save_edit(state)

    assert state.entries[0] == entry


def test_save_without_changes_keeps_missing_values():
    """Les champs absents (None, N/A, aucun sujet) survivent à une sauvegarde sans saisie."""
    entry = _entry(
        0,
        first_publish_year=None,
        ratings_average=NOT_AVAILABLE,
        subject=(),
        author_name=None,
        author_birth_date=None,
        author_top_work=None,
    )
    state = begin_edit(_loaded(DashboardState(), [entry], total_count=1), 0)

    state = save_edit(state)

    assert state.entries[0] == entry


def test_cleared_author_field_becomes_missing():
    state = begin_edit(_loaded(DashboardState(), [_entry(0)], total_count=1), 0)
    state = save_edit(edit_field(state, "author_top_work", ""))

    assert state.entries[0].author_top_work is None


def test_saved_subjects_are_truncated():
    state = begin_edit(_loaded(DashboardState(), [_entry(0)], total_count=1), 0)
    state = save_edit(edit_field(state, "subject", "a, b, , c, d"))

    assert state.entries[0].subject == ("a", "b", "c")


def test_edit_field_rejects_unknown_field():
    state = begin_edit(_loaded(DashboardState(), [_entry(0)], total_count=1), 0)
    with pytest.raises(ValueError):
        edit_field(state, "key", "/works/X")


def test_edit_and_save_without_open_edit_are_noops():
    state = _loaded(DashboardState(), [_entry(0)], total_count=1)

    assert edit_field(state, "title", "x") is state
    assert save_edit(state) is state


def test_edit_does_not_trigger_fetch_or_touch_other_state():
    state = _loaded(DashboardState(), [_entry(0)], total_count=1)
    edited = edit_field(begin_edit(state, 0), "title", "New")

    assert edited.fetch_key == state.fetch_key
    assert edited.epoch == state.epoch
    assert edited.entries is state.entries


# --- Conversions ---


@pytest.mark.parametrize(
    "text, expected",
    [("4", 4), ("4.25", 4.25), (" 3.5 ", 3.5), ("", NOT_AVAILABLE), ("great", NOT_AVAILABLE)],
)
def test_parse_rating(text, expected):
    assert parse_rating(text) == expected


@pytest.mark.parametrize(
    "text, expected", [("1951", 1951), ("", None), ("  ", None), ("circa 1950", "circa 1950")]
)
def test_parse_year(text, expected):
    assert parse_year(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("a, b, c", ("a", "b", "c")),
        ("a,b", ("a", "b")),
        ("", ()),
        (" , ,", ()),
        ("a, b, c, d, e", ("a", "b", "c")),
    ],
)
def test_split_subjects(text, expected):
    assert split_subjects(text) == expected
