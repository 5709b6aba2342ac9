import pytest
from domain.entities.note import UNTITLED_NOTE, Note
from domain.entities.search import NoteListCriteria, PaginationMetadata
from domain.services.note_service import NoteService


def test_create_new_starts_with_empty_share_set():
    note = Note.create_new("U1", "alice@example.com", "  Plan ", "# Q1 goals")

    assert note.owner_id == "U1"
    assert note.owner_email == "alice@example.com"
    assert note.title == "Plan"
    assert note.shared_with_ids == []
    assert note.created_at is not None


def test_create_new_allows_missing_title_and_content():
    note = Note.create_new("U1", "alice@example.com", "   ", None)

    assert note.title is None
    assert note.content is None
    assert note.display_title == UNTITLED_NOTE


@pytest.mark.parametrize("owner_id, owner_email", [("", "a@example.com"), ("U1", " ")])
def test_create_new_requires_owner(owner_id, owner_email):
    with pytest.raises(ValueError):
        Note.create_new(owner_id, owner_email, "t", "c")


@pytest.mark.parametrize(
    "query, expected",
    [
        (None, True),
        ("", True),
        ("   ", True),
        ("plan", True),
        ("PLAN", True),
        ("q1 GOALS", True),
        ("budget", False),
    ],
)
def test_matches_text_search_is_case_insensitive(query, expected):
    note = Note.create_new("U1", "alice@example.com", "Plan", "# Q1 goals")

    assert note.matches_text_search(query) is expected


def test_matches_text_search_ignores_missing_fields():
    note = Note.create_new("U1", "alice@example.com", None, "groceries")

    assert note.matches_text_search("groc")
    assert not note.matches_text_search("plan")


def test_filter_notes_keeps_order():
    first = Note.create_new("U1", "a@example.com", "Plan A", None)
    second = Note.create_new("U1", "a@example.com", "Shopping", "plan the week")
    third = Note.create_new("U1", "a@example.com", "Other", None)

    assert NoteService.filter_notes([first, second, third], "plan") == [first, second]
    assert NoteService.filter_notes([first, second, third], "") == [
        first,
        second,
        third,
    ]


def test_pagination_metadata():
    pagination = PaginationMetadata.calculate(
        current_page=2, total_notes=31, notes_per_page=15
    )

    assert pagination.total_pages == 3
    assert pagination.has_next
    assert pagination.has_previous

    empty = PaginationMetadata.calculate(1, 0, 15)
    assert empty.total_pages == 1
    assert not empty.has_next


@pytest.mark.parametrize("page, limit", [(0, 15), (1, 0), (1, 101)])
def test_list_criteria_validates_pagination(page, limit):
    with pytest.raises(ValueError):
        NoteListCriteria(user_id="U1", page=page, limit=limit)


def test_list_criteria_blank_query_is_no_query():
    criteria = NoteListCriteria(user_id="U1", query="   ")

    assert criteria.query is None
    assert not criteria.has_text_search()
