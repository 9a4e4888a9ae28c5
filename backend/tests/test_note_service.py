import pytest

from notes_api.errors import ApplicationError, ErrorKind
from notes_api.services.note_service import NOTE_TITLE_IS_NOT_FREE


def test_groceries_scenario(note_service):
    note_id = note_service.create_note(1, "Groceries", "milk, eggs")
    assert note_id > 0

    with pytest.raises(ApplicationError) as exc:
        note_service.create_note(1, "Groceries", "bread")
    assert exc.value.kind == ErrorKind.VALIDATION
    assert exc.value.message == NOTE_TITLE_IS_NOT_FREE

    assert note_service.create_note(2, "Groceries", "milk, eggs") > 0


def test_create_note_validation_error_saves_nothing(note_service, repo):
    with pytest.raises(ApplicationError) as exc:
        note_service.create_note(1, "title", "content", ["a", "b", "c", "d"])
    assert exc.value.kind == ErrorKind.VALIDATION
    assert repo.saved == []


def test_update_note_overwrites_only_text_and_tags(note_service, folder_service, repo):
    folder_id = folder_service.create_folder(1, "F")
    note_id = note_service.create_note(1, "t1", "c1", ["old"])
    note_service.move_to_folder(1, note_id, folder_id)
    note_service.add_to_favorites(1, note_id)

    note_service.update_note(1, note_id, "t2", "c2", ["new", "tags"])

    note = repo.notes[note_id]
    assert (note.title, note.content, note.tags) == ("t2", "c2", ["new", "tags"])
    assert note.is_favorite is True
    assert note.folder_id == folder_id
    assert note.user_id == 1


def test_update_note_without_tags_clears_them(note_service, repo):
    note_id = note_service.create_note(1, "t", "c", ["x"])
    note_service.update_note(1, note_id, "t", "c")
    assert repo.notes[note_id].tags == []


def test_update_note_duplicate_title(note_service, repo):
    note_service.create_note(1, "first", "c")
    second = note_service.create_note(1, "second", "c")

    with pytest.raises(ApplicationError) as exc:
        note_service.update_note(1, second, "first", "c")
    assert exc.value.kind == ErrorKind.VALIDATION
    assert repo.notes[second].title == "second"


def test_update_foreign_note_is_not_found(note_service, repo):
    note_id = note_service.create_note(1, "mine", "secret")

    with pytest.raises(ApplicationError) as exc:
        note_service.update_note(2, note_id, "hacked", "hacked")
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert repo.notes[note_id].content == "secret"


def test_delete_note_is_idempotent(note_service, repo):
    note_id = note_service.create_note(1, "t", "c")

    note_service.delete_note(1, note_id)
    note_service.delete_note(1, note_id)

    assert note_id not in repo.notes
    assert len(repo.deleted) == 1


def test_delete_foreign_note_is_silent_noop(note_service, repo):
    note_id = note_service.create_note(1, "t", "c")
    note_service.delete_note(2, note_id)
    assert note_id in repo.notes
    assert repo.deleted == []


def test_favorites_roundtrip(note_service, repo):
    note_id = note_service.create_note(1, "t", "c")

    note_service.add_to_favorites(1, note_id)
    assert repo.notes[note_id].is_favorite is True

    note_service.delete_from_favorites(1, note_id)
    assert repo.notes[note_id].is_favorite is False


def test_favorite_missing_note_is_not_found(note_service):
    with pytest.raises(ApplicationError) as exc:
        note_service.add_to_favorites(1, 404)
    assert exc.value.kind == ErrorKind.NOT_FOUND

    with pytest.raises(ApplicationError) as exc:
        note_service.delete_from_favorites(1, 404)
    assert exc.value.kind == ErrorKind.NOT_FOUND


def test_move_to_folder_and_back(note_service, folder_service, repo):
    folder_id = folder_service.create_folder(1, "F")
    note_id = note_service.create_note(1, "t", "c")

    note_service.move_to_folder(1, note_id, folder_id)
    assert repo.notes[note_id].folder_id == folder_id

    note_service.move_to_folder(1, note_id, None)
    assert repo.notes[note_id].folder_id is None


def test_move_to_missing_folder_leaves_note_unchanged(note_service, folder_service, repo):
    folder_id = folder_service.create_folder(1, "F")
    note_id = note_service.create_note(1, "t", "c")
    note_service.move_to_folder(1, note_id, folder_id)

    with pytest.raises(ApplicationError) as exc:
        note_service.move_to_folder(1, note_id, 999)
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert repo.notes[note_id].folder_id == folder_id


def test_move_to_foreign_folder_is_not_found(note_service, folder_service, repo):
    other_folder = folder_service.create_folder(2, "theirs")
    note_id = note_service.create_note(1, "t", "c")

    with pytest.raises(ApplicationError) as exc:
        note_service.move_to_folder(1, note_id, other_folder)
    assert exc.value.kind == ErrorKind.NOT_FOUND
    assert repo.notes[note_id].folder_id is None


def test_move_foreign_note_is_not_found(note_service, folder_service):
    folder_id = folder_service.create_folder(2, "F")
    note_id = note_service.create_note(1, "t", "c")

    with pytest.raises(ApplicationError) as exc:
        note_service.move_to_folder(2, note_id, folder_id)
    assert exc.value.kind == ErrorKind.NOT_FOUND


def test_empty_query_returns_all_notes_in_order(note_service, repo):
    for i in range(3):
        note_service.create_note(1, f"n{i}", "content")
    note_service.create_note(2, "other", "content")

    found = note_service.find_notes_by_query_phrase(1, "")
    assert [n.id for n in found] == [n.id for n in repo.get_notes_by_user_id(1)]
    assert [n.title for n in found] == ["n0", "n1", "n2"]


def test_query_matches_title_content_or_exact_tag(note_service):
    note_service.create_note(1, "Shopping list", "milk")
    note_service.create_note(1, "Diary", "went shopping today")
    note_service.create_note(1, "Ideas", "nothing", ["shop"])
    note_service.create_note(1, "Misc", "nothing", ["shopping-cart"])

    titles = [n.title for n in note_service.find_notes_by_query_phrase(1, "shop")]
    # "Shopping list" misses: substring match is case-sensitive
    assert titles == ["Diary", "Ideas"]


def test_query_does_not_leak_other_users_notes(note_service):
    note_service.create_note(2, "secret", "secret")
    assert note_service.find_notes_by_query_phrase(1, "secret") == []


def test_get_favorite_notes(note_service):
    a = note_service.create_note(1, "a", "c")
    note_service.create_note(1, "b", "c")
    c = note_service.create_note(1, "c", "c")
    note_service.add_to_favorites(1, a)
    note_service.add_to_favorites(1, c)

    assert [n.id for n in note_service.get_favorite_notes(1)] == [a, c]
    assert note_service.get_favorite_notes(2) == []


def test_get_note_is_scoped(note_service):
    note_id = note_service.create_note(1, "t", "c")
    assert note_service.get_note(1, note_id).title == "t"

    with pytest.raises(ApplicationError) as exc:
        note_service.get_note(2, note_id)
    assert exc.value.kind == ErrorKind.NOT_FOUND
