import pytest

from client.notify import RecordingNotifier
from client.stores import AudioUploadError, MeetingStore, NoteStore, TaskStore, ThoughtStore
from db.supabase import SupabaseError
from fakes import FakeSupabase


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def notes(supabase, notifier):
    return NoteStore(supabase, "user-ana", notifier)


def test_add_prepends_server_row(notes, supabase, notifier):
    notes.items = [{"id": "old", "title": "Antiga"}]

    created = notes.add({"title": " <Nova> ", "content": "texto", "tags": ["A", "a"], "color": "blue"})

    assert created["id"].startswith("notes-")
    assert notes.items[0] == created
    assert created["title"] == "&lt;Nova&gt;"
    assert created["tags"] == ["a"]
    assert created["user_id"] == "user-ana"
    assert notifier.successes == ["Nota criada!"]


def test_update_replaces_item_with_server_row(notes, supabase):
    created = notes.add({"title": "Nota", "content": "v1", "tags": []})

    updated = notes.update(created["id"], {"content": "v2", "pinned": 1})

    assert updated["content"] == "v2"
    assert updated["pinned"] is True
    assert "updated_at" in updated
    assert notes.items == [updated]
    assert supabase.calls[-1][0] == "update"


def test_delete_removes_item(notes):
    created = notes.add({"title": "Nota", "content": "x", "tags": []})
    assert notes.delete(created["id"]) is True
    assert notes.items == []


def test_refresh_uses_sort_order(supabase, notifier):
    tasks = TaskStore(supabase, "user-ana", notifier)
    supabase.tables["tasks"] = [{"id": "t1", "title": "A"}]

    assert tasks.refresh() == [{"id": "t1", "title": "A"}]
    assert supabase.calls[-1] == (
        "select", "tasks", [("completed", True), ("priority", False), ("created_at", False)],
    )
    assert tasks.loading is False


def test_failures_notify_and_keep_state(notifier):
    failing = FakeSupabase(fail_on={"insert", "update", "delete", "select"})
    thoughts = ThoughtStore(failing, "user-ana", notifier)
    thoughts.items = [{"id": "th1", "content": "x"}]

    assert thoughts.add({"content": "novo", "tags": []}) is None
    assert thoughts.update("th1", {"content": "y"}) is None
    assert thoughts.delete("th1") is False
    assert thoughts.refresh() is None

    assert thoughts.items == [{"id": "th1", "content": "x"}]
    assert notifier.errors == [
        "Erro ao salvar pensamento",
        "Erro ao atualizar pensamento",
        "Erro ao excluir pensamento",
        "Erro ao carregar pensamentos",
    ]


def test_invalid_enum_is_rejected_before_write(supabase, notifier):
    tasks = TaskStore(supabase, "user-ana", notifier)
    assert tasks.add({"title": "x", "priority": "urgent"}) is None
    assert not any(call[0] == "insert" for call in supabase.calls)
    assert notifier.errors == ["Erro ao criar tarefa"]


def test_signed_out_store_is_noop(supabase):
    notes = NoteStore(supabase, None)
    assert notes.add({"title": "x"}) is None
    assert notes.delete("x") is False
    assert supabase.calls == []


def test_meeting_sanitization(supabase, notifier):
    meetings = MeetingStore(supabase, "user-ana", notifier)
    created = meetings.add({
        "title": "Sprint <review>",
        "participants": ["  Ana ", "", "B" * 150],
        "transcript": "",
        "duration": "42",
        "status": "draft",
    })
    assert created["title"] == "Sprint &lt;review&gt;"
    assert created["participants"] == ["Ana", "B" * 100]
    assert created["duration"] == 42


def test_upload_audio_returns_signed_url(supabase, notifier, wav_bytes):
    meetings = MeetingStore(supabase, "user-ana", notifier)

    url = meetings.upload_audio(wav_bytes, "m1", "audio/wav")

    assert "audio-recordings/user-ana/m1.wav" in url
    assert "e=86400" in url
    assert supabase.objects["audio-recordings/user-ana/m1.wav"] == wav_bytes


def test_upload_audio_rejects_non_audio(supabase, notifier):
    meetings = MeetingStore(supabase, "user-ana", notifier)
    with pytest.raises(AudioUploadError, match="inválido ou corrompido"):
        meetings.upload_audio(b"<html></html>", "m1", "audio/webm")
    assert notifier.errors == ["Erro ao fazer upload do áudio"]
    assert supabase.objects == {}


def test_upload_audio_backend_error_propagates(notifier, wav_bytes):
    meetings = MeetingStore(FakeSupabase(fail_on={"upload"}), "user-ana", notifier)
    with pytest.raises(SupabaseError):
        meetings.upload_audio(wav_bytes, "m1", "audio/wav")
    assert notifier.errors == ["Erro ao fazer upload do áudio"]


def test_same_record_is_stored_identically(notes, supabase):
    record = {"title": " Plano <Q4> ", "content": "Metas & prazos", "tags": ["Q4", "q4", " Metas "],
              "color": "blue"}

    first = notes.add(dict(record))
    second = notes.add(dict(record))

    inserted = [call[2] for call in supabase.calls if call[0] == "insert"]
    assert inserted[0] == inserted[1]
    assert first["tags"] == second["tags"] == ["q4", "metas"]
    assert notes.sanitize(record) == notes.sanitize(record)


def test_single_string_participant_is_kept_whole(supabase, notifier):
    meetings = MeetingStore(supabase, "user-ana", notifier)
    created = meetings.add({"title": "1:1", "participants": "Ana Souza", "status": "draft"})
    assert created["participants"] == ["Ana Souza"]


def test_single_string_tag_is_kept_whole(notes):
    created = notes.add({"title": "x", "content": "y", "tags": "Trabalho"})
    assert created["tags"] == ["trabalho"]
