import json

import pytest

from processing.smart_content import SmartContentError, parse_smart_content


def test_parse_note_with_defaults():
    fields = parse_smart_content("note", '{"title": "Ideia", "content": "App de receitas", "tags": ["app"]}')
    assert fields == {
        "title": "Ideia",
        "content": "App de receitas",
        "tags": ["app"],
        "color": "yellow",
        "pinned": False,
    }


def test_parse_task_strips_code_fence_and_fixes_priority():
    raw = '```json\n{"title": "Relatorio", "description": "- revisar", "priority": "urgent"}\n```'
    fields = parse_smart_content("task", raw)
    assert fields["title"] == "Relatorio"
    assert fields["priority"] == "medium"
    assert fields["completed"] is False


def test_parse_thought_keeps_valid_mood_and_unsets_unknown():
    assert parse_smart_content("thought", '{"content": "x", "mood": "positive"}')["mood"] == "positive"
    assert parse_smart_content("thought", '{"content": "x", "mood": "ecstatic"}')["mood"] is None


@pytest.mark.parametrize(
    "raw",
    [
        "Aqui está sua nota: {title: sem aspas}",
        '["not", "an", "object"]',
        "",
    ],
)
def test_malformed_provider_output_raises(raw):
    with pytest.raises(SmartContentError):
        parse_smart_content("note", raw)


def test_unknown_content_type_raises():
    with pytest.raises(SmartContentError):
        parse_smart_content("poem", "{}")


@pytest.mark.parametrize("value, expected", [(True, True), (False, False), ("false", False), ("true", False), (1, False)])
def test_task_completed_accepts_only_booleans(value, expected):
    raw = json.dumps({"title": "x", "completed": value})
    assert parse_smart_content("task", raw)["completed"] is expected
