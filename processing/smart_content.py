import json
import re

CONTENT_TYPES = ("note", "task", "thought")
NOTE_COLORS = ("yellow", "blue", "green", "pink", "purple", "orange")
PRIORITIES = ("low", "medium", "high")
MOODS = ("positive", "neutral", "negative")

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class SmartContentError(ValueError):
    pass


def parse_smart_content(content_type: str, raw: str) -> dict:
    """Converte a resposta JSON do modelo em campos do registro correspondente.

    Levanta SmartContentError quando a resposta nao e um objeto JSON valido.
    Valores fora dos enums sao substituidos pelo padrao do tipo.
    """
    if content_type not in CONTENT_TYPES:
        raise SmartContentError(f"Tipo de conteudo invalido: {content_type}")
    if not isinstance(raw, str) or not raw.strip():
        raise SmartContentError("Resposta vazia do modelo")

    text = raw.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SmartContentError(f"JSON invalido na resposta do modelo: {e}") from e
    if not isinstance(data, dict):
        raise SmartContentError("A resposta do modelo nao e um objeto JSON")

    tags = data.get("tags") or []
    if not isinstance(tags, list):
        tags = [tags]
    tags = [str(tag) for tag in tags]

    if content_type == "note":
        color = data.get("color")
        return {
            "title": str(data.get("title") or ""),
            "content": str(data.get("content") or ""),
            "tags": tags,
            "color": color if color in NOTE_COLORS else "yellow",
            "pinned": False,
        }

    if content_type == "task":
        priority = data.get("priority")
        return {
            "title": str(data.get("title") or ""),
            "description": str(data.get("description") or ""),
            "completed": data.get("completed") is True,
            "priority": priority if priority in PRIORITIES else "medium",
            "tags": tags,
        }

    mood = data.get("mood")
    return {
        "content": str(data.get("content") or ""),
        "mood": mood if mood in MOODS else None,
        "tags": tags,
    }
