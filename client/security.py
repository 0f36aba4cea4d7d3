import secrets
import string
import time

from processing.audio import detect_audio_format

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}

_TOKEN_ALPHABET = string.ascii_letters + string.digits


def escape_html(value) -> str:
    if not isinstance(value, str):
        return ""
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in value)


def sanitize_input(value, max_length: int = 200) -> str:
    """Remove espacos das pontas, trunca em max_length e escapa HTML."""
    if not isinstance(value, str):
        return ""
    return escape_html(value.strip()[:max_length])


def normalize_tags(tags, max_length: int = 50) -> list[str]:
    if not tags:
        return []
    if isinstance(tags, str):
        tags = [tags]
    seen = set()
    result = []
    for tag in tags:
        clean = sanitize_input(tag, max_length).casefold()
        if clean and clean not in seen:
            seen.add(clean)
            result.append(clean)
    return result


def validate_file_size(data: bytes, max_size_mb: int = 50) -> bool:
    return len(data) <= max_size_mb * 1024 * 1024


def validate_audio_type(mime_type: str) -> bool:
    return isinstance(mime_type, str) and mime_type.startswith("audio/")


def validate_audio_content(data: bytes) -> bool:
    return detect_audio_format(data) is not None


def is_rate_limited(last_request_time: float | None, min_interval_ms: int = 5000,
                    now: float | None = None) -> bool:
    if not last_request_time:
        return False
    now = time.time() if now is None else now
    return (now - last_request_time) * 1000 < min_interval_ms


def generate_secure_token(length: int = 32) -> str:
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))
