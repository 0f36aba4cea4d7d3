import base64
import binascii

import config

MIME_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
}


def decode_base64_chunks(data: str, chunk_size: int = config.BASE64_CHUNK_CHARS) -> bytes:
    """Decodifica base64 em blocos e concatena os bytes resultantes.

    chunk_size precisa ser multiplo de 4 para que cada bloco seja base64
    valido por si so.
    """
    if chunk_size <= 0 or chunk_size % 4:
        raise ValueError("chunk_size must be a positive multiple of 4")

    parts = []
    for position in range(0, len(data), chunk_size):
        chunk = data[position : position + chunk_size]
        parts.append(base64.b64decode(chunk, validate=True))
    return b"".join(parts)


def encode_base64_chunks(audio: bytes, chunk_size: int = config.ENCODE_CHUNK_BYTES) -> str:
    """Codifica em blocos de bytes multiplos de 3, sem padding intermediario."""
    chunk_size -= chunk_size % 3
    if chunk_size <= 0:
        raise ValueError("chunk_size too small")

    parts = []
    for position in range(0, len(audio), chunk_size):
        parts.append(base64.b64encode(audio[position : position + chunk_size]).decode("ascii"))
    return "".join(parts)


def is_valid_base64(data: str) -> bool:
    try:
        decode_base64_chunks(data)
    except (binascii.Error, ValueError):
        return False
    return True


def detect_audio_format(audio: bytes) -> str | None:
    """Identifica o container pela assinatura. Retorna a extensao ou None."""
    head = audio[:4]
    if len(head) < 2:
        return None
    if head == b"\x1a\x45\xdf\xa3":
        return "webm"
    if head == b"OggS":
        return "ogg"
    if head == b"RIFF":
        return "wav"
    if head[:3] == b"ID3" or (head[0] == 0xFF and (head[1] & 0xF0) == 0xF0):
        return "mp3"
    return None


def extension_for(mime_type: str) -> str:
    base = (mime_type or "").split(";")[0].strip().lower()
    return MIME_EXTENSIONS.get(base, "webm")
