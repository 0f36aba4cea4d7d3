import base64
import os

import pytest

from processing.audio import (
    decode_base64_chunks,
    detect_audio_format,
    encode_base64_chunks,
    extension_for,
    is_valid_base64,
)


def test_chunked_round_trip_preserves_bytes():
    # Larger than several chunks and not aligned to the chunk size
    audio = os.urandom(3 * 32768 + 1234)
    encoded = encode_base64_chunks(audio)

    assert encoded == base64.b64encode(audio).decode("ascii")
    assert decode_base64_chunks(encoded) == audio


def test_decode_matches_single_pass_with_small_chunks():
    audio = bytes(range(256)) * 7
    encoded = base64.b64encode(audio).decode("ascii")
    assert decode_base64_chunks(encoded, chunk_size=8) == audio


def test_empty_payload_decodes_to_empty_bytes():
    assert decode_base64_chunks("") == b""
    assert encode_base64_chunks(b"") == ""


def test_chunk_size_must_align_with_base64_quanta():
    with pytest.raises(ValueError):
        decode_base64_chunks("AAAA", chunk_size=6)


def test_invalid_base64_detected():
    assert is_valid_base64("UklGRg==")
    assert not is_valid_base64("not base64!")
    assert not is_valid_base64("AAA")


@pytest.mark.parametrize(
    "head, expected",
    [
        (b"\x1a\x45\xdf\xa3rest", "webm"),
        (b"OggS\x00", "ogg"),
        (b"RIFF\x24\x00", "wav"),
        (b"ID3\x04", "mp3"),
        (b"\xff\xfb\x90\x00", "mp3"),
        (b"%PDF-1.7", None),
        (b"", None),
    ],
)
def test_detect_audio_format(head, expected):
    assert detect_audio_format(head) == expected


def test_extension_for_mime_types():
    assert extension_for("audio/webm;codecs=opus") == "webm"
    assert extension_for("audio/wav") == "wav"
    assert extension_for("audio/mpeg") == "mp3"
    assert extension_for("application/octet-stream") == "webm"
