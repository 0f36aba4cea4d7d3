import io
import wave

from pydub import AudioSegment

MIME_TYPES = {
    "wav": "audio/wav",
    "mp3": "audio/mpeg",
}


def pcm_to_wav(pcm: bytes, sample_rate: int, channels: int = 1, sample_width: int = 2) -> bytes:
    """Empacota amostras PCM intercaladas em um WAV completo, em memoria."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(sample_width)
        wf.setframerate(sample_rate)
        wf.writeframes(pcm)
    return buffer.getvalue()


def wav_to_mp3(wav: bytes, bitrate: str = "128k") -> bytes:
    """Converte WAV para MP3 usando pydub/ffmpeg."""
    audio = AudioSegment.from_wav(io.BytesIO(wav))
    out = io.BytesIO()
    audio.export(out, format="mp3", bitrate=bitrate)
    return out.getvalue()


def wav_duration_secs(wav: bytes) -> int:
    with wave.open(io.BytesIO(wav), "rb") as wf:
        rate = wf.getframerate()
        return wf.getnframes() // rate if rate else 0


def assemble(chunks: list[bytes], sample_rate: int, channels: int = 1,
             audio_format: str = "wav") -> tuple[bytes, str]:
    """Junta os blocos capturados em um unico arquivo reproduzivel.

    Retorna (bytes, mime_type).
    """
    if audio_format not in MIME_TYPES:
        raise ValueError(f"Formato de audio nao suportado: {audio_format}")

    wav = pcm_to_wav(b"".join(chunks), sample_rate, channels)
    if audio_format == "mp3":
        return wav_to_mp3(wav), MIME_TYPES["mp3"]
    return wav, MIME_TYPES["wav"]
