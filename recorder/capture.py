import logging
import tempfile
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

import config
from recorder.encoder import assemble

logger = logging.getLogger(__name__)


class CaptureError(RuntimeError):
    pass


@dataclass
class Recording:
    audio: bytes
    mime_type: str
    duration: int
    playback_path: Path | None = None


def open_microphone(sample_rate: int, channels: int, callback: Callable) -> Any:
    try:
        import sounddevice as sd
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise CaptureError("sounddevice is required for microphone capture.") from exc

    return sd.RawInputStream(
        samplerate=sample_rate,
        channels=channels,
        dtype="int16",
        callback=callback,
    )


class AudioCapture:
    """Captura continua do microfone em blocos, montada em um unico audio.

    O stream recebe os blocos por callback; ``stop`` fecha o dispositivo,
    junta os blocos e grava um arquivo temporario para reproducao, removido
    em ``close`` ou na proxima gravacao.
    """

    def __init__(self, sample_rate: int = config.SAMPLE_RATE, channels: int = config.CHANNELS,
                 audio_format: str = config.AUDIO_FORMAT,
                 stream_factory: Callable[..., Any] = open_microphone,
                 output_dir: str | Path | None = None,
                 clock: Callable[[], float] = time.monotonic):
        self.sample_rate = sample_rate
        self.channels = channels
        self.audio_format = audio_format
        self.stream_factory = stream_factory
        self.output_dir = Path(output_dir) if output_dir else None
        self.clock = clock
        self._lock = threading.Lock()
        self._stream = None
        self._chunks: list[bytes] = []
        self._recording = False
        self._started_at: float | None = None
        self._duration = 0
        self._playback_path: Path | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def is_recording(self) -> bool:
        return self._recording

    @property
    def duration(self) -> int:
        if self._recording and self._started_at is not None:
            return int(self.clock() - self._started_at)
        return self._duration

    @property
    def playback_path(self) -> Path | None:
        return self._playback_path

    def start(self):
        with self._lock:
            if self._recording:
                raise CaptureError("Ja existe uma gravacao em andamento")

            self._release_playback()
            self._chunks = []
            self._duration = 0

            try:
                stream = self.stream_factory(self.sample_rate, self.channels, self._on_chunk)
                stream.start()
            except CaptureError:
                raise
            except Exception as e:
                logger.error("Nao foi possivel acessar o microfone: %s", e)
                raise CaptureError("Nao foi possivel acessar o microfone") from e

            self._stream = stream
            self._started_at = self.clock()
            self._recording = True
        logger.info("Gravacao iniciada (%d Hz, %d canal(is))", self.sample_rate, self.channels)

    def _on_chunk(self, indata, frames=None, time_info=None, status=None):
        if status:
            logger.warning("Status do stream de audio: %s", status)
        if not self._recording:
            return
        data = bytes(indata)
        if not data:
            return
        with self._lock:
            self._chunks.append(data)

    def stop(self) -> Recording:
        with self._lock:
            if not self._recording:
                raise CaptureError("Nenhuma gravacao em andamento")
            self._duration = self.duration
            self._recording = False
            self._started_at = None
            chunks = self._chunks
            self._chunks = []

        self._close_stream()

        try:
            audio, mime_type = assemble(chunks, self.sample_rate, self.channels, self.audio_format)
        except Exception as e:
            logger.error("Erro ao montar o audio gravado: %s", e)
            raise CaptureError("Nao foi possivel finalizar a gravacao") from e
        self._playback_path = self._write_playback(audio)
        logger.info("Gravacao finalizada: %d s, %d bytes", self._duration, len(audio))
        return Recording(audio, mime_type, self._duration, self._playback_path)

    def close(self):
        """Libera stream e arquivo de reproducao. Pode ser chamado varias vezes."""
        with self._lock:
            self._recording = False
            self._started_at = None
            self._chunks = []
        self._close_stream()
        self._release_playback()

    def _close_stream(self):
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()

    def _write_playback(self, audio: bytes) -> Path:
        suffix = ".mp3" if self.audio_format == "mp3" else ".wav"
        if self.output_dir:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            suffix=suffix, prefix="atavoz-", dir=self.output_dir, delete=False,
        ) as fh:
            fh.write(audio)
        return Path(fh.name)

    def _release_playback(self):
        path, self._playback_path = self._playback_path, None
        if path is not None:
            path.unlink(missing_ok=True)
