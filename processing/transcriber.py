import logging
import tempfile
from pathlib import Path

import requests

from processing.audio import detect_audio_format

logger = logging.getLogger(__name__)

_model_cache = {}

AUTO_LANGUAGE = "auto"


class Transcriber:
    """Transcreve audio via API da OpenAI (whisper-1) ou faster-whisper local."""

    def __init__(self, provider: str = "openai", api_key: str = None,
                 model: str = "whisper-1", language: str = "pt",
                 openai_url: str = None, model_size: str = "medium"):
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.language = language
        self.openai_url = (openai_url or "https://api.openai.com/v1").rstrip("/")
        self.model_size = model_size
        self._model = None

    def _load_model(self):
        if self.model_size in _model_cache:
            self._model = _model_cache[self.model_size]
            return

        from faster_whisper import WhisperModel

        logger.info("Carregando modelo Whisper '%s'...", self.model_size)
        self._model = WhisperModel(self.model_size, device="auto", compute_type="int8")
        _model_cache[self.model_size] = self._model
        logger.info("Modelo Whisper carregado")

    @property
    def is_loaded(self) -> bool:
        return self._model is not None or self.model_size in _model_cache

    def transcribe(self, audio: bytes, language: str | None = AUTO_LANGUAGE) -> str:
        """Retorna o texto transcrito.

        language=AUTO_LANGUAGE usa o idioma configurado; None deixa o provedor
        detectar o idioma.
        """
        if not audio:
            raise ValueError("Audio vazio")
        if language == AUTO_LANGUAGE:
            language = self.language

        extension = detect_audio_format(audio) or "webm"
        logger.info("Transcrevendo %d bytes (%s) via %s...", len(audio), extension, self.provider)

        if self.provider == "local":
            text = self._transcribe_local(audio, extension, language)
        else:
            text = self._transcribe_openai(audio, extension, language)

        logger.info("Transcricao concluida: %d caracteres", len(text))
        return text

    def _transcribe_openai(self, audio: bytes, extension: str, language: str | None) -> str:
        if not self.api_key:
            raise RuntimeError("OpenAI API key not configured")

        data = {"model": self.model, "response_format": "json"}
        if language:
            data["language"] = language

        response = requests.post(
            f"{self.openai_url}/audio/transcriptions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            files={"file": (f"audio.{extension}", audio, f"audio/{extension}")},
            data=data,
            timeout=300,
        )
        if not response.ok:
            logger.error("Erro OpenAI transcricao (%d): %s", response.status_code, response.text)
            raise RuntimeError(f"OpenAI transcription error: {response.text}")
        return response.json()["text"].strip()

    def _transcribe_local(self, audio: bytes, extension: str, language: str | None) -> str:
        if self._model is None:
            self._load_model()

        with tempfile.TemporaryDirectory() as tmp_dir:
            audio_path = Path(tmp_dir) / f"audio.{extension}"
            audio_path.write_bytes(audio)
            segments, _info = self._model.transcribe(
                str(audio_path),
                language=language,
                beam_size=5,
                vad_filter=True,
            )
            return "\n".join(segment.text.strip() for segment in segments)
