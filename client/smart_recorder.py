import logging

from client.functions import FunctionError, FunctionsClient
from client.notify import Notifier
from client.stores import RecordStore
from processing.audio import encode_base64_chunks
from processing.smart_content import CONTENT_TYPES, SmartContentError, parse_smart_content
from recorder.capture import AudioCapture, CaptureError, Recording

logger = logging.getLogger(__name__)

LABELS = {
    "note": "Nota",
    "task": "Tarefa",
    "thought": "Pensamento",
}


class SmartRecorder:
    """Grava um audio curto e o transforma em nota, tarefa ou pensamento."""

    def __init__(self, capture: AudioCapture, functions: FunctionsClient,
                 stores: dict[str, RecordStore], notifier: Notifier | None = None):
        self.capture = capture
        self.functions = functions
        self.stores = stores
        self.notifier = notifier or Notifier()
        self.content_type = "note"
        self.generated_content = ""
        self.transcription = ""
        self.last_recording: Recording | None = None
        self.processing = False
        self.adjusting = False

    def start(self, content_type: str = "note") -> bool:
        if content_type not in CONTENT_TYPES:
            raise ValueError(f"Tipo de conteudo invalido: {content_type}")

        try:
            self.capture.start()
        except CaptureError as e:
            logger.error("Erro ao iniciar gravacao: %s", e)
            self.notifier.error("Não foi possível acessar o microfone")
            return False

        self.content_type = content_type
        self.notifier.success(f"Gravando {LABELS[content_type].lower()}...")
        return True

    def stop(self) -> str | None:
        if not self.capture.is_recording():
            return None

        try:
            self.last_recording = self.capture.stop()
        except CaptureError as e:
            logger.error("Erro ao finalizar gravacao: %s", e)
            self.notifier.error("Não foi possível finalizar a gravação")
            return None

        self.notifier.success("A IA está analisando sua gravação...")
        return self.process(self.last_recording.audio)

    def process(self, audio: bytes) -> str | None:
        self.processing = True
        try:
            data = self.functions.create_smart_content(
                encode_base64_chunks(audio), self.content_type,
            )
        except FunctionError as e:
            logger.error("Erro ao processar audio: %s", e)
            self.notifier.error("Não foi possível processar a gravação")
            return None
        finally:
            self.processing = False

        self.generated_content = data.get("content") or ""
        self.transcription = data.get("transcription") or ""
        self.notifier.success(f"{LABELS[self.content_type]} criado(a) com sucesso.")
        return self.generated_content

    def adjust(self, prompt: str) -> str | None:
        if not prompt or not prompt.strip() or not self.generated_content:
            return None

        self.adjusting = True
        try:
            adjusted = self.functions.adjust_smart_content(
                self.generated_content, prompt.strip(), self.content_type,
            )
        except FunctionError as e:
            logger.error("Erro ao ajustar conteudo: %s", e)
            self.notifier.error("Não foi possível ajustar o conteúdo")
            return None
        finally:
            self.adjusting = False

        self.generated_content = adjusted
        self.notifier.success("Conteúdo ajustado!")
        return adjusted

    def save(self) -> dict | None:
        if not self.generated_content:
            return None

        try:
            fields = parse_smart_content(self.content_type, self.generated_content)
        except SmartContentError as e:
            logger.error("Erro ao salvar conteudo: %s", e)
            self.notifier.error("Erro ao salvar conteúdo")
            return None

        saved = self.stores[self.content_type].add(fields)
        if saved is None:
            self.notifier.error("Não foi possível salvar o conteúdo")
            return None

        self.reset()
        self.notifier.success(f"{LABELS[self.content_type]} salvo(a) com sucesso.")
        return saved

    def reset(self):
        self.generated_content = ""
        self.transcription = ""
        self.last_recording = None
        self.capture.close()

    def close(self):
        self.capture.close()
