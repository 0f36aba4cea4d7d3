import logging

logger = logging.getLogger(__name__)


class Notifier:
    """Destino das mensagens mostradas ao usuario (os "toasts")."""

    def success(self, message: str):
        logger.info("%s", message)

    def error(self, message: str):
        logger.error("%s", message)


class RecordingNotifier(Notifier):
    """Guarda as mensagens em memoria; util para telas de console e testes."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str):
        self.messages.append(("success", message))
        super().success(message)

    def error(self, message: str):
        self.messages.append(("error", message))
        super().error(message)

    @property
    def errors(self) -> list[str]:
        return [msg for kind, msg in self.messages if kind == "error"]

    @property
    def successes(self) -> list[str]:
        return [msg for kind, msg in self.messages if kind == "success"]
