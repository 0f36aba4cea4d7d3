import logging

import requests

import config

logger = logging.getLogger(__name__)


class FunctionError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class FunctionsClient:
    """Chama as funcoes do servidor com o token do usuario."""

    def __init__(self, base_url: str, access_token: str | None = None, api_key: str | None = None,
                 session: requests.Session | None = None, timeout: int = 600):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def invoke(self, name: str, body: dict) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        if self.api_key:
            headers["apikey"] = self.api_key

        try:
            response = self.session.post(
                f"{self.base_url}{config.FUNCTIONS_PREFIX}/{name}",
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise FunctionError(0, str(e)) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            logger.warning("Funcao %s falhou (%d): %s", name, response.status_code, message)
            raise FunctionError(response.status_code, message or response.reason or "Erro")
        if not isinstance(data, dict):
            raise FunctionError(response.status_code, "Resposta inválida do servidor")
        return data

    def transcribe_audio(self, audio_base64: str, meeting_title: str | None = None) -> dict:
        body = {"audio": audio_base64}
        if meeting_title:
            body["meetingTitle"] = meeting_title
        return self.invoke("transcribe-audio", body)

    def adjust_meeting_minutes(self, original_minutes: str, adjustment_request: str,
                               transcription: str) -> str:
        data = self.invoke("adjust-meeting-minutes", {
            "originalMinutes": original_minutes,
            "adjustmentRequest": adjustment_request,
            "transcription": transcription,
        })
        if not data.get("adjustedMinutes"):
            raise FunctionError(200, "Resposta inválida do servidor")
        return data["adjustedMinutes"]

    def create_smart_content(self, audio_base64: str, content_type: str) -> dict:
        return self.invoke("create-smart-content", {
            "audio": audio_base64,
            "contentType": content_type,
        })

    def adjust_smart_content(self, original_content: str, adjustment_prompt: str,
                             content_type: str) -> str:
        data = self.invoke("adjust-smart-content", {
            "originalContent": original_content,
            "adjustmentPrompt": adjustment_prompt,
            "contentType": content_type,
        })
        if not data.get("adjustedContent"):
            raise FunctionError(200, "Resposta inválida do servidor")
        return data["adjustedContent"]
