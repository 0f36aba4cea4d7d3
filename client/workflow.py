import logging
from datetime import datetime, timezone

import requests

from client.functions import FunctionError, FunctionsClient
from client.notify import Notifier
from client.stores import AudioUploadError, MeetingStore
from db.supabase import SupabaseError
from processing.audio import encode_base64_chunks
from recorder.capture import Recording

logger = logging.getLogger(__name__)


def parse_participants(participants) -> list[str]:
    if isinstance(participants, str):
        participants = participants.split(",")
    return [p.strip() for p in participants or [] if p and p.strip()]


class MeetingWorkflow:
    """Ciclo de vida de uma reuniao: gravar, salvar, enviar, gerar e ajustar a ata.

    A transcricao bruta devolvida pelo servidor nao e persistida; fica em
    ``transcriptions`` para alimentar os ajustes da ata na mesma sessao.
    """

    def __init__(self, meetings: MeetingStore, functions: FunctionsClient,
                 notifier: Notifier | None = None, http: requests.Session | None = None):
        self.meetings = meetings
        self.functions = functions
        self.notifier = notifier or Notifier()
        self.http = http or requests.Session()
        self.transcriptions: dict[str, str] = {}

    def on_recording_complete(self, recording: Recording, title: str = "",
                              participants=None) -> dict | None:
        now = datetime.now(timezone.utc)
        meeting = self.meetings.add({
            "title": title.strip() if title and title.strip() else f"Reunião {datetime.now():%d/%m/%Y}",
            "date": now.isoformat(),
            "duration": recording.duration,
            "participants": parse_participants(participants),
            "status": "draft",
            "transcript": "",
            "audio_url": "",
        })
        if meeting is None:
            return None

        try:
            audio_url = self.meetings.upload_audio(recording.audio, meeting["id"], recording.mime_type)
        except (AudioUploadError, SupabaseError, requests.RequestException):
            return meeting

        if audio_url:
            meeting = self.meetings.update(meeting["id"], {"audio_url": audio_url}) or meeting

        self.notifier.success(
            "Reunião gravada! A gravação foi salva com sucesso. Você pode agora gerar a ata."
        )
        return meeting

    def generate_minutes(self, meeting_id: str, audio: bytes | None = None) -> dict | None:
        meeting = self.meetings.get(meeting_id)
        if meeting is None or (audio is None and not meeting.get("audio_url")):
            self.notifier.error("Nenhum áudio encontrado para transcrever.")
            return None

        if audio is None:
            try:
                audio = self._download(meeting["audio_url"])
            except requests.RequestException as e:
                logger.error("Erro ao baixar audio da reuniao %s: %s", meeting_id, e)
                self.notifier.error("Não foi possível baixar o áudio")
                return None

        previous_status = meeting.get("status") or "draft"
        self.meetings.update(meeting_id, {"status": "processing"})

        try:
            data = self.functions.transcribe_audio(encode_base64_chunks(audio), meeting.get("title"))
        except FunctionError as e:
            logger.error("Erro ao gerar ata da reuniao %s: %s", meeting_id, e)
            self.meetings.update(meeting_id, {"status": previous_status})
            self.notifier.error(f"Erro ao gerar ata: {e.message}")
            return None

        minutes = data.get("meetingMinutes")
        if not minutes:
            self.meetings.update(meeting_id, {"status": previous_status})
            self.notifier.error("Nenhuma ata foi gerada")
            return None

        self.transcriptions[meeting_id] = data.get("transcription") or ""
        updated = self.meetings.update(meeting_id, {"transcript": minutes, "status": "completed"})
        if updated is not None:
            self.notifier.success("Ata gerada com sucesso!")
        return updated

    def adjust_minutes(self, meeting_id: str, adjustment_request: str,
                       transcription: str | None = None) -> str | None:
        if not adjustment_request or not adjustment_request.strip():
            return None

        meeting = self.meetings.get(meeting_id)
        if meeting is None or not meeting.get("transcript"):
            self.notifier.error("Nenhuma ata encontrada para ajustar.")
            return None

        transcription = transcription or self.transcriptions.get(meeting_id)
        if not transcription:
            self.notifier.error("A transcrição original não está disponível. Gere a ata novamente.")
            return None

        try:
            adjusted = self.functions.adjust_meeting_minutes(
                meeting["transcript"], adjustment_request.strip(), transcription,
            )
        except FunctionError as e:
            logger.error("Erro ao ajustar ata da reuniao %s: %s", meeting_id, e)
            self.notifier.error("Não foi possível ajustar a ata")
            return None

        if self.meetings.update(meeting_id, {"transcript": adjusted}) is None:
            return None
        self.notifier.success("Ata ajustada com sucesso!")
        return adjusted

    def _download(self, url: str) -> bytes:
        response = self.http.get(url, timeout=120)
        response.raise_for_status()
        return response.content
