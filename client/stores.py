import logging
from datetime import datetime, timezone

import requests

import config
from client.notify import Notifier
from client.security import (
    normalize_tags,
    sanitize_input,
    validate_audio_content,
    validate_audio_type,
    validate_file_size,
)
from db.supabase import SupabaseClient, SupabaseError
from processing.audio import extension_for
from processing.smart_content import MOODS, NOTE_COLORS, PRIORITIES

logger = logging.getLogger(__name__)

MEETING_STATUSES = ("draft", "processing", "completed")

STORE_ERRORS = (SupabaseError, requests.RequestException, ValueError)


class AudioUploadError(Exception):
    pass


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore:
    """Estado local de uma tabela do usuario, sincronizado com o Supabase.

    Cada operacao retorna o registro devolvido pelo servidor e atualiza
    ``items`` com ele. Falhas viram notificacoes e a operacao retorna None
    (False em delete), sem alterar o estado local.
    """

    table = ""
    order: list[tuple[str, bool]] = [("created_at", False)]
    has_updated_at = True
    messages = {}

    def __init__(self, client: SupabaseClient | None, user_id: str | None,
                 notifier: Notifier | None = None):
        self.client = client
        self.user_id = user_id
        self.notifier = notifier or Notifier()
        self.items: list[dict] = []
        self.loading = False

    @property
    def signed_in(self) -> bool:
        return self.client is not None and bool(self.user_id)

    def sanitize(self, fields: dict) -> dict:
        return dict(fields)

    def get(self, record_id: str) -> dict | None:
        return next((item for item in self.items if item.get("id") == record_id), None)

    def refresh(self) -> list[dict] | None:
        if not self.signed_in:
            return None

        self.loading = True
        try:
            self.items = self.client.select(self.table, order=self.order)
            return self.items
        except STORE_ERRORS as e:
            logger.error("Erro ao carregar %s: %s", self.table, e)
            self.notifier.error(self.messages["load_error"])
            return None
        finally:
            self.loading = False

    def add(self, record: dict) -> dict | None:
        if not self.signed_in:
            return None

        try:
            row = self.sanitize(record)
            row.pop("id", None)
            row["user_id"] = self.user_id
            created = self.client.insert(self.table, row)
        except STORE_ERRORS as e:
            logger.error("Erro ao inserir em %s: %s", self.table, e)
            self.notifier.error(self.messages["add_error"])
            return None

        self.items.insert(0, created)
        self.notifier.success(self.messages["added"])
        return created

    def update(self, record_id: str, updates: dict) -> dict | None:
        if not self.signed_in:
            return None

        try:
            fields = self.sanitize(updates)
            for key in ("id", "user_id", "created_at"):
                fields.pop(key, None)
            if self.has_updated_at:
                fields["updated_at"] = _now()
            updated = self.client.update(self.table, record_id, fields)
        except STORE_ERRORS as e:
            logger.error("Erro ao atualizar %s/%s: %s", self.table, record_id, e)
            self.notifier.error(self.messages["update_error"])
            return None

        self.items = [updated if item.get("id") == record_id else item for item in self.items]
        self.notifier.success(self.messages["updated"])
        return updated

    def delete(self, record_id: str) -> bool:
        if not self.signed_in:
            return False

        try:
            self.client.delete(self.table, record_id)
        except STORE_ERRORS as e:
            logger.error("Erro ao excluir %s/%s: %s", self.table, record_id, e)
            self.notifier.error(self.messages["delete_error"])
            return False

        self.items = [item for item in self.items if item.get("id") != record_id]
        self.notifier.success(self.messages["deleted"])
        return True


class MeetingStore(RecordStore):
    table = "meetings"
    order = [("created_at", False)]
    messages = {
        "load_error": "Erro ao carregar reuniões",
        "added": "Reunião salva com sucesso!",
        "add_error": "Erro ao salvar reunião",
        "updated": "Reunião atualizada!",
        "update_error": "Erro ao atualizar reunião",
        "deleted": "Reunião excluída!",
        "delete_error": "Erro ao excluir reunião",
    }

    def sanitize(self, fields: dict) -> dict:
        clean = dict(fields)
        if "title" in clean:
            clean["title"] = sanitize_input(clean["title"], 200)
        if "participants" in clean:
            participants = clean["participants"] or []
            if isinstance(participants, str):
                participants = [participants]
            clean["participants"] = [
                p for p in (sanitize_input(p, 100) for p in participants) if p
            ]
        if clean.get("transcript"):
            clean["transcript"] = sanitize_input(clean["transcript"], 50000)
        if "duration" in clean:
            duration = int(clean["duration"] or 0)
            if duration < 0:
                raise ValueError("duration must not be negative")
            clean["duration"] = duration
        if "status" in clean and clean["status"] not in MEETING_STATUSES:
            raise ValueError(f"invalid meeting status: {clean['status']!r}")
        return clean

    def upload_audio(self, audio: bytes, meeting_id: str, mime_type: str = "audio/webm") -> str | None:
        """Sobe o audio para o bucket privado e retorna uma URL assinada."""
        if not self.signed_in:
            return None

        try:
            if not validate_file_size(audio, config.MAX_UPLOAD_MB):
                raise AudioUploadError(
                    f"Arquivo de áudio muito grande. Tamanho máximo: {config.MAX_UPLOAD_MB}MB"
                )
            if not validate_audio_type(mime_type):
                raise AudioUploadError(
                    "Tipo de arquivo inválido. Apenas arquivos de áudio são permitidos"
                )
            if not validate_audio_content(audio):
                raise AudioUploadError("Arquivo de áudio inválido ou corrompido")

            path = f"{self.user_id}/{meeting_id}.{extension_for(mime_type)}"
            self.client.upload(config.AUDIO_BUCKET, path, audio, mime_type, upsert=True)
            return self.client.create_signed_url(
                config.AUDIO_BUCKET, path, config.SIGNED_URL_EXPIRES_SECS,
            )
        except (AudioUploadError, SupabaseError, requests.RequestException) as e:
            logger.error("Erro ao enviar audio da reuniao %s: %s", meeting_id, e)
            self.notifier.error("Erro ao fazer upload do áudio")
            raise


class NoteStore(RecordStore):
    table = "notes"
    order = [("pinned", False), ("updated_at", False)]
    messages = {
        "load_error": "Erro ao carregar notas",
        "added": "Nota criada!",
        "add_error": "Erro ao criar nota",
        "updated": "Nota atualizada!",
        "update_error": "Erro ao atualizar nota",
        "deleted": "Nota excluída!",
        "delete_error": "Erro ao excluir nota",
    }

    def sanitize(self, fields: dict) -> dict:
        clean = dict(fields)
        if "title" in clean:
            clean["title"] = sanitize_input(clean["title"], 200)
        if "content" in clean:
            clean["content"] = sanitize_input(clean["content"], 10000)
        if "tags" in clean:
            clean["tags"] = normalize_tags(clean["tags"])
        if clean.get("color") is not None and clean["color"] not in NOTE_COLORS:
            raise ValueError(f"invalid note color: {clean['color']!r}")
        if "pinned" in clean:
            clean["pinned"] = bool(clean["pinned"])
        return clean


class TaskStore(RecordStore):
    table = "tasks"
    order = [("completed", True), ("priority", False), ("created_at", False)]
    messages = {
        "load_error": "Erro ao carregar tarefas",
        "added": "Tarefa criada!",
        "add_error": "Erro ao criar tarefa",
        "updated": "Tarefa atualizada!",
        "update_error": "Erro ao atualizar tarefa",
        "deleted": "Tarefa excluída!",
        "delete_error": "Erro ao excluir tarefa",
    }

    def sanitize(self, fields: dict) -> dict:
        clean = dict(fields)
        if "title" in clean:
            clean["title"] = sanitize_input(clean["title"], 200)
        if clean.get("description"):
            clean["description"] = sanitize_input(clean["description"], 5000)
        if "tags" in clean:
            clean["tags"] = normalize_tags(clean["tags"])
        if "priority" in clean and clean["priority"] not in PRIORITIES:
            raise ValueError(f"invalid task priority: {clean['priority']!r}")
        if "completed" in clean:
            clean["completed"] = bool(clean["completed"])
        return clean


class ThoughtStore(RecordStore):
    table = "thoughts"
    order = [("created_at", False)]
    has_updated_at = False
    messages = {
        "load_error": "Erro ao carregar pensamentos",
        "added": "Pensamento salvo!",
        "add_error": "Erro ao salvar pensamento",
        "updated": "Pensamento atualizado!",
        "update_error": "Erro ao atualizar pensamento",
        "deleted": "Pensamento excluído!",
        "delete_error": "Erro ao excluir pensamento",
    }

    def sanitize(self, fields: dict) -> dict:
        clean = dict(fields)
        if "content" in clean:
            clean["content"] = sanitize_input(clean["content"], 5000)
        if "tags" in clean:
            clean["tags"] = normalize_tags(clean["tags"])
        if clean.get("mood") is not None and clean["mood"] not in MOODS:
            raise ValueError(f"invalid mood: {clean['mood']!r}")
        return clean
