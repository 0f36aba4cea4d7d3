import binascii
import logging
from datetime import datetime
from typing import Any, Callable

from fastapi import APIRouter, Body, Header, HTTPException
from pydantic import BaseModel

import config
from processing.audio import decode_base64_chunks
from processing.smart_content import CONTENT_TYPES
from processing.summarizer import Summarizer
from processing.transcriber import Transcriber
from server.auth import SupabaseAuthVerifier
from server.errors import INTERNAL_ERROR, ClientError, ValidationError
from server.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

DEFAULT_MEETING_TITLE = "Reunião"
MAX_TITLE_CHARS = 200


class TranscribeAudioResponse(BaseModel):
    transcription: str
    meetingMinutes: str


class AdjustMinutesResponse(BaseModel):
    adjustedMinutes: str


class SmartContentResponse(BaseModel):
    content: str
    transcription: str


class AdjustContentResponse(BaseModel):
    adjustedContent: str


def _run(function_name: str, handler: Callable[[], dict]) -> dict:
    logger.info("Funcao %s chamada", function_name)
    try:
        return handler()
    except ClientError as e:
        logger.warning("Requisicao rejeitada em %s: %s", function_name, e)
        raise HTTPException(e.status_code, str(e))
    except Exception:
        # Provider and backend errors never reach the client
        logger.exception("Erro em %s", function_name)
        raise HTTPException(500, INTERNAL_ERROR)


def _audio_from(payload: dict, max_chars: int) -> bytes:
    audio = payload.get("audio")
    if not audio:
        raise ValidationError("No audio data provided")
    if not isinstance(audio, str):
        raise ValidationError("Invalid audio data format")
    if len(audio) > max_chars:
        raise ValidationError("Audio file too large. Maximum size is 25MB")
    try:
        return decode_base64_chunks(audio)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Invalid audio data format") from e


def _required_string(payload: dict, key: str, message: str) -> str:
    value = payload.get(key)
    if not value or not isinstance(value, str):
        raise ValidationError(message)
    return value


def _content_type_from(payload: dict) -> str:
    content_type = payload.get("contentType")
    if not content_type:
        raise ValidationError("Content type is required")
    if content_type not in CONTENT_TYPES:
        raise ValidationError("Invalid content type")
    return content_type


def create_router(auth: SupabaseAuthVerifier, rate_limiter: RateLimiter,
                  transcriber: Transcriber, summarizer: Summarizer,
                  max_audio_chars: int = config.MAX_AUDIO_BASE64_CHARS) -> APIRouter:
    router = APIRouter()

    # -- Meeting minutes --

    @router.post("/transcribe-audio", response_model=TranscribeAudioResponse)
    def transcribe_audio(payload: dict[str, Any] | None = Body(None),
                         authorization: str | None = Header(None)):
        def handler():
            user_id = auth.authenticate(authorization)
            rate_limiter.check(user_id, "transcribe-audio")

            body = payload or {}
            audio = _audio_from(body, max_audio_chars)

            title = body.get("meetingTitle")
            if title is not None and not isinstance(title, str):
                raise ValidationError("Invalid meeting title format")
            title = (title or "").strip()[:MAX_TITLE_CHARS] or DEFAULT_MEETING_TITLE

            transcription = transcriber.transcribe(audio)
            minutes = summarizer.generate_minutes(
                transcription, title, datetime.now().strftime("%d/%m/%Y"),
            )
            return {"transcription": transcription, "meetingMinutes": minutes}

        return _run("transcribe-audio", handler)

    @router.post("/adjust-meeting-minutes", response_model=AdjustMinutesResponse)
    def adjust_meeting_minutes(payload: dict[str, Any] | None = Body(None),
                               authorization: str | None = Header(None)):
        def handler():
            auth.authenticate(authorization)

            body = payload or {}
            original = _required_string(body, "originalMinutes", "Original minutes are required")
            request = _required_string(body, "adjustmentRequest", "Adjustment request is required")
            transcription = _required_string(
                body, "transcription", "Original transcription is required",
            )

            adjusted = summarizer.adjust_minutes(original, request, transcription)
            return {"adjustedMinutes": adjusted}

        return _run("adjust-meeting-minutes", handler)

    # -- Smart content --

    @router.post("/create-smart-content", response_model=SmartContentResponse)
    def create_smart_content(payload: dict[str, Any] | None = Body(None)):
        def handler():
            body = payload or {}
            audio = _audio_from(body, max_audio_chars)
            content_type = _content_type_from(body)

            logger.info("Criando %s a partir do audio...", content_type)
            transcription = transcriber.transcribe(audio, language=None)
            content = summarizer.create_content(content_type, transcription)
            return {"content": content, "transcription": transcription}

        return _run("create-smart-content", handler)

    @router.post("/adjust-smart-content", response_model=AdjustContentResponse)
    def adjust_smart_content(payload: dict[str, Any] | None = Body(None)):
        def handler():
            body = payload or {}
            original = body.get("originalContent")
            prompt = body.get("adjustmentPrompt")
            if not original or not prompt or not body.get("contentType"):
                raise ValidationError("Missing required parameters")
            if not isinstance(original, str) or not isinstance(prompt, str):
                raise ValidationError("Invalid parameters format")
            content_type = _content_type_from(body)

            adjusted = summarizer.adjust_content(content_type, original, prompt)
            return {"adjustedContent": adjusted}

        return _run("adjust-smart-content", handler)

    return router
