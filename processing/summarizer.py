import logging

import requests

from processing.prompts import (
    ADJUST_CONTENT_PROMPTS,
    ADJUST_CONTENT_USER_PROMPT,
    ADJUST_MINUTES_SYSTEM_PROMPT,
    ADJUST_MINUTES_USER_PROMPT,
    CONSOLIDATION_PROMPT,
    CREATE_CONTENT_PROMPTS,
    CREATE_CONTENT_USER_PROMPT,
    MINUTES_SYSTEM_PROMPT,
    MINUTES_USER_PROMPT,
)

logger = logging.getLogger(__name__)

MAX_TRANSCRIPT_CHARS = 100_000
DEFAULT_CONTENT_PROMPT = "Analise este áudio e crie conteúdo estruturado apropriado."
DEFAULT_ADJUST_PROMPT = "Ajuste o conteúdo conforme solicitado pelo usuário, mantendo a estrutura original."


class Summarizer:
    """Gera e ajusta atas e conteudo inteligente via um provedor de LLM."""

    def __init__(self, provider: str = "openai", api_key: str = None, model: str = None,
                 openai_url: str = None, anthropic_api_key: str = None,
                 anthropic_model: str = None, ollama_url: str = None,
                 ollama_model: str = None):
        self.provider = provider
        self.api_key = api_key
        self.model = model or "gpt-4o-mini"
        self.openai_url = (openai_url or "https://api.openai.com/v1").rstrip("/")
        self.anthropic_api_key = anthropic_api_key
        self.anthropic_model = anthropic_model
        self.ollama_url = ollama_url or "http://localhost:11434"
        self.ollama_model = ollama_model or "llama3"

    # -- Meeting minutes --

    def generate_minutes(self, transcription: str, title: str, meeting_date: str) -> str:
        if not transcription.strip():
            raise ValueError("A transcricao esta vazia")

        if len(transcription) > MAX_TRANSCRIPT_CHARS:
            minutes = self._summarize_long(transcription, title, meeting_date)
        else:
            minutes = self._minutes_for(transcription, title, meeting_date)
        logger.info("Ata gerada para '%s' (%d caracteres)", title, len(minutes))
        return minutes

    def _minutes_for(self, transcription: str, title: str, meeting_date: str) -> str:
        user_prompt = MINUTES_USER_PROMPT.format(
            titulo=title, data=meeting_date, transcricao=transcription,
        )
        return self._call_llm(MINUTES_SYSTEM_PROMPT, user_prompt, temperature=0.7, max_tokens=2000)

    def _summarize_long(self, transcription: str, title: str, meeting_date: str) -> str:
        # Split into chunks and summarize each, then consolidate
        chunks = []
        for i in range(0, len(transcription), MAX_TRANSCRIPT_CHARS):
            chunks.append(transcription[i : i + MAX_TRANSCRIPT_CHARS])

        partial_minutes = []
        for idx, chunk in enumerate(chunks):
            logger.info("Resumindo parte %d/%d...", idx + 1, len(chunks))
            partial_minutes.append(self._minutes_for(chunk, title, meeting_date))

        if len(partial_minutes) == 1:
            return partial_minutes[0]

        combined = "\n\n---\n\n".join(partial_minutes)
        return self._call_llm(
            MINUTES_SYSTEM_PROMPT,
            CONSOLIDATION_PROMPT.format(parciais=combined),
            temperature=0.3,
            max_tokens=2500,
        )

    def adjust_minutes(self, original_minutes: str, adjustment_request: str,
                       transcription: str) -> str:
        user_prompt = ADJUST_MINUTES_USER_PROMPT.format(
            transcricao=transcription, ata=original_minutes, ajuste=adjustment_request,
        )
        adjusted = self._call_llm(
            ADJUST_MINUTES_SYSTEM_PROMPT, user_prompt, temperature=0.3, max_tokens=2500,
        )
        logger.info("Ata ajustada")
        return adjusted

    # -- Smart content --

    def create_content(self, content_type: str, transcription: str) -> str:
        system_prompt = CREATE_CONTENT_PROMPTS.get(content_type, DEFAULT_CONTENT_PROMPT)
        user_prompt = CREATE_CONTENT_USER_PROMPT.format(transcricao=transcription)
        return self._call_llm(system_prompt, user_prompt, temperature=0.7, max_tokens=1000)

    def adjust_content(self, content_type: str, original_content: str,
                       adjustment_prompt: str) -> str:
        system_prompt = ADJUST_CONTENT_PROMPTS.get(content_type, DEFAULT_ADJUST_PROMPT)
        user_prompt = ADJUST_CONTENT_USER_PROMPT.format(
            original=original_content, ajuste=adjustment_prompt,
        )
        return self._call_llm(system_prompt, user_prompt, temperature=0.7, max_tokens=1000)

    # -- Providers --

    def _call_llm(self, system_prompt: str, user_prompt: str,
                  temperature: float = 0.7, max_tokens: int = 2000) -> str:
        if self.provider == "anthropic":
            return self._call_anthropic(system_prompt, user_prompt, max_tokens)

        if self.provider == "ollama":
            try:
                return self._call_ollama(system_prompt, user_prompt)
            except Exception as e:
                if self.api_key:
                    logger.warning("Ollama falhou (%s), tentando com OpenAI...", e)
                    return self._call_openai(system_prompt, user_prompt, temperature, max_tokens)
                raise

        return self._call_openai(system_prompt, user_prompt, temperature, max_tokens)

    def _call_openai(self, system_prompt: str, user_prompt: str,
                     temperature: float, max_tokens: int) -> str:
        if not self.api_key:
            raise RuntimeError("OpenAI API key not configured")

        response = requests.post(
            f"{self.openai_url}/chat/completions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": temperature,
                "max_tokens": max_tokens,
            },
            timeout=300,
        )
        if not response.ok:
            logger.error("Erro OpenAI chat (%d): %s", response.status_code, response.text)
            raise RuntimeError(f"OpenAI chat error: {response.text}")
        return response.json()["choices"][0]["message"]["content"]

    def _call_anthropic(self, system_prompt: str, user_prompt: str, max_tokens: int) -> str:
        import anthropic

        if not self.anthropic_api_key:
            raise RuntimeError("Anthropic API key not configured")

        client = anthropic.Anthropic(api_key=self.anthropic_api_key)
        message = client.messages.create(
            model=self.anthropic_model or "claude-sonnet-4-5-20250929",
            max_tokens=max_tokens,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        return message.content[0].text

    def _call_ollama(self, system_prompt: str, user_prompt: str) -> str:
        response = requests.post(
            f"{self.ollama_url}/api/generate",
            json={
                "model": self.ollama_model,
                "system": system_prompt,
                "prompt": user_prompt,
                "stream": False,
            },
            timeout=300,
        )
        response.raise_for_status()
        return response.json()["response"]
