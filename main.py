import logging
import socket
import sys
import threading

import uvicorn

import config
from db.database import Database
from db.supabase import SupabaseClient
from processing.summarizer import Summarizer
from processing.transcriber import Transcriber
from server.app import create_app
from server.auth import SupabaseAuthVerifier
from server.rate_limit import RateLimiter

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("atavoz")


def find_available_port(start: int, end: int) -> int:
    for port in range(start, end + 1):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((config.HOST, port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"Nenhuma porta disponivel entre {start} e {end}")


def build_app():
    config.DATA_DIR.mkdir(parents=True, exist_ok=True)

    db = Database(config.DB_PATH)
    rate_limiter = RateLimiter(
        db,
        max_requests=config.RATE_LIMIT_MAX_REQUESTS,
        window_secs=config.RATE_LIMIT_WINDOW_SECS,
    )
    purged = rate_limiter.purge()
    if purged:
        logger.info("%d registros antigos de limite removidos", purged)

    supabase = SupabaseClient(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
    auth = SupabaseAuthVerifier(supabase)

    transcriber = Transcriber(
        provider=config.TRANSCRIBE_PROVIDER,
        api_key=config.OPENAI_API_KEY,
        model=config.OPENAI_TRANSCRIBE_MODEL,
        language=config.LANGUAGE,
        openai_url=config.OPENAI_URL,
        model_size=config.WHISPER_MODEL,
    )
    summarizer = Summarizer(
        provider=config.LLM_PROVIDER,
        api_key=config.OPENAI_API_KEY,
        model=config.OPENAI_MODEL,
        openai_url=config.OPENAI_URL,
        anthropic_api_key=config.ANTHROPIC_API_KEY,
        anthropic_model=config.ANTHROPIC_MODEL,
        ollama_url=config.OLLAMA_URL,
        ollama_model=config.OLLAMA_MODEL,
    )

    # Load the local Whisper model in background
    if config.TRANSCRIBE_PROVIDER == "local" and not transcriber.is_loaded:
        def preload_whisper():
            try:
                logger.info("Pre-carregando modelo Whisper em background...")
                transcriber._load_model()
            except Exception as e:
                logger.warning("Nao foi possivel pre-carregar o Whisper: %s", e)

        threading.Thread(target=preload_whisper, daemon=True).start()

    return create_app(auth, rate_limiter, transcriber, summarizer)


def main():
    if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
        logger.error("SUPABASE_URL e SUPABASE_SERVICE_ROLE_KEY sao obrigatorios")
        sys.exit(1)

    try:
        port = find_available_port(config.PORT, config.PORT + 13)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    if port != config.PORT:
        logger.info("Porta %d em uso, usando %d", config.PORT, port)

    app = build_app()
    logger.info("AtaVoz iniciado em http://%s:%d%s", config.HOST, port, config.FUNCTIONS_PREFIX)
    uvicorn.run(app, host=config.HOST, port=port, log_level="warning")


if __name__ == "__main__":
    main()
