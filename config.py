import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Caminhos
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("ATAVOZ_DATA_DIR", BASE_DIR / "data"))
RECORDINGS_DIR = DATA_DIR / "recordings"
DB_PATH = DATA_DIR / "atavoz.db"

# Servidor
HOST = os.getenv("ATAVOZ_HOST", "127.0.0.1")
PORT = int(os.getenv("ATAVOZ_PORT", "8787"))
FUNCTIONS_PREFIX = "/functions/v1"

# Audio
SAMPLE_RATE = 44100
CHANNELS = 1
AUDIO_FORMAT = os.getenv("ATAVOZ_AUDIO_FORMAT", "wav")  # "wav" ou "mp3"
BASE64_CHUNK_CHARS = 32768
ENCODE_CHUNK_BYTES = 0x8000

# Limites
MAX_AUDIO_BASE64_CHARS = 25 * 1024 * 1024
MAX_UPLOAD_MB = 50
RATE_LIMIT_WINDOW_SECS = 60 * 60
RATE_LIMIT_MAX_REQUESTS = 10
SIGNED_URL_EXPIRES_SECS = 86400

# Transcricao
TRANSCRIBE_PROVIDER = os.getenv("ATAVOZ_TRANSCRIBE_PROVIDER", "openai")  # "openai" ou "local"
LANGUAGE = os.getenv("ATAVOZ_LANGUAGE", "pt")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_URL = os.getenv("OPENAI_URL", "https://api.openai.com/v1")
OPENAI_TRANSCRIBE_MODEL = "whisper-1"
WHISPER_MODEL = os.getenv("ATAVOZ_WHISPER_MODEL", "medium")

# LLM
LLM_PROVIDER = os.getenv("ATAVOZ_LLM_PROVIDER", "openai")  # "openai", "anthropic" ou "ollama"
OPENAI_MODEL = os.getenv("ATAVOZ_OPENAI_MODEL", "gpt-4o-mini")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"
OLLAMA_MODEL = os.getenv("ATAVOZ_OLLAMA_MODEL", "llama3")
OLLAMA_URL = os.getenv("ATAVOZ_OLLAMA_URL", "http://localhost:11434")

# Supabase
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
AUDIO_BUCKET = "audio-recordings"
