import base64

import pytest
from fastapi.testclient import TestClient

from db.database import Database
from fakes import FakeClock, FakeSummarizer, FakeSupabase, FakeTranscriber
from recorder.encoder import pcm_to_wav
from server.app import create_app
from server.auth import SupabaseAuthVerifier
from server.rate_limit import RateLimiter


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def db(tmp_path):
    database = Database(tmp_path / "test.db")
    yield database
    database.close()


@pytest.fixture()
def rate_limiter(db, clock):
    return RateLimiter(db, max_requests=10, window_secs=3600, clock=clock)


@pytest.fixture()
def transcriber():
    return FakeTranscriber()


@pytest.fixture()
def summarizer():
    return FakeSummarizer()


@pytest.fixture()
def supabase():
    return FakeSupabase()


@pytest.fixture()
def app(supabase, rate_limiter, transcriber, summarizer):
    return create_app(SupabaseAuthVerifier(supabase), rate_limiter, transcriber, summarizer)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers():
    return {"Authorization": "Bearer token-ana"}


@pytest.fixture()
def wav_bytes():
    return pcm_to_wav(b"\x01\x00\x02\x00" * 4410, sample_rate=44100)


@pytest.fixture()
def audio_b64(wav_bytes):
    return base64.b64encode(wav_bytes).decode("ascii")
