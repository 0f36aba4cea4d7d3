import itertools
import json

import requests

from db.supabase import SupabaseError

USERS = {
    "token-ana": {"id": "user-ana", "email": "ana@example.com"},
    "token-bruno": {"id": "user-bruno", "email": "bruno@example.com"},
}


class FakeSupabase:
    """In-memory stand-in for the Supabase REST client."""

    def __init__(self, fail_on: set[str] | None = None):
        self.tables: dict[str, list[dict]] = {}
        self.objects: dict[str, bytes] = {}
        self.fail_on = fail_on or set()
        self.calls: list[tuple] = []
        self._ids = itertools.count(1)

    def _maybe_fail(self, op: str):
        if op in self.fail_on:
            raise SupabaseError(500, f"{op} failed")

    def select(self, table, order=None, filters=None):
        self.calls.append(("select", table, order))
        self._maybe_fail("select")
        return [dict(row) for row in self.tables.get(table, [])]

    def insert(self, table, row):
        self.calls.append(("insert", table, row))
        self._maybe_fail("insert")
        created = dict(row, id=f"{table}-{next(self._ids)}", created_at="2026-10-19T10:00:00+00:00")
        self.tables.setdefault(table, []).append(created)
        return dict(created)

    def update(self, table, row_id, fields):
        self.calls.append(("update", table, row_id, fields))
        self._maybe_fail("update")
        for row in self.tables.get(table, []):
            if row["id"] == row_id:
                row.update(fields)
                return dict(row)
        raise SupabaseError(406, "Expected a single row, got 0")

    def delete(self, table, row_id):
        self.calls.append(("delete", table, row_id))
        self._maybe_fail("delete")
        self.tables[table] = [row for row in self.tables.get(table, []) if row["id"] != row_id]

    def get_user(self, token):
        if token not in USERS:
            raise SupabaseError(401, "invalid JWT")
        return USERS[token]

    def upload(self, bucket, path, data, content_type, upsert=True, cache_control="3600"):
        self.calls.append(("upload", bucket, path, content_type))
        self._maybe_fail("upload")
        self.objects[f"{bucket}/{path}"] = data
        return f"{bucket}/{path}"

    def create_signed_url(self, bucket, path, expires_in):
        self._maybe_fail("sign")
        return f"https://example.supabase.co/storage/v1/object/sign/{bucket}/{path}?token=abc&e={expires_in}"


class FakeTranscriber:
    def __init__(self, text="Ana abriu a reuniao e definiu o prazo de sexta."):
        self.text = text
        self.calls = []
        self.error = None

    def transcribe(self, audio, language="auto"):
        self.calls.append((audio, language))
        if self.error:
            raise self.error
        return self.text


class FakeSummarizer:
    def __init__(self):
        self.calls = []
        self.content = json.dumps({
            "title": "Compras",
            "content": "Comprar cafe",
            "tags": ["Casa", "casa"],
            "color": "green",
        })

    def generate_minutes(self, transcription, title, meeting_date):
        self.calls.append(("generate_minutes", transcription, title))
        return f"# Ata da Reunião - {title}\n\n{transcription}"

    def adjust_minutes(self, original, request, transcription):
        self.calls.append(("adjust_minutes", original, request, transcription))
        return original + "\n\n(ajustada)"

    def create_content(self, content_type, transcription):
        self.calls.append(("create_content", content_type, transcription))
        return self.content

    def adjust_content(self, content_type, original, prompt):
        self.calls.append(("adjust_content", content_type, original, prompt))
        return original


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, secs):
        self.now += secs


class FakeStream:
    """Input stream double: records lifecycle calls and lets tests push chunks."""

    def __init__(self, callback):
        self.callback = callback
        self.started = False
        self.stopped = False
        self.closed = False

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def close(self):
        self.closed = True

    def push(self, data: bytes):
        self.callback(data, len(data) // 2, None, None)


class TestClientSession:
    """Adapts FastAPI's TestClient to the subset of requests.Session the clients use."""

    __test__ = False

    def __init__(self, client):
        self.client = client

    def post(self, url, json=None, headers=None, timeout=None):
        return _Response(self.client.post(url, json=json, headers=headers))


class _Response:
    def __init__(self, response):
        self._response = response
        self.status_code = response.status_code
        self.ok = response.is_success
        self.reason = response.reason_phrase
        self.text = response.text

    def json(self):
        return self._response.json()


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.reason = "OK" if self.ok else "Error"
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")


class RecordingHTTP:
    """Queue of canned responses; every call is kept for assertions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, call):
        self.calls.append(call)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method, url, **kwargs):
        return self._next((method, url, kwargs))

    def post(self, url, **kwargs):
        return self._next(("POST", url, kwargs))
