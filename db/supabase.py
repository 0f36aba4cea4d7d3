import logging
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class SupabaseError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class SupabaseClient:
    """Thin client over the Supabase REST surface (PostgREST, Auth, Storage).

    ``api_key`` is the project key sent as ``apikey``. ``access_token`` is the
    signed-in user's JWT; when set, row-level security scopes every query to
    that user. Without it the api key itself is used as bearer, which is what
    the server side does with the service role key.
    """

    def __init__(self, url: str, api_key: str, access_token: str | None = None,
                 session: requests.Session | None = None, timeout: int = DEFAULT_TIMEOUT):
        if not url:
            raise ValueError("Supabase URL is required")
        self.url = url.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.session = session or requests.Session()
        self.timeout = timeout

    def with_token(self, access_token: str) -> "SupabaseClient":
        return SupabaseClient(self.url, self.api_key, access_token, self.session, self.timeout)

    def _headers(self, extra: dict | None = None) -> dict:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        response = self.session.request(
            method, f"{self.url}{path}", timeout=self.timeout, **kwargs
        )
        if not response.ok:
            message = _error_message(response)
            logger.warning("Supabase %s %s -> %d: %s", method, path, response.status_code, message)
            raise SupabaseError(response.status_code, message)
        return response

    # -- PostgREST --

    def select(self, table: str, order: list[tuple[str, bool]] | None = None,
               filters: dict | None = None) -> list[dict]:
        params = {"select": "*"}
        if order:
            params["order"] = ",".join(
                f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in order
            )
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        response = self._request("GET", f"/rest/v1/{table}", headers=self._headers(), params=params)
        return response.json()

    def insert(self, table: str, row: dict) -> dict:
        response = self._request(
            "POST", f"/rest/v1/{table}",
            headers=self._headers({"Prefer": "return=representation"}),
            json=[row],
        )
        return _single(response.json())

    def update(self, table: str, row_id: str, fields: dict) -> dict:
        response = self._request(
            "PATCH", f"/rest/v1/{table}",
            headers=self._headers({"Prefer": "return=representation"}),
            params={"id": f"eq.{row_id}"},
            json=fields,
        )
        return _single(response.json())

    def delete(self, table: str, row_id: str) -> None:
        self._request(
            "DELETE", f"/rest/v1/{table}",
            headers=self._headers(),
            params={"id": f"eq.{row_id}"},
        )

    # -- Auth --

    def sign_in_with_password(self, email: str, password: str) -> dict:
        """Abre uma sessao no Supabase Auth.

        Retorna a sessao (``access_token``, ``refresh_token``, ``user``...).
        Use ``with_token(session["access_token"])`` para operar como o usuario.
        """
        response = self._request(
            "POST", "/auth/v1/token",
            headers={"apikey": self.api_key, "Content-Type": "application/json"},
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return response.json()

    def get_user(self, token: str) -> dict:
        response = self._request(
            "GET", "/auth/v1/user",
            headers={"apikey": self.api_key, "Authorization": f"Bearer {token}"},
        )
        return response.json()

    # -- Storage --

    def upload(self, bucket: str, path: str, data: bytes, content_type: str,
               upsert: bool = True, cache_control: str = "3600") -> str:
        response = self._request(
            "POST", f"/storage/v1/object/{bucket}/{quote(path)}",
            headers=self._headers({
                "Content-Type": content_type,
                "Cache-Control": f"max-age={cache_control}",
                "x-upsert": "true" if upsert else "false",
            }),
            data=data,
        )
        return response.json().get("Key", f"{bucket}/{path}")

    def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str:
        response = self._request(
            "POST", f"/storage/v1/object/sign/{bucket}/{quote(path)}",
            headers=self._headers(),
            json={"expiresIn": expires_in},
        )
        signed = response.json().get("signedURL") or response.json().get("signedUrl")
        if not signed:
            raise SupabaseError(response.status_code, "Signed URL missing from response")
        if signed.startswith("http"):
            return signed
        return f"{self.url}/storage/v1{signed}"


def _single(payload) -> dict:
    if isinstance(payload, list):
        if len(payload) != 1:
            raise SupabaseError(406, f"Expected a single row, got {len(payload)}")
        return payload[0]
    return payload


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason or "Unknown error"
    if isinstance(body, dict):
        return body.get("message") or body.get("msg") or body.get("error_description") \
            or body.get("error") or str(body)
    return str(body)
