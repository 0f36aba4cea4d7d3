import logging

from db.supabase import SupabaseClient, SupabaseError
from server.errors import AuthError

logger = logging.getLogger(__name__)


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthError("Authentication required")
    token = authorization.removeprefix("Bearer ").strip()
    if not token:
        raise AuthError("Authentication required")
    return token


class SupabaseAuthVerifier:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def authenticate(self, authorization: str | None) -> str:
        """Valida o JWT no Supabase Auth e retorna o id do usuario."""
        token = bearer_token(authorization)
        try:
            user = self.client.get_user(token)
        except SupabaseError as e:
            if e.status_code in (401, 403):
                raise AuthError("Invalid authentication token") from e
            raise

        user_id = (user or {}).get("id")
        if not user_id:
            raise AuthError("Invalid authentication token")
        return user_id
