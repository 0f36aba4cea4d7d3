import logging
import threading
import time
from typing import Callable

from db.database import Database
from server.errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Janela deslizante por (usuario, endpoint) registrada no SQLite."""

    def __init__(self, db: Database, max_requests: int = 10, window_secs: int = 3600,
                 clock: Callable[[], float] = time.time):
        self.db = db
        self.max_requests = max_requests
        self.window_secs = window_secs
        self.clock = clock
        # Count and insert must not interleave across threadpool workers
        self._lock = threading.Lock()

    def check(self, user_id: str, endpoint: str) -> int:
        """Registra a requisicao ou levanta RateLimitError. Retorna o total na janela."""
        with self._lock:
            now = self.clock()
            window_start = now - self.window_secs

            total = self.db.count_requests_since(user_id, endpoint, window_start)
            if total >= self.max_requests:
                logger.warning("Limite excedido: usuario=%s endpoint=%s (%d)", user_id, endpoint, total)
                raise RateLimitError(
                    f"Rate limit exceeded. Maximum {self.max_requests} requests per hour"
                )

            self.db.insert_rate_limit(user_id, endpoint, now)
            return total + 1

    def purge(self) -> int:
        return self.db.purge_rate_limits_before(self.clock() - self.window_secs)
