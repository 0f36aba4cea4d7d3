SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS api_rate_limits (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id         TEXT NOT NULL,
    endpoint        TEXT NOT NULL,
    request_count   INTEGER NOT NULL DEFAULT 1,
    window_start    REAL NOT NULL,
    created_at      TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_api_rate_limits_lookup
    ON api_rate_limits (user_id, endpoint, window_start);
"""
