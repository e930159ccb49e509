from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass
class AccessTokenCache:
    """Bearer token owned by a single calendar adapter instance."""

    token: str | None = None
    expires_at: float = 0.0
    skew_seconds: float = 60.0

    def get(self, now: float | None = None) -> str | None:
        now = time.time() if now is None else now
        if self.token and now < self.expires_at:
            return self.token
        return None

    def store(self, token: str, expires_in: float, now: float | None = None) -> None:
        now = time.time() if now is None else now
        self.token = token
        self.expires_at = now + max(float(expires_in) - self.skew_seconds, 0.0)

    def clear(self) -> None:
        self.token = None
        self.expires_at = 0.0
