from datetime import UTC, datetime, timedelta
from threading import Lock
from typing import Protocol

from castpress.rules.models import RateLimitRules

DEFAULT_LOGIN_ATTEMPTS = 10
DEFAULT_UPLOAD_REQUESTS = 100


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...


class _UtcClock:
    def now_utc(self) -> datetime:
        return datetime.now(UTC)


class RateLimiter:
    """Sliding-window limiter keyed by client IP (login) or admin id (upload)."""

    def __init__(
        self,
        rules: RateLimitRules,
        time_port: TimePort | None = None,
    ):
        self.rules = rules
        self._time = time_port if time_port is not None else _UtcClock()
        self._history: dict[str, list[datetime]] = {}
        self._lock = Lock()

    def _prune(self, key: str, window: int, now: datetime) -> list[datetime]:
        cutoff = now - timedelta(seconds=window)
        recent = [t for t in self._history.get(key, []) if t > cutoff]
        if recent:
            self._history[key] = recent
        else:
            self._history.pop(key, None)
        return recent

    def allow_request(self, key: str, window: int, limit: int) -> bool:
        """Record the attempt and return True, or return False when over the limit."""
        if limit <= 0:
            return False

        with self._lock:
            now = self._time.now_utc()
            recent = self._prune(key, window, now)
            if len(recent) >= limit:
                return False
            self._history.setdefault(key, []).append(now)
            return True

    def reset(self, key: str) -> None:
        with self._lock:
            self._history.pop(key, None)

    def check_login(self, ip: str) -> bool:
        cfg = self.rules.login
        limit = cfg.max_attempts if cfg.max_attempts is not None else DEFAULT_LOGIN_ATTEMPTS
        return self.allow_request(f"login:{ip}", cfg.window_seconds, limit)

    def check_upload(self, admin_id: str) -> bool:
        cfg = self.rules.upload
        limit = cfg.max_requests if cfg.max_requests is not None else DEFAULT_UPLOAD_REQUESTS
        return self.allow_request(f"upload:{admin_id}", cfg.window_seconds, limit)
