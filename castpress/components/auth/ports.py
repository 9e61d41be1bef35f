from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from castpress.domain.entities import Admin


class AdminRepoPort(Protocol):
    def get_by_id(self, admin_id: UUID) -> Admin | None: ...
    def get_by_username(self, username: str) -> Admin | None: ...
    def save(self, admin: Admin) -> Admin: ...
    def count(self) -> int: ...
    def delete(self, admin_id: UUID) -> bool: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def create_token(self, claims: dict[str, Any], ttl_minutes: int) -> str: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
