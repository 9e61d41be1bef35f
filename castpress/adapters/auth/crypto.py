from datetime import timedelta
from typing import Any

from castpress.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """Auth adapter that signs JWTs and hashes passwords with passlib (argon2)."""

    def __init__(self, secret_key: str | None = None) -> None:
        self._secret_key = secret_key

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_token(self, claims: dict[str, Any], ttl_minutes: int) -> str:
        return create_access_token(
            claims, timedelta(minutes=ttl_minutes), secret_key=self._secret_key
        )

    def decode_token(self, token: str) -> dict[str, Any] | None:
        return decode_access_token(token, secret_key=self._secret_key)
