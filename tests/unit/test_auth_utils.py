from __future__ import annotations

from datetime import UTC, datetime, timedelta

from castpress.adapters.auth.crypto import JWTAuthAdapter
from castpress.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = get_password_hash("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert hashed.startswith("$argon2")
        assert verify_password("s3cret-pass", hashed) is True
        assert verify_password("wrong", hashed) is False


class TestTokens:
    def test_round_trip(self) -> None:
        token = create_access_token({"sub": "abc"}, secret_key="k1")

        payload = decode_access_token(token, secret_key="k1")

        assert payload is not None
        assert payload["sub"] == "abc"
        assert payload["exp"] - payload["iat"] == 4 * 60 * 60

    def test_wrong_key(self) -> None:
        token = create_access_token({"sub": "abc"}, secret_key="k1")

        assert decode_access_token(token, secret_key="k2") is None

    def test_expired(self) -> None:
        issued = datetime.now(UTC) - timedelta(hours=5)
        token = create_access_token({"sub": "abc"}, now_utc=issued, secret_key="k1")

        assert decode_access_token(token, secret_key="k1") is None

    def test_garbage(self) -> None:
        assert decode_access_token("not-a-jwt", secret_key="k1") is None


class TestJWTAuthAdapter:
    def test_token_claims(self) -> None:
        adapter = JWTAuthAdapter("adapter-key")

        token = adapter.create_token({"sub": "id-1", "is_super_admin": True}, ttl_minutes=5)
        claims = adapter.decode_token(token)

        assert claims is not None
        assert claims["sub"] == "id-1"
        assert claims["is_super_admin"] is True

    def test_passwords(self) -> None:
        adapter = JWTAuthAdapter("adapter-key")

        hashed = adapter.hash_password("password1")

        assert adapter.verify_password("password1", hashed)
        assert not adapter.verify_password("password2", hashed)
