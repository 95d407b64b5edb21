"""Unit tests for tuneshare.core.security: bcrypt hashing, verification codes, session JWTs."""

import os
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt
from pydantic import SecretStr

from tuneshare.core.config import PLACEHOLDER_JWT_SECRET, Settings
from tuneshare.core.security import (
    create_session_token,
    hash_password,
    issue_verification_code,
    resolve_session_token,
    verify_password,
)


def _settings(secret: str = "test-secret", **kwargs: object) -> Settings:
    """Build settings without reading .env (sqlite so no Postgres is implied)."""
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        JWT_SECRET=SecretStr(secret),
        **kwargs,
    )


class TestPasswordHashing(unittest.TestCase):
    """hash_password/verify_password round-trip and reject mismatches without raising."""

    def test_round_trip(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        self.assertNotEqual(hashed, "pw123")
        self.assertTrue(verify_password("pw123", hashed))

    def test_different_password_fails(self) -> None:
        hashed = hash_password("pw123", rounds=4)
        self.assertFalse(verify_password("pw124", hashed))

    def test_salted(self) -> None:
        self.assertNotEqual(hash_password("same", rounds=4), hash_password("same", rounds=4))

    def test_cost_factor_is_encoded(self) -> None:
        self.assertTrue(hash_password("pw123", rounds=5).startswith("$2b$05$"))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("pw123", "not-a-bcrypt-hash"))


class TestVerificationCode(unittest.TestCase):
    """issue_verification_code returns a 6-digit code expiring after the TTL."""

    def test_six_digits_in_range(self) -> None:
        for _ in range(200):
            vc = issue_verification_code()
            self.assertEqual(len(vc.code), 6)
            self.assertTrue(vc.code.isdigit())
            self.assertTrue(100000 <= int(vc.code) <= 999999)

    def test_expiry_is_ttl_after_now(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        vc = issue_verification_code(ttl_hours=24, now=now)
        self.assertEqual(vc.expires_at, now + timedelta(hours=24))


class TestSessionToken(unittest.TestCase):
    """resolve_session_token returns an identity for valid tokens and None for anything else."""

    def test_round_trip(self) -> None:
        settings = _settings()
        token = create_session_token(7, "alice", settings)
        identity = resolve_session_token(token, settings)
        self.assertIsNotNone(identity)
        self.assertEqual(identity.id, 7)
        self.assertEqual(identity.username, "alice")

    def test_expires_after_ttl(self) -> None:
        settings = _settings()
        token = create_session_token(7, "alice", settings)
        payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
        self.assertEqual(payload["exp"] - payload["iat"], 24 * 3600)

    def test_expired_token_is_anonymous(self) -> None:
        settings = _settings()
        issued = datetime.now(UTC) - timedelta(hours=25)
        token = create_session_token(7, "alice", settings, now=issued)
        self.assertIsNone(resolve_session_token(token, settings))

    def test_foreign_key_is_anonymous(self) -> None:
        token = create_session_token(7, "alice", _settings(secret="other-secret"))
        self.assertIsNone(resolve_session_token(token, _settings()))

    def test_garbage_and_missing_are_anonymous(self) -> None:
        settings = _settings()
        self.assertIsNone(resolve_session_token("not.a.jwt", settings))
        self.assertIsNone(resolve_session_token("", settings))
        self.assertIsNone(resolve_session_token(None, settings))

    def test_missing_claims_are_anonymous(self) -> None:
        settings = _settings()
        exp = datetime.now(UTC) + timedelta(hours=1)
        no_username = jwt.encode({"sub": "7", "exp": exp}, "test-secret", algorithm="HS256")
        bad_sub = jwt.encode(
            {"sub": "abc", "username": "alice", "exp": exp}, "test-secret", algorithm="HS256"
        )
        no_exp = jwt.encode({"sub": "7", "username": "alice"}, "test-secret", algorithm="HS256")
        self.assertIsNone(resolve_session_token(no_username, settings))
        self.assertIsNone(resolve_session_token(bad_sub, settings))
        self.assertIsNone(resolve_session_token(no_exp, settings))


class TestSettingsValidation(unittest.TestCase):
    """A missing or blank signing key, or an out-of-range cost is a startup error."""

    def test_blank_jwt_secret_rejected(self) -> None:
        with self.assertRaises(ValueError):
            _settings(secret="  ")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValueError):
            _settings(BCRYPT_ROUNDS=3)
        self.assertEqual(_settings(BCRYPT_ROUNDS=12).BCRYPT_ROUNDS, 12)

    def test_non_sql_database_url_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Settings(
                _env_file=None,
                DATABASE_URL="mysql://localhost/x",
                JWT_SECRET=SecretStr("test-secret"),
            )

    def test_missing_jwt_secret_rejected(self) -> None:
        env = {k: v for k, v in os.environ.items() if k.upper() != "JWT_SECRET"}
        with patch.dict(os.environ, env, clear=True):
            with self.assertRaises(ValueError):
                Settings(_env_file=None, DATABASE_URL="sqlite://")

    def test_jwt_secret_read_from_environment(self) -> None:
        with patch.dict(os.environ, {"JWT_SECRET": "from-env"}):
            settings = Settings(_env_file=None, DATABASE_URL="sqlite://")
        self.assertEqual(settings.JWT_SECRET.get_secret_value(), "from-env")

    def test_placeholder_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValueError):
            _settings(secret=PLACEHOLDER_JWT_SECRET, APP_ENV="prod")
        # Local development may still run from the copied .env.example.
        self.assertEqual(_settings(secret=PLACEHOLDER_JWT_SECRET).APP_ENV, "dev")


if __name__ == "__main__":
    unittest.main()
