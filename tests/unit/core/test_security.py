"""
Unit tests for security utilities (password hashing, JWT tokens).

All tests are fully mocked - no database or external dependencies.
"""

import uuid
from datetime import timedelta

import pytest
from jose import JWTError, jwt

from src.core import security
from src.core.config import settings
from src.exceptions import InvalidTokenError


class TestPasswordHashing:
    """Test password hashing with Argon2id."""

    def test_hash_password_returns_argon2id_hash(self):
        hashed = security.hash_password("secret123")

        assert isinstance(hashed, str)
        assert hashed.startswith("$argon2id$")

    def test_hash_password_different_for_same_password(self):
        """Hashing twice produces different hashes (random salt)."""
        assert security.hash_password("secret123") != security.hash_password("secret123")

    def test_verify_password_correct_password(self):
        hashed = security.hash_password("secret123")

        assert security.verify_password("secret123", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = security.hash_password("secret123")

        assert security.verify_password("wrong-password", hashed) is False

    def test_verify_password_without_hash(self):
        """Google-only accounts have no hash and never match a password."""
        assert security.verify_password("secret123", None) is False
        assert security.verify_password("secret123", "") is False

    def test_verify_password_malformed_hash(self):
        assert security.verify_password("secret123", "not-a-hash") is False


class TestAccessTokens:
    """Test bearer token issuing and reading."""

    def test_issue_and_read_round_trip(self):
        user_id = uuid.uuid4()
        token = security.issue_access_token(user_id, "a@example.com")

        assert security.read_access_token(token) == user_id

    def test_claims(self):
        user_id = uuid.uuid4()
        claims = security.decode_token(security.issue_access_token(user_id, "a@example.com"))

        assert claims["sub"] == str(user_id)
        assert claims["email"] == "a@example.com"
        assert claims["type"] == security.TOKEN_TYPE_ACCESS
        assert claims["jti"]

    def test_default_lifetime_is_configured_minutes(self):
        claims = security.decode_token(security.issue_access_token(uuid.uuid4()))

        assert claims["exp"] - claims["iat"] == settings.access_token_expire_minutes * 60
        assert "email" not in claims

    def test_tokens_are_unique(self):
        user_id = uuid.uuid4()

        assert security.issue_access_token(user_id) != security.issue_access_token(user_id)

    def test_expired_token_rejected(self):
        token = security.issue_access_token(uuid.uuid4(), lifetime=timedelta(seconds=-5))

        with pytest.raises(JWTError):
            security.decode_token(token)
        with pytest.raises(InvalidTokenError):
            security.read_access_token(token)

    def test_token_signed_with_other_key_rejected(self):
        token = jwt.encode({"sub": str(uuid.uuid4()), "type": "access"}, "x" * 40, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            security.read_access_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(InvalidTokenError) as exc_info:
            security.read_access_token("not.a.jwt")

        assert exc_info.value.error_code == "INVALID_TOKEN"

    def test_wrong_token_type_rejected(self):
        token = jwt.encode(
            {"sub": str(uuid.uuid4()), "type": "refresh"}, settings.secret_key, algorithm="HS256"
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            security.read_access_token(token)

        assert exc_info.value.message == "Invalid token type"

    def test_subject_must_be_user_id(self):
        token = jwt.encode(
            {"sub": "user-1", "type": "access"}, settings.secret_key, algorithm="HS256"
        )

        with pytest.raises(InvalidTokenError) as exc_info:
            security.read_access_token(token)

        assert exc_info.value.message == "Invalid token payload"
