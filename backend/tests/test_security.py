"""Tests for the credential primitives."""
from datetime import timedelta

import jwt
import pytest

from taskflow.config import settings
from taskflow.errors import AuthenticationError
from taskflow.security import hash_password, issue_token, verify_password, verify_token


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("secret124", hashed)

    def test_malformed_hash_does_not_verify(self):
        assert not verify_password("secret123", "not-a-bcrypt-hash")


class TestTokens:

    def test_round_trip(self):
        assert verify_token(issue_token("user-1")) == "user-1"

    def test_expired(self):
        token = issue_token("user-1", expires_in=timedelta(seconds=-10))
        with pytest.raises(AuthenticationError, match="expired"):
            verify_token(token)

    def test_wrong_secret(self):
        token = jwt.encode({"sub": "user-1", "exp": 9999999999}, "other-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            verify_token(token)

    def test_missing_subject(self):
        token = jwt.encode({"exp": 9999999999}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(AuthenticationError):
            verify_token(token)
