"""
Unit tests for TokenValidator.
"""

import time

import pytest
from jose import jwt

from service_auth.app.validation.token_validator import TokenValidator
from shared.test_helpers import TEST_JWT_SECRET, TokenFactory


class TestTokenValidator:
    """Test cases for TokenValidator."""

    @pytest.fixture
    def token_validator(self):
        return TokenValidator(TEST_JWT_SECRET, ttl_seconds=3600)

    @pytest.fixture
    def tokens(self):
        return TokenFactory(TEST_JWT_SECRET)

    def test_issue_and_validate(self, token_validator):
        token = token_validator.issue("user-1", "a@example.com")

        result = token_validator.validate(token)

        assert result.valid is True
        assert result.user_id == "user-1"

    def test_issued_claims(self, token_validator):
        before = int(time.time())
        token = token_validator.issue("user-1", "a@example.com")

        claims = jwt.get_unverified_claims(token)

        assert claims["user_id"] == "user-1"
        assert claims["email"] == "a@example.com"
        assert before + 3600 <= claims["exp"] <= int(time.time()) + 3600
        assert jwt.get_unverified_header(token)["alg"] == "HS256"

    def test_bearer_prefix_tolerated(self, token_validator):
        token = token_validator.issue("user-1", "a@example.com")

        assert token_validator.validate(f"Bearer {token}").valid is True

    def test_expired_token(self, token_validator, tokens):
        result = token_validator.validate(tokens.create_expired())

        assert result.valid is False
        assert result.user_id == ""

    def test_wrong_secret(self, token_validator, tokens):
        assert token_validator.validate(tokens.create_foreign()).valid is False

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "Bearer "])
    def test_unparseable_token(self, token_validator, token):
        assert token_validator.validate(token).valid is False

    @pytest.mark.parametrize("user_id", [None, "", "   ", 123])
    def test_bad_user_id_claim(self, token_validator, tokens, user_id):
        result = token_validator.validate(tokens.create(user_id=user_id))

        assert result.valid is False
        assert result.user_id == ""

    def test_missing_user_id_claim(self, token_validator):
        token = jwt.encode(
            {"email": "a@example.com", "exp": int(time.time()) + 60},
            TEST_JWT_SECRET,
            algorithm="HS256"
        )

        assert token_validator.validate(token).valid is False
