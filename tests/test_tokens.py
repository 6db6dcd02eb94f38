"""Unit tests for auth/tokens.py -- JWT issue/verify and the access/refresh issuer.

Covers:
- issue() adds iat/exp/jti and verify() returns the claims
- verify() distinguishes malformed, expired and invalid tokens
- access and refresh secrets are not interchangeable
- TokenIssuer rejects shared secrets and non-positive lifetimes
"""

import time
from datetime import timedelta

import pytest
from jose import jwt

from auth import tokens
from auth.errors import TokenError, TokenExpiredError, TokenInvalidError, TokenMalformedError
from auth.models import User
from auth.tokens import TokenIssuer

ACCESS_SECRET = "access-secret-for-tests-0123456789abcdef"
REFRESH_SECRET = "refresh-secret-for-tests-0123456789abcdef"
CLAIMS = {"sub": "abc123", "email": "a@x.com", "name": "A"}


@pytest.fixture
def user() -> User:
    return User(id="abc123", email="a@x.com", hashed_password="$2b$04$unused", name="A")


class TestPrimitives:
    def test_round_trip_claims(self) -> None:
        token = tokens.issue(CLAIMS, ACCESS_SECRET, 600)
        claims = tokens.verify(token, ACCESS_SECRET)
        assert claims["sub"] == "abc123"
        assert claims["email"] == "a@x.com"
        assert claims["name"] == "A"
        assert claims["exp"] - claims["iat"] == 600
        assert claims["jti"]

    def test_timedelta_ttl(self) -> None:
        token = tokens.issue(CLAIMS, ACCESS_SECRET, timedelta(minutes=10))
        claims = tokens.verify(token, ACCESS_SECRET)
        assert claims["exp"] - claims["iat"] == 600

    def test_each_issue_is_distinct(self) -> None:
        assert tokens.issue(CLAIMS, ACCESS_SECRET, 600) != tokens.issue(CLAIMS, ACCESS_SECRET, 600)

    @pytest.mark.parametrize("ttl", [0, -1, timedelta(0)])
    def test_non_positive_ttl_rejected(self, ttl) -> None:
        with pytest.raises(ValueError):
            tokens.issue(CLAIMS, ACCESS_SECRET, ttl)

    @pytest.mark.parametrize("garbage", ["garbage", "", "a.b", "not.a.jwt"])
    def test_garbage_is_malformed(self, garbage: str) -> None:
        with pytest.raises(TokenMalformedError):
            tokens.verify(garbage, ACCESS_SECRET)

    def test_wrong_secret_is_invalid(self) -> None:
        token = tokens.issue(CLAIMS, "some-other-secret-0123456789abcdef", 600)
        with pytest.raises(TokenInvalidError):
            tokens.verify(token, ACCESS_SECRET)

    def test_expired_token(self) -> None:
        now = int(time.time())
        token = jwt.encode({**CLAIMS, "iat": now - 120, "exp": now - 60}, ACCESS_SECRET, algorithm="HS256")
        with pytest.raises(TokenExpiredError):
            tokens.verify(token, ACCESS_SECRET)

    def test_missing_subject_is_invalid(self) -> None:
        token = tokens.issue({"email": "a@x.com", "name": "A"}, ACCESS_SECRET, 600)
        with pytest.raises(TokenInvalidError):
            tokens.verify(token, ACCESS_SECRET)

    def test_all_failures_share_base_class(self) -> None:
        for exc in (TokenExpiredError, TokenInvalidError, TokenMalformedError):
            assert issubclass(exc, TokenError)


class TestTokenIssuer:
    def test_pair_verifies_with_same_subject(self, issuer: TokenIssuer, user: User) -> None:
        pair = issuer.issue_pair(user)
        access = issuer.verify_access(pair.access_token)
        refresh = issuer.verify_refresh(pair.refresh_token)
        assert access.sub == refresh.sub == "abc123"
        assert access.email == "a@x.com"
        assert pair.token_type == "bearer"
        assert pair.expires_in == 600

    def test_refresh_outlives_access(self, issuer: TokenIssuer, user: User) -> None:
        pair = issuer.issue_pair(user)
        access = issuer.verify_access(pair.access_token)
        refresh = issuer.verify_refresh(pair.refresh_token)
        assert refresh.exp > access.exp

    def test_access_token_rejected_as_refresh(self, issuer: TokenIssuer, user: User) -> None:
        pair = issuer.issue_pair(user)
        with pytest.raises(TokenInvalidError):
            issuer.verify_refresh(pair.access_token)

    def test_refresh_token_rejected_as_access(self, issuer: TokenIssuer, user: User) -> None:
        pair = issuer.issue_pair(user)
        with pytest.raises(TokenInvalidError):
            issuer.verify_access(pair.refresh_token)

    def test_shared_secret_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenIssuer(ACCESS_SECRET, ACCESS_SECRET, access_ttl=600, refresh_ttl=3600)

    def test_non_positive_lifetime_rejected(self) -> None:
        with pytest.raises(ValueError):
            TokenIssuer(ACCESS_SECRET, REFRESH_SECRET, access_ttl=0, refresh_ttl=3600)
