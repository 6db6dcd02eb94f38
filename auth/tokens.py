"""
auth/tokens.py -- JWT issuance and verification for access and refresh tokens.

Security design decisions:
  JWT: python-jose with HS256. Both token kinds carry the same identity
       claims (sub, email, name) plus iat, exp and a random jti, so every
       issuance produces a distinct string.

  Two secrets: access tokens are signed with JWT_SECRET and refresh tokens
       with JWT_REFRESH_SECRET. Verifying one kind under the other's secret
       fails the signature check, so a refresh token can never be replayed
       as an access token and vice versa. TokenIssuer refuses equal secrets.

  Failure modes: verify() separates three outcomes --
       TokenMalformedError  the string cannot be parsed as a JWT at all
       TokenExpiredError    signature is good but exp has passed
       TokenInvalidError    signature mismatch or missing/ill-typed claims
       The service collapses all three on refresh; only the request guard
       reports expiry separately.

Layer rule: no imports from api/. core/ is imported only by from_settings().
"""

from __future__ import annotations

import time
import uuid
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from jose import ExpiredSignatureError, JWTError, jwt

from auth.errors import TokenExpiredError, TokenInvalidError, TokenMalformedError
from auth.models import TokenPair, TokenPayload

if TYPE_CHECKING:
    from auth.models import User
    from core.config import Settings

_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = {"sub": str, "email": str, "name": str, "exp": int}


def _ttl_seconds(ttl: timedelta | int) -> int:
    seconds = int(ttl.total_seconds()) if isinstance(ttl, timedelta) else int(ttl)
    if seconds <= 0:
        raise ValueError(f"Token lifetime must be positive, got {seconds}s.")
    return seconds


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def issue(claims: dict[str, Any], secret: str, ttl: timedelta | int) -> str:
    """Sign claims with secret, adding iat, exp (now + ttl) and jti.

    ttl is a timedelta or a number of seconds and must be positive.
    """
    now = int(time.time())
    payload = dict(claims)
    payload.update(
        {
            "iat": now,
            "exp": now + _ttl_seconds(ttl),
            "jti": uuid.uuid4().hex,
        }
    )
    return jwt.encode(payload, secret, algorithm=_ALGORITHM)


def verify(token: str, secret: str) -> dict[str, Any]:
    """Verify token against secret and return its claims.

    Raises TokenMalformedError, TokenExpiredError or TokenInvalidError.
    """
    try:
        jwt.get_unverified_header(token)
    except JWTError as exc:
        raise TokenMalformedError(str(exc)) from exc

    try:
        claims = jwt.decode(token, secret, algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError(str(exc)) from exc
    except JWTError as exc:
        raise TokenInvalidError(str(exc)) from exc

    for name, expected in _REQUIRED_CLAIMS.items():
        if not isinstance(claims.get(name), expected):
            raise TokenInvalidError(f"Missing or invalid claim: {name}")
    return claims


# ---------------------------------------------------------------------------
# Issuer bound to configured secrets and lifetimes
# ---------------------------------------------------------------------------


class TokenIssuer:
    """Issues and verifies access/refresh token pairs.

    Usage:
        issuer = TokenIssuer(access_secret, refresh_secret, access_ttl=600, refresh_ttl=604800)
        pair = issuer.issue_pair(user)
        payload = issuer.verify_access(pair.access_token)
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta | int,
        refresh_ttl: timedelta | int,
    ) -> None:
        if not access_secret or not refresh_secret:
            raise ValueError("Both token secrets must be set.")
        if access_secret == refresh_secret:
            raise ValueError("Access and refresh tokens must use different secrets.")
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.access_ttl = _ttl_seconds(access_ttl)
        self.refresh_ttl = _ttl_seconds(refresh_ttl)

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(
            access_secret=settings.jwt_secret,
            refresh_secret=settings.jwt_refresh_secret,
            access_ttl=settings.jwt_expiration,
            refresh_ttl=settings.jwt_refresh_expiration,
        )

    def issue_pair(self, user: User) -> TokenPair:
        claims = {"sub": user.id, "email": user.email, "name": user.name}
        return TokenPair(
            access_token=issue(claims, self._access_secret, self.access_ttl),
            refresh_token=issue(claims, self._refresh_secret, self.refresh_ttl),
            expires_in=self.access_ttl,
        )

    def verify_access(self, token: str) -> TokenPayload:
        return _to_payload(verify(token, self._access_secret))

    def verify_refresh(self, token: str) -> TokenPayload:
        return _to_payload(verify(token, self._refresh_secret))


def _to_payload(claims: dict[str, Any]) -> TokenPayload:
    return TokenPayload(sub=claims["sub"], email=claims["email"], name=claims["name"], exp=claims["exp"])
