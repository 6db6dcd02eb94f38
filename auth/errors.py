"""
auth/errors.py -- Typed failures raised by the auth layer.

Two families:
  AuthError   -- outward-facing outcomes of service operations. Each carries
                 the HTTP-analog status and a stable machine-readable code;
                 api/main.py maps them into the error envelope.
  TokenError  -- internal verification outcomes from auth/tokens.py. The
                 service collapses these into UnauthorizedError on refresh;
                 the request guard distinguishes only TokenExpiredError.

Layer rule: no imports from api/ or core/, and no web framework imports.
"""

from __future__ import annotations


class AuthError(Exception):
    status_code: int = 400
    code: str = "auth_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConflictError(AuthError):
    status_code = 409
    code = "conflict"


class UnauthorizedError(AuthError):
    status_code = 401
    code = "unauthorized"


class NotFoundError(AuthError):
    status_code = 404
    code = "not_found"


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpiredError(TokenError):
    """The token's exp claim is in the past."""


class TokenInvalidError(TokenError):
    """Signature mismatch or missing/ill-typed claims."""


class TokenMalformedError(TokenError):
    """The string is not a parseable JWT."""


class DuplicateEmailError(Exception):
    """The store's unique index on email rejected an insert."""
