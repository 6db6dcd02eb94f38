"""
auth/dependencies.py -- FastAPI Depends() helpers: the request guard.

get_current_identity() is the guard stage for protected routes. It runs
before the route body, so a request with a missing, tampered, malformed or
expired access token is rejected with 401 before AuthService is touched.

Only expiry is reported distinctly ("token_expired") so clients know to
refresh or log in again; every other failure is a plain "unauthorized".

The guard does not look the subject up in the store. Routes that need the
user record (e.g. /auth/profile) go through the service, which reports a
missing subject as NotFoundError.

Layer rule: no imports from api/ or core/. This module may import from
fastapi because it is part of the dependency injection system.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from auth.errors import TokenError, TokenExpiredError
from auth.models import TokenPayload
from auth.service import AuthService

_BEARER_PREFIX = "bearer "


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService wired into app.state by the lifespan."""
    return request.app.state.auth_service


def _unauthorized(code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail={"code": code, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_bearer_token(request: Request) -> str:
    """Extract the token from "Authorization: Bearer <token>". Raises 401 if absent."""
    header = request.headers.get("Authorization", "")
    if not header.lower().startswith(_BEARER_PREFIX):
        raise _unauthorized("unauthorized", "Authentication required.")
    token = header[len(_BEARER_PREFIX) :].strip()
    if not token:
        raise _unauthorized("unauthorized", "Authentication required.")
    return token


def get_current_identity(request: Request) -> TokenPayload:
    """Require a valid access token; attach its claims to request.state.identity.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(identity: TokenPayload = Depends(get_current_identity)): ...
    """
    token = get_bearer_token(request)
    service = get_auth_service(request)
    try:
        identity = service.issuer.verify_access(token)
    except TokenExpiredError as exc:
        raise _unauthorized("token_expired", "Token has expired. Please log in again.") from exc
    except TokenError as exc:
        raise _unauthorized("unauthorized", "Invalid access token.") from exc

    request.state.identity = identity
    return identity
