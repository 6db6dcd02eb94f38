"""
api/routes/v1/auth.py -- Sign-up, sign-in, token refresh and profile endpoints.

Routes:
  POST /api/v1/auth/signup    -- create account; 201 with user + token pair
  POST /api/v1/auth/signin    -- password login; 200 with token pair
  POST /api/v1/auth/refresh   -- exchange refresh token; 201 with new pair
  GET  /api/v1/auth/profile   -- current user {id, email, name} (requires auth)

Security:
  signup/signin/refresh are rate-limited per client IP (see api/limiter.py).
  signin goes through AuthService.authenticate(), which is
  fail-closed and timing-equalized -- never inline a store lookup + verify.
  Wrong email and wrong password share one error ("bad_credentials").
  Token responses carry Cache-Control: no-store.

AuthError raised by the service (ConflictError, UnauthorizedError,
NotFoundError) is rendered by the exception handler in api/main.py.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from api.limiter import limiter
from api.models import (
    RefreshRequest,
    SignInRequest,
    SignUpRequest,
    SignUpResponse,
    TokenResponse,
    UserResponse,
)
from auth.dependencies import get_auth_service, get_current_identity
from auth.errors import UnauthorizedError
from auth.models import TokenPayload, UserProfile
from auth.service import AuthService
from core.config import get_settings

logger = logging.getLogger("authapi.api.auth")

_settings = get_settings()

# Auth policy:
# - POST /api/v1/auth/signup:   public
# - POST /api/v1/auth/signin:   public
# - POST /api/v1/auth/refresh:  public -- the refresh token is the credential
# - GET  /api/v1/auth/profile:  requires access token (get_current_identity)
router = APIRouter()


def _no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store"


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@limiter.limit(_settings.signup_rate_limit)
@router.post("/auth/signup", response_model=SignUpResponse, status_code=201)
def sign_up(
    request: Request,
    response: Response,
    body: SignUpRequest,
    service: AuthService = Depends(get_auth_service),
) -> SignUpResponse:
    """Create an account and return it with a first token pair.

    409 if the email is already registered (case-insensitive).
    """
    result = service.sign_up(body.email, body.password, body.name)
    logger.info("Signed up user %s", result.user.id)

    _no_store(response)
    return SignUpResponse(
        user=UserResponse.from_profile(UserProfile.from_user(result.user)),
        **TokenResponse.from_pair(result.tokens).model_dump(),
    )


@limiter.limit(_settings.signin_rate_limit)
@router.post("/auth/signin", response_model=TokenResponse)
def sign_in(
    request: Request,
    response: Response,
    body: SignInRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Authenticate with email and password; return a token pair."""
    try:
        user, pair = service.authenticate(body.email, body.password)
    except UnauthorizedError as exc:
        raise HTTPException(
            status_code=401,
            detail={"code": "bad_credentials", "message": "Invalid email or password."},
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    logger.info("Signed in user %s", user.id)

    _no_store(response)
    return TokenResponse.from_pair(pair)


@limiter.limit(_settings.refresh_rate_limit)
@router.post("/auth/refresh", response_model=TokenResponse, status_code=201)
def refresh(
    request: Request,
    response: Response,
    body: RefreshRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Exchange a refresh token for a new access/refresh pair.

    Every verification failure is the same 401; the response never says
    whether the token was expired, tampered with, or garbage.
    """
    pair = service.refresh(body.refresh_token)
    logger.debug("Refreshed token pair")

    _no_store(response)
    return TokenResponse.from_pair(pair)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------


@router.get("/auth/profile", response_model=UserResponse)
def profile(
    identity: TokenPayload = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Return {id, email, name} for the user named by the access token.

    404 if the account behind a still-valid token no longer exists.
    """
    return UserResponse.from_profile(service.get_profile(identity.sub))
