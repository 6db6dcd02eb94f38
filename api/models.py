"""
API request and response models for the auth REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Separation of concerns: auth/ models = domain truth; api/ models = API contract.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import TokenPair, UserProfile

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Deliberately loose: one "@", no whitespace, a dot in the domain part.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

PASSWORD_MIN_LENGTH = 8


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignUpRequest(BaseModel):
    """Request body for POST /api/v1/auth/signup.

    Passwords are taken verbatim; only email and name are trimmed.
    """

    email: str = Field(max_length=320, pattern=EMAIL_PATTERN, examples=["user@example.com"])
    # No upper bound: PasswordHasher only feeds the first 72 bytes to bcrypt.
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, examples=["password123"])
    name: str = Field(min_length=1, max_length=255, examples=["John Doe"])

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class SignInRequest(BaseModel):
    """Request body for POST /api/v1/auth/signin.

    Only the shape is checked. An empty password or an address that could
    never have signed up is a failed sign-in (401), not a validation error.
    """

    email: str = Field(examples=["user@example.com"])
    password: str


class RefreshRequest(BaseModel):
    """Request body for POST /api/v1/auth/refresh.

    Accepts both refresh_token and the camelCase refreshToken that browser
    clients tend to send. Any string is accepted; empty or oversized tokens
    fail verification with the same 401 as any other bad token.
    """

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(alias="refreshToken")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    """Access/refresh token pair. expires_in is the access-token lifetime in seconds."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            expires_in=pair.expires_in,
            token_type=pair.token_type,
        )


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "UserResponse":
        return cls(id=profile.id, email=profile.email, name=profile.name)


class SignUpResponse(TokenResponse):
    """Created user plus its first token pair (token fields at the top level)."""

    user: UserResponse


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
