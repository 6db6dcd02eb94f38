"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores, the token
issuer and the service do the work; these only own the shape.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered identity.

    email is stored case-normalized (stripped, lower-cased) so uniqueness
    holds regardless of how the address was typed at sign-up.

    hashed_password is a bcrypt digest, never the plaintext. It must not
    leave the auth layer -- routes serialize UserProfile instead.
    """

    email: str
    hashed_password: str
    name: str
    id: str | None = None  # opaque 32-char hex, assigned by the store
    created_at: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """Public projection of a User: everything except the password hash."""

    id: str
    email: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> UserProfile:
        return cls(id=user.id, email=user.email, name=user.name)


@dataclass(frozen=True)
class TokenPair:
    """Freshly issued credentials. Never persisted.

    expires_in is the access-token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"


@dataclass(frozen=True)
class TokenPayload:
    """Verified claims carried by an access or refresh token."""

    sub: str
    email: str
    name: str
    exp: int


@dataclass(frozen=True)
class SignUpResult:
    user: User
    tokens: TokenPair
