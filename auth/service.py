"""
auth/service.py -- Sign-up, sign-in, refresh and profile orchestration.

AuthService receives its collaborators explicitly:
  store   -- a CredentialStore (UserStore in production, a fake in tests)
  hasher  -- PasswordHasher
  issuer  -- TokenIssuer

Failures are raised as typed AuthError subclasses and are never logged or
swallowed here; the HTTP layer decides how to render them.

Layer rule: no imports from api/ or core/, and no web framework imports.
"""

from __future__ import annotations

from auth.errors import ConflictError, DuplicateEmailError, NotFoundError, TokenError, UnauthorizedError
from auth.models import SignUpResult, TokenPair, User, UserProfile
from auth.passwords import PasswordHasher
from auth.store import CredentialStore, normalize_email
from auth.tokens import TokenIssuer


class AuthService:
    def __init__(self, store: CredentialStore, hasher: PasswordHasher, issuer: TokenIssuer) -> None:
        self.store = store
        self.hasher = hasher
        self.issuer = issuer

    def sign_up(self, email: str, password: str, name: str) -> SignUpResult:
        """Register a new user and issue their first token pair.

        Raises ConflictError if the (normalized) email is already taken,
        whether detected by the lookup or by the store's unique index when
        a concurrent sign-up wins the race.
        """
        email = normalize_email(email)
        if self.store.get_by_email(email) is not None:
            raise ConflictError("Email already exists")

        # Hash before the insert so only a digest can ever be persisted.
        user = User(email=email, hashed_password=self.hasher.hash(password), name=name)
        try:
            user.id = self.store.create_user(user)
        except DuplicateEmailError as exc:
            raise ConflictError("Email already exists") from exc

        created = self.store.get_by_id(user.id) or user
        return SignUpResult(user=created, tokens=self.issuer.issue_pair(created))

    def validate_credentials(self, email: str, password: str) -> User | None:
        """Return the matching User, or None. Never raises for a miss.

        Unknown email and wrong password are indistinguishable to the caller,
        and both paths run exactly one bcrypt verification so they take the
        same time.
        """
        user = self.store.get_by_email(normalize_email(email))
        if user is None:
            self.hasher.verify(password, self.hasher.dummy_hash)
            return None
        if not self.hasher.verify(password, user.hashed_password):
            return None
        return user

    def sign_in(self, user: User) -> TokenPair:
        """Issue a token pair for a user already resolved by validate_credentials()."""
        return self.issuer.issue_pair(user)

    def authenticate(self, email: str, password: str) -> tuple[User, TokenPair]:
        """validate_credentials() + sign_in(); raises UnauthorizedError on no match."""
        user = self.validate_credentials(email, password)
        if user is None:
            raise UnauthorizedError("Invalid email or password")
        return user, self.sign_in(user)

    def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a brand-new pair.

        Expired, tampered and malformed tokens all produce the same
        UnauthorizedError, as does a token whose subject no longer exists.
        The presented refresh token is not revoked; it stays usable until
        its own exp.
        """
        try:
            payload = self.issuer.verify_refresh(refresh_token)
        except TokenError as exc:
            raise UnauthorizedError("Invalid refresh token") from exc

        user = self.store.get_by_id(payload.sub)
        if user is None:
            raise UnauthorizedError("Invalid refresh token")
        return self.issuer.issue_pair(user)

    def get_profile(self, user_id: str) -> UserProfile:
        user = self.store.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserProfile.from_user(user)
