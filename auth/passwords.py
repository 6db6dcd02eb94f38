"""
auth/passwords.py -- bcrypt password hashing (direct usage, no passlib wrapper).

bcrypt is deliberately slow and its cost factor is tunable (BCRYPT_ROUNDS),
which is what makes offline brute force of a leaked hash expensive. Each
call to hash() draws a fresh salt, so equal passwords produce different
digests.

bcrypt only looks at the first 72 bytes of its input and current releases
raise ValueError for anything longer. Both hash() and verify() truncate to
72 bytes first so the two sides always see the same input.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import bcrypt

_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted one-way hashing with a configurable work factor.

    Usage:
        hasher = PasswordHasher(rounds=12)
        digest = hasher.hash("password123")
        hasher.verify("password123", digest)  # True
    """

    def __init__(self, rounds: int = 12) -> None:
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, plain: str) -> str:
        """Return a bcrypt digest of plain. Errors propagate."""
        return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if plain matches hashed; False on mismatch or a corrupt hash."""
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except ValueError:
            return False

    @property
    def dummy_hash(self) -> str:
        """A throwaway digest at the same cost, for timing equalization.

        Verifying against it when an email is unknown makes that path cost
        the same as a wrong password, so response time does not reveal
        which accounts exist.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("authapi_timing_dummy")
        return self._dummy_hash
