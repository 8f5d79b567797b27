from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way, salted password hashing."""

    def hash(self, raw: str) -> str:
        """Return a salted hash of ``raw`` (a fresh salt on every call)."""
        ...

    def verify(self, hashed: str, raw: str) -> bool:
        """Return ``True`` when ``raw`` matches ``hashed``."""
        ...

    def verify_dummy(self, raw: str) -> bool:
        """Spend one verification against a throwaway hash; always ``False``.

        Lets callers answer "unknown account" in the same time as "wrong
        password".
        """
        ...
