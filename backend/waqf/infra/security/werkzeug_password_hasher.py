from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from werkzeug.security import check_password_hash, generate_password_hash

from waqf.services._shared.ports import PasswordHasher

#: Production work factor: scrypt with N=2**15, r=8, p=1.
DEFAULT_METHOD = "scrypt:32768:8:1"


@lru_cache(maxsize=8)
def _dummy_hash(method: str) -> str:
    return generate_password_hash("waqf-timing-equalizer", method=method)


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hasher backed by :mod:`werkzeug.security`.

    ``method`` pins the algorithm and its cost parameters; the salt is drawn
    fresh on every :meth:`hash` call and embedded in the result.

    :param method: werkzeug method string, e.g. ``"scrypt:32768:8:1"``.
    :param salt_length: Salt length in characters.
    """

    method: str = DEFAULT_METHOD
    salt_length: int = 16

    def hash(self, raw: str) -> str:
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        return generate_password_hash(raw, method=self.method, salt_length=self.salt_length)

    def verify(self, hashed: str, raw: str) -> bool:
        if not hashed or not isinstance(raw, str):
            return False
        # check_password_hash is untyped; coerce for mypy.
        return bool(check_password_hash(hashed, raw))

    def verify_dummy(self, raw: str) -> bool:
        check_password_hash(_dummy_hash(self.method), raw or "")
        return False
