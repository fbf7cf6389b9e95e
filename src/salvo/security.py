"""Password hashing for player identities (salted scrypt)."""

from __future__ import annotations

import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from . import config as _cfg

SALT_LEN = 16
KEY_LEN = 32


class PasswordHasher:
    """Salted scrypt hashing for player passwords.

    Encoded hashes carry their own parameters, so changing the configured cost
    does not invalidate hashes that were created earlier.
    """

    def __init__(self, n: int = _cfg.SCRYPT_N, r: int = _cfg.SCRYPT_R, p: int = _cfg.SCRYPT_P):
        self.n = n
        self.r = r
        self.p = p

    def hash(self, password: str) -> str:
        """Return ``scrypt$n$r$p$salt$key`` for *password*."""
        salt = os.urandom(SALT_LEN)
        kdf = Scrypt(salt=salt, length=KEY_LEN, n=self.n, r=self.r, p=self.p)
        key = kdf.derive(password.encode("utf-8"))
        return f"scrypt${self.n}${self.r}${self.p}${salt.hex()}${key.hex()}"

    def verify(self, password: str, encoded: str) -> bool:
        """Return True if *password* matches the *encoded* hash."""
        try:
            scheme, n, r, p, salt_hex, key_hex = encoded.split("$")
        except ValueError:
            return False
        if scheme != "scrypt":
            return False
        kdf = Scrypt(salt=bytes.fromhex(salt_hex), length=KEY_LEN, n=int(n), r=int(r), p=int(p))
        try:
            kdf.verify(password.encode("utf-8"), bytes.fromhex(key_hex))
        except InvalidKey:
            return False
        return True
