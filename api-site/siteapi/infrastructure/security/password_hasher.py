# siteapi/infrastructure/security/password_hasher.py
import base64
import binascii
import hashlib
import hmac
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PasswordHash:
    """As quatro colunas de senha de users, sempre lidas e gravadas juntas."""

    hash: str
    salt: str
    algo: str
    iterations: int


class PasswordHasher:
    """
    PBKDF2-SHA256 com salt aleatório por senha.

    O número de rounds vem da configuração; hashes gravados com menos rounds
    (ou no algo legado) continuam válidos e são marcados para rehash.
    """

    ALGO = "pbkdf2_sha256"
    LEGACY_ALGOS = ("pbkdf2",)
    DEFAULT_ITERATIONS = 600_000
    SALT_BYTES = 16

    def __init__(self, iterations: int | None = None) -> None:
        self._iterations = iterations or self.DEFAULT_ITERATIONS

    @property
    def iterations(self) -> int:
        return self._iterations

    def hash(self, password: str) -> PasswordHash:
        # regra de tamanho mínimo fica nos schemas de request
        if not password:
            raise ValueError("Password must not be empty.")

        salt = os.urandom(self.SALT_BYTES)
        dk = self._derive(password, salt, self._iterations)
        return PasswordHash(
            hash=base64.b64encode(dk).decode("ascii"),
            salt=base64.b64encode(salt).decode("ascii"),
            algo=self.ALGO,
            iterations=self._iterations,
        )

    def verify(self, password: str, stored: PasswordHash) -> bool:
        if stored.algo != self.ALGO and stored.algo not in self.LEGACY_ALGOS:
            return False

        try:
            salt = base64.b64decode(stored.salt, validate=True)
            expected = base64.b64decode(stored.hash, validate=True)
        except (binascii.Error, ValueError):
            return False

        return hmac.compare_digest(self._derive(password, salt, stored.iterations), expected)

    def needs_rehash(self, stored: PasswordHash) -> bool:
        return stored.algo != self.ALGO or stored.iterations < self._iterations

    def burn(self, password: str) -> None:
        """Gasta o mesmo tempo de um verify quando o email não existe."""
        self._derive(password, b"\x00" * self.SALT_BYTES, self._iterations)

    @staticmethod
    def _derive(password: str, salt: bytes, iterations: int) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
