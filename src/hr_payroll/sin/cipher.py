"""AES-256-GCM envelope encryption and search hashing for SINs.

The cipher holds one process-wide key and salt. It is built once at
startup; a missing or malformed secret is a fatal configuration error.
There is no key rotation: records encrypted under a previous key cannot be
decrypted after the key changes.
"""

from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from hr_payroll.errors import ConfigurationError, SINIntegrityError
from hr_payroll.sin.luhn import is_valid_sin

if TYPE_CHECKING:
    from hr_payroll.config import Settings

KEY_LENGTH = 32
IV_LENGTH = 16
TAG_LENGTH = 16
HASH_ITERATIONS = 1000
HASH_LENGTH = 64


@dataclass(frozen=True)
class EncryptedSINData:
    """Ciphertext envelope; every field is base64."""

    iv: str
    content: str
    auth_tag: str

    def to_json(self) -> dict[str, str]:
        return {"iv": self.iv, "content": self.content, "authTag": self.auth_tag}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> EncryptedSINData:
        try:
            return cls(iv=data["iv"], content=data["content"], auth_tag=data["authTag"])
        except (KeyError, TypeError):
            raise SINIntegrityError() from None


class SINCipher:
    """Encrypts, decrypts and hashes SINs with process-wide secrets."""

    def __init__(self, encoded_key: str | None, salt: str | None):
        if not encoded_key or not salt:
            raise ConfigurationError("Required encryption configuration missing")

        try:
            key = base64.b64decode(encoded_key, validate=True)
        except (binascii.Error, ValueError):
            raise ConfigurationError("Encryption key is not valid base64") from None

        if len(key) != KEY_LENGTH:
            raise ConfigurationError("Invalid encryption key length")

        self._aead = AESGCM(key)
        self._salt = salt.encode("utf-8")

    @classmethod
    def from_settings(cls, settings: Settings) -> SINCipher:
        return cls(settings.encryption_key, settings.sin_hash_salt)

    def encrypt(self, sin: str) -> EncryptedSINData:
        """Encrypt with a fresh random IV."""
        iv = os.urandom(IV_LENGTH)
        sealed = self._aead.encrypt(iv, sin.encode("utf-8"), None)
        content, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return EncryptedSINData(
            iv=base64.b64encode(iv).decode("ascii"),
            content=base64.b64encode(content).decode("ascii"),
            auth_tag=base64.b64encode(tag).decode("ascii"),
        )

    def decrypt(self, data: EncryptedSINData) -> str:
        """Decrypt and verify; any failure is an integrity error."""
        try:
            iv = base64.b64decode(data.iv, validate=True)
            content = base64.b64decode(data.content, validate=True)
            tag = base64.b64decode(data.auth_tag, validate=True)
            plaintext = self._aead.decrypt(iv, content + tag, None).decode("utf-8")
        except (InvalidTag, binascii.Error, ValueError, UnicodeDecodeError):
            raise SINIntegrityError() from None

        if not is_valid_sin(plaintext):
            raise SINIntegrityError()
        return plaintext

    def search_hash(self, sin: str) -> str:
        """Deterministic salted hash for equality lookup."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA512(),
            length=HASH_LENGTH,
            salt=self._salt,
            iterations=HASH_ITERATIONS,
        )
        return kdf.derive(sin.encode("utf-8")).hex()
