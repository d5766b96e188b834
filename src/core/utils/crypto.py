"""Symmetric encryption for source credentials stored at rest.

Credentials are encrypted with Fernet (AES-128-CBC + HMAC-SHA256) using a key
derived from the configured ``secret_key``. Empty values pass through
unchanged so "no credential" never turns into ciphertext.

Examples::

    >>> cipher = SecretCipher("s3cret")
    >>> token = cipher.encrypt("abc123")
    >>> cipher.decrypt(token)
    'abc123'
    >>> cipher.encrypt("")
    ''
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from src.core.errors import DecryptError


def derive_key(secret: str) -> bytes:
    """Derive a urlsafe-base64 Fernet key from an arbitrary secret string."""
    digest = hashlib.sha256(secret.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest)


class SecretCipher:
    """Encrypts and decrypts credential strings.

    Parameters
    ----------
    secret_key : str
        Application secret the Fernet key is derived from. Changing it makes
        previously stored credentials undecryptable.
    """

    def __init__(self, secret_key: str) -> None:
        self._fernet = Fernet(derive_key(secret_key))

    def encrypt(self, value: str) -> str:
        if not value:
            return ""
        return self._fernet.encrypt(value.encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        """Decrypt *token*.

        Raises:
            DecryptError: If the token is malformed or was produced with a
                different key.
        """
        if not token:
            return ""
        try:
            return self._fernet.decrypt(token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError, ValueError) as exc:
            raise DecryptError("Stored credential could not be decrypted") from exc
