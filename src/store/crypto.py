"""Per-record encryption helpers.

Encrypted values are tagged with a marker prefix followed by URL-safe
base64 of ``nonce || AES-GCM ciphertext``. ``decrypt`` returns an empty
string for anything it cannot open; callers treat that as plaintext.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from core.constants import AES_NONCE_SIZE, ENCRYPTED_VALUE_PREFIX
from core.errors import CryptoError


def is_encrypted(value: str) -> bool:
    """Return whether a stored value carries the encryption marker."""
    return value.startswith(ENCRYPTED_VALUE_PREFIX)


def encrypt(key: str, plaintext: str) -> str:
    """Encrypt record content with a dataset key.

    Args:
        key: Opaque key material.
        plaintext: Serialized record content.

    Returns:
        Marker-prefixed ciphertext string.

    Raises:
        CryptoError: If no key material is supplied.
    """
    if not key:
        raise CryptoError(
            "Cannot encrypt record: no encryption key configured. "
            "Set BLOCKDB_ENCRYPTION_KEY or encryption_key in the config file."
        )
    nonce = secrets.token_bytes(AES_NONCE_SIZE)
    sealed = AESGCM(_derive_key(key)).encrypt(nonce, plaintext.encode("utf-8"), None)
    encoded = base64.urlsafe_b64encode(nonce + sealed).decode("ascii")
    return f"{ENCRYPTED_VALUE_PREFIX}{encoded}"


def decrypt(key: str, ciphertext: str) -> str:
    """Decrypt record content with a dataset key.

    Args:
        key: Opaque key material.
        ciphertext: Stored value, possibly plaintext.

    Returns:
        Decrypted text, or an empty string when the value is not
        marked as encrypted or cannot be opened with this key.
    """
    if not key or not is_encrypted(ciphertext):
        return ""
    try:
        raw = base64.urlsafe_b64decode(ciphertext[len(ENCRYPTED_VALUE_PREFIX) :].encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError):
        return ""
    if len(raw) <= AES_NONCE_SIZE:
        return ""
    nonce, sealed = raw[:AES_NONCE_SIZE], raw[AES_NONCE_SIZE:]
    try:
        return AESGCM(_derive_key(key)).decrypt(nonce, sealed, None).decode("utf-8")
    except (InvalidTag, UnicodeDecodeError):
        return ""


def _derive_key(key: str) -> bytes:
    # AES-256 needs exactly 32 bytes.
    return hashlib.sha256(key.encode("utf-8")).digest()
