"""Encryption helpers for stored PayPal credentials.

AES-256-CBC with PKCS#7 padding. Each call draws a fresh 16-byte IV, and the
payload is stored as ``<ivHex>:<cipherHex>``.
"""

import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from core.errors import CorruptPayload

KEY_BYTES = 32
IV_BYTES = 16
SEPARATOR = ":"


def _key_bytes(key: str) -> bytes:
    raw = key.encode("utf-8")[:KEY_BYTES]
    if len(raw) != KEY_BYTES:
        raise ValueError(f"Encryption key must be at least {KEY_BYTES} bytes")
    return raw


def encrypt(plaintext: str, key: str) -> str:
    """Encrypt *plaintext* and return ``hex(iv) + ":" + hex(ciphertext)``."""
    iv = os.urandom(IV_BYTES)
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(algorithms.AES(_key_bytes(key)), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return iv.hex() + SEPARATOR + ciphertext.hex()


def decrypt(payload: str, key: str) -> str:
    """Decrypt a payload produced by :func:`encrypt`.

    Raises:
        CorruptPayload: If the payload is malformed, or the key is wrong.
    """
    iv_hex, sep, cipher_hex = payload.partition(SEPARATOR)
    if not sep:
        raise CorruptPayload("Encrypted payload is missing the IV separator")

    try:
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(cipher_hex)
    except ValueError as exc:
        raise CorruptPayload("Encrypted payload is not valid hex") from exc

    if len(iv) != IV_BYTES:
        raise CorruptPayload("Encrypted payload has an invalid IV")

    decryptor = Cipher(algorithms.AES(_key_bytes(key)), modes.CBC(iv)).decryptor()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    try:
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        data = unpadder.update(padded) + unpadder.finalize()
        return data.decode("utf-8")
    except (ValueError, UnicodeDecodeError) as exc:
        # Wrong key or tampered ciphertext
        raise CorruptPayload("Encrypted payload could not be decrypted") from exc


class CredentialVault:
    """Binds the process-wide encryption key to encrypt/decrypt."""

    def __init__(self, key: str):
        _key_bytes(key)
        self._key = key

    def encrypt(self, plaintext: str) -> str:
        return encrypt(plaintext, self._key)

    def decrypt(self, payload: str) -> str:
        return decrypt(payload, self._key)
