"""
Tests for credential encryption at rest.
"""

import pytest

from core.errors import CorruptPayload
from core.vault import CredentialVault, decrypt, encrypt

KEY = "unit-test-encryption-key-0123456789abcdef"
OTHER_KEY = "another-encryption-key-fedcba9876543210"


@pytest.mark.parametrize(
    "plaintext",
    ["AZ-client-id-123", "", "secret with spaces and ünïcödé", "x" * 1000, "a:b:c"],
)
def test_decrypt_returns_original_plaintext(plaintext):
    assert decrypt(encrypt(plaintext, KEY), KEY) == plaintext


def test_payload_format_is_iv_hex_colon_cipher_hex():
    payload = encrypt("client-secret", KEY)
    iv_hex, cipher_hex = payload.split(":")

    assert len(bytes.fromhex(iv_hex)) == 16
    ciphertext = bytes.fromhex(cipher_hex)
    # "client-secret" is 13 bytes, padded to one AES block
    assert len(ciphertext) == 16


def test_same_plaintext_encrypts_differently_each_time():
    first = encrypt("client-secret", KEY)
    second = encrypt("client-secret", KEY)

    assert first != second
    assert first.split(":")[0] != second.split(":")[0]
    assert decrypt(first, KEY) == decrypt(second, KEY) == "client-secret"


def test_only_first_32_key_bytes_are_used():
    long_key = "k" * 32 + "ignored-suffix"
    payload = encrypt("value", long_key)
    assert decrypt(payload, "k" * 32) == "value"


def test_decrypt_without_separator_fails():
    with pytest.raises(CorruptPayload):
        decrypt("00112233445566778899aabbccddeeff", KEY)


def test_decrypt_with_bad_hex_fails():
    with pytest.raises(CorruptPayload):
        decrypt("not-hex:also-not-hex", KEY)


def test_decrypt_with_short_iv_fails():
    payload = encrypt("value", KEY)
    _, cipher_hex = payload.split(":")
    with pytest.raises(CorruptPayload):
        decrypt("0011:" + cipher_hex, KEY)


def test_decrypt_with_truncated_ciphertext_fails():
    payload = encrypt("value", KEY)
    with pytest.raises(CorruptPayload):
        decrypt(payload[:-2], KEY)


def test_decrypt_with_wrong_key_fails():
    payload = encrypt("sandbox-client-secret", KEY)
    with pytest.raises(CorruptPayload):
        decrypt(payload, OTHER_KEY)


def test_short_key_is_rejected():
    with pytest.raises(ValueError):
        CredentialVault("too-short")


def test_vault_binds_key():
    vault = CredentialVault(KEY)
    payload = vault.encrypt("client-id")

    assert vault.decrypt(payload) == "client-id"
    assert decrypt(payload, KEY) == "client-id"
