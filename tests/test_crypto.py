"""
Tests for the record encryption codec.

Tests cover:
- Round trip, including empty plaintext
- Fresh salt/nonce per record
- Tamper detection across every region of the record
- Short record rejection before any key derivation
- Wrong root secret
"""
import pytest

from tabd_native_host.vault import crypto
from tabd_native_host.vault.crypto import (
    HEADER_SIZE,
    MIN_RECORD_SIZE,
    NONCE_SIZE,
    SALT_SIZE,
    TAG_SIZE,
    decrypt_record,
    derive_key,
    encrypt_record,
)
from tabd_native_host.vault.exceptions import AuthenticationError, InvalidDataError
from tabd_native_host.vault.passphrase import generate_root_secret

SECRET = b"c2VjcmV0LXBhc3NwaHJhc2UtZm9yLXRlc3RzLW9ubHk="


class TestKeyDerivation:
    """Tests for Argon2id key derivation."""

    def test_key_length(self):
        assert len(derive_key(SECRET, b"\x00" * SALT_SIZE)) == 32

    def test_deterministic_for_same_salt(self):
        salt = b"\x01" * SALT_SIZE
        assert derive_key(SECRET, salt) == derive_key(SECRET, salt)

    def test_salt_changes_key(self):
        assert derive_key(SECRET, b"\x01" * SALT_SIZE) != derive_key(
            SECRET, b"\x02" * SALT_SIZE
        )


class TestRecordRoundTrip:
    """Tests for encrypt_record / decrypt_record."""

    @pytest.mark.parametrize("plaintext", [
        b"",
        b"hello",
        bytes(range(256)) * 4,
    ])
    def test_round_trip(self, plaintext):
        record = encrypt_record(plaintext, SECRET)
        assert decrypt_record(record, SECRET) == plaintext

    def test_record_layout_length(self):
        """Record is salt + nonce + ciphertext of equal length + tag."""
        record = encrypt_record(b"twelve bytes", SECRET)
        assert len(record) == SALT_SIZE + NONCE_SIZE + len(b"twelve bytes") + TAG_SIZE

    def test_empty_plaintext_yields_minimum_record(self):
        assert len(encrypt_record(b"", SECRET)) == MIN_RECORD_SIZE

    def test_same_plaintext_differs_each_time(self):
        first = encrypt_record(b"same", SECRET)
        second = encrypt_record(b"same", SECRET)
        assert first != second
        assert first[:SALT_SIZE] != second[:SALT_SIZE]
        assert first[SALT_SIZE:HEADER_SIZE] != second[SALT_SIZE:HEADER_SIZE]
        assert decrypt_record(first, SECRET) == b"same"
        assert decrypt_record(second, SECRET) == b"same"


class TestRecordIntegrity:
    """Tests for tamper detection and malformed records."""

    @pytest.mark.parametrize("position", [0, SALT_SIZE, HEADER_SIZE, -1])
    def test_bit_flip_fails_authentication(self, position):
        record = bytearray(encrypt_record(b"do not touch", SECRET))
        record[position] ^= 0x01
        with pytest.raises(AuthenticationError):
            decrypt_record(bytes(record), SECRET)

    def test_wrong_root_secret_fails_authentication(self):
        record = encrypt_record(b"data", SECRET)
        with pytest.raises(AuthenticationError):
            decrypt_record(record, generate_root_secret())

    @pytest.mark.parametrize("size", [0, 1, HEADER_SIZE - 1, HEADER_SIZE, MIN_RECORD_SIZE - 1])
    def test_short_record_is_invalid_data(self, size, monkeypatch):
        """Short records are rejected before the KDF ever runs."""
        def fail_derive(*args, **kwargs):
            raise AssertionError("key derivation must not run")

        monkeypatch.setattr(crypto, "derive_key", fail_derive)
        with pytest.raises(InvalidDataError):
            decrypt_record(b"\x00" * size, SECRET)

    def test_invalid_data_is_not_authentication_error(self):
        with pytest.raises(InvalidDataError) as exc_info:
            decrypt_record(b"short", SECRET)
        assert not isinstance(exc_info.value, AuthenticationError)
