"""
Vault Crypto Core — Key derivation and record encryption/decryption.

Record layout written by the encrypted file backend:
    [salt 16B][nonce 12B][encrypted_payload + GCM_tag 16B]

- Key derivation: Argon2id(root_secret, salt; t=1, m=64 MiB, p=4) → 32 bytes
- Encryption: AES-256-GCM, no associated data

Security Note:
    Never log plaintext, ciphertext or derived keys.
    Salt and nonce are fresh random values on every write; a counter is
    never used because no state survives a process restart.
"""
import os
import logging

from argon2.low_level import Type, hash_secret_raw
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from .exceptions import AuthenticationError, InvalidDataError

logger = logging.getLogger("tabd.vault")

SALT_SIZE = 16
NONCE_SIZE = 12  # 96-bit nonce
TAG_SIZE = 16
KEY_LENGTH = 32  # AES-256
HEADER_SIZE = SALT_SIZE + NONCE_SIZE
MIN_RECORD_SIZE = HEADER_SIZE + TAG_SIZE

# Argon2id cost parameters; changing them breaks every existing record.
ARGON2_TIME_COST = 1
ARGON2_MEMORY_COST = 64 * 1024  # KiB
ARGON2_PARALLELISM = 4


# ---------------------------------------------------------------------------
# Key derivation
# ---------------------------------------------------------------------------

def derive_key(root_secret: bytes, salt: bytes) -> bytes:
    """Derive a 32-byte record key using Argon2id.

    Args:
        root_secret: Installation root secret, exactly as stored on disk.
        salt: Per-record random salt.

    Returns:
        32-byte derived key.
    """
    return hash_secret_raw(
        secret=root_secret,
        salt=salt,
        time_cost=ARGON2_TIME_COST,
        memory_cost=ARGON2_MEMORY_COST,
        parallelism=ARGON2_PARALLELISM,
        hash_len=KEY_LENGTH,
        type=Type.ID,
    )


# ---------------------------------------------------------------------------
# Record encryption
# ---------------------------------------------------------------------------

def encrypt_record(plaintext: bytes, root_secret: bytes) -> bytes:
    """Encrypt plaintext into a self-contained stored record.

    Args:
        plaintext: Data to encrypt (may be empty).
        root_secret: Installation root secret.

    Returns:
        Record bytes: salt + nonce + ciphertext with tag.
    """
    salt = os.urandom(SALT_SIZE)
    key = derive_key(root_secret, salt)
    nonce = os.urandom(NONCE_SIZE)
    ct = AESGCM(key).encrypt(nonce, plaintext, None)
    return salt + nonce + ct


def decrypt_record(record: bytes, root_secret: bytes) -> bytes:
    """Decrypt a stored record.

    Args:
        record: Record bytes produced by :func:`encrypt_record`.
        root_secret: Installation root secret.

    Returns:
        Decrypted plaintext bytes.

    Raises:
        InvalidDataError: If the record is too short to hold salt, nonce
            and tag. Checked before any key derivation.
        AuthenticationError: If the GCM tag does not verify.
    """
    if len(record) < MIN_RECORD_SIZE:
        raise InvalidDataError(
            f"Encrypted record too short: {len(record)} bytes "
            f"(minimum {MIN_RECORD_SIZE})"
        )
    salt = record[:SALT_SIZE]
    nonce = record[SALT_SIZE:HEADER_SIZE]
    ct = record[HEADER_SIZE:]
    key = derive_key(root_secret, salt)
    try:
        return AESGCM(key).decrypt(nonce, ct, None)
    except InvalidTag as err:
        raise AuthenticationError(
            "Encrypted record failed authentication "
            "(tampered data or wrong root secret)"
        ) from err
