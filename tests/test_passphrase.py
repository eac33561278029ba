"""Tests for root secret creation and persistence."""
import base64
import os
import stat

import pytest

from tabd_native_host.vault import EncryptedFileBackend
from tabd_native_host.vault.crypto import decrypt_record, encrypt_record
from tabd_native_host.vault.exceptions import InvalidDataError, StorageIOError
from tabd_native_host.vault.passphrase import (
    PASSPHRASE_FILENAME,
    generate_root_secret,
    get_or_create_root_secret,
)


class TestGenerateRootSecret:

    def test_encodes_32_random_bytes(self):
        secret = generate_root_secret()
        assert len(base64.urlsafe_b64decode(secret)) == 32

    def test_url_safe_alphabet(self):
        for _ in range(20):
            secret = generate_root_secret()
            assert b"+" not in secret and b"/" not in secret

    def test_values_differ(self):
        assert generate_root_secret() != generate_root_secret()


class TestGetOrCreateRootSecret:

    def test_creates_file_on_first_use(self, install_dir):
        secret = get_or_create_root_secret(install_dir)
        path = install_dir / PASSPHRASE_FILENAME
        assert path.read_bytes() == secret

    def test_second_call_returns_same_value(self, install_dir):
        """A restarted process reads back the same secret."""
        first = get_or_create_root_secret(install_dir)
        second = get_or_create_root_secret(install_dir)
        assert first == second

    def test_existing_file_returned_verbatim(self, install_dir):
        (install_dir / PASSPHRASE_FILENAME).write_bytes(b"not-base64-but-kept")
        assert get_or_create_root_secret(install_dir) == b"not-base64-but-kept"

    def test_crlf_line_ending_preserved(self, install_dir):
        """A hand-edited secret keeps its exact bytes, newline included."""
        (install_dir / PASSPHRASE_FILENAME).write_bytes(b"secret\r\n")
        assert get_or_create_root_secret(install_dir) == b"secret\r\n"

    def test_non_ascii_secret_accepted(self, install_dir):
        raw = "p\u00e4ssphrase".encode("utf-8")
        (install_dir / PASSPHRASE_FILENAME).write_bytes(raw)
        secret = get_or_create_root_secret(install_dir)
        assert secret == raw
        record = encrypt_record(b"data", secret)
        assert decrypt_record(record, get_or_create_root_secret(install_dir)) == b"data"

    def test_crlf_secret_decrypts_after_restart(self, install_dir):
        (install_dir / PASSPHRASE_FILENAME).write_bytes(b"secret\r\n")
        backend = EncryptedFileBackend(install_dir, get_or_create_root_secret(install_dir))
        backend.store("latest", b"kept")
        restarted = EncryptedFileBackend(install_dir, get_or_create_root_secret(install_dir))
        assert restarted.retrieve("latest") == b"kept"

    def test_records_survive_restart(self, install_dir):
        record = encrypt_record(b"before restart", get_or_create_root_secret(install_dir))
        assert decrypt_record(record, get_or_create_root_secret(install_dir)) == b"before restart"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_file_is_owner_only(self, install_dir):
        get_or_create_root_secret(install_dir)
        mode = stat.S_IMODE((install_dir / PASSPHRASE_FILENAME).stat().st_mode)
        assert mode == 0o600

    def test_no_temp_files_left_behind(self, install_dir):
        get_or_create_root_secret(install_dir)
        leftovers = [p.name for p in install_dir.iterdir() if p.name.endswith(".tmp")]
        assert leftovers == []

    def test_empty_file_is_invalid(self, install_dir):
        (install_dir / PASSPHRASE_FILENAME).write_bytes(b"")
        with pytest.raises(InvalidDataError):
            get_or_create_root_secret(install_dir)

    def test_unwritable_directory_is_fatal(self, tmp_path):
        """Persistence failure surfaces instead of handing out a lost secret."""
        missing = tmp_path / "does" / "not" / "exist"
        with pytest.raises(StorageIOError):
            get_or_create_root_secret(missing)
