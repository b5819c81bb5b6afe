"""Tests for password hashing and password rules."""

import pytest

from urbanease.core.errors import ValidationError
from urbanease.core.security import (
    ensure_password_hash,
    hash_password,
    is_password_hash,
    validate_password_strength,
    verify_password,
)

_PASSWORD = "pw12345678"  # nosec B105


class TestHashing:
    def test_hash_is_bcrypt(self):
        hashed = hash_password(_PASSWORD)
        assert is_password_hash(hashed)
        assert hashed != _PASSWORD

    def test_hashes_are_salted(self):
        assert hash_password(_PASSWORD) != hash_password(_PASSWORD)

    def test_ensure_hashes_plain_text(self):
        hashed = ensure_password_hash(_PASSWORD)
        assert verify_password(_PASSWORD, hashed)

    def test_ensure_keeps_existing_hash(self):
        hashed = hash_password(_PASSWORD)
        assert ensure_password_hash(hashed) == hashed

    @pytest.mark.parametrize("prefix", ["$2a$", "$2b$", "$2y$"])
    def test_recognises_bcrypt_prefixes(self, prefix):
        value = prefix + "04$" + "a" * 53
        assert is_password_hash(value)

    def test_plain_text_with_prefix_but_wrong_length_is_not_a_hash(self):
        assert not is_password_hash("$2b$short")


class TestVerify:
    def test_correct_password(self):
        assert verify_password(_PASSWORD, hash_password(_PASSWORD))

    def test_wrong_password(self):
        assert not verify_password("wrong-password", hash_password(_PASSWORD))

    def test_missing_hash_never_matches(self):
        assert not verify_password(_PASSWORD, None)

    def test_malformed_hash_never_matches(self):
        assert not verify_password(_PASSWORD, "not-a-bcrypt-hash")


class TestPasswordRules:
    def test_accepts_eight_characters(self):
        validate_password_strength("abcdefgh")

    def test_rejects_short_password(self):
        with pytest.raises(ValidationError, match="at least 8"):
            validate_password_strength("short")

    def test_rejects_password_over_72_bytes(self):
        with pytest.raises(ValidationError, match="72 bytes"):
            validate_password_strength("é" * 40)
