"""Tests for password hashing and validation."""

import pytest

from tutow.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from tutow.config import get_settings


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("rahasia123")
        assert verify_password("rahasia123", hashed) is True

    def test_wrong_password_rejected(self):
        hashed = hash_password("rahasia123")
        assert verify_password("salah123", hashed) is False

    def test_garbage_hash_rejected(self):
        assert verify_password("rahasia123", "not-a-hash") is False

    def test_hash_is_argon2id(self):
        assert hash_password("rahasia123").startswith("$argon2id$")

    def test_check_needs_rehash(self):
        assert check_needs_rehash(hash_password("rahasia123")) is False


class TestPasswordStrength:
    def test_six_characters_accepted(self):
        validate_password_strength("abcdef")  # Should not raise

    def test_no_character_class_rules(self):
        validate_password_strength("kucingku")  # Should not raise

    def test_empty_password_rejected(self):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength("")

    def test_whitespace_only_rejected(self):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength("        ")

    def test_short_password_rejected(self):
        with pytest.raises(PasswordStrengthError, match="at least 6"):
            validate_password_strength("abc12")

    def test_too_long_password_rejected(self):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength("a" * 129)

    def test_strength_error_is_value_error(self):
        assert issubclass(PasswordStrengthError, ValueError)


class TestHashCost:
    def test_cost_follows_settings(self):
        assert "m=8192,t=1" in hash_password("rahasia123")

    def test_rehash_after_cost_change(self, monkeypatch: pytest.MonkeyPatch):
        old = hash_password("rahasia123")
        monkeypatch.setenv("TUTOW_PASSWORD_HASH_TIME_COST", "2")
        get_settings.cache_clear()
        assert check_needs_rehash(old) is True
        assert verify_password("rahasia123", old) is True
