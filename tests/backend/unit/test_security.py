"""
Unit tests for core.security module.
Tests password hashing and the signed bearer format.
"""
import pytest
import jwt

from blog_api.core.security import (
    JWT_ALG,
    JWT_SECRET,
    create_access_token,
    decode_access_token,
    hash_password,
    sha256_hex,
    verify_password,
)


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_different_hash_each_time(self):
        """Password hashing should produce different hashes (salt included)."""
        password = "TestPassword123"
        hash1 = hash_password(password)
        hash2 = hash_password(password)
        assert hash1 != hash2  # Different salts produce different hashes

    def test_hash_password_produces_valid_hash(self):
        password = "TestPassword123"
        hashed = hash_password(password)
        assert isinstance(hashed, str)
        assert hashed != password  # Should not be plain text
        assert hashed.startswith("$argon2")

    def test_verify_password_correct_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("TestPassword123", hashed) is True

    def test_verify_password_incorrect_password(self):
        hashed = hash_password("TestPassword123")
        assert verify_password("WrongPassword456", hashed) is False


class TestTokenFingerprint:
    def test_sha256_hex_is_stable(self):
        assert sha256_hex("abc") == sha256_hex("abc")
        assert len(sha256_hex("abc")) == 64

    def test_sha256_hex_known_value(self):
        assert sha256_hex("abc") == (
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )


class TestBearerTokens:
    """Tests for bearer string creation and validation."""

    def test_create_access_token_returns_string(self):
        token = create_access_token(1, 10, ["*"])
        assert isinstance(token, str)
        assert token.count(".") == 2

    def test_payload_points_at_token_record(self):
        token = create_access_token(7, 42, ["read", "write"])
        payload = decode_access_token(token)
        assert payload["sub"] == "7"
        assert payload["jti"] == "42"
        assert payload["abilities"] == ["read", "write"]
        assert "iat" in payload

    def test_payload_has_no_exp_claim(self):
        """Expiry lives on the token record, not in the bearer."""
        payload = decode_access_token(create_access_token(1, 1, ["*"]))
        assert "exp" not in payload

    def test_same_record_never_yields_same_bearer(self):
        assert create_access_token(1, 1, ["*"]) != create_access_token(1, 1, ["*"])

    def test_decode_access_token_invalid_token(self):
        with pytest.raises(jwt.InvalidTokenError):
            decode_access_token("invalid.token.here")

    def test_decode_access_token_wrong_secret(self):
        token = jwt.encode({"sub": "1", "jti": "1"}, "wrong-secret", algorithm=JWT_ALG)
        with pytest.raises(jwt.InvalidSignatureError):
            decode_access_token(token)

    def test_decode_requires_jti(self):
        token = jwt.encode({"sub": "1"}, JWT_SECRET, algorithm=JWT_ALG)
        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_access_token(token)
