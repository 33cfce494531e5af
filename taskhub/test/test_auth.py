import pytest
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from taskhub.infra.auth import BcryptPasswordHasher, create_access_token, verify_token


class TestAuthFunctions:
    """Test auth functions without external dependencies"""

    def test_password_hashing(self):
        """Test password hashing and verification"""
        hasher = BcryptPasswordHasher()

        hashed = hasher.hash("mysecretpassword")

        assert hashed != "mysecretpassword"
        assert hasher.verify("mysecretpassword", hashed) is True
        assert hasher.verify("wrongpassword", hashed) is False

    def test_hashes_are_salted(self):
        hasher = BcryptPasswordHasher()

        assert hasher.hash("same") != hasher.hash("same")

    def test_malformed_hash_does_not_verify(self):
        assert BcryptPasswordHasher().verify("password", "not-a-bcrypt-hash") is False

    def test_jwt_token_creation_and_verification(self, settings):
        """Test JWT token creation and verification"""
        token = create_access_token({"sub": "123"}, settings)

        assert isinstance(token, str)
        payload = verify_token(token, settings)
        assert payload["sub"] == "123"

    def test_jwt_token_with_expiration(self, settings):
        """Test JWT token with custom expiration"""
        token = create_access_token({"sub": "123"}, settings, timedelta(minutes=15))

        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        assert timedelta(minutes=14) < expires - datetime.now(timezone.utc) <= timedelta(minutes=15)

    def test_invalid_jwt_token(self, settings):
        """Test handling of invalid JWT tokens"""
        with pytest.raises(JWTError):
            verify_token("invalid.token.here", settings)

    def test_expired_jwt_token(self, settings):
        """Test handling of expired JWT tokens"""
        data = {"sub": "123", "exp": datetime.now(timezone.utc) - timedelta(hours=1)}
        token = jwt.encode(data, settings.secret_key, algorithm=settings.algorithm)

        with pytest.raises(JWTError):
            verify_token(token, settings)

    def test_token_signed_with_other_key(self, settings):
        token = jwt.encode({"sub": "123"}, "another-secret-key-that-is-also-long-enough", algorithm="HS256")

        with pytest.raises(JWTError):
            verify_token(token, settings)
