"""
Security utilities for authentication

Passwords are hashed with argon2. bcrypt hashes ($2a$/$2b$/$2y$) from
earlier deployments are still accepted on verification.
"""
import logging
from datetime import timedelta
from typing import Dict, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
import bcrypt
from jose import JWTError, jwt

from fieldcollect.core.config import settings
from fieldcollect.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password with argon2"""
    return _hasher.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against its stored hash"""
    if not hashed_password:
        return False

    if hashed_password.startswith("$argon2"):
        try:
            return _hasher.verify(hashed_password, plain_password)
        except VerificationError:
            return False
        except InvalidHashError:
            logger.warning("Stored argon2 hash is malformed")
            return False

    if hashed_password.startswith("$2"):
        password_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Stored bcrypt hash is malformed")
            return False

    return False


def create_access_token(data: Dict, expires_minutes: Optional[int] = None) -> str:
    """Create a JWT access token"""
    to_encode = data.copy()

    if expires_minutes is None:
        expires_minutes = settings.JWT_EXPIRE_MINUTES

    expire = now_utc() + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_token(token: str) -> Dict:
    """Decode and verify a JWT token"""
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise ValueError("Invalid token")
