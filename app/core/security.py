from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
import bcrypt
from jose import jwt, JWTError
from app.core.config import settings


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Check a password against a stored hash. Accounts without a password
    cannot log in with credentials.
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(subject: str, claims: Optional[Dict[str, Any]] = None,
                        expires_in: Optional[int] = None) -> str:
    expire = datetime.now(timezone.utc) + timedelta(
        seconds=expires_in or settings.ACCESS_TOKEN_EXPIRE_SECONDS
    )
    payload = {"sub": subject, "exp": expire, **(claims or {})}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a session token. Raises ``JWTError`` when the token is
    malformed, tampered with or expired.
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])


__all__ = ["get_password_hash", "verify_password", "create_access_token",
           "decode_access_token", "JWTError"]
