"""
Password hashing and session tokens.

A session is a pair: a signed access JWT (sub = user id) sent as a Bearer
header, and an opaque refresh token kept on the user row until sign-out.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import bcrypt as _bcrypt
from jose import JWTError, jwt

from questify.config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY

ACCESS_TOKEN_TYPE = "access"


# ─── Passwords ────────────────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    return _bcrypt.hashpw(password.encode("utf-8"), _bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return _bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


# ─── Session tokens ───────────────────────────────────────────────────────────

def create_access_token(user_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": str(user_id), "email": email, "type": ACCESS_TOKEN_TYPE, "exp": expire}
    return jwt.encode(claims, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def issue_session_tokens(user_id: int, email: str) -> Tuple[str, str]:
    """(access_token, refresh_token) for a freshly opened session."""
    return create_access_token(user_id, email), secrets.token_urlsafe(48)


def user_id_from_access_token(token: str) -> Optional[int]:
    """User id carried by a valid, unexpired access token; None otherwise."""
    try:
        claims = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except (JWTError, ValueError, TypeError):
        return None
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None
