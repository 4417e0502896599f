# PURPOSE: password hashing (bcrypt), JWT issuing/decoding (python-jose) and
# the FastAPI dependency that resolves the caller from a Bearer token.
# The token subject is the numeric user id (as a string, per JWT).

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
import bcrypt
from sqlalchemy.orm import Session

from .config import settings
from .models import UserPublic
from .store_db import get_db, get_user

# Bearer token extraction; tokens are issued by POST /user/login (JSON body)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/user/login")


# --- Password helpers (bcrypt, no passlib) ---

def hash_password(password: str) -> str:
    """Return a bcrypt hash for the given plain password."""
    if not isinstance(password, str):
        raise TypeError("password must be a string")
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8"),
        )
    except ValueError:
        # malformed stored hash
        return False


# --- JWT helpers ---

def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def get_access_token_ttl_minutes() -> int:
    """
    Return access token TTL in minutes, parsed safely from settings.
    Falls back to 60 if env contains invalid value (e.g., '60m').
    """
    try:
        return int(settings.JWT_EXPIRE_MIN)
    except (TypeError, ValueError):
        return 60


def create_access_token(user_id: int, extra_claims: Dict[str, Any] | None = None) -> str:
    """
    Create a signed JWT for a user.
    - `sub` is the user id; `extra_claims` (e.g. userName) are merged in.
    - Expiration controlled by settings.JWT_EXPIRE_MIN (safely parsed).
    """
    payload: Dict[str, Any] = {**(extra_claims or {}), "sub": str(user_id)}
    expire = _now_utc() + timedelta(minutes=get_access_token_ttl_minutes())
    payload.update({"exp": expire})
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_subject(token: str) -> int | None:
    """Return the numeric subject of a valid token, or None."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> UserPublic:
    """Decode JWT, load user by id (sub), return public user schema."""
    cred_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user_id = decode_subject(token)
    if user_id is None:
        raise cred_error

    row = get_user(db, user_id)
    if row is None:
        raise cred_error

    return UserPublic.model_validate(row)
