from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status, Request, Header, Cookie
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from .config import get_settings
from .models import User
from .database import get_db

import logging
logger = logging.getLogger(__name__)

settings = get_settings()

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Creates a JWT access token. Used by the auth service that shares SECRET_KEY."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def create_user_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token({"sub": str(user_id)}, expires_delta)

def decode_user_id(token: str) -> Optional[int]:
    """Returns the user id carried in the token's `sub` claim, or None if invalid."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("JWT decode failed: %s", e)
        return None
    subject = payload.get("sub")
    try:
        return int(subject) if subject is not None else None
    except (TypeError, ValueError):
        return None

def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(None),
    access_token: Optional[str] = Cookie(None),
) -> User:
    """
    Accepts either Authorization: Bearer <token> OR the 'access_token' cookie.
    Prefers the Authorization header, falls back to cookie.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = None
    if authorization:
        if authorization.startswith("Bearer "):
            token = authorization.split(" ", 1)[1]
        else:
            logger.info("Authorization header present but not Bearer.")

    if not token:
        token = access_token or request.cookies.get("access_token")

    if not token:
        raise credentials_exception

    user_id = decode_user_id(token)
    if user_id is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception
    return user

def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user
