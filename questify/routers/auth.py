"""
Auth Router — /api/auth

Endpoints:
  POST /api/auth/signup   — create an account; returns a live session
  POST /api/auth/login    — email + password → session
  POST /api/auth/refresh  — rotate a refresh token
  GET  /api/auth/me       — the signed-in user
  POST /api/auth/logout   — revoke the refresh token
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from sqlalchemy.orm import Session

from questify.auth.security import (
    hash_password,
    issue_session_tokens,
    user_id_from_access_token,
    verify_password,
)
from questify.database import crud
from questify.database.database import get_db
from questify.database.models import User

log = logging.getLogger("questify.auth")

MIN_PASSWORD_LENGTH = 6

_bearer = HTTPBearer(auto_error=False)


# ─── Pydantic schemas ─────────────────────────────────────────────────────────

class CredentialsRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    created_at: datetime


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    user: UserOut


class RefreshRequest(BaseModel):
    refresh_token: str


# ─── Auth dependency ──────────────────────────────────────────────────────────

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = user_id_from_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = crud.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


# ─── Router ───────────────────────────────────────────────────────────────────

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _open_session(db: Session, user: User) -> SessionResponse:
    access_token, refresh_token = issue_session_tokens(user.id, user.email)
    user = crud.set_refresh_token(db, user, refresh_token)
    return SessionResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserOut.model_validate(user),
    )


@router.post("/signup", response_model=SessionResponse, status_code=201)
def signup(payload: CredentialsRequest, db: Session = Depends(get_db)):
    """Create an account and sign it in immediately."""
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=409, detail="Email already registered")
    user = crud.create_user(db, payload.email, hash_password(payload.password))
    log.info("[AUTH] New account user=%s", user.id)
    return _open_session(db, user)


@router.post("/login", response_model=SessionResponse)
def login(payload: CredentialsRequest, db: Session = Depends(get_db)):
    user = crud.get_user_by_email(db, payload.email)
    if not user or not verify_password(payload.password, user.hashed_password):
        log.warning("[AUTH] Failed sign-in for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _open_session(db, user)


@router.post("/refresh", response_model=SessionResponse)
def refresh_tokens(payload: RefreshRequest, db: Session = Depends(get_db)):
    """Exchange a refresh token for a new session; the old refresh token stops working."""
    user = crud.get_user_by_refresh_token(db, payload.refresh_token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid or expired refresh token")
    return _open_session(db, user)


@router.get("/me", response_model=UserOut)
def get_me(current: User = Depends(get_current_user)):
    return UserOut.model_validate(current)


@router.post("/logout")
def logout(current: User = Depends(get_current_user), db: Session = Depends(get_db)):
    crud.set_refresh_token(db, current, None)
    log.info("[AUTH] Signed out user=%s", current.id)
    return {"detail": "Logged out"}
