"""Authentication API — registration, login and the current user."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from journal.database import get_session
from journal.models.user import User
from journal.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from journal.services.auth import authenticate_user, create_access_token, register_user
from journal.api.deps import get_current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(body: RegisterRequest, session: Session = Depends(get_session)):
    user = register_user(session, body.email, body.password)
    return TokenResponse(access_token=create_access_token(user.id))


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, session: Session = Depends(get_session)):
    user = authenticate_user(session, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return TokenResponse(access_token=create_access_token(user.id))


@router.get("/me", response_model=UserRead)
def me(user: User = Depends(get_current_user)):
    return user
