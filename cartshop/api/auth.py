# cartshop/api/auth.py
# Роуты для регистрации и получения JWT токена.
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm
from datetime import timedelta

from cartshop.api.schemas import RegisterRequest, TokenResponse, UserResponse
from cartshop.core import security
from cartshop.core.config import settings
from cartshop.models.user import User
from cartshop.services import users as user_service

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def register(body: RegisterRequest, db: Session = Depends(security.get_db)):
    """
    Регистрация пользователя: username + email + пароль с подтверждением.
    По умолчанию роль = USER.
    """
    return user_service.register_user(
        db, body.username, body.email, body.password, body.confirm_password
    )


@router.post("/token", response_model=TokenResponse)
def login(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(security.get_db)):
    """Логин: возвращает access_token (JWT)."""
    user = user_service.authenticate(db, form_data.username, form_data.password)
    if user is None:
        raise HTTPException(status_code=400, detail="Invalid username or password")
    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    token = security.create_access_token(subject=str(user.id), expires_delta=access_token_expires)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(security.get_current_user)):
    return current_user
