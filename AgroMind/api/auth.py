# api/auth.py
"""
API de autenticación.
Endpoints: register, login, token (OAuth2), me.
"""
from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user
from schemas.user import RegisterIn, LoginIn, LoginOut, Token, UserEnvelope
from services.auth_service import register_user, authenticate_user, issue_access_token
from models.user import User

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar usuario",
    description=(
        "Crea una cuenta nueva.\n\n"
        "**Validaciones:**\n"
        "- `email` obligatorio (se guarda en minúsculas)\n"
        "- `password` mínimo 8 caracteres\n"
        "- Email duplicado → 409"
    )
)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    user = register_user(db, payload)
    return {"user": user}


@router.post(
    "/login",
    response_model=LoginOut,
    summary="Login (JSON)",
    description=(
        "Login con email y password en JSON.\n\n"
        "**Response:**\n"
        "- `token`: JWT válido por 7 días (header `Authorization: Bearer <token>`)\n"
        "- `user`: datos públicos del usuario"
    )
)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = authenticate_user(db, payload.email, payload.password)
    return {"token": issue_access_token(user), "user": user}


@router.post(
    "/token",
    response_model=Token,
    summary="Login (OAuth2)",
    description=(
        "Autenticación usando OAuth2 Password Flow (para /docs).\n\n"
        "**Formato:** `application/x-www-form-urlencoded`\n\n"
        "**Campos:**\n"
        "- `username`: email del usuario\n"
        "- `password`: Contraseña"
    )
)
def token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    user = authenticate_user(db, form_data.username, form_data.password)
    return {"access_token": issue_access_token(user), "token_type": "bearer"}


@router.get(
    "/me",
    response_model=UserEnvelope,
    summary="Obtener usuario actual",
    description="Retorna el usuario autenticado (Bearer token)."
)
def me(current_user: User = Depends(get_current_user)):
    """Obtener información del usuario autenticado"""
    return {"user": current_user}
