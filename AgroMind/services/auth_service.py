# services/auth_service.py
"""
Servicio de autenticación.
Registro, login y generación de tokens JWT.
"""
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from utils.security import verify_password, hash_password, create_access_token
from utils.logger import get_logger
from models.user import User
from schemas.user import RegisterIn

logger = get_logger(__name__)


def register_user(db: Session, payload: RegisterIn) -> User:
    """
    Registrar un usuario nuevo.

    Raises:
        HTTPException 409: Si el email ya está registrado
    """
    existing = db.query(User.id).filter(User.email == payload.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Ese email ya está registrado."
        )

    try:
        user = User(
            email=payload.email,
            name=payload.name,
            password_hash=hash_password(payload.password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
    except Exception:
        db.rollback()
        raise

    logger.info("Usuario registrado: user_id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """
    Autenticar usuario con email y password.

    Raises:
        HTTPException 401: Si las credenciales son inválidas
    """
    user = db.query(User).filter(User.email == email.strip().lower()).first()

    if not user or not verify_password(password, user.password_hash):
        logger.info("Login rechazado para email=%s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales inválidas."
        )

    return user


def issue_access_token(user: User) -> str:
    """Token JWT con sub=id y claims email/name (7 días por defecto)."""
    return create_access_token(user.id, user.email, user.name)
