# utils/dependencies.py
from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from models.user import User
from utils.db import get_db
from utils.security import oauth2_scheme, token_user_id


def get_current_user(db: Session = Depends(get_db), token: str = Depends(oauth2_scheme)) -> User:
    """Usuario del Bearer token; 401 si falta, es inválido o el usuario ya no existe."""
    user_id = token_user_id(token)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido o expirado.")
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuario no existe.")
    return user
