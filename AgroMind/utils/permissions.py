"""
Autorización por propiedad de fila.

Arquitectura:
- Cada Farm pertenece a un único User (farm.user_id)
- Todo lo demás (mapa, tareas, movimientos, activos) cuelga de una Farm
- Un recurso hijo solo es visible si su farm_id coincide con la finca validada

Reglas de respuesta:
- Finca inexistente o ajena: 403 (no se revela si existe)
- Recurso hijo que no pertenece a la finca: 404
"""
from typing import TypeVar

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models.farm import Farm
from models.user import User
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def ensure_farm_owner(db: Session, farm_id: int, current_user: User) -> Farm:
    """
    Validar que la finca exista y pertenezca al usuario.

    Returns:
        Farm validada

    Raises:
        HTTPException 403: Si no existe o es de otro usuario
    """
    farm = (
        db.query(Farm)
        .filter(Farm.id == farm_id, Farm.user_id == current_user.id)
        .first()
    )
    if not farm:
        logger.warning("Acceso denegado: user_id=%s farm_id=%s", current_user.id, farm_id)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sin acceso a esa finca."
        )
    return farm


def get_child_in_farm(db: Session, model: type[T], child_id: int, farm_id: int, not_found_detail: str) -> T:
    """
    Obtener un registro hijo (zona, tarea, movimiento, activo) de una finca.

    Raises:
        HTTPException 404: Si no existe o pertenece a otra finca
    """
    obj = (
        db.query(model)
        .filter(model.id == child_id, model.farm_id == farm_id)
        .first()
    )
    if not obj:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found_detail)
    return obj
