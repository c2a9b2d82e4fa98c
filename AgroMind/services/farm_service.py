# ============================================================================
# SERVICES: services/farm_service.py
# ============================================================================

from typing import Any

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status

from models.farm import Farm
from models.user import User
from schemas.farm import FarmCreate, FarmUpdate
from utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_FARM_DETAIL = "Ya existe una finca con ese nombre."


def preferred_center_from_view(view: Any) -> list | None:
    """`view.center` si es una lista ([lat, lng]); None en otro caso."""
    if isinstance(view, dict) and isinstance(view.get("center"), list):
        return view["center"]
    return None


def list_farms(db: Session, current_user: User) -> list[Farm]:
    """Fincas del usuario, más recientes primero."""
    return (
        db.query(Farm)
        .filter(Farm.user_id == current_user.id)
        .order_by(Farm.created_at.desc(), Farm.id.desc())
        .all()
    )


def create_farm(db: Session, current_user: User, payload: FarmCreate) -> Farm:
    """
    Crear una finca para el usuario.

    - El nombre ya viene limpio del schema (fallback "Mi finca")
    - preferred_center se toma de view.center

    Raises:
        HTTPException 409: Si el usuario ya tiene una finca con ese nombre
    """
    try:
        farm = Farm(
            user_id=current_user.id,
            name=payload.name,
            view=payload.view,
            preferred_center=preferred_center_from_view(payload.view),
        )
        db.add(farm)
        db.commit()
        db.refresh(farm)
    except IntegrityError:
        db.rollback()
        logger.info("Finca duplicada: user_id=%s name=%s", current_user.id, payload.name)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_FARM_DETAIL)
    except Exception:
        db.rollback()
        raise

    logger.info("Finca creada: farm_id=%s user_id=%s", farm.id, current_user.id)
    return farm


def update_farm(db: Session, farm: Farm, payload: FarmUpdate) -> Farm:
    """
    Actualizar una finca ya validada.

    Marcar `is_primary=True` desmarca las demás fincas del mismo usuario.
    """
    data = payload.model_dump(exclude_unset=True)

    try:
        if "name" in data and data["name"] is not None:
            farm.name = data["name"]

        if "view" in data:
            farm.view = data["view"]
            center = preferred_center_from_view(data["view"])
            if center is not None:
                farm.preferred_center = center

        if data.get("is_primary") is True:
            (
                db.query(Farm)
                .filter(Farm.user_id == farm.user_id, Farm.id != farm.id)
                .update({Farm.is_primary: False}, synchronize_session=False)
            )
            farm.is_primary = True
        elif data.get("is_primary") is False:
            farm.is_primary = False

        db.add(farm)
        db.commit()
        db.refresh(farm)
        return farm
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=DUPLICATE_FARM_DETAIL)
    except Exception:
        db.rollback()
        raise


def delete_farm(db: Session, farm: Farm) -> None:
    """Eliminar finca (cascada a mapa, tareas, movimientos y activos)."""
    farm_id = farm.id
    try:
        db.delete(farm)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Finca eliminada: farm_id=%s", farm_id)
