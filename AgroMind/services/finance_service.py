# services/finance_service.py
"""
Servicio de movimientos financieros (ingresos y gastos).

La categoría guardada siempre pasa por el categorizador de palabras clave.
"""
from sqlalchemy.orm import Session

from models.farm import Farm
from models.finance import FinanceMovement
from schemas.finance import MovementCreate, MovementUpdate
from utils.datetime_utils import today_local
from utils.logger import get_logger
from utils.normalizers import keyword_category
from utils.permissions import get_child_in_farm

logger = get_logger(__name__)

MOVEMENT_NOT_FOUND = "Movimiento no encontrado."


def list_movements(db: Session, farm: Farm) -> list[FinanceMovement]:
    """Movimientos por fecha descendente; empates, más recientes primero."""
    return (
        db.query(FinanceMovement)
        .filter(FinanceMovement.farm_id == farm.id)
        .order_by(FinanceMovement.date.desc(), FinanceMovement.created_at.desc(), FinanceMovement.id.desc())
        .all()
    )


def create_movement(db: Session, farm: Farm, payload: MovementCreate) -> FinanceMovement:
    """
    Registrar movimiento.

    - Fecha inválida o ausente → hoy
    - Categoría resuelta por palabras clave
    """
    try:
        movement = FinanceMovement(
            farm_id=farm.id,
            date=payload.date or today_local(),
            concept=payload.concept,
            category=keyword_category(payload.concept, payload.category),
            type=payload.type,
            amount=payload.amount,
            note=payload.note,
            invoice_number=payload.invoice_number,
        )
        db.add(movement)
        db.commit()
        db.refresh(movement)
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Movimiento creado: movement_id=%s farm_id=%s type=%s category=%s",
        movement.id, farm.id, movement.type, movement.category,
    )
    return movement


def update_movement(db: Session, farm: Farm, movement_id: int, payload: MovementUpdate) -> FinanceMovement:
    """
    Actualización parcial.

    Si cambia el concepto o la categoría, la categoría se recalcula con
    los valores combinados.

    Raises:
        HTTPException 404: Si el movimiento no es de la finca
    """
    movement = get_child_in_farm(db, FinanceMovement, movement_id, farm.id, MOVEMENT_NOT_FOUND)
    data = payload.model_dump(exclude_unset=True)

    if "concept" in data or "category" in data:
        data["category"] = keyword_category(
            data.get("concept", movement.concept),
            data.get("category", movement.category),
        )

    try:
        for k, v in data.items():
            setattr(movement, k, v)
        db.add(movement)
        db.commit()
        db.refresh(movement)
        return movement
    except Exception:
        db.rollback()
        raise


def delete_movement(db: Session, farm: Farm, movement_id: int) -> None:
    movement = get_child_in_farm(db, FinanceMovement, movement_id, farm.id, MOVEMENT_NOT_FOUND)
    try:
        db.delete(movement)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Movimiento eliminado: movement_id=%s farm_id=%s", movement_id, farm.id)
