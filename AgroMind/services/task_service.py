# services/task_service.py
from datetime import date

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models.farm import Farm
from models.map import MapZone
from models.task import Task
from schemas.task import TaskCreate, TaskUpdate
from services.suggestion_service import build_task_suggestions
from utils.datetime_utils import today_local
from utils.logger import get_logger
from utils.permissions import get_child_in_farm

logger = get_logger(__name__)

TASK_NOT_FOUND = "Tarea no encontrada."


def _ensure_dates_order(start, due) -> None:
    if start > due:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start no puede ser posterior a due."
        )


def list_tasks(db: Session, farm: Farm) -> list[Task]:
    """Tareas de la finca por vencimiento ascendente; empates, más recientes primero."""
    return (
        db.query(Task)
        .filter(Task.farm_id == farm.id)
        .order_by(Task.due.asc(), Task.created_at.desc(), Task.id.desc())
        .all()
    )


def create_task(db: Session, farm: Farm, payload: TaskCreate) -> Task:
    """
    Crear tarea en la finca.

    Raises:
        HTTPException 400: Si start > due
    """
    _ensure_dates_order(payload.start, payload.due)

    try:
        task = Task(
            farm_id=farm.id,
            title=payload.title,
            zone=payload.zone,
            type=payload.type,
            priority=payload.priority,
            status=payload.status,
            owner=payload.owner,
            start=payload.start,
            due=payload.due,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
    except Exception:
        db.rollback()
        raise

    logger.info("Tarea creada: task_id=%s farm_id=%s", task.id, farm.id)
    return task


def update_task(db: Session, farm: Farm, task_id: int, payload: TaskUpdate) -> Task:
    """
    Actualización parcial de una tarea.

    La regla start <= due se valida con los valores combinados
    (lo enviado + lo que ya estaba guardado).

    Raises:
        HTTPException 404: Si la tarea no es de la finca
        HTTPException 400: Si start > due
    """
    task = get_child_in_farm(db, Task, task_id, farm.id, TASK_NOT_FOUND)
    data = payload.model_dump(exclude_unset=True)

    _ensure_dates_order(data.get("start", task.start), data.get("due", task.due))

    try:
        for k, v in data.items():
            setattr(task, k, v)
        db.add(task)
        db.commit()
        db.refresh(task)
        return task
    except Exception:
        db.rollback()
        raise


def delete_task(db: Session, farm: Farm, task_id: int) -> None:
    task = get_child_in_farm(db, Task, task_id, farm.id, TASK_NOT_FOUND)
    try:
        db.delete(task)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Tarea eliminada: task_id=%s farm_id=%s", task_id, farm.id)


def get_task_suggestions(db: Session, farm: Farm, today: date | None = None) -> list[dict]:
    """Carga tareas y zonas de la finca y aplica el motor de sugerencias."""
    tasks = db.query(Task).filter(Task.farm_id == farm.id).all()
    zones = db.query(MapZone).filter(MapZone.farm_id == farm.id).order_by(MapZone.id.asc()).all()
    return build_task_suggestions(tasks, zones, today or today_local())
