# api/tasks.py
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_farm_owner
from models.user import User
from schemas.common import OkOut
from schemas.task import (
    TaskCreate, TaskUpdate,
    TaskEnvelope, TaskUpdateOut, TaskListOut, SuggestionListOut
)
from services.task_service import (
    list_tasks, create_task, update_task, delete_task, get_task_suggestions
)

router = APIRouter(prefix="/farms/{farm_id}/tasks", tags=["Tasks"])


# ============================================================================
# Sugerencias
# ============================================================================

@router.get(
    "/suggestions",
    response_model=SuggestionListOut,
    summary="Sugerencias de tareas",
    description=(
        "Sugerencias calculadas a partir de tareas y zonas.\n\n"
        "**Reglas:**\n"
        "- `ZONE_COMPONENT_CROP` / `ZONE_COMPONENT_ANIMAL_FEED` / `ZONE_COMPONENT_OTHER`\n"
        "- `DUE_SOON`: vence en 0–2 días\n"
        "- `ZONE_NO_ACTIVE_TASKS`: zona sin tareas activas\n"
        "- `TOO_MANY_PENDING`: 5 o más pendientes\n"
        "- `OVERDUE`: vencida hace 1 día o más\n\n"
        "`actionPayload` es un body listo para `POST /tasks`."
    )
)
def task_suggestions_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"suggestions": get_task_suggestions(db, farm)}


# ============================================================================
# CRUD Básico
# ============================================================================

@router.get(
    "",
    response_model=TaskListOut,
    summary="Listar tareas",
    description="Tareas de la finca por vencimiento ascendente."
)
def list_tasks_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"tasks": list_tasks(db, farm)}


@router.post(
    "",
    response_model=TaskEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Crear tarea",
    description=(
        "Crea una tarea en la finca.\n\n"
        "- `title` obligatorio (máx. 80)\n"
        "- `start` y `due` en formato `YYYY-MM-DD`; `start <= due`\n"
        "- Defaults: type \"Mantenimiento\", priority \"Media\", status \"Pendiente\""
    )
)
def create_task_endpoint(
    payload: TaskCreate,
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"task": create_task(db, farm, payload)}


@router.put(
    "/{task_id}",
    response_model=TaskUpdateOut,
    summary="Actualizar tarea",
    description="Actualización parcial; `start <= due` se valida con los valores combinados."
)
def update_task_endpoint(
    payload: TaskUpdate,
    farm_id: int = Path(..., description="ID de la finca"),
    task_id: int = Path(..., description="ID de la tarea"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"ok": True, "task": update_task(db, farm, task_id, payload)}


@router.delete(
    "/{task_id}",
    response_model=OkOut,
    summary="Eliminar tarea"
)
def delete_task_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    task_id: int = Path(..., description="ID de la tarea"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    delete_task(db, farm, task_id)
    return {"ok": True}
