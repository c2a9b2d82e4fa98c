# schemas/task.py
from __future__ import annotations

from datetime import datetime, date
from pydantic import BaseModel, Field, field_validator

from enums.enums import TaskStatusEnum, TaskPriorityEnum, DEFAULT_TASK_TYPE
from schemas.common import CamelModel, require_date_only
from utils.normalizers import clean_name, clean_optional


# ============================================================================
# DTOs de Entrada (Create/Update)
# ============================================================================

class TaskCreate(CamelModel):
    """
    Crear nueva tarea.

    NOTA: farm_id NO se incluye aquí porque SIEMPRE viene del path.
    La regla start <= due se valida en el service (400).
    """
    title: str | None = Field(None, validate_default=True)
    zone: str | None = None
    type: str = Field(DEFAULT_TASK_TYPE, validate_default=True)
    priority: str = Field(TaskPriorityEnum.MEDIA.value, validate_default=True)
    status: str = Field(TaskStatusEnum.PENDIENTE.value, validate_default=True)
    owner: str | None = None
    start: date | None = Field(None, validate_default=True)
    due: date | None = Field(None, validate_default=True)

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        """Título obligatorio; trim y máximo 80 caracteres"""
        title = clean_name(v, "")
        if not title:
            raise ValueError("title es requerido.")
        return title

    @field_validator("zone", mode="before")
    @classmethod
    def clean_zone(cls, v):
        return clean_optional(v, 120)

    @field_validator("owner", mode="before")
    @classmethod
    def clean_owner(cls, v):
        return clean_optional(v, 80)

    @field_validator("type", mode="before")
    @classmethod
    def clean_type(cls, v):
        return clean_name(v, DEFAULT_TASK_TYPE)

    @field_validator("priority", mode="before")
    @classmethod
    def clean_priority(cls, v):
        return clean_name(v, TaskPriorityEnum.MEDIA.value)

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, v):
        return clean_name(v, TaskStatusEnum.PENDIENTE.value)

    @field_validator("start", "due", mode="before")
    @classmethod
    def validate_dates(cls, v, info):
        return require_date_only(v, info.field_name)


class TaskUpdate(CamelModel):
    """Actualizar tarea existente (solo los campos enviados)"""
    title: str | None = None
    zone: str | None = None
    type: str | None = None
    priority: str | None = None
    status: str | None = None
    owner: str | None = None
    start: date | None = None
    due: date | None = None

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v):
        title = clean_name(v, "")
        if not title:
            raise ValueError("title inválido.")
        return title

    @field_validator("zone", mode="before")
    @classmethod
    def clean_zone(cls, v):
        return clean_optional(v, 120)

    @field_validator("owner", mode="before")
    @classmethod
    def clean_owner(cls, v):
        return clean_optional(v, 80)

    @field_validator("type", mode="before")
    @classmethod
    def clean_type(cls, v):
        return clean_name(v, DEFAULT_TASK_TYPE)

    @field_validator("priority", mode="before")
    @classmethod
    def clean_priority(cls, v):
        return clean_name(v, TaskPriorityEnum.MEDIA.value)

    @field_validator("status", mode="before")
    @classmethod
    def clean_status(cls, v):
        return clean_name(v, TaskStatusEnum.PENDIENTE.value)

    @field_validator("start", "due", mode="before")
    @classmethod
    def validate_dates(cls, v, info):
        return require_date_only(v, info.field_name)


# ============================================================================
# DTOs de Salida (Response)
# ============================================================================

class TaskOut(CamelModel):
    id: int
    farm_id: int
    title: str
    zone: str | None
    type: str
    priority: str
    start: date
    due: date
    status: str
    owner: str | None
    created_at: datetime
    updated_at: datetime


class TaskEnvelope(BaseModel):
    task: TaskOut


class TaskUpdateOut(BaseModel):
    ok: bool = True
    task: TaskOut


class TaskListOut(BaseModel):
    tasks: list[TaskOut]


# ============================================================================
# Sugerencias
# ============================================================================

class TaskActionPayload(CamelModel):
    """Cuerpo listo para POST /tasks si el usuario acepta la sugerencia"""
    title: str
    zone: str = ""
    type: str = DEFAULT_TASK_TYPE
    priority: str = TaskPriorityEnum.MEDIA.value
    start: str
    due: str
    status: str = TaskStatusEnum.PENDIENTE.value
    owner: str = ""


class SuggestionOut(CamelModel):
    id: str
    code: str
    level: str | None = None
    title: str
    message: str
    zone: str | None = None
    action_payload: TaskActionPayload | None = None


class SuggestionListOut(BaseModel):
    suggestions: list[SuggestionOut]
