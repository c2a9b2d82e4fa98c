# models/task.py
from __future__ import annotations

from datetime import datetime, date
from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, String, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local
from enums.enums import TaskStatusEnum, TaskPriorityEnum, DEFAULT_TASK_TYPE


class Task(Base):
    """
    Tarea operativa de una finca.

    Características:
    - `zone` es el nombre (texto libre) de una zona del mapa, no una FK
    - `type`, `priority` y `status` son texto libre con valores por defecto
      (el frontend usa "Pendiente" / "En progreso" / "Completada")
    - start <= due siempre (validado en service)
    """
    __tablename__ = "task"
    __table_args__ = (
        Index("ix_task_farm_id_due", "farm_id", "due"),
        Index("ix_task_farm_id_start", "farm_id", "start"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("farm.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title: Mapped[str] = mapped_column(String(80), nullable=False)
    zone: Mapped[str | None] = mapped_column(String(120))
    type: Mapped[str] = mapped_column(String(80), default=DEFAULT_TASK_TYPE, nullable=False)
    priority: Mapped[str] = mapped_column(String(80), default=TaskPriorityEnum.MEDIA.value, nullable=False)
    status: Mapped[str] = mapped_column(String(80), default=TaskStatusEnum.PENDIENTE.value, nullable=False)
    owner: Mapped[str | None] = mapped_column(String(80))

    # Temporalidad
    start: Mapped[date] = mapped_column(Date, nullable=False)
    due: Mapped[date] = mapped_column(Date, nullable=False)

    # Auditoría
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=now_local,
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        default=now_local,
        onupdate=now_local,
        nullable=False
    )

    farm: Mapped["Farm"] = relationship("Farm", back_populates="tasks")

    @property
    def is_active(self) -> bool:
        """Una tarea está activa mientras no esté completada."""
        return self.status != TaskStatusEnum.COMPLETADA.value
