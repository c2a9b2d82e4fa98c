from __future__ import annotations

from datetime import datetime
from typing import Any
from sqlalchemy import String, BigInteger, DateTime, Boolean, ForeignKey, JSON, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class Farm(Base):
    """
    Finca de un usuario.

    - `view` guarda el estado del mapa del frontend (center, zoom, ...)
    - `preferred_center` se deriva de view.center cuando es una lista
    - El nombre es único por usuario
    """
    __tablename__ = "farm"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_farm_user_id_name"),
        Index("ix_farm_user_id_is_primary", "user_id", "is_primary"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    view: Mapped[Any | None] = mapped_column(JSON)
    preferred_center: Mapped[Any | None] = mapped_column(JSON)
    is_primary: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="farms")

    points: Mapped[list["MapPoint"]] = relationship(
        "MapPoint", back_populates="farm", cascade="all, delete-orphan"
    )
    lines: Mapped[list["MapLine"]] = relationship(
        "MapLine", back_populates="farm", cascade="all, delete-orphan"
    )
    zones: Mapped[list["MapZone"]] = relationship(
        "MapZone", back_populates="farm", cascade="all, delete-orphan"
    )
    tasks: Mapped[list["Task"]] = relationship(
        "Task", back_populates="farm", cascade="all, delete-orphan"
    )
    movements: Mapped[list["FinanceMovement"]] = relationship(
        "FinanceMovement", back_populates="farm", cascade="all, delete-orphan"
    )
    assets: Mapped[list["Asset"]] = relationship(
        "Asset", back_populates="farm", cascade="all, delete-orphan"
    )
