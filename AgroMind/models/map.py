# models/map.py
from __future__ import annotations

from datetime import datetime
from typing import Any
from sqlalchemy import String, BigInteger, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local


class MapPoint(Base):
    """Punto del mapa. `data` es el feature tal cual lo envía el frontend."""
    __tablename__ = "map_point"
    __table_args__ = (
        Index("ix_map_point_farm_id_updated_at", "farm_id", "updated_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("farm.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str | None] = mapped_column(String(80))
    data: Mapped[Any] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="points")


class MapLine(Base):
    """Línea del mapa (cercas, tuberías, caminos...)."""
    __tablename__ = "map_line"
    __table_args__ = (
        Index("ix_map_line_farm_id_updated_at", "farm_id", "updated_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("farm.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str | None] = mapped_column(String(80))
    data: Mapped[Any] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="lines")


class MapZone(Base):
    """
    Zona (polígono) del mapa.

    `components` describe lo que hay en la zona, con claves libres del
    frontend: cultivos/crops, animales/animals/ganado, notas, etc.
    `notes_updated_at` se refresca cuando cambian las notas de la zona.
    """
    __tablename__ = "map_zone"
    __table_args__ = (
        Index("ix_map_zone_farm_id_updated_at", "farm_id", "updated_at"),
        Index("ix_map_zone_farm_id_notes_updated_at", "farm_id", "notes_updated_at"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("farm.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str | None] = mapped_column(String(80))
    data: Mapped[Any] = mapped_column(JSON, nullable=False)
    components: Mapped[Any | None] = mapped_column(JSON)
    notes_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=False))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="zones")
