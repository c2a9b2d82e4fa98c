# models/finance.py
from __future__ import annotations

from datetime import datetime, date as date_type
from sqlalchemy import BigInteger, Date, DateTime, ForeignKey, String, Float, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from utils.db import Base, BigIntPK
from utils.datetime_utils import now_local, today_local


class FinanceMovement(Base):
    """
    Movimiento financiero (ingreso o gasto) de una finca.

    - `type` ∈ {"Ingreso", "Gasto"}
    - `amount` siempre >= 0; el signo lo da `type`
    - `category` ya viene resuelta por el categorizador de palabras clave
    """
    __tablename__ = "finance_movement"
    __table_args__ = (
        Index("ix_finance_movement_farm_id_date", "farm_id", "date"),
        Index("ix_finance_movement_farm_id_type", "farm_id", "type"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("farm.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    concept: Mapped[str] = mapped_column(String(160), nullable=False)
    category: Mapped[str] = mapped_column(String(80), nullable=False)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    note: Mapped[str | None] = mapped_column(String(240))
    invoice_number: Mapped[str | None] = mapped_column(String(60))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="movements")


class Asset(Base):
    """
    Activo depreciable (equipos, maquinaria, infraestructura).

    La depreciación es lineal:
    (purchase_value - residual_value) / useful_life_years por año.
    """
    __tablename__ = "asset"
    __table_args__ = (
        Index("ix_asset_farm_id_purchase_date", "farm_id", "purchase_date"),
        Index("ix_asset_farm_id_category", "farm_id", "category"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    farm_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("farm.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    category: Mapped[str] = mapped_column(String(60), default="Equipos", nullable=False)
    purchase_value: Mapped[float] = mapped_column(Float, nullable=False)
    purchase_date: Mapped[date_type] = mapped_column(Date, default=today_local, nullable=False)
    useful_life_years: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    residual_value: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), default=now_local, onupdate=now_local,
                                                 nullable=False)

    farm: Mapped["Farm"] = relationship("Farm", back_populates="assets")
