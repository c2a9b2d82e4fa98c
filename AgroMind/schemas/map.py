# schemas/map.py
from __future__ import annotations

from datetime import datetime, date
from typing import Any

from pydantic import BaseModel, field_validator

from schemas.common import CamelModel


# ============================================================================
# DTOs de Entrada
# ============================================================================

class MapSaveIn(CamelModel):
    """
    Reemplazo completo del mapa de una finca.

    Cada item es un objeto libre del frontend. Si trae `data` se guarda ese
    valor; si no, se guarda el item completo. Colecciones que no sean listas
    se tratan como vacías.
    """
    view: Any | None = None
    points: list[Any] = []
    lines: list[Any] = []
    zones: list[Any] = []

    @field_validator("points", "lines", "zones", mode="before")
    @classmethod
    def coerce_to_list(cls, v):
        return v if isinstance(v, list) else []


class ZoneComponentsIn(CamelModel):
    """`components` es obligatorio (null permitido)."""
    components: Any


# ============================================================================
# DTOs de Salida
# ============================================================================

class MapFarmOut(CamelModel):
    id: int
    name: str
    view: Any | None = None
    preferred_center: Any | None = None


class MapItemOut(CamelModel):
    id: int
    name: str | None = None
    data: Any = None
    created_at: datetime
    updated_at: datetime


class MapZoneOut(MapItemOut):
    components: Any | None = None
    notes_updated_at: datetime | None = None


class MapOut(BaseModel):
    farm: MapFarmOut
    points: list[MapItemOut]
    lines: list[MapItemOut]
    zones: list[MapZoneOut]


class MapSavedCounts(BaseModel):
    points: int
    lines: int
    zones: int


class MapSaveOut(BaseModel):
    ok: bool = True
    saved: MapSavedCounts


class ZoneComponentsZoneOut(CamelModel):
    id: int
    name: str | None = None
    components: Any | None = None
    updated_at: datetime
    notes_updated_at: datetime | None = None


class ZoneComponentsOut(BaseModel):
    ok: bool = True
    zone: ZoneComponentsZoneOut


# ============================================================================
# Reporte de zonas
# ============================================================================

class ZoneReportTaskOut(CamelModel):
    id: int
    title: str
    zone: str | None = None
    status: str
    due: date
    priority: str
    type: str


class ZoneComponentsSummary(CamelModel):
    has_animals: bool
    has_crops: bool
    keys: list[str]


class ZoneReportEntry(CamelModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    notes_updated_at: datetime | None = None
    components: dict[str, Any]
    components_summary: ZoneComponentsSummary
    active_tasks_count: int
    active_tasks: list[ZoneReportTaskOut]


class ZoneReportFarmOut(CamelModel):
    id: int
    name: str


class ZonesReportOut(CamelModel):
    ok: bool = True
    farm: ZoneReportFarmOut
    zones_count: int
    active_tasks_count: int
    report: list[ZoneReportEntry]
