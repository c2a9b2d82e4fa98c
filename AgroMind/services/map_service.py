# services/map_service.py
"""
Servicio del mapa de una finca (puntos, líneas y zonas).

El guardado es un reemplazo completo dentro de una sola transacción:
se borran todos los elementos y se recrean desde el payload.
"""
from typing import Any

from sqlalchemy.orm import Session

from models.farm import Farm
from models.map import MapPoint, MapLine, MapZone
from schemas.map import MapSaveIn
from services.farm_service import preferred_center_from_view
from utils.datetime_utils import now_local
from utils.logger import get_logger
from utils.normalizers import clean_name
from utils.permissions import get_child_in_farm
from utils.transactions import uow

logger = get_logger(__name__)

NOTES_KEYS = ("notes", "notas")


def get_map(db: Session, farm: Farm) -> dict:
    """Finca + elementos del mapa ordenados por creación."""
    def _ordered(model):
        return (
            db.query(model)
            .filter(model.farm_id == farm.id)
            .order_by(model.created_at.asc(), model.id.asc())
            .all()
        )

    return {
        "farm": farm,
        "points": _ordered(MapPoint),
        "lines": _ordered(MapLine),
        "zones": _ordered(MapZone),
    }


def _item_name(item: Any, fallback: str) -> str:
    return clean_name(item.get("name") if isinstance(item, dict) else None, fallback)


def _item_data(item: Any) -> Any:
    """`item.data` si existe (no nulo); si no, el item completo."""
    if isinstance(item, dict) and item.get("data") is not None:
        return item["data"]
    return item


def _item_components(item: Any) -> Any:
    if isinstance(item, dict) and item.get("components") is not None:
        return item["components"]
    return {}


def save_map(db: Session, farm: Farm, payload: MapSaveIn) -> dict:
    """
    Reemplazar el mapa completo de la finca.

    - Si viene `view` se guarda (y preferred_center si view.center es lista)
    - Borra y recrea puntos, líneas y zonas
    - Nombres por defecto: "Punto", "Línea", "Zona"
    """
    with uow(db, "save_map") as tx:
        if payload.view is not None:
            farm.view = payload.view
            center = preferred_center_from_view(payload.view)
            if center is not None:
                farm.preferred_center = center
            tx.add(farm)

        tx.query(MapPoint).filter(MapPoint.farm_id == farm.id).delete(synchronize_session=False)
        tx.query(MapLine).filter(MapLine.farm_id == farm.id).delete(synchronize_session=False)
        tx.query(MapZone).filter(MapZone.farm_id == farm.id).delete(synchronize_session=False)

        tx.add_all(
            MapPoint(farm_id=farm.id, name=_item_name(p, "Punto"), data=_item_data(p))
            for p in payload.points
        )
        tx.add_all(
            MapLine(farm_id=farm.id, name=_item_name(line, "Línea"), data=_item_data(line))
            for line in payload.lines
        )
        tx.add_all(
            MapZone(
                farm_id=farm.id,
                name=_item_name(z, "Zona"),
                data=_item_data(z),
                components=_item_components(z),
            )
            for z in payload.zones
        )

    # Los borrados masivos no sincronizan las colecciones ya cargadas
    db.expire(farm)

    logger.info(
        "Mapa guardado: farm_id=%s points=%s lines=%s zones=%s",
        farm.id, len(payload.points), len(payload.lines), len(payload.zones),
    )
    return {
        "ok": True,
        "saved": {
            "points": len(payload.points),
            "lines": len(payload.lines),
            "zones": len(payload.zones),
        },
    }


def extract_notes(components: Any) -> Any:
    """Notas de una zona dentro de sus componentes (`notes` o `notas`)."""
    if not isinstance(components, dict):
        return None
    for key in NOTES_KEYS:
        if components.get(key) is not None:
            return components[key]
    return None


def update_zone_components(db: Session, farm: Farm, zone_id: int, components: Any) -> MapZone:
    """
    Reemplazar los componentes de una zona.

    Si cambian las notas se actualiza notes_updated_at.

    Raises:
        HTTPException 404: Si la zona no pertenece a la finca
    """
    zone = get_child_in_farm(db, MapZone, zone_id, farm.id, "Zona no encontrada.")

    try:
        if extract_notes(zone.components) != extract_notes(components):
            zone.notes_updated_at = now_local()
        zone.components = components
        zone.updated_at = now_local()
        db.add(zone)
        db.commit()
        db.refresh(zone)
        return zone
    except Exception:
        db.rollback()
        raise
