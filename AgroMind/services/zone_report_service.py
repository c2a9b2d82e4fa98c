# services/zone_report_service.py
from datetime import date

from sqlalchemy.orm import Session

from models.farm import Farm
from models.map import MapZone
from models.task import Task
from services.suggestion_service import component_flags, is_active, zone_name_of
from utils.normalizers import normalize_text

MAX_COMPONENT_KEYS = 30
MAX_ZONE_TASKS = 12


def _task_entry(t: Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "zone": t.zone,
        "status": t.status,
        "due": t.due,
        "priority": t.priority,
        "type": t.type,
    }


def build_zones_report(farm: Farm, zones: list, tasks: list) -> dict:
    """
    Reporte por zona: componentes, flags y tareas activas.

    Las tareas se asocian a la zona comparando nombres normalizados
    (sin acentos, minúsculas).
    """
    active = [t for t in tasks if is_active(t)]

    report = []
    for z in zones:
        zone_name = zone_name_of(z)
        zn = normalize_text(zone_name)
        zone_tasks = sorted(
            (t for t in active if normalize_text(t.zone or "") == zn),
            key=lambda t: t.due or date.max,
        )

        components = z.components if isinstance(z.components, dict) else {}
        flags = component_flags(components)

        report.append({
            "id": z.id,
            "name": zone_name,
            "created_at": z.created_at,
            "updated_at": z.updated_at,
            "notes_updated_at": z.notes_updated_at,
            "components": components,
            "components_summary": {
                **flags,
                "keys": list(components.keys())[:MAX_COMPONENT_KEYS],
            },
            "active_tasks_count": len(zone_tasks),
            "active_tasks": [_task_entry(t) for t in zone_tasks[:MAX_ZONE_TASKS]],
        })

    return {
        "ok": True,
        "farm": {"id": farm.id, "name": farm.name},
        "zones_count": len(zones),
        "active_tasks_count": len(active),
        "report": report,
    }


def get_zones_report(db: Session, farm: Farm) -> dict:
    zones = (
        db.query(MapZone)
        .filter(MapZone.farm_id == farm.id)
        .order_by(MapZone.created_at.asc(), MapZone.id.asc())
        .all()
    )
    tasks = db.query(Task).filter(Task.farm_id == farm.id).all()
    return build_zones_report(farm, zones, tasks)
