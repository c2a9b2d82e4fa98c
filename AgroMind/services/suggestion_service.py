"""
Motor de sugerencias de tareas.

Funciones puras: reciben tareas y zonas ya cargadas más la fecha de
referencia (`today`) y devuelven dicts compatibles con SuggestionOut.

Reglas, en orden de evaluación:
1. Componentes de zona: cultivo, animales u otros componentes
2. DUE_SOON: tarea activa que vence en 0–2 días
3. ZONE_NO_ACTIVE_TASKS: zona con nombre sin tareas activas
4. TOO_MANY_PENDING: 5 o más tareas "Pendiente"
5. OVERDUE: tarea activa vencida hace 1 día o más
"""
from datetime import date
from typing import Any, Iterable

from enums.enums import (
    TaskStatusEnum,
    TaskPriorityEnum,
    SuggestionLevelEnum,
    DEFAULT_TASK_TYPE,
    FEEDING_TASK_TYPE,
)
from utils.datetime_utils import to_yyyymmdd
from utils.normalizers import is_non_empty_string, normalize_text

MAX_ID_LENGTH = 180
MAX_COMPONENT_ITEMS = 12
TOO_MANY_PENDING_THRESHOLD = 5
DUE_SOON_DAYS = 2

CROP_KEYS = ("cultivos", "cultivo", "crops", "crop", "plantas", "planta")
ANIMAL_KEYS = ("animales", "animal", "animals", "animalList", "ganado")

# Claves usadas para los flags hasCrops / hasAnimals
CROP_FLAG_KEYS = ("cultivos", "cultivo", "crops", "plantas")
ANIMAL_FLAG_KEYS = ("animales", "animal", "animals", "ganado")


# ==================== COMPONENTES ====================

def _fmt_number(v: float) -> str:
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def list_from_unknown(x: Any) -> list:
    """
    Convierte un valor libre de componentes en lista de etiquetas.

    - lista → tal cual
    - string → [string]
    - dict → por cada clave: True → clave, número > 0 → "clave (n)",
      string → el string, objeto con name/tipo → ese nombre
    """
    if not x:
        return []
    if isinstance(x, list):
        return x
    if isinstance(x, str):
        return [x]
    if isinstance(x, dict):
        out = []
        for k, v in x.items():
            if not k:
                continue
            if v is True:
                out.append(k)
            elif isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0:
                out.append(f"{k} ({_fmt_number(v)})")
            elif isinstance(v, str) and v.strip():
                out.append(v.strip())
            elif isinstance(v, dict) and (v.get("name") or v.get("tipo")):
                out.append(str(v.get("name") or v.get("tipo")))
        return out
    return []


def _label(x: Any) -> str:
    if isinstance(x, dict):
        x = x.get("name") or x.get("tipo")
    return str(x).strip() if x else ""


def _clean_list(items: list) -> list[str]:
    labels = [_label(x) for x in items]
    return [s for s in labels if s][:MAX_COMPONENT_ITEMS]


def _first_non_empty(components: dict, keys: Iterable[str]) -> list[str]:
    for key in keys:
        items = _clean_list(list_from_unknown(components.get(key)))
        if items:
            return items
    return []


def extract_components(components: Any) -> dict[str, list[str]]:
    """Cultivos, animales y "otros" (solo si no hay cultivos ni animales)."""
    c = components if isinstance(components, dict) else {}
    crops = _first_non_empty(c, CROP_KEYS)
    animals = _first_non_empty(c, ANIMAL_KEYS)
    other = _clean_list(list_from_unknown(c)) if not crops and not animals else []
    return {"crops": crops, "animals": animals, "other": other}


def component_flags(components: Any) -> dict[str, bool]:
    c = components if isinstance(components, dict) else {}
    return {
        "has_animals": any(c.get(k) for k in ANIMAL_FLAG_KEYS),
        "has_crops": any(c.get(k) for k in CROP_FLAG_KEYS),
    }


def zone_name_of(zone: Any) -> str:
    return zone.name.strip() if is_non_empty_string(zone.name) else ""


# ==================== TAREAS ====================

def is_active(task: Any) -> bool:
    return task.status != TaskStatusEnum.COMPLETADA.value


def has_similar_active_task(tasks: Iterable[Any], zone_name: str, keywords: Iterable[str]) -> bool:
    """
    ¿Existe una tarea activa en la zona cuyo título/tipo contenga alguna keyword?

    Zona y keywords se comparan normalizadas (minúsculas, sin acentos).
    """
    zn = normalize_text(zone_name)
    keys = [k for k in (normalize_text(kw) for kw in keywords) if k]
    if not keys:
        return False

    for t in tasks:
        if not is_active(t):
            continue
        if zn and normalize_text(t.zone or "") != zn:
            continue
        hay = normalize_text(f"{t.title or ''} {t.type or ''}")
        if any(k in hay for k in keys):
            return True
    return False


def build_action_payload(
    title: str,
    start: str,
    due: str,
    zone: str = "",
    type: str = DEFAULT_TASK_TYPE,
    priority: str = TaskPriorityEnum.MEDIA.value,
    owner: str = "",
) -> dict:
    """Cuerpo listo para crear la tarea sugerida."""
    return {
        "title": title,
        "zone": zone,
        "type": type,
        "priority": priority,
        "start": start,
        "due": due,
        "status": TaskStatusEnum.PENDIENTE.value,
        "owner": owner,
    }


class _SuggestionBag:
    """Acumula sugerencias descartando duplicadas."""

    def __init__(self):
        self.items: list[dict] = []
        self._seen: set[tuple] = set()

    def push(self, suggestion: dict) -> None:
        payload = suggestion.get("action_payload") or {}
        key = (
            suggestion["code"],
            suggestion.get("zone") or "",
            suggestion.get("title") or "",
            payload.get("due") or "",
            suggestion.get("message") or "",
        )
        if key in self._seen:
            return
        self._seen.add(key)
        self.items.append(suggestion)


def _zone_component_suggestions(bag: _SuggestionBag, tasks: list, zones: list, today_str: str) -> None:
    for z in zones:
        zone_name = zone_name_of(z)
        if not zone_name:
            continue

        parts = extract_components(z.components)

        for crop in parts["crops"]:
            if not has_similar_active_task(tasks, zone_name, ["abonar", "fertiliz", crop]):
                bag.push({
                    "id": f"crop_{zone_name}_{crop}"[:MAX_ID_LENGTH],
                    "code": "ZONE_COMPONENT_CROP",
                    "level": SuggestionLevelEnum.INFO.value,
                    "title": "Acción recomendada para cultivo",
                    "message": f'Zona "{zone_name}": revisar y planificar labores para el cultivo ({crop}).',
                    "zone": zone_name,
                    "action_payload": build_action_payload(
                        f"Revisión de cultivo ({crop})", today_str, today_str, zone=zone_name
                    ),
                })

        for animal in parts["animals"]:
            if not has_similar_active_task(tasks, zone_name, ["aliment", "agua", animal]):
                bag.push({
                    "id": f"animal_feed_{zone_name}_{animal}"[:MAX_ID_LENGTH],
                    "code": "ZONE_COMPONENT_ANIMAL_FEED",
                    "level": SuggestionLevelEnum.INFO.value,
                    "title": "Rutina de animales",
                    "message": f'Zona "{zone_name}": revisar agua y alimentación para ({animal}).',
                    "zone": zone_name,
                    "action_payload": build_action_payload(
                        f"Revisar agua/alimento ({animal})", today_str, today_str,
                        zone=zone_name, type=FEEDING_TASK_TYPE,
                    ),
                })

        if parts["other"] and not has_similar_active_task(tasks, zone_name, ["inspeccion", "revision"]):
            bag.push({
                "id": f"zone_other_{zone_name}"[:MAX_ID_LENGTH],
                "code": "ZONE_COMPONENT_OTHER",
                "level": SuggestionLevelEnum.INFO.value,
                "title": "Inspección por componentes",
                "message": (
                    f'Zona "{zone_name}": hay componentes registrados. '
                    "Recomendación: inspección preventiva y actualización de tareas."
                ),
                "zone": zone_name,
                "action_payload": build_action_payload(
                    f"Inspección preventiva ({zone_name})", today_str, today_str, zone=zone_name
                ),
            })


def _due_soon_suggestions(bag: _SuggestionBag, tasks: list, today: date) -> None:
    for t in tasks:
        if not t.due or not t.title or not is_active(t):
            continue

        diff = (t.due - today).days
        if diff < 0 or diff > DUE_SOON_DAYS:
            continue

        due_today = diff == 0
        bag.push({
            "id": f"due_soon_{t.id}",
            "code": "DUE_SOON",
            "level": SuggestionLevelEnum.ALERT.value if due_today else SuggestionLevelEnum.WARNING.value,
            "title": "Vence hoy" if due_today else "Vence pronto",
            "message": (
                f'La tarea "{t.title}" vence hoy.' if due_today
                else f'La tarea "{t.title}" vence en {diff} día(s).'
            ),
            "zone": t.zone or None,
            "action_payload": build_action_payload(
                f"Seguimiento: {t.title}",
                to_yyyymmdd(t.start or t.due),
                to_yyyymmdd(t.due),
                zone=t.zone or "",
                type=t.type or DEFAULT_TASK_TYPE,
                priority=TaskPriorityEnum.ALTA.value,
                owner=t.owner or "",
            ),
        })


def _empty_zone_suggestions(bag: _SuggestionBag, tasks: list, zones: list, today_str: str) -> None:
    zone_names = [n for n in (zone_name_of(z) for z in zones) if n]
    for zn in zone_names:
        has_active = any((t.zone or "").strip() == zn and is_active(t) for t in tasks)
        if has_active:
            continue
        bag.push({
            "id": f"zone_empty_{zn}",
            "code": "ZONE_NO_ACTIVE_TASKS",
            "level": SuggestionLevelEnum.INFO.value,
            "title": "Zona sin tareas activas",
            "message": f'La zona "{zn}" no tiene tareas activas.',
            "zone": zn,
            "action_payload": build_action_payload(
                f"Inspección preventiva - {zn}", today_str, today_str, zone=zn
            ),
        })


def _pending_load_suggestion(bag: _SuggestionBag, tasks: list) -> None:
    pending = sum(1 for t in tasks if t.status == TaskStatusEnum.PENDIENTE.value)
    if pending < TOO_MANY_PENDING_THRESHOLD:
        return
    bag.push({
        "id": f"too_many_pending_{pending}",
        "code": "TOO_MANY_PENDING",
        "level": SuggestionLevelEnum.WARNING.value,
        "title": "Carga alta de pendientes",
        "message": (
            f'Tenés {pending} tareas en estado "Pendiente". '
            "Considerá priorizar o dividir trabajo."
        ),
        "zone": None,
        "action_payload": None,
    })


def _overdue_suggestions(bag: _SuggestionBag, tasks: list, today: date) -> None:
    today_str = to_yyyymmdd(today)
    for t in tasks:
        if not t.due or not t.title or not is_active(t):
            continue

        late = (today - t.due).days
        if late < 1:
            continue

        bag.push({
            "id": f"overdue_{t.id}",
            "code": "OVERDUE",
            "level": SuggestionLevelEnum.ALERT.value,
            "title": "Tarea atrasada",
            "message": f'La tarea "{t.title}" está atrasada por {late} día(s).',
            "zone": t.zone or None,
            "action_payload": build_action_payload(
                f"Reprogramar: {t.title}",
                to_yyyymmdd(t.start or t.due),
                today_str,
                zone=t.zone or "",
                type=t.type or DEFAULT_TASK_TYPE,
                priority=TaskPriorityEnum.ALTA.value,
                owner=t.owner or "",
            ),
        })


def build_task_suggestions(tasks: list, zones: list, today: date) -> list[dict]:
    """Sugerencias de tareas para una finca a la fecha `today`."""
    bag = _SuggestionBag()
    today_str = to_yyyymmdd(today)

    _zone_component_suggestions(bag, tasks, zones, today_str)
    _due_soon_suggestions(bag, tasks, today)
    _empty_zone_suggestions(bag, tasks, zones, today_str)
    _pending_load_suggestion(bag, tasks)
    _overdue_suggestions(bag, tasks, today)

    return bag.items
