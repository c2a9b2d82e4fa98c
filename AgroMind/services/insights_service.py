# services/insights_service.py
"""
Insights financieros de una finca.

Se recalcula todo en cada request a partir de movimientos, zonas y tareas:
- Resumen del mes actual y variación vs mes anterior
- Top 3 categorías del mes
- Auditoría de calidad de datos
- Anomalías (máx. 6)
- Health score 0–100
- Proyección de balance a 30/90 días
- Sugerencias accionables (máx. 8), omitidas si ya hay una tarea activa similar
"""
from collections import defaultdict
from datetime import date
from typing import Any, Iterable

from sqlalchemy.orm import Session

from enums.enums import MovementTypeEnum, TaskPriorityEnum, FEEDING_TASK_TYPE
from models.farm import Farm
from models.finance import FinanceMovement
from models.map import MapZone
from models.task import Task
from services.calculation_service import (
    round_money,
    sum_by_type,
    calculate_variation,
    calculate_health_score,
    calculate_projection,
)
from services.suggestion_service import build_action_payload, component_flags, is_active, zone_name_of
from utils.datetime_utils import (
    today_local,
    month_key,
    prev_month_key,
    start_of_month,
    start_of_next_month,
    get_week_start,
    to_yyyymmdd,
)
from utils.logger import get_logger
from utils.normalizers import is_non_empty_string, keyword_category, normalize_text, DEFAULT_CATEGORY

logger = get_logger(__name__)

MAX_ANOMALIES = 6
MAX_SUGGESTIONS = 8
MAX_ID_LENGTH = 180
TOP_CATEGORIES = 3

CATEGORY_SPIKE_FACTOR = 2.5
CATEGORY_SPIKE_MIN_MOVEMENTS = 3
WEEKLY_SPIKE_FACTOR = 1.8
LOW_MARGIN_PCT = 10
GENERIC_CONCEPTS = {"compra", "venta", "gasto", "ingreso"}


# ==================== AUDITORÍA ====================

def _duplicate_count(movements: list) -> int:
    """Movimientos repetidos (misma fecha + monto + concepto normalizado)."""
    seen = set()
    dups = 0
    for m in movements:
        key = (to_yyyymmdd(m.date), float(m.amount or 0), normalize_text(m.concept))
        if key in seen:
            dups += 1
        else:
            seen.add(key)
    return dups


def build_audit(month_movs: list) -> dict:
    return {
        "missing_category": sum(1 for m in month_movs if not is_non_empty_string(m.category)),
        "too_general_category": sum(1 for m in month_movs if (m.category or "") == DEFAULT_CATEGORY),
        "generic_concept": sum(1 for m in month_movs if normalize_text(m.concept) in GENERIC_CONCEPTS),
        "possible_duplicates": _duplicate_count(month_movs),
        "invoice_missing": sum(
            1 for m in month_movs
            if m.type == MovementTypeEnum.GASTO.value and not is_non_empty_string(m.invoice_number)
        ),
    }


def top_categories(month_movs: list) -> list[dict]:
    totals: dict[str, float] = defaultdict(float)
    for m in month_movs:
        totals[keyword_category(m.concept, m.category)] += float(m.amount or 0)
    ranked = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:TOP_CATEGORIES]
    return [{"category": cat, "total": round_money(total)} for cat, total in ranked]


# ==================== ANOMALÍAS ====================

def detect_anomalies(month_movs: list, prev_movs: list, top: list[dict], dup_count: int) -> list[dict]:
    anomalies = []

    # 1) Movimiento muy por encima del promedio de su categoría
    stats: dict[str, list[float]] = defaultdict(list)
    for m in month_movs:
        stats[keyword_category(m.concept, m.category)].append(float(m.amount or 0))

    for m in month_movs:
        cat = keyword_category(m.concept, m.category)
        amounts = stats[cat]
        if len(amounts) < CATEGORY_SPIKE_MIN_MOVEMENTS:
            continue
        avg = sum(amounts) / len(amounts)
        if avg > 0 and float(m.amount or 0) > CATEGORY_SPIKE_FACTOR * avg:
            anomalies.append({
                "title": "Movimiento inusual",
                "message": f'"{m.concept}" en {cat} es muy alto vs tu promedio.',
                "movement_id": m.id,
            })

    # 2) Duplicados
    if dup_count > 0:
        anomalies.append({
            "title": "Posibles duplicados",
            "message": f"Detectamos {dup_count} movimiento(s) que parecen repetidos.",
        })

    # 3) Categoría top que no existía el mes anterior
    prev_cats = {keyword_category(m.concept, m.category) for m in prev_movs}
    new_cats = [c["category"] for c in top if c["category"] not in prev_cats]
    if new_cats:
        anomalies.append({
            "title": "Categoría nueva",
            "message": f"Este mes apareció una categoría nueva: {new_cats[0]}.",
        })

    # 4) Semana con gastos muy por encima del promedio semanal
    weeks: dict[date, float] = defaultdict(float)
    for m in month_movs:
        if m.type == MovementTypeEnum.GASTO.value:
            weeks[get_week_start(m.date)] += float(m.amount or 0)
    if len(weeks) >= 2:
        avg_week = sum(weeks.values()) / len(weeks)
        if avg_week > 0 and max(weeks.values()) > WEEKLY_SPIKE_FACTOR * avg_week:
            anomalies.append({
                "title": "Pico semanal",
                "message": "Se detectó una semana con gastos anormalmente altos.",
            })

    return anomalies[:MAX_ANOMALIES]


# ==================== PROYECCIÓN ====================

def monthly_balances(movements: Iterable[Any]) -> list[float]:
    """Balance por mes (solo meses con movimientos), ordenado ascendente."""
    by_month: dict[str, list] = defaultdict(list)
    for m in movements:
        if m.date:
            by_month[month_key(m.date)].append(m)
    return [sum_by_type(by_month[k])["balance"] for k in sorted(by_month)]


# ==================== SUGERENCIAS ====================

def has_active_task_like(tasks: Iterable[Any], keywords: Iterable[str]) -> bool:
    """¿Alguna tarea activa menciona (título o zona) alguna keyword?"""
    keys = [k for k in (normalize_text(kw) for kw in keywords) if k]
    if not keys:
        return False
    for t in tasks:
        if not is_active(t):
            continue
        hay = normalize_text(f"{t.title or ''} {t.zone or ''}")
        if any(k in hay for k in keys):
            return True
    return False


def _suggestion(sid: str, code: str, title: str, message: str, payload: dict) -> dict:
    return {"id": sid[:MAX_ID_LENGTH], "code": code, "title": title, "message": message, "action_payload": payload}


def build_finance_suggestions(
    month: str,
    today_str: str,
    month_movs: list,
    cur: dict,
    audit: dict,
    top: list[dict],
    zones: list,
    tasks: list,
) -> list[dict]:
    suggestions: list[dict] = []
    seen: set[tuple] = set()

    def push(s: dict) -> None:
        key = (s["code"], s["title"], s["message"])
        if key in seen:
            return
        seen.add(key)
        suggestions.append(s)

    def payload(title: str, **kwargs) -> dict:
        return build_action_payload(title, today_str, today_str, **kwargs)

    top_norm = {normalize_text(c["category"]) for c in top}

    def top_has(*names: str) -> bool:
        return any(normalize_text(n) in top_norm for n in names)

    def task_like(*keywords: str) -> bool:
        return has_active_task_like(tasks, keywords)

    if not month_movs:
        push(_suggestion(
            f"FIN_BOOT_{month}", "FIN_BOOT",
            "Activar finanzas del mes",
            "No hay movimientos registrados este mes. Agregá al menos 5 (ingresos y gastos) "
            "para que el análisis sea más preciso.",
            payload("Registrar movimientos iniciales del mes", priority=TaskPriorityEnum.ALTA.value),
        ))

    if audit["invoice_missing"] > 0 and not task_like("factura", "recibo"):
        push(_suggestion(
            f"FIN_INVOICE_{month}", "FIN_INVOICE_MISSING",
            "Completar facturas faltantes",
            f"Hay {audit['invoice_missing']} gasto(s) sin número de factura/recibo. "
            "Eso debilita control y auditoría.",
            payload("Completar facturas faltantes en gastos"),
        ))

    if (audit["missing_category"] > 0 or audit["too_general_category"] > 0) and not task_like("categoria", "categoría"):
        push(_suggestion(
            f"FIN_CATS_{month}", "FIN_FIX_CATEGORIES",
            "Ordenar categorías",
            f'Tenés {audit["missing_category"]} sin categoría y {audit["too_general_category"]} en "General". '
            "Clasificar mejora reportes y decisiones.",
            payload("Auditar categorías de movimientos"),
        ))

    if audit["possible_duplicates"] > 0 and not task_like("duplicad", "repetid"):
        push(_suggestion(
            f"FIN_DUPS_{month}", "FIN_DUPLICATES",
            "Revisar posibles duplicados",
            f"Detectamos {audit['possible_duplicates']} movimiento(s) posiblemente duplicados. "
            "Revisarlos evita distorsión del balance.",
            payload("Revisar duplicados en movimientos"),
        ))

    if cur["ingresos"] > 0 and cur["margen"] < LOW_MARGIN_PCT and not task_like("margen", "costos", "coste"):
        push(_suggestion(
            f"FIN_MARGIN_{month}", "FIN_LOW_MARGIN",
            "Mejorar margen",
            f"El margen del mes está en {cur['margen']:.1f}%. "
            "Recomendación: revisar costos silenciosos y renegociar insumos.",
            payload("Revisión de costos para mejorar margen", priority=TaskPriorityEnum.ALTA.value),
        ))

    if top_has("transporte", "combustible") and not task_like("rutas", "combustible"):
        push(_suggestion(
            f"FIN_TRANSPORTE_{month}", "FIN_HIGH_TRANSPORT",
            "Optimizar rutas",
            "Gasto alto en transporte/combustible. "
            "Recomendación: revisar rutas y recorridos para reducir costos.",
            payload("Optimizar rutas y consumo de combustible"),
        ))

    if top_has("alimentacion", "alimentación") and not task_like("aliment"):
        push(_suggestion(
            f"FIN_ALIMENTACION_{month}", "FIN_HIGH_FEED",
            "Revisar eficiencia de alimentación",
            "Gasto alto en alimentación. "
            "Recomendación: revisar consumo, desperdicio y calendario de suministro.",
            payload("Revisar eficiencia de alimentación", type=FEEDING_TASK_TYPE),
        ))

    if top_has("fertilizantes", "abono", "fertiliz") and not task_like("fertiliz", "abono"):
        push(_suggestion(
            f"FIN_FERT_{month}", "FIN_HIGH_FERT",
            "Optimizar plan de fertilización",
            "Inversión alta en fertilización. "
            "Recomendación: revisar dosis, calendario y necesidades por zona/cultivo.",
            payload("Optimizar plan de fertilización por zona"),
        ))

    if top_has("venta", "ventas") and not task_like("ventas", "clientes", "producto"):
        push(_suggestion(
            f"FIN_SALES_{month}", "FIN_SALES_ORDER",
            "Ordenar registro de ventas",
            "Ventas son top este mes. Recomendación: registrar ventas con mejor detalle "
            "(producto/cliente/canal) para medir rentabilidad real.",
            payload("Mejorar detalle de registro de ventas"),
        ))

    # Mapa → finanzas → tareas
    for z in zones:
        zone_name = zone_name_of(z)
        if not zone_name:
            continue
        flags = component_flags(z.components)

        if flags["has_animals"] and top_has("sanidad") and not task_like("sanidad"):
            push(_suggestion(
                f"MAP_FIN_SANIDAD_{zone_name}_{month}", "MAP_FIN_SANIDAD",
                f"Chequeo sanitario ({zone_name})",
                f'Hay gasto relevante en Sanidad y la zona "{zone_name}" tiene animales. '
                "Recomendación: chequeo sanitario y control preventivo.",
                payload(f"Chequeo sanitario - {zone_name}", zone=zone_name),
            ))

        if flags["has_crops"] and top_has("fertilizantes") and not task_like("fertiliz"):
            push(_suggestion(
                f"MAP_FIN_FERT_{zone_name}_{month}", "MAP_FIN_FERT",
                f"Revisión nutricional ({zone_name})",
                f'Hay inversión en Fertilizantes y la zona "{zone_name}" tiene cultivos. '
                "Recomendación: revisión nutricional y plan por cultivo.",
                payload(f"Revisión nutricional - {zone_name}", zone=zone_name),
            ))

    return suggestions[:MAX_SUGGESTIONS]


# ==================== ENSAMBLADO ====================

def build_insights(movements: list, zones: list, tasks: list, today: date) -> dict:
    """Insights completos a la fecha `today` (función pura)."""
    this_month = month_key(today)
    prev_month = prev_month_key(this_month)
    start, end = start_of_month(today), start_of_next_month(today)

    month_movs = [m for m in movements if m.date and start <= m.date < end]
    prev_movs = [m for m in movements if m.date and month_key(m.date) == prev_month]

    cur = sum_by_type(month_movs)
    prev = sum_by_type(prev_movs)
    variation = calculate_variation(cur, prev)

    audit = build_audit(month_movs)
    top = top_categories(month_movs)
    anomalies = detect_anomalies(month_movs, prev_movs, top, audit["possible_duplicates"])
    score = calculate_health_score(cur, variation, audit)
    projection = calculate_projection(monthly_balances(movements))

    suggestions = build_finance_suggestions(
        this_month, to_yyyymmdd(today), month_movs, cur, audit, top, zones, tasks
    )

    return {
        "summary": {
            "month": this_month,
            "ingresos": round_money(cur["ingresos"]),
            "gastos": round_money(cur["gastos"]),
            "balance": round_money(cur["balance"]),
            "margen": round_money(cur["margen"]),
            "variation_vs_prev": {k: round_money(v) for k, v in variation.items()},
        },
        "top_categories": top,
        "anomalies": anomalies,
        "health_score": score,
        "projection30": round_money(projection["projection30"]),
        "projection90": round_money(projection["projection90"]),
        "audit": audit,
        "suggestions": suggestions,
    }


def get_finance_insights(db: Session, farm: Farm, today: date | None = None) -> dict:
    """Carga movimientos, zonas y tareas de la finca y calcula los insights."""
    movements = (
        db.query(FinanceMovement)
        .filter(FinanceMovement.farm_id == farm.id)
        .order_by(FinanceMovement.date.desc(), FinanceMovement.created_at.desc(), FinanceMovement.id.desc())
        .all()
    )
    zones = db.query(MapZone).filter(MapZone.farm_id == farm.id).order_by(MapZone.id.asc()).all()
    tasks = db.query(Task).filter(Task.farm_id == farm.id).all()

    insights = build_insights(movements, zones, tasks, today or today_local())
    logger.debug("Insights farm_id=%s score=%s", farm.id, insights["health_score"])
    return insights
