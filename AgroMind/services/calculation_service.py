"""
Servicio de cálculos financieros.

Funciones puras (sin DB) usadas por insights y activos:
- Totales por tipo, margen y variación mensual
- Health score 0–100
- Proyección por promedio de balance mensual
- Depreciación lineal de activos
"""
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from enums.enums import MovementTypeEnum


def round_money(value: float) -> float:
    """Redondeo monetario a 2 decimales (half-up)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# ==================== TOTALES ====================

def sum_by_type(movements: Iterable[Any]) -> Dict[str, float]:
    """
    Totales de un conjunto de movimientos.

    Fórmulas:
    balance = ingresos - gastos
    margen = balance / ingresos × 100 (0 si no hay ingresos)
    """
    ingresos = 0.0
    gastos = 0.0
    for m in movements:
        amount = float(m.amount or 0)
        if m.type == MovementTypeEnum.INGRESO.value:
            ingresos += amount
        elif m.type == MovementTypeEnum.GASTO.value:
            gastos += amount

    balance = ingresos - gastos
    margen = (balance / ingresos) * 100 if ingresos > 0 else 0.0
    return {"ingresos": ingresos, "gastos": gastos, "balance": balance, "margen": margen}


def calculate_variation(cur: Dict[str, float], prev: Dict[str, float]) -> Dict[str, float]:
    """Diferencia mes actual vs mes anterior."""
    return {
        "ingresos": cur["ingresos"] - prev["ingresos"],
        "gastos": cur["gastos"] - prev["gastos"],
        "balance": cur["balance"] - prev["balance"],
    }


# ==================== SCORE ====================

def calculate_health_score(cur: Dict[str, float], variation: Dict[str, float], audit: Dict[str, int]) -> int:
    """
    Salud financiera 0–100.

    Base 50 y ajustes:
    +15 balance positivo, +10 margen >= 20, -15 margen negativo,
    +8 balance mejor que el mes anterior, -8 más de 3 en "General",
    -6 sin categoría, -6 duplicados, -6 más de 2 gastos sin factura
    """
    score = 50
    if cur["balance"] > 0:
        score += 15
    if cur["ingresos"] > 0 and cur["margen"] >= 20:
        score += 10
    if cur["ingresos"] > 0 and cur["margen"] < 0:
        score -= 15
    if variation["balance"] > 0:
        score += 8
    if audit["too_general_category"] > 3:
        score -= 8
    if audit["missing_category"] > 0:
        score -= 6
    if audit["possible_duplicates"] > 0:
        score -= 6
    if audit["invoice_missing"] > 2:
        score -= 6
    return max(0, min(100, score))


# ==================== PROYECCIÓN ====================

def calculate_projection(monthly_balances: List[float]) -> Dict[str, float]:
    """
    Proyección de balance a 30 y 90 días.

    `monthly_balances` viene ordenado por mes ascendente (solo meses con datos).
    Se promedian los últimos 3.
    """
    last3 = monthly_balances[-3:]
    avg = sum(last3) / len(last3) if last3 else 0.0
    return {"projection30": avg, "projection90": avg * 3}


# ==================== ACTIVOS ====================

def straight_line_depreciation(
    purchase_value: float,
    residual_value: float,
    useful_life_years: int,
    purchase_date: date,
    as_of: date,
) -> Dict[str, float]:
    """
    Depreciación lineal a una fecha.

    Fórmulas:
    anual = (valor_compra - residual) / vida_util
    acumulada = anual × años transcurridos (tope: valor_compra - residual)
    valor_libros = valor_compra - acumulada

    Un residual mayor al valor de compra no genera depreciación.
    """
    base = max(0.0, float(purchase_value or 0) - float(residual_value or 0))
    years = max(1, int(useful_life_years or 1))
    annual = base / years

    elapsed_days = max(0, (as_of - purchase_date).days) if purchase_date else 0
    accumulated = min(base, annual * (elapsed_days / 365.25))

    return {
        "annual": round_money(annual),
        "accumulated": round_money(accumulated),
        "book_value": round_money(float(purchase_value or 0) - accumulated),
    }
