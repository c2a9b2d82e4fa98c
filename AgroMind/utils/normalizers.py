"""
Normalización de entradas de texto y montos.

Funciones puras, usadas por los validators de schemas y por los servicios
de sugerencias/insights.
"""
import math
import unicodedata


def is_non_empty_string(v) -> bool:
    return isinstance(v, str) and len(v.strip()) > 0


def clean_name(v, fallback: str, max_length: int = 80) -> str:
    """Trim + recorte a max_length; si queda vacío retorna fallback."""
    s = v.strip() if is_non_empty_string(v) else ""
    return s[:max_length] if s else fallback


def clean_optional(v, max_length: int) -> str | None:
    """Trim + recorte; strings vacíos o no-strings se guardan como NULL."""
    return v.strip()[:max_length] if is_non_empty_string(v) else None


def normalize_text(s) -> str:
    """Minúsculas, sin acentos y sin espacios en los extremos."""
    text = unicodedata.normalize("NFD", str(s or "").lower())
    return "".join(ch for ch in text if unicodedata.category(ch) != "Mn").strip()


def parse_amount(v) -> float | None:
    """
    Parsea un monto >= 0.

    Acepta números o strings numéricos ("1,250.50" → 1250.5).
    Retorna None si no es numérico, es infinito/NaN o es negativo.
    """
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        n = float(v)
    elif isinstance(v, str):
        s = v.replace(",", "").strip()
        if not s:
            return None
        try:
            n = float(s)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(n) or math.isinf(n) or n < 0:
        return None
    return n


# Diccionario de categorías por palabra clave (se evalúa en orden)
CATEGORY_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("urea", "fertiliz", "abono"), "Fertilizantes"),
    (("concentrado", "alimento", "balanceado"), "Alimentación"),
    (("diesel", "diésel", "gasolina", "combustible"), "Transporte"),
    (("vacuna", "desparas", "vitamina"), "Sanidad"),
    (("manguera", "riego", "aspersor", "bomba"), "Riego"),
    (("repuesto", "mantenimiento", "taller"), "Mantenimiento"),
]

DEFAULT_CATEGORY = "General"


def keyword_category(concept: str | None, category: str | None) -> str:
    """
    Categoría efectiva de un movimiento.

    - Si viene una categoría explícita distinta de "General", se respeta.
    - Si no, se busca una palabra clave en concepto + categoría.
    """
    cat = category.strip() if is_non_empty_string(category) else DEFAULT_CATEGORY
    if cat != DEFAULT_CATEGORY:
        return cat

    hay = normalize_text(f"{concept or ''} {cat}")
    for keys, mapped in CATEGORY_KEYWORDS:
        if any(normalize_text(k) in hay for k in keys):
            return mapped
    return cat
