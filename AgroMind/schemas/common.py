# schemas/common.py
from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from utils.datetime_utils import parse_date_only, parse_date_any
from utils.normalizers import parse_amount


# -------------------------------------------------------------------
# Base con alias camelCase (contrato JSON del frontend)
# Acepta tanto camelCase (alias) como snake_case (por nombre)
# -------------------------------------------------------------------
class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# -------------------------------------------------------------------
# Objetos de respuesta simples
# -------------------------------------------------------------------
class OkOut(BaseModel):
    """Respuesta de acciones sin payload (deletes, etc.)."""
    ok: bool = True


# -------------------------------------------------------------------
# Helpers de validación compartidos por los schemas de entrada
# -------------------------------------------------------------------
def require_date_only(v, field: str) -> date:
    """Valida fecha estricta YYYY-MM-DD (o date ya parseada)."""
    if isinstance(v, date):
        return v
    parsed = parse_date_only(v)
    if parsed is None:
        raise ValueError(f"{field} debe ser YYYY-MM-DD.")
    return parsed


def require_date_any(v, field: str) -> date:
    parsed = parse_date_any(v)
    if parsed is None:
        raise ValueError(f"{field} inválida.")
    return parsed


def require_amount(v, field: str) -> float:
    parsed = parse_amount(v)
    if parsed is None:
        raise ValueError(f"{field} inválido (debe ser número >= 0).")
    return parsed
