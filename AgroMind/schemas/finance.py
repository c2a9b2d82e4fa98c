# schemas/finance.py
import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from enums.enums import MovementTypeEnum
from schemas.common import CamelModel, require_amount, require_date_any
from schemas.task import SuggestionOut
from utils.datetime_utils import parse_date_any
from utils.normalizers import clean_optional, DEFAULT_CATEGORY

DEFAULT_ASSET_CATEGORY = "Equipos"
MAX_USEFUL_LIFE_YEARS = 50


def _normalize_type(v):
    s = v.strip() if isinstance(v, str) else ""
    if s not in (MovementTypeEnum.INGRESO.value, MovementTypeEnum.GASTO.value):
        raise ValueError('type debe ser "Ingreso" o "Gasto".')
    return s


# ============================================================================
# Movimientos
# ============================================================================

class MovementCreate(CamelModel):
    """
    Crear movimiento.

    - `date` acepta YYYY-MM-DD o datetime ISO; si falta o no se puede
      interpretar se usa la fecha de hoy (lo resuelve el service)
    - `category` es la categoría "cruda"; el service aplica el categorizador
    """
    date: dt.date | None = None
    concept: str | None = Field(None, validate_default=True)
    category: str = Field(DEFAULT_CATEGORY, validate_default=True)
    type: Literal["Ingreso", "Gasto"] | None = Field(None, validate_default=True)
    amount: float | None = Field(None, validate_default=True)
    note: str | None = None
    invoice_number: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def lenient_date(cls, v):
        return parse_date_any(v)

    @field_validator("concept", mode="before")
    @classmethod
    def validate_concept(cls, v):
        concept = clean_optional(v, 160)
        if not concept:
            raise ValueError("concept es requerido.")
        return concept

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, v):
        return clean_optional(v, 80) or DEFAULT_CATEGORY

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v):
        return _normalize_type(v)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v):
        return require_amount(v, "amount")

    @field_validator("note", mode="before")
    @classmethod
    def clean_note(cls, v):
        return clean_optional(v, 240)

    @field_validator("invoice_number", mode="before")
    @classmethod
    def clean_invoice(cls, v):
        return clean_optional(v, 60)


class MovementUpdate(CamelModel):
    """Actualizar movimiento (solo los campos enviados)"""
    date: dt.date | None = None
    concept: str | None = None
    category: str | None = None
    type: Literal["Ingreso", "Gasto"] | None = None
    amount: float | None = None
    note: str | None = None
    invoice_number: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return require_date_any(v, "date")

    @field_validator("concept", mode="before")
    @classmethod
    def validate_concept(cls, v):
        concept = clean_optional(v, 160)
        if not concept:
            raise ValueError("concept inválido.")
        return concept

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, v):
        return clean_optional(v, 80) or DEFAULT_CATEGORY

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v):
        return _normalize_type(v)

    @field_validator("amount", mode="before")
    @classmethod
    def validate_amount(cls, v):
        return require_amount(v, "amount")

    @field_validator("note", mode="before")
    @classmethod
    def clean_note(cls, v):
        return clean_optional(v, 240)

    @field_validator("invoice_number", mode="before")
    @classmethod
    def clean_invoice(cls, v):
        return clean_optional(v, 60)


class MovementOut(CamelModel):
    id: int
    farm_id: int
    date: dt.date
    concept: str
    category: str
    type: str
    amount: float
    note: str | None
    invoice_number: str | None
    created_at: dt.datetime
    updated_at: dt.datetime


class MovementEnvelope(BaseModel):
    movement: MovementOut


class MovementUpdateOut(BaseModel):
    ok: bool = True
    movement: MovementOut


class MovementListOut(BaseModel):
    movements: list[MovementOut]


# ============================================================================
# Activos
# ============================================================================

def _validate_useful_life(v):
    if isinstance(v, bool):
        raise ValueError(f"usefulLifeYears inválido (1–{MAX_USEFUL_LIFE_YEARS}).")
    try:
        n = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"usefulLifeYears inválido (1–{MAX_USEFUL_LIFE_YEARS}).")
    if not n.is_integer() or n <= 0 or n > MAX_USEFUL_LIFE_YEARS:
        raise ValueError(f"usefulLifeYears inválido (1–{MAX_USEFUL_LIFE_YEARS}).")
    return int(n)


class AssetCreate(CamelModel):
    name: str | None = Field(None, validate_default=True)
    category: str = Field(DEFAULT_ASSET_CATEGORY, validate_default=True)
    purchase_value: float | None = Field(None, validate_default=True)
    purchase_date: dt.date | None = None
    useful_life_years: int = Field(1, validate_default=True)
    residual_value: float = Field(0.0, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        name = clean_optional(v, 120)
        if not name:
            raise ValueError("name es requerido.")
        return name

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, v):
        return clean_optional(v, 60) or DEFAULT_ASSET_CATEGORY

    @field_validator("purchase_value", mode="before")
    @classmethod
    def validate_purchase_value(cls, v):
        return require_amount(v, "purchaseValue")

    @field_validator("purchase_date", mode="before")
    @classmethod
    def lenient_purchase_date(cls, v):
        return parse_date_any(v)

    @field_validator("useful_life_years", mode="before")
    @classmethod
    def validate_useful_life(cls, v):
        return 1 if v is None else _validate_useful_life(v)

    @field_validator("residual_value", mode="before")
    @classmethod
    def validate_residual(cls, v):
        return 0.0 if v is None else require_amount(v, "residualValue")


class AssetUpdate(CamelModel):
    name: str | None = None
    category: str | None = None
    purchase_value: float | None = None
    purchase_date: dt.date | None = None
    useful_life_years: int | None = None
    residual_value: float | None = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        name = clean_optional(v, 120)
        if not name:
            raise ValueError("name inválido.")
        return name

    @field_validator("category", mode="before")
    @classmethod
    def clean_category(cls, v):
        return clean_optional(v, 60) or DEFAULT_ASSET_CATEGORY

    @field_validator("purchase_value", mode="before")
    @classmethod
    def validate_purchase_value(cls, v):
        return require_amount(v, "purchaseValue")

    @field_validator("purchase_date", mode="before")
    @classmethod
    def validate_purchase_date(cls, v):
        return require_date_any(v, "purchaseDate")

    @field_validator("useful_life_years", mode="before")
    @classmethod
    def validate_useful_life(cls, v):
        return _validate_useful_life(v)

    @field_validator("residual_value", mode="before")
    @classmethod
    def validate_residual(cls, v):
        return 0.0 if v is None else require_amount(v, "residualValue")


class AssetOut(CamelModel):
    """Activo con depreciación lineal calculada a la fecha de consulta"""
    id: int
    farm_id: int
    name: str
    category: str
    purchase_value: float
    purchase_date: dt.date
    useful_life_years: int
    residual_value: float
    annual_depreciation: float
    accumulated_depreciation: float
    book_value: float
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_asset(cls, asset, as_of: dt.date) -> "AssetOut":
        """Constructor desde modelo Asset + cálculo de depreciación"""
        from services.calculation_service import straight_line_depreciation

        dep = straight_line_depreciation(
            purchase_value=asset.purchase_value,
            residual_value=asset.residual_value,
            useful_life_years=asset.useful_life_years,
            purchase_date=asset.purchase_date,
            as_of=as_of,
        )
        return cls(
            id=asset.id,
            farm_id=asset.farm_id,
            name=asset.name,
            category=asset.category,
            purchase_value=asset.purchase_value,
            purchase_date=asset.purchase_date,
            useful_life_years=asset.useful_life_years,
            residual_value=asset.residual_value,
            annual_depreciation=dep["annual"],
            accumulated_depreciation=dep["accumulated"],
            book_value=dep["book_value"],
            created_at=asset.created_at,
            updated_at=asset.updated_at,
        )


class AssetEnvelope(BaseModel):
    asset: AssetOut


class AssetUpdateOut(BaseModel):
    ok: bool = True
    asset: AssetOut


class AssetListOut(BaseModel):
    assets: list[AssetOut]


# ============================================================================
# Insights financieros
# ============================================================================

class MonthVariation(CamelModel):
    ingresos: float
    gastos: float
    balance: float


class FinanceSummary(CamelModel):
    month: str
    ingresos: float
    gastos: float
    balance: float
    margen: float
    variation_vs_prev: MonthVariation


class CategoryTotal(CamelModel):
    category: str
    total: float


class FinanceAudit(CamelModel):
    missing_category: int = 0
    too_general_category: int = 0
    generic_concept: int = 0
    possible_duplicates: int = 0
    invoice_missing: int = 0


class Anomaly(CamelModel):
    title: str
    message: str
    movement_id: int | None = None


class FinanceInsightsOut(CamelModel):
    summary: FinanceSummary
    top_categories: list[CategoryTotal]
    anomalies: list[Anomaly]
    health_score: int
    projection30: float
    projection90: float
    audit: FinanceAudit
    suggestions: list[SuggestionOut]
