# api/finance.py
"""
API de finanzas de una finca.

- Movimientos (ingresos/gastos)
- Activos con depreciación lineal
- Insights: resumen, anomalías, score, proyección y sugerencias
"""
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.datetime_utils import today_local
from utils.dependencies import get_current_user
from utils.permissions import ensure_farm_owner
from models.user import User
from schemas.common import OkOut
from schemas.finance import (
    MovementCreate, MovementUpdate, MovementEnvelope, MovementUpdateOut, MovementListOut,
    AssetCreate, AssetUpdate, AssetOut, AssetEnvelope, AssetUpdateOut, AssetListOut,
    FinanceInsightsOut,
)
from services.finance_service import list_movements, create_movement, update_movement, delete_movement
from services.asset_service import list_assets, create_asset, update_asset, delete_asset
from services.insights_service import get_finance_insights

router = APIRouter(prefix="/farms/{farm_id}/finance", tags=["Finance"])


# ============================================================================
# Movimientos
# ============================================================================

@router.get(
    "/movements",
    response_model=MovementListOut,
    summary="Listar movimientos",
    description="Movimientos de la finca por fecha descendente."
)
def list_movements_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"movements": list_movements(db, farm)}


@router.post(
    "/movements",
    response_model=MovementEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar movimiento",
    description=(
        "Registra un ingreso o gasto.\n\n"
        "- `concept` obligatorio (máx. 160)\n"
        "- `type`: \"Ingreso\" o \"Gasto\"\n"
        "- `amount`: número o string numérico >= 0 (\"1,250.50\" se acepta)\n"
        "- `date`: `YYYY-MM-DD` o ISO; por defecto hoy\n"
        "- `category` vacía o \"General\" se infiere por palabras clave del concepto"
    )
)
def create_movement_endpoint(
    payload: MovementCreate,
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"movement": create_movement(db, farm, payload)}


@router.put(
    "/movements/{movement_id}",
    response_model=MovementUpdateOut,
    summary="Actualizar movimiento"
)
def update_movement_endpoint(
    payload: MovementUpdate,
    farm_id: int = Path(..., description="ID de la finca"),
    movement_id: int = Path(..., description="ID del movimiento"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"ok": True, "movement": update_movement(db, farm, movement_id, payload)}


@router.delete(
    "/movements/{movement_id}",
    response_model=OkOut,
    summary="Eliminar movimiento"
)
def delete_movement_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    movement_id: int = Path(..., description="ID del movimiento"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    delete_movement(db, farm, movement_id)
    return {"ok": True}


# ============================================================================
# Activos
# ============================================================================

@router.get(
    "/assets",
    response_model=AssetListOut,
    summary="Listar activos",
    description="Activos con depreciación calculada a la fecha de hoy."
)
def list_assets_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    today = today_local()
    return {"assets": [AssetOut.from_asset(a, today) for a in list_assets(db, farm)]}


@router.post(
    "/assets",
    response_model=AssetEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar activo",
    description=(
        "- `name` obligatorio (máx. 120)\n"
        "- `purchaseValue` >= 0\n"
        "- `usefulLifeYears` entero 1–50 (default 1)\n"
        "- `residualValue` >= 0 (default 0)\n"
        "- `purchaseDate` por defecto hoy"
    )
)
def create_asset_endpoint(
    payload: AssetCreate,
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    asset = create_asset(db, farm, payload)
    return {"asset": AssetOut.from_asset(asset, today_local())}


@router.put(
    "/assets/{asset_id}",
    response_model=AssetUpdateOut,
    summary="Actualizar activo"
)
def update_asset_endpoint(
    payload: AssetUpdate,
    farm_id: int = Path(..., description="ID de la finca"),
    asset_id: int = Path(..., description="ID del activo"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    asset = update_asset(db, farm, asset_id, payload)
    return {"ok": True, "asset": AssetOut.from_asset(asset, today_local())}


@router.delete(
    "/assets/{asset_id}",
    response_model=OkOut,
    summary="Eliminar activo"
)
def delete_asset_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    asset_id: int = Path(..., description="ID del activo"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    delete_asset(db, farm, asset_id)
    return {"ok": True}


# ============================================================================
# Insights
# ============================================================================

@router.get(
    "/insights",
    response_model=FinanceInsightsOut,
    summary="Insights financieros",
    description=(
        "Recalcula sobre los datos actuales:\n\n"
        "- `summary` del mes y `variationVsPrev`\n"
        "- `topCategories` (top 3)\n"
        "- `anomalies` (máx. 6)\n"
        "- `healthScore` 0–100\n"
        "- `projection30` / `projection90`\n"
        "- `audit` de calidad de datos\n"
        "- `suggestions` (máx. 8)"
    )
)
def finance_insights_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return get_finance_insights(db, farm)
