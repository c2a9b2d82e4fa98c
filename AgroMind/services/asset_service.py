# services/asset_service.py
from sqlalchemy.orm import Session

from models.farm import Farm
from models.finance import Asset
from schemas.finance import AssetCreate, AssetUpdate
from utils.datetime_utils import today_local
from utils.logger import get_logger
from utils.permissions import get_child_in_farm

logger = get_logger(__name__)

ASSET_NOT_FOUND = "Activo no encontrado."


def list_assets(db: Session, farm: Farm) -> list[Asset]:
    """Activos por fecha de compra descendente; empates, más recientes primero."""
    return (
        db.query(Asset)
        .filter(Asset.farm_id == farm.id)
        .order_by(Asset.purchase_date.desc(), Asset.created_at.desc(), Asset.id.desc())
        .all()
    )


def create_asset(db: Session, farm: Farm, payload: AssetCreate) -> Asset:
    """Registrar activo. Fecha de compra inválida o ausente → hoy."""
    try:
        asset = Asset(
            farm_id=farm.id,
            name=payload.name,
            category=payload.category,
            purchase_value=payload.purchase_value,
            purchase_date=payload.purchase_date or today_local(),
            useful_life_years=payload.useful_life_years,
            residual_value=payload.residual_value,
        )
        db.add(asset)
        db.commit()
        db.refresh(asset)
    except Exception:
        db.rollback()
        raise

    logger.info("Activo creado: asset_id=%s farm_id=%s", asset.id, farm.id)
    return asset


def update_asset(db: Session, farm: Farm, asset_id: int, payload: AssetUpdate) -> Asset:
    """
    Actualización parcial de un activo.

    Raises:
        HTTPException 404: Si el activo no es de la finca
    """
    asset = get_child_in_farm(db, Asset, asset_id, farm.id, ASSET_NOT_FOUND)
    data = payload.model_dump(exclude_unset=True)

    try:
        for k, v in data.items():
            setattr(asset, k, v)
        db.add(asset)
        db.commit()
        db.refresh(asset)
        return asset
    except Exception:
        db.rollback()
        raise


def delete_asset(db: Session, farm: Farm, asset_id: int) -> None:
    asset = get_child_in_farm(db, Asset, asset_id, farm.id, ASSET_NOT_FOUND)
    try:
        db.delete(asset)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Activo eliminado: asset_id=%s farm_id=%s", asset_id, farm.id)
