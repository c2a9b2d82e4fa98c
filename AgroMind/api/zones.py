# api/zones.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_farm_owner
from models.user import User
from schemas.map import ZonesReportOut
from services.zone_report_service import get_zones_report

router = APIRouter(prefix="/farms", tags=["Zones"])


@router.get(
    "/{farm_id}/zones/report",
    response_model=ZonesReportOut,
    summary="Reporte de zonas",
    description=(
        "Por cada zona: componentes, resumen (`hasAnimals`, `hasCrops`, `keys`) "
        "y tareas activas asociadas por nombre de zona (máx. 12, por vencimiento)."
    )
)
def zones_report_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return get_zones_report(db, farm)
