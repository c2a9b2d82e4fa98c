# api/farms.py
"""
API de fincas y su mapa.

- CRUD de fincas del usuario autenticado
- Lectura y reemplazo completo del mapa
- Componentes de una zona
"""
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from utils.db import get_db
from utils.dependencies import get_current_user
from utils.permissions import ensure_farm_owner
from models.user import User
from schemas.common import OkOut
from schemas.farm import FarmCreate, FarmUpdate, FarmEnvelope, FarmUpdateOut, FarmListOut
from schemas.map import MapSaveIn, MapOut, MapSaveOut, ZoneComponentsIn, ZoneComponentsOut
from services.farm_service import list_farms, create_farm, update_farm, delete_farm
from services.map_service import get_map, save_map, update_zone_components

router = APIRouter(prefix="/farms", tags=["Farms"])


# ============================================================================
# Fincas
# ============================================================================

@router.get(
    "",
    response_model=FarmListOut,
    summary="Listar fincas",
    description="Fincas del usuario autenticado, más recientes primero."
)
def list_farms_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"farms": list_farms(db, current_user)}


@router.post(
    "",
    response_model=FarmEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Crear finca",
    description=(
        "Crea una finca para el usuario.\n\n"
        "- `name` se limpia (máx. 80); vacío → \"Mi finca\"\n"
        "- `preferredCenter` se toma de `view.center`\n"
        "- Nombre repetido para el mismo usuario → 409"
    )
)
def create_farm_endpoint(
    payload: FarmCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return {"farm": create_farm(db, current_user, payload)}


@router.put(
    "/{farm_id}",
    response_model=FarmUpdateOut,
    summary="Actualizar finca",
    description="Renombrar, guardar `view` o marcar como principal (`isPrimary`)."
)
def update_farm_endpoint(
    payload: FarmUpdate,
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return {"ok": True, "farm": update_farm(db, farm, payload)}


@router.delete(
    "/{farm_id}",
    response_model=OkOut,
    summary="Eliminar finca",
    description="Elimina la finca con su mapa, tareas, movimientos y activos."
)
def delete_farm_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    delete_farm(db, farm)
    return {"ok": True}


# ============================================================================
# Mapa
# ============================================================================

@router.get(
    "/{farm_id}/map",
    response_model=MapOut,
    summary="Obtener mapa",
    description="Finca + puntos, líneas y zonas ordenados por creación."
)
def get_map_endpoint(
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return get_map(db, farm)


@router.put(
    "/{farm_id}/map",
    response_model=MapSaveOut,
    summary="Guardar mapa",
    description=(
        "Reemplaza el mapa completo en una transacción.\n\n"
        "- Si viene `view` se guarda junto con el centro preferido\n"
        "- Se borran y recrean todos los puntos, líneas y zonas\n"
        "- Colecciones que no sean listas se tratan como vacías"
    )
)
def save_map_endpoint(
    payload: MapSaveIn,
    farm_id: int = Path(..., description="ID de la finca"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    return save_map(db, farm, payload)


@router.put(
    "/{farm_id}/zones/{zone_id}/components",
    response_model=ZoneComponentsOut,
    summary="Actualizar componentes de zona",
    description=(
        "Reemplaza `components` de una zona (obligatorio, admite null).\n\n"
        "Si cambian las notas (`notes`/`notas`) se actualiza `notesUpdatedAt`."
    )
)
def update_zone_components_endpoint(
    payload: ZoneComponentsIn,
    farm_id: int = Path(..., description="ID de la finca"),
    zone_id: int = Path(..., description="ID de la zona"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    farm = ensure_farm_owner(db, farm_id, current_user)
    zone = update_zone_components(db, farm, zone_id, payload.components)
    return {"ok": True, "zone": zone}
