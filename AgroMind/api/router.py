from fastapi import APIRouter
from .auth import router as auth_router
from .farms import router as farms_router
from .zones import router as zones_router
from .tasks import router as tasks_router
from .finance import router as finance_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(farms_router, prefix="/api")
api_router.include_router(zones_router, prefix="/api")
api_router.include_router(tasks_router, prefix="/api")
api_router.include_router(finance_router, prefix="/api")
