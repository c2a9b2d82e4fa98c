from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from config.settings import settings
from api.router import api_router
from utils.errors import install_error_handlers
from utils.logger import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="AgroMind API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_origin_regex=settings.CORS_ALLOW_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

install_error_handlers(app)

app.include_router(api_router)


@app.get("/", tags=["health"])
def root():
    return {"message": "AgroMind Backend running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


# Diagnóstico de despliegue
@app.get("/__version", tags=["health"], include_in_schema=False)
def version():
    return {
        "ok": True,
        "env": settings.ENVIRONMENT,
        "version": app.version,
        "time": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/__routes", tags=["health"], include_in_schema=False)
def routes():
    """Rutas montadas (confirma que /api/farms está expuesto)."""
    return {
        "routes": [
            {"path": r.path, "methods": sorted(r.methods)}
            for r in app.routes
            if isinstance(r, APIRoute)
        ]
    }


logger.info("AgroMind API lista (env=%s)", settings.ENVIRONMENT)
