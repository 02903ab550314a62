"""
Módulo principal de la API del dashboard de búsquedas.

Responsabilidades:
- Instanciación de FastAPI
- Registro de routers (agregados /api/* y vista cruzada /api/dashboard)
- Endpoint global mínimo (/health)
- CORS para el frontend
- Logging (dictConfig) + Correlation-Id (X-Correlation-Id) en cada request
- Destino de logging para eventos dashboard.load.*
"""

from __future__ import annotations

import os
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from busquedas.app.logging_config import setup_logging
from busquedas.observability.middleware_correlation import CorrelationIdMiddleware
from busquedas.observability.logging_context import install_logrecord_factory
from busquedas.observability.destinos.log_handler import wire_logging_destination

from .routers import busquedas, dashboard

app = FastAPI(title="Dashboard de Búsquedas API", version=os.getenv("API_VERSION", "0.1.0"))

# ---------------------------------------------------------------------------
# CORS
#   - BQ_ALLOWED_ORIGINS: lista separada por comas
#   - Sin definir: se permite cualquier origen (el frontend se sirve aparte)
# ---------------------------------------------------------------------------
_raw_origins = os.getenv("BQ_ALLOWED_ORIGINS")
ALLOWED_ORIGINS = (
    [o.strip() for o in _raw_origins.split(",") if o.strip()]
    if _raw_origins
    else ["*"]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=ALLOWED_ORIGINS != ["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-Id"],
    max_age=600,
)

app.add_middleware(CorrelationIdMiddleware)


@app.on_event("startup")
def _startup_observability_wiring() -> None:
    """
    - Configura logging (dictConfig con filtro cid)
    - Instala LogRecordFactory que inyecta correlation_id desde ContextVar
    - Conecta el destino de logging para eventos dashboard.load.*
    """
    setup_logging()
    install_logrecord_factory()
    wire_logging_destination()
    logging.getLogger("busquedas").info("API lista; origins=%s", ALLOWED_ORIGINS)


@app.get("/health")
def health() -> dict:
    """Endpoint de salud: permite saber si la API está arriba."""
    return {"status": "ok"}


app.include_router(busquedas.router, prefix="/api",           tags=["busquedas"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["dashboard"])
