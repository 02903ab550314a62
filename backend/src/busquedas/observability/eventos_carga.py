# backend/src/busquedas/observability/eventos_carga.py
"""
Constantes y helpers para eventos de carga del dashboard.
No realiza la carga; solo estandariza nombres y payloads, y valida su forma.
"""

from __future__ import annotations

from typing import Dict, List, Optional
from datetime import datetime, timezone

from .bus_eventos import publicador
from .payloads_carga import LoadCompleted, LoadFailed, LoadRequested

# Nombres canónicos de eventos
EV_LOAD_REQUESTED = "dashboard.load.requested"
EV_LOAD_COMPLETED = "dashboard.load.completed"
EV_LOAD_FAILED    = "dashboard.load.failed"


def _now_utc() -> datetime:
    """Datetime actual en UTC con tzinfo."""
    return datetime.now(timezone.utc)


def emit_requested(correlation_id: str, start: Optional[str], end: Optional[str]) -> None:
    """
    Emite `dashboard.load.requested`.
    - start/end: límites del rango tal como llegan al DataSource (None = abierto).
    """
    payload = LoadRequested(
        correlation_id=correlation_id,
        start=start or None,
        end=end or None,
        ts=_now_utc(),
    ).model_dump(mode="json", exclude_none=True)

    publicador(EV_LOAD_REQUESTED, payload)


def emit_completed(
    correlation_id: str,
    latencia_ms: int,
    n_rows: int,
    n_records: int,
    years: List[int] | None = None,
    por_tipo: Dict[str, int] | None = None,
) -> None:
    """
    Emite `dashboard.load.completed`.
    - n_rows: filas crudas recibidas del DataSource.
    - n_records: registros que sobrevivieron la normalización.
    - years / por_tipo: resumen opcional de la carga.
    """
    payload = LoadCompleted(
        correlation_id=correlation_id,
        latencia_ms=latencia_ms,
        n_rows=n_rows,
        n_records=n_records,
        years=years,
        por_tipo=por_tipo,
        ts=_now_utc(),
    ).model_dump(mode="json", exclude_none=True)

    publicador(EV_LOAD_COMPLETED, payload)


def emit_failed(
    correlation_id: str,
    error: str,
    stage: Optional[str] = None,
    *,
    error_code: Optional[str] = None,
) -> None:
    """
    Emite `dashboard.load.failed`.
    - error: mensaje corto y legible.
    - stage: "fetch" | "normalize".
    - error_code: por defecto "LOAD_ERROR".
    """
    payload = LoadFailed(
        correlation_id=correlation_id,
        error=error,
        error_code=error_code or "LOAD_ERROR",
        stage=stage,
        ts=_now_utc(),
    ).model_dump(mode="json", exclude_none=True)

    publicador(EV_LOAD_FAILED, payload)


__all__ = [
    "EV_LOAD_REQUESTED",
    "EV_LOAD_COMPLETED",
    "EV_LOAD_FAILED",
    "emit_requested",
    "emit_completed",
    "emit_failed",
]
