# backend/src/busquedas/observability/__init__.py
"""
Paquete de observabilidad.
Exporta helpers y constantes de eventos de carga del dashboard.
"""

from .eventos_carga import (
    EV_LOAD_REQUESTED,
    EV_LOAD_COMPLETED,
    EV_LOAD_FAILED,
    emit_requested,
    emit_completed,
    emit_failed,
)

__all__ = [
    "EV_LOAD_REQUESTED",
    "EV_LOAD_COMPLETED",
    "EV_LOAD_FAILED",
    "emit_requested",
    "emit_completed",
    "emit_failed",
]
