# backend/src/busquedas/observability/logging_context.py
from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Optional

# Contexto por request para el correlation_id
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")


def set_correlation_id(cid: Optional[str]) -> None:
    """Establece el correlation_id del contexto actual ('-' si viene vacío)."""
    correlation_id_var.set((cid or "").strip() or "-")


def get_correlation_id() -> str:
    """Obtiene el correlation_id actual del contexto."""
    return correlation_id_var.get()


def install_logrecord_factory() -> None:
    """
    Instala una LogRecordFactory que agrega 'correlation_id' a cada LogRecord.

    Si el record ya trae un valor (p. ej. vía ``extra=...``) distinto de '-',
    se respeta; en caso contrario se toma el del ContextVar.
    """
    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        current = record.__dict__.get("correlation_id")
        if not current or current == "-":
            record.__dict__["correlation_id"] = correlation_id_var.get() or "-"
        return record

    logging.setLogRecordFactory(record_factory)
