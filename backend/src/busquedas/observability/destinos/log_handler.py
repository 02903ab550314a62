"""
Destino de observabilidad vía logging.

- Se suscribe al bus in-memory para eventos:
  - dashboard.load.requested | dashboard.load.completed | dashboard.load.failed
- Escribe cada evento en un logger propio, con el correlation_id del evento.

Idempotente con _WIRED para evitar duplicar suscripciones con --reload.
"""

import logging
from typing import Tuple
from ..bus_eventos import BUS, Evento
from ..logging_context import correlation_id_var

logger = logging.getLogger("busquedas.events")

_WIRED = False

_LOAD_TOPICS: Tuple[str, ...] = (
    "dashboard.load.requested",
    "dashboard.load.completed",
    "dashboard.load.failed",
)


def _to_log(evt: Evento) -> None:
    """Escribe el evento en logs; los fallos de carga van como WARNING.

    El correlation_id del evento se fija en el ContextVar mientras se loguea:
    la LogRecordFactory ya define ese atributo y ``extra=`` no puede pisarlo.
    """
    level = logging.WARNING if evt.name.endswith(".failed") else logging.INFO
    token = correlation_id_var.set(evt.correlation_id)
    try:
        logger.log(level, "%s %s", evt.name, evt.payload)
    finally:
        correlation_id_var.reset(token)


def wire_logging_destination() -> None:
    """
    Conecta una única vez el log handler al bus de eventos.
    Llamadas repetidas (p. ej. por --reload) no duplican suscripciones.
    """
    global _WIRED
    if _WIRED:
        return

    for topic in _LOAD_TOPICS:
        BUS.subscribe(topic, _to_log)

    _WIRED = True
    logger.info("Observability logging wired for topics: %s", _LOAD_TOPICS)
