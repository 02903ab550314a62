# backend/src/busquedas/observability/bus_eventos.py
from __future__ import annotations
from typing import Callable, Dict, List, Any
from dataclasses import dataclass
import time, uuid, logging


# Evento base para dashboard.* (extensible)
@dataclass
class Evento:
    name: str              # e.g., "dashboard.load.completed"
    ts: float              # epoch seconds
    correlation_id: str    # id de la carga o del request
    payload: Dict[str, Any]


class EventBus:
    """Bus simple in-memory (pub/sub) con entrega sin garantías."""

    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Evento], None]]] = {}
        self._log = logging.getLogger("busquedas.events.bus")

    def subscribe(self, topic: str, handler: Callable[[Evento], None]) -> None:
        """Registra un handler para un tópico concreto (e.g., 'dashboard.load.failed')."""
        self._subs.setdefault(topic, []).append(handler)
        self._log.debug("Suscrito handler a topic=%s: %s",
                        topic, getattr(handler, "__name__", repr(handler)))

    def publish(self, topic: str, payload: Dict[str, Any]) -> Evento:
        """Publica un evento al tópico dado y lo entrega a todos los suscriptores."""
        evt = Evento(
            name=topic,
            ts=time.time(),
            correlation_id=payload.get("correlation_id") or str(uuid.uuid4()),
            payload=payload,
        )
        handlers = self._subs.get(topic, [])
        if not handlers:
            self._log.debug("event=%s payload=%s", evt.name, evt.payload)
            return evt

        for handler in handlers:
            try:
                handler(evt)
            except Exception as e:
                # El destino de observabilidad nunca corta el flujo del dashboard
                self._log.warning("Handler error for topic=%s: %s", topic, e)
        return evt


BUS = EventBus()


def publicador(event: str, payload: Dict[str, Any]) -> Evento:
    """Punto único para publicar eventos desde el dominio."""
    return BUS.publish(event, payload)


def suscribir(topic: str, handler: Callable[[Evento], None]) -> None:
    """Atajo para registrar suscriptores al bus in-memory."""
    BUS.subscribe(topic, handler)


__all__ = ["Evento", "EventBus", "BUS", "publicador", "suscribir"]
