"""busquedas.crossfilter.records

Normalización de filas crudas del log de búsquedas.

El DataSource entrega filas ``{fecha, tipo_busqueda, criterio_texto}``. Aquí las
convertimos en :class:`SearchRecord` inmutables, que son la única forma en que
los datos entran al índice de cross-filtering.

Reglas
------
- Si ``fecha`` no se puede parsear, la fila se descarta en silencio. Es un
  filtrado de calidad de datos, no un error.
- ``tipo_busqueda`` nulo o vacío se reemplaza por ``"sin informacion"``.
- ``criterio_texto`` ausente queda como cadena vacía.
- Las fechas con zona horaria se pasan a hora local (naive) antes de derivar
  ``hour`` y ``dow``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

SIN_INFORMACION = "sin informacion"

# Índice = día de la semana con la convención domingo=0.
DAY_NAMES = ("Dom", "Lun", "Mar", "Mié", "Jue", "Vie", "Sáb")
# Orden fijo de presentación (lunes a domingo).
DAY_ORDER = ("Lun", "Mar", "Mié", "Jue", "Vie", "Sáb", "Dom")

RawRows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass(frozen=True)
class SearchRecord:
    """Registro normalizado de una búsqueda."""

    date: datetime
    year: int
    hour: int
    dow: str
    tipo_busqueda: str
    criterio_texto: str = ""


def parse_fecha(value: Any) -> Optional[datetime]:
    """Parsea ``fecha`` a datetime local naive, o ``None`` si no es válida."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None

    dt = ts.to_pydatetime()
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _tipo(value: Any) -> str:
    if value is None:
        return SIN_INFORMACION
    if isinstance(value, float) and pd.isna(value):
        return SIN_INFORMACION
    s = str(value)
    return s if s != "" else SIN_INFORMACION


def _texto(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value)


def to_record(row: Mapping[str, Any]) -> Optional[SearchRecord]:
    """Convierte una fila cruda en :class:`SearchRecord` (``None`` si se descarta)."""
    dt = parse_fecha(row.get("fecha"))
    if dt is None:
        return None
    # isoweekday(): lunes=1..domingo=7 -> % 7 da domingo=0
    return SearchRecord(
        date=dt,
        year=dt.year,
        hour=dt.hour,
        dow=DAY_NAMES[dt.isoweekday() % 7],
        tipo_busqueda=_tipo(row.get("tipo_busqueda")),
        criterio_texto=_texto(row.get("criterio_texto")),
    )


def normalize_rows(rows: RawRows) -> List[SearchRecord]:
    """Normaliza una secuencia de filas crudas.

    Parameters
    ----------
    rows:
        Iterable de dicts o un DataFrame con columnas ``fecha``,
        ``tipo_busqueda`` y (opcional) ``criterio_texto``.

    Returns
    -------
    list[SearchRecord]
        Registros en el mismo orden de entrada; las filas con fecha inválida
        no aparecen.
    """
    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict("records")

    out: List[SearchRecord] = []
    dropped = 0
    for row in rows:
        rec = to_record(row)
        if rec is None:
            dropped += 1
            continue
        out.append(rec)

    if dropped:
        logger.debug("Normalización: %d filas descartadas por fecha inválida", dropped)
    return out
