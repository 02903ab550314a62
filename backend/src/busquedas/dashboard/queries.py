"""busquedas.dashboard.queries

Lectura del log de búsquedas desde el almacén relacional (SQLite).

Este módulo concentra:

- la resolución del archivo de base de datos y de la tabla (variables de entorno),
- la normalización de los parámetros de fecha recibidos por HTTP,
- el armado del ``WHERE`` parametrizado común a todos los endpoints,
- la lectura de filas crudas (el DataSource del pipeline de cross-filtering).

Reglas
------
1) Los límites ``start``/``end`` son inclusivos y se comparan por fecha
   (``date(fecha)``), no por timestamp.
2) Un límite ausente o no parseable significa rango abierto de ese lado.
3) El filtro ``tipo`` solo se aplica en los endpoints que lo aceptan.

Configuración
-------------
- ``BQ_DB_PATH``: ruta al archivo SQLite (default ``<repo>/data/busquedas.db``).
- ``BQ_TABLE``: tabla a consultar (default ``busquedas_clasificadas_v2``).

Ambas se leen en cada llamada, de modo que los tests pueden redirigirlas con
``monkeypatch.setenv``.
"""

from __future__ import annotations

import logging
import os
import re
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "busquedas_clasificadas_v2"
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_DMY_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _repo_root() -> Path:
    """Raíz del repo: backend/src/busquedas/dashboard/queries.py -> parents[4]."""
    return Path(__file__).resolve().parents[4]


def get_db_path() -> Path:
    return Path(os.getenv("BQ_DB_PATH", str(_repo_root() / "data" / "busquedas.db")))


def get_table() -> str:
    """Nombre de tabla validado (se interpola en SQL, no puede ir como parámetro)."""
    table = os.getenv("BQ_TABLE", DEFAULT_TABLE).strip()
    if not _IDENT_RE.match(table):
        raise ValueError(f"Nombre de tabla inválido en BQ_TABLE: {table!r}")
    return table


def connect() -> sqlite3.Connection:
    """Abre una conexión de solo lectura lógica al SQLite configurado.

    Raises
    ------
    FileNotFoundError
        Si el archivo de base de datos no existe (no lo creamos implícitamente).
    """
    path = get_db_path()
    if not path.exists():
        raise FileNotFoundError(f"No existe la base de datos {path.as_posix()}")
    return sqlite3.connect(str(path))


# ---------------------------------------------------------------------------
# Parámetros de fecha
# ---------------------------------------------------------------------------

def normalize_date_param(value: Optional[str]) -> Optional[str]:
    """Normaliza una fecha de query string a ``YYYY-MM-DD``.

    Acepta ``YYYY-MM-DD`` y ``DD/MM/YYYY``; cualquier otro string parseable se
    convierte a su fecha. Si no se puede parsear retorna ``None`` (se ignora).
    Con forma válida pero fecha inexistente (``2022-13-01``, ``31/02/2023``)
    también retorna ``None``: SQLite evaluaría ``date(?)`` a NULL y el filtro
    descartaría todas las filas.
    """
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    if _DMY_RE.match(s):
        d, m, y = s.split("/")
        s = f"{y}-{m}-{d}"
    if _ISO_RE.match(s):
        ts = pd.to_datetime(s, format="%Y-%m-%d", errors="coerce")
        return None if pd.isna(ts) else s
    ts = pd.to_datetime(s, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.strftime("%Y-%m-%d")


@dataclass(frozen=True)
class SearchFilters:
    """Filtros estándar de los endpoints de búsquedas."""

    start: Optional[str] = None
    end: Optional[str] = None
    tipo: Optional[str] = None

    @classmethod
    def from_query(
        cls,
        start: Optional[str] = None,
        end: Optional[str] = None,
        tipo: Optional[str] = None,
    ) -> "SearchFilters":
        return cls(
            start=normalize_date_param(start),
            end=normalize_date_param(end),
            tipo=(tipo or None),
        )


def build_where(f: SearchFilters, with_tipo: bool = True) -> Tuple[str, List[Any]]:
    """Arma el ``WHERE`` parametrizado (placeholders ``?``)."""
    conditions: List[str] = []
    params: List[Any] = []
    if f.start:
        conditions.append("date(fecha) >= date(?)")
        params.append(f.start)
    if f.end:
        conditions.append("date(fecha) <= date(?)")
        params.append(f.end)
    if with_tipo and f.tipo:
        conditions.append("tipo_busqueda = ?")
        params.append(f.tipo)
    where = ("WHERE " + " AND ".join(conditions)) if conditions else ""
    return where, params


def read_frame(sql: str, params: Sequence[Any] = ()) -> pd.DataFrame:
    """Ejecuta ``sql`` y devuelve un DataFrame."""
    with closing(connect()) as conn:
        return pd.read_sql_query(sql, conn, params=list(params))


# ---------------------------------------------------------------------------
# DataSource del pipeline de cross-filtering
# ---------------------------------------------------------------------------

def raw_rows_frame(f: SearchFilters) -> pd.DataFrame:
    where, params = build_where(f, with_tipo=False)
    sql = f"""
        SELECT fecha, tipo_busqueda, criterio_texto
        FROM {get_table()}
        {where}
        ORDER BY fecha DESC
    """
    return read_frame(sql, params)


def _none_if_nan(value: Any) -> Any:
    return None if value is None or (isinstance(value, float) and pd.isna(value)) else value


def fetch_raw_rows(start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
    """Filas crudas ``{fecha, tipo_busqueda, criterio_texto}`` para ``[start, end]``.

    Es la firma que consume :class:`busquedas.crossfilter.DashboardController`.
    """
    df = raw_rows_frame(SearchFilters.from_query(start, end))
    logger.debug("DataSource: %d filas (start=%s end=%s)", len(df), start, end)
    return [
        {k: _none_if_nan(v) for k, v in row.items()}
        for row in df.to_dict("records")
    ]
