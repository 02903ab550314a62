"""busquedas.dashboard.aggregations

Agregados servidos por ``/api/*`` sobre el log de búsquedas.

Este módulo se apoya en :mod:`busquedas.dashboard.queries` para leer con filtros
estándar (``start`` / ``end`` / ``tipo``) y completa con pandas lo que el SQL no
entrega directamente:

- ``hourly_totals``: siempre 24 filas (horas sin búsquedas en 0).
- ``dow_totals``: siempre 7 filas en orden lunes..domingo.
- ``monthly_totals``: además de la serie, el promedio mensual redondeado.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Tuple

import pandas as pd

from busquedas.crossfilter.records import DAY_NAMES, SIN_INFORMACION
from busquedas.dashboard.queries import SearchFilters, build_where, get_table, read_frame

# Orden de presentación de días (domingo=0 al final)
_DOW_ORDER = (1, 2, 3, 4, 5, 6, 0)

MAX_SAMPLE_LIMIT = 1000


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# ---------------------------------------------------------------------------
# Serie mensual
# ---------------------------------------------------------------------------

def monthly_totals(f: SearchFilters) -> Tuple[List[Dict[str, Any]], int]:
    """Total de búsquedas por mes + promedio mensual.

    Returns
    -------
    tuple[list[dict], int]
        Filas ``{mes: "YYYY-MM", anio, mes_num, total}`` ordenadas por mes y el
        promedio de ``total`` redondeado (0 si no hay meses).
    """
    where, params = build_where(f)
    sql = f"""
        SELECT strftime('%Y-%m', fecha) AS mes, COUNT(*) AS total
        FROM {get_table()}
        {where}
        GROUP BY 1
        HAVING mes IS NOT NULL
        ORDER BY 1
    """
    df = read_frame(sql, params)
    if df.empty:
        return [], 0

    df["total"] = df["total"].astype(int)
    df["anio"] = df["mes"].str.slice(0, 4).astype(int)
    df["mes_num"] = df["mes"].str.slice(5, 7).astype(int)
    promedio = _round_half_up(float(df["total"].mean()))
    rows = df[["mes", "anio", "mes_num", "total"]].to_dict("records")
    return [{k: (int(v) if k != "mes" else v) for k, v in r.items()} for r in rows], promedio


# ---------------------------------------------------------------------------
# Hora del día
# ---------------------------------------------------------------------------

def hourly_totals(f: SearchFilters) -> List[Dict[str, int]]:
    where, params = build_where(f)
    sql = f"""
        SELECT CAST(strftime('%H', fecha) AS INTEGER) AS hour, COUNT(*) AS total
        FROM {get_table()}
        {where}
        GROUP BY 1
        HAVING hour IS NOT NULL
        ORDER BY 1
    """
    df = read_frame(sql, params)
    totals = (
        df.set_index("hour")["total"].reindex(range(24), fill_value=0)
        if not df.empty
        else pd.Series(0, index=range(24))
    )
    return [{"hour": int(h), "total": int(t)} for h, t in totals.items()]


# ---------------------------------------------------------------------------
# Día de la semana
# ---------------------------------------------------------------------------

def dow_totals(f: SearchFilters) -> List[Dict[str, Any]]:
    """Totales por día de semana (``dow`` con domingo=0), lunes primero."""
    where, params = build_where(f)
    sql = f"""
        SELECT CAST(strftime('%w', fecha) AS INTEGER) AS dow, COUNT(*) AS total
        FROM {get_table()}
        {where}
        GROUP BY 1
        HAVING dow IS NOT NULL
    """
    df = read_frame(sql, params)
    by_dow = {int(d): int(t) for d, t in zip(df["dow"], df["total"])} if not df.empty else {}
    return [{"dow": i, "dia": DAY_NAMES[i], "total": by_dow.get(i, 0)} for i in _DOW_ORDER]


# ---------------------------------------------------------------------------
# Tipos de búsqueda
# ---------------------------------------------------------------------------

def type_totals(f: SearchFilters) -> List[Dict[str, Any]]:
    """Totales por ``tipo_busqueda`` (nulos/vacíos como categoría centinela)."""
    where, params = build_where(f, with_tipo=False)
    sql = f"""
        SELECT COALESCE(NULLIF(tipo_busqueda, ''), ?) AS tipo_busqueda, COUNT(*) AS total
        FROM {get_table()}
        {where}
        GROUP BY 1
        ORDER BY total DESC, 1 ASC
    """
    df = read_frame(sql, [SIN_INFORMACION, *params])
    return [{"tipo_busqueda": str(t), "total": int(n)} for t, n in zip(df["tipo_busqueda"], df["total"])]


# ---------------------------------------------------------------------------
# Muestra de filas
# ---------------------------------------------------------------------------

def sample_rows(f: SearchFilters, limit: int = 200) -> List[Dict[str, Any]]:
    """Últimas ``limit`` filas (más recientes primero)."""
    limit = max(1, min(int(limit), MAX_SAMPLE_LIMIT))
    where, params = build_where(f)
    sql = f"""
        SELECT id, fecha, tipo_busqueda, criterio_texto
        FROM {get_table()}
        {where}
        ORDER BY datetime(fecha) DESC
        LIMIT ?
    """
    df = read_frame(sql, [*params, limit])
    df = df.astype(object).where(df.notna(), None)
    return df.to_dict("records")
