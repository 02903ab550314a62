# backend/src/busquedas/app/routers/busquedas.py
"""Router de agregados del log de búsquedas (``/api/*``).

Los routers se mantienen delgados (HTTP/serialización); la lectura y
agregación vive en :mod:`busquedas.dashboard.aggregations`.

Errores
-------
- 400: parámetros inválidos (``ValueError``).
- 503: base de datos no disponible (archivo inexistente).
- 500: error del almacén al ejecutar la consulta.
"""

from __future__ import annotations

import logging
import os
import sqlite3
from typing import Callable, Optional, TypeVar

import pandas as pd
from fastapi import APIRouter, HTTPException, Query

from busquedas.app.schemas.busquedas import (
    DowPoint,
    DowResponse,
    HourlyPoint,
    HourlyResponse,
    MonthlyPoint,
    MonthlyResponse,
    RawDataResponse,
    RawRow,
    SampleResponse,
    SampleRow,
    TypeCount,
    TypesResponse,
)
from busquedas.dashboard.aggregations import (
    MAX_SAMPLE_LIMIT,
    dow_totals,
    hourly_totals,
    monthly_totals,
    sample_rows,
    type_totals,
)
from busquedas.dashboard.queries import SearchFilters, fetch_raw_rows

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")

DEFAULT_SAMPLE_LIMIT = int(os.getenv("BQ_SAMPLE_LIMIT", "200"))


def run_query(fn: Callable[[], T]) -> T:
    """Ejecuta una consulta traduciendo errores de dominio a HTTP."""
    try:
        return fn()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except (sqlite3.Error, pd.errors.DatabaseError) as exc:
        logger.exception("Error consultando el log de búsquedas")
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/monthly", response_model=MonthlyResponse)
def api_monthly(
    start: Optional[str] = Query(None, description="Fecha inicial (incl.), YYYY-MM-DD o DD/MM/YYYY."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final (incl.), YYYY-MM-DD o DD/MM/YYYY."),  # noqa: B008
    tipo: Optional[str] = Query(None, description="Filtro por tipo de búsqueda (opcional)."),  # noqa: B008
) -> MonthlyResponse:
    """Serie mensual de búsquedas + promedio mensual."""
    rows, promedio = run_query(lambda: monthly_totals(SearchFilters.from_query(start, end, tipo)))
    return MonthlyResponse(data=[MonthlyPoint(**r) for r in rows], promedio=promedio)


@router.get("/hourly", response_model=HourlyResponse)
def api_hourly(
    start: Optional[str] = Query(None, description="Fecha inicial (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final (incl.)."),  # noqa: B008
    tipo: Optional[str] = Query(None, description="Filtro por tipo de búsqueda (opcional)."),  # noqa: B008
) -> HourlyResponse:
    """Búsquedas por hora del día (0..23, horas vacías en 0)."""
    rows = run_query(lambda: hourly_totals(SearchFilters.from_query(start, end, tipo)))
    return HourlyResponse(data=[HourlyPoint(**r) for r in rows])


@router.get("/dow", response_model=DowResponse)
def api_dow(
    start: Optional[str] = Query(None, description="Fecha inicial (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final (incl.)."),  # noqa: B008
    tipo: Optional[str] = Query(None, description="Filtro por tipo de búsqueda (opcional)."),  # noqa: B008
) -> DowResponse:
    """Búsquedas por día de la semana, de lunes a domingo."""
    rows = run_query(lambda: dow_totals(SearchFilters.from_query(start, end, tipo)))
    return DowResponse(data=[DowPoint(**r) for r in rows])


@router.get("/types", response_model=TypesResponse)
def api_types(
    start: Optional[str] = Query(None, description="Fecha inicial (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final (incl.)."),  # noqa: B008
) -> TypesResponse:
    """Distribución por tipo de búsqueda (mayor a menor)."""
    rows = run_query(lambda: type_totals(SearchFilters.from_query(start, end)))
    return TypesResponse(data=[TypeCount(**r) for r in rows])


@router.get("/sample", response_model=SampleResponse)
def api_sample(
    start: Optional[str] = Query(None, description="Fecha inicial (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final (incl.)."),  # noqa: B008
    tipo: Optional[str] = Query(None, description="Filtro por tipo de búsqueda (opcional)."),  # noqa: B008
    limit: int = Query(DEFAULT_SAMPLE_LIMIT, description="Cantidad de filas.", ge=1, le=MAX_SAMPLE_LIMIT),  # noqa: B008
) -> SampleResponse:
    """Muestra de filas recientes."""
    rows = run_query(lambda: sample_rows(SearchFilters.from_query(start, end, tipo), limit=limit))
    return SampleResponse(data=[SampleRow(**r) for r in rows])


@router.get("/data", response_model=RawDataResponse)
def api_data(
    start: Optional[str] = Query(None, description="Fecha inicial (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final (incl.)."),  # noqa: B008
) -> RawDataResponse:
    """Filas crudas para el cross-filtering (más recientes primero)."""
    rows = run_query(lambda: fetch_raw_rows(start, end))
    return RawDataResponse(data=[RawRow(**r) for r in rows])
