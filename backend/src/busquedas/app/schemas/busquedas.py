# backend/src/busquedas/app/schemas/busquedas.py
"""Esquemas (Pydantic) para los endpoints de agregados ``/api/*``.

Los nombres de campos replican los que consume el frontend (``mes``, ``anio``,
``mes_num``, ``hour``, ``dow``, ``dia``, ``tipo_busqueda``, ``total``) para no
romper el contrato existente.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class MonthlyPoint(BaseModel):
    mes: str = Field(..., description="Mes en formato YYYY-MM.")
    anio: int
    mes_num: int
    total: int


class MonthlyResponse(BaseModel):
    """Contrato para ``GET /api/monthly``."""

    data: List[MonthlyPoint] = Field(default_factory=list)
    promedio: int = Field(0, description="Promedio de búsquedas por mes (redondeado).")


class HourlyPoint(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    total: int


class HourlyResponse(BaseModel):
    """Contrato para ``GET /api/hourly`` (siempre 24 puntos)."""

    data: List[HourlyPoint] = Field(default_factory=list)


class DowPoint(BaseModel):
    dow: int = Field(..., ge=0, le=6, description="Día de la semana (domingo=0).")
    dia: str
    total: int


class DowResponse(BaseModel):
    """Contrato para ``GET /api/dow`` (siempre 7 puntos, lunes primero)."""

    data: List[DowPoint] = Field(default_factory=list)


class TypeCount(BaseModel):
    tipo_busqueda: str
    total: int


class TypesResponse(BaseModel):
    """Contrato para ``GET /api/types``."""

    data: List[TypeCount] = Field(default_factory=list)


class SampleRow(BaseModel):
    id: Optional[int] = None
    fecha: Optional[str] = None
    tipo_busqueda: Optional[str] = None
    criterio_texto: Optional[str] = None


class SampleResponse(BaseModel):
    """Contrato para ``GET /api/sample``."""

    data: List[SampleRow] = Field(default_factory=list)


class RawRow(BaseModel):
    fecha: Optional[str] = None
    tipo_busqueda: Optional[str] = None
    criterio_texto: Optional[str] = None


class RawDataResponse(BaseModel):
    """Contrato para ``GET /api/data`` (filas crudas para cross-filtering)."""

    data: List[RawRow] = Field(default_factory=list)
