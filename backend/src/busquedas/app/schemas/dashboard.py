# backend/src/busquedas/app/schemas/dashboard.py
"""Esquemas (Pydantic) para la vista de cross-filtering ``/api/dashboard``.

Fuente de verdad
----------------
Los gráficos se construyen en :mod:`busquedas.crossfilter.bindings` como
dataclasses; el router solo los traduce a estos contratos.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ChartItemOut(BaseModel):
    key: Union[int, str]
    label: str
    value: int


class ChartOut(BaseModel):
    name: str
    kind: str = Field(..., description="bar | row | pie")
    title: str
    items: List[ChartItemOut] = Field(default_factory=list)
    filter: Optional[Dict[str, Any]] = Field(
        None,
        description="Filtro activo de la propia dimensión (no afecta su propio gráfico).",
    )
    year: Optional[int] = Field(None, description="Año mostrado (solo gráfico mensual).")


class NavState(BaseModel):
    prev_enabled: bool = False
    next_enabled: bool = False


class DashboardView(BaseModel):
    """Contrato para ``GET /api/dashboard``."""

    status: str = Field(..., description="ready | empty | error")
    year_label: str = ""
    nav: NavState = Field(default_factory=NavState)
    available_years: List[int] = Field(default_factory=list)
    total: int = Field(0, description="Registros válidos en la carga.")
    filtered: int = Field(0, description="Registros que pasan todos los filtros.")
    charts: Dict[str, ChartOut] = Field(default_factory=dict)


class WordcloudItem(BaseModel):
    text: str
    value: int


class DashboardWordcloud(BaseModel):
    """Contrato para ``GET /api/dashboard/wordcloud``."""

    items: List[WordcloudItem] = Field(default_factory=list)
    message: Optional[str] = Field(None, description="Mensaje para el usuario si no hay palabras.")
