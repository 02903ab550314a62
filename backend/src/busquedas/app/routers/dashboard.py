# backend/src/busquedas/app/routers/dashboard.py
"""Router de la vista de cross-filtering (``/api/dashboard``).

Cada request construye su propio :class:`DashboardController` con destinos en
memoria: el servidor no guarda estado entre requests. La interacción del
usuario (brush, selección, año) llega como query params y se aplica en este
orden:

1. ``start`` / ``end``: validación estricta + carga.
2. ``year``: navegación del pager (limpia el brush mensual).
3. brushes y selecciones por gráfico.

Una falla al cargar no es un error HTTP: la vista responde ``status="error"``
con los gráficos vacíos, igual que la UI muestra "Error cargando datos".
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query

from busquedas.app.schemas.dashboard import (
    ChartItemOut,
    ChartOut,
    DashboardView,
    DashboardWordcloud,
    NavState,
    WordcloudItem,
)
from busquedas.crossfilter import DashboardController, FilterValidationError, memory_targets
from busquedas.crossfilter.bindings import ChartData
from busquedas.dashboard.queries import fetch_raw_rows

router = APIRouter()


def _parse_month(value: str) -> datetime:
    try:
        return datetime.strptime(value.strip(), "%Y-%m")
    except ValueError as exc:
        raise ValueError(f"Mes inválido {value!r}. Use formato AAAA-MM.") from exc


def _next_month(d: datetime) -> datetime:
    return datetime(d.year + 1, 1, 1) if d.month == 12 else datetime(d.year, d.month + 1, 1)


def _build_controller(
    start: Optional[str],
    end: Optional[str],
    year: Optional[int],
    mes_from: Optional[str],
    mes_to: Optional[str],
    hora_from: Optional[int],
    hora_to: Optional[int],
    dia: Optional[List[str]],
    tipo: Optional[List[str]],
) -> DashboardController:
    """Carga y aplica la interacción pedida; traduce errores de entrada a 400."""
    controller = DashboardController(fetch_raw_rows, memory_targets())
    try:
        controller.apply_filters(start, end)
        if not controller.state.ready:
            return controller

        if year is not None:
            controller.go_to_year(year)

        if mes_from or mes_to:
            first = controller.state.pager.available_years[0]
            last = controller.state.pager.available_years[-1]
            lo = _parse_month(mes_from) if mes_from else datetime(first, 1, 1)
            hi = _next_month(_parse_month(mes_to)) if mes_to else datetime(last + 1, 1, 1)
            if lo >= hi:
                raise ValueError("El mes inicial no puede ser mayor que el mes final.")
            controller.brush("mes", lo, hi)
        if hora_from is not None or hora_to is not None:
            lo_h = hora_from if hora_from is not None else 0
            hi_h = (hora_to if hora_to is not None else 23) + 1
            if lo_h >= hi_h:
                raise ValueError("La hora inicial no puede ser mayor que la hora final.")
            controller.brush("hora", lo_h, hi_h)
        if dia:
            controller.select("dia", *dia)
        if tipo:
            controller.select("tipo", *tipo)
    except (FilterValidationError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return controller


def _chart_out(chart: ChartData) -> ChartOut:
    return ChartOut(
        name=chart.name,
        kind=chart.kind,
        title=chart.title,
        items=[ChartItemOut(key=i.key, label=i.label, value=i.value) for i in chart.items],
        filter=chart.filter,
        year=chart.year,
    )


@router.get("", response_model=DashboardView)
def dashboard_view(
    start: Optional[str] = Query(None, description="Fecha inicial AAAA-MM-DD (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final AAAA-MM-DD (incl.)."),  # noqa: B008
    year: Optional[int] = Query(None, description="Año a mostrar en la vista mensual."),  # noqa: B008
    mes_from: Optional[str] = Query(None, description="Brush mensual: mes inicial AAAA-MM (incl.)."),  # noqa: B008
    mes_to: Optional[str] = Query(None, description="Brush mensual: mes final AAAA-MM (incl.)."),  # noqa: B008
    hora_from: Optional[int] = Query(None, ge=0, le=23, description="Brush horario: hora inicial (incl.)."),  # noqa: B008
    hora_to: Optional[int] = Query(None, ge=0, le=23, description="Brush horario: hora final (incl.)."),  # noqa: B008
    dia: Optional[List[str]] = Query(None, description="Días seleccionados (Lun..Dom)."),  # noqa: B008
    tipo: Optional[List[str]] = Query(None, description="Tipos de búsqueda seleccionados."),  # noqa: B008
) -> DashboardView:
    """Vista completa del dashboard con los cuatro gráficos cruzados."""
    controller = _build_controller(start, end, year, mes_from, mes_to, hora_from, hora_to, dia, tipo)
    state = controller.state
    nav = controller.nav_state()
    charts: Dict[str, ChartOut] = {name: _chart_out(c) for name, c in state.charts.items()}

    return DashboardView(
        status=state.status,
        year_label=state.year_label,
        nav=NavState(prev_enabled=nav["prev_enabled"], next_enabled=nav["next_enabled"]),
        available_years=list(state.pager.available_years),
        total=state.crossfilter.size() if state.crossfilter is not None else 0,
        filtered=len(controller.filtered_records()),
        charts=charts,
    )


@router.get("/wordcloud", response_model=DashboardWordcloud)
def dashboard_wordcloud(
    limit: int = Query(100, description="Cantidad máxima de palabras.", ge=1, le=500),  # noqa: B008
    start: Optional[str] = Query(None, description="Fecha inicial AAAA-MM-DD (incl.)."),  # noqa: B008
    end: Optional[str] = Query(None, description="Fecha final AAAA-MM-DD (incl.)."),  # noqa: B008
    year: Optional[int] = Query(None, description="Año a mostrar en la vista mensual."),  # noqa: B008
    mes_from: Optional[str] = Query(None, description="Brush mensual: mes inicial AAAA-MM (incl.)."),  # noqa: B008
    mes_to: Optional[str] = Query(None, description="Brush mensual: mes final AAAA-MM (incl.)."),  # noqa: B008
    hora_from: Optional[int] = Query(None, ge=0, le=23, description="Brush horario: hora inicial (incl.)."),  # noqa: B008
    hora_to: Optional[int] = Query(None, ge=0, le=23, description="Brush horario: hora final (incl.)."),  # noqa: B008
    dia: Optional[List[str]] = Query(None, description="Días seleccionados (Lun..Dom)."),  # noqa: B008
    tipo: Optional[List[str]] = Query(None, description="Tipos de búsqueda seleccionados."),  # noqa: B008
) -> DashboardWordcloud:
    """Nube de palabras sobre los registros que pasan todos los filtros.

    Si no hay datos cargados o ninguna palabra es válida, responde 200 con
    ``items`` vacío y un ``message`` para el usuario.
    """
    controller = _build_controller(start, end, year, mes_from, mes_to, hora_from, hora_to, dia, tipo)
    result = controller.word_cloud(limit=limit)
    return DashboardWordcloud(
        items=[WordcloudItem(text=t, value=int(v)) for t, v in result.items],
        message=result.message,
    )
