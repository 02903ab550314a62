"""busquedas.crossfilter.controller

Controlador del dashboard: orquesta carga, filtros, paginación por año y
redibujado.

Flujo
-----
``apply_filters(start, end)`` valida el rango y llama a ``load``. Una carga
consulta el DataSource, normaliza, y **recién entonces** reemplaza el estado
completo (índice, dimensiones, pager, bindings). Cualquier interacción (brush,
selección, navegación de año) termina en :meth:`DashboardController.on_filter_changed`,
que recalcula todos los grupos y redibuja en orden fijo.

Cargas solapadas
----------------
No hay cancelación: si dos cargas se resuelven en orden distinto al que se
pidieron, la última en terminar sobrescribe el estado (last-write-wins).
``load_seq`` solo numera las cargas para trazabilidad.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional

from busquedas.crossfilter.bindings import (
    CHART_ORDER,
    ChartBindings,
    ChartData,
    MemoryTarget,
    RenderTarget,
    bind_dashboard_charts,
)
from busquedas.crossfilter.index import CrossFilter, Dimension, build_index
from busquedas.crossfilter.pager import YearPager
from busquedas.crossfilter.records import DAY_ORDER, RawRows, SearchRecord, normalize_rows
from busquedas.crossfilter.wordcloud import extract_word_counts, top_words
from busquedas.observability import emit_completed, emit_failed, emit_requested

logger = logging.getLogger(__name__)

FetchRows = Callable[[Optional[str], Optional[str]], RawRows]

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

LABEL_SIN_DATOS = "Sin datos"
LABEL_ERROR = "Error cargando datos"
MSG_WORDCLOUD_SIN_INDICE = "No hay datos para mostrar. Aplica un filtro primero."
MSG_WORDCLOUD_VACIO = (
    "No se encontraron palabras válidas en los criterios de búsqueda para el rango seleccionado."
)


class FilterValidationError(ValueError):
    """Rango de fechas inválido ingresado por el usuario (se informa antes de cargar)."""


def validate_range(start: Optional[str], end: Optional[str]) -> None:
    """Valida el rango del filtro de fechas.

    Raises
    ------
    FilterValidationError
        Si alguna fecha no cumple ``YYYY-MM-DD`` o ``start > end``.
    """
    if start and not _ISO_DATE_RE.match(start):
        raise FilterValidationError("Fecha de inicio inválida. Use formato AAAA-MM-DD.")
    if end and not _ISO_DATE_RE.match(end):
        raise FilterValidationError("Fecha de fin inválida. Use formato AAAA-MM-DD.")
    if start and end and start > end:
        raise FilterValidationError("La fecha de inicio no puede ser mayor que la fecha de fin.")


def month_floor(d: datetime) -> datetime:
    return datetime(d.year, d.month, 1)


def build_dimensions(index: CrossFilter) -> Dict[str, Dimension]:
    """Crea las dimensiones estándar (mes, hora, dia, tipo)."""
    return {
        "mes": index.dimension("mes", lambda r: month_floor(r.date)),
        "hora": index.dimension("hora", lambda r: r.hour),
        "dia": index.dimension("dia", lambda r: r.dow, order=DAY_ORDER.index),
        "tipo": index.dimension("tipo", lambda r: r.tipo_busqueda),
    }


@dataclass
class WordCloudResult:
    items: List[tuple] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class DashboardState:
    """Estado mutable del dashboard para una carga."""

    crossfilter: Optional[CrossFilter] = None
    dimensions: Dict[str, Dimension] = field(default_factory=dict)
    pager: YearPager = field(default_factory=YearPager)
    bindings: Optional[ChartBindings] = None
    status: str = "idle"
    year_label: str = ""
    load_seq: int = 0
    charts: Dict[str, ChartData] = field(default_factory=dict)

    def reset(self, status: str, year_label: str) -> None:
        self.crossfilter = None
        self.dimensions = {}
        self.pager = YearPager()
        self.bindings = None
        self.status = status
        self.year_label = year_label
        self.charts = {}

    @property
    def ready(self) -> bool:
        return self.crossfilter is not None


class DashboardController:
    def __init__(self, fetch_rows: FetchRows, targets: Dict[str, RenderTarget]) -> None:
        missing = [n for n in CHART_ORDER if n not in targets]
        if missing:
            raise ValueError(f"Faltan destinos de render: {missing}")
        self._fetch_rows = fetch_rows
        self.targets = targets
        self.state = DashboardState()

    # ------------------------------------------------------------------
    # Carga
    # ------------------------------------------------------------------

    def apply_filters(self, start: Optional[str] = None, end: Optional[str] = None) -> DashboardState:
        validate_range(start, end)
        return self.load(start or None, end or None)

    def load(self, start: Optional[str] = None, end: Optional[str] = None) -> DashboardState:
        self.state.load_seq += 1
        seq = self.state.load_seq
        cid = str(uuid.uuid4())
        t0 = time.perf_counter()
        emit_requested(cid, start, end)

        stage = "fetch"
        try:
            rows = self._fetch_rows(start, end)
            stage = "normalize"
            records = normalize_rows(rows)
        except Exception as exc:
            logger.warning("Error cargando datos (carga #%d, %s): %s", seq, stage, exc, exc_info=True)
            emit_failed(cid, error=str(exc) or exc.__class__.__name__, stage=stage)
            self._clear(status="error", year_label=LABEL_ERROR)
            return self.state

        n_rows = len(rows) if hasattr(rows, "__len__") else len(records)
        if not records:
            self._clear(status="empty", year_label=LABEL_SIN_DATOS)
        else:
            self._install(records)

        emit_completed(
            cid,
            latencia_ms=int((time.perf_counter() - t0) * 1000),
            n_rows=n_rows,
            n_records=len(records),
            years=list(self.state.pager.available_years) or None,
            por_tipo=dict(Counter(r.tipo_busqueda for r in records)) or None,
        )
        return self.state

    def _clear(self, status: str, year_label: str) -> None:
        self.state.reset(status=status, year_label=year_label)
        for name in CHART_ORDER:
            self.targets[name].clear()

    def _install(self, records: List[SearchRecord]) -> None:
        index = build_index(records)
        dimensions = build_dimensions(index)
        pager = YearPager.from_records(records)
        pager.subscribe(lambda _year: dimensions["mes"].filter_all())

        state = self.state
        state.crossfilter = index
        state.dimensions = dimensions
        state.pager = pager
        state.bindings = bind_dashboard_charts(dimensions, self.targets, pager.current_year)
        state.status = "ready"
        self.on_filter_changed()

    # ------------------------------------------------------------------
    # Interacciones
    # ------------------------------------------------------------------

    def on_filter_changed(self) -> Dict[str, ChartData]:
        """Recalcula todos los grupos y redibuja todos los gráficos."""
        state = self.state
        if state.bindings is None:
            return {}
        year = state.pager.current_year()
        state.year_label = str(year) if year is not None else LABEL_SIN_DATOS
        state.charts = state.bindings.redraw_all()
        return state.charts

    def _dimension(self, chart: str) -> Optional[Dimension]:
        return self.state.dimensions.get(chart)

    def brush(self, chart: str, lo: Hashable, hi: Hashable) -> Dict[str, ChartData]:
        """Filtro de rango ``[lo, hi)`` sobre la dimensión de ``chart``."""
        dim = self._dimension(chart)
        if dim is None:
            return self.state.charts
        dim.filter_range(lo, hi)
        return self.on_filter_changed()

    def select(self, chart: str, *values: Hashable) -> Dict[str, ChartData]:
        """Selección de una o más claves (click en barra/porción)."""
        dim = self._dimension(chart)
        if dim is None:
            return self.state.charts
        dim.filter_in(values)
        return self.on_filter_changed()

    def clear_filter(self, chart: str) -> Dict[str, ChartData]:
        dim = self._dimension(chart)
        if dim is None:
            return self.state.charts
        dim.filter_all()
        return self.on_filter_changed()

    def clear_all_filters(self) -> Dict[str, ChartData]:
        if self.state.crossfilter is not None:
            self.state.crossfilter.filter_all()
        return self.on_filter_changed()

    def next_year(self) -> bool:
        moved = self.state.pager.next()
        if moved:
            self.on_filter_changed()
        return moved

    def prev_year(self) -> bool:
        moved = self.state.pager.prev()
        if moved:
            self.on_filter_changed()
        return moved

    def go_to_year(self, year: int) -> bool:
        moved = self.state.pager.go_to(year)
        if moved:
            self.on_filter_changed()
        return moved

    # ------------------------------------------------------------------
    # Consultas para la UI
    # ------------------------------------------------------------------

    def nav_state(self) -> Dict[str, Any]:
        pager = self.state.pager
        return {
            "prev_enabled": pager.has_prev,
            "next_enabled": pager.has_next,
            "year_label": self.state.year_label,
        }

    def filtered_records(self) -> List[SearchRecord]:
        if self.state.crossfilter is None:
            return []
        return self.state.crossfilter.all_filtered()

    def word_cloud(self, limit: Optional[int] = None) -> WordCloudResult:
        if not self.state.ready:
            return WordCloudResult(message=MSG_WORDCLOUD_SIN_INDICE)
        counts = extract_word_counts(self.state.crossfilter.all_filtered())
        if not counts:
            return WordCloudResult(message=MSG_WORDCLOUD_VACIO)
        return WordCloudResult(items=top_words(counts, limit))


def memory_targets(names: Iterable[str] = CHART_ORDER) -> Dict[str, MemoryTarget]:
    return {name: MemoryTarget() for name in names}
