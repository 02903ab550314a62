"""busquedas.crossfilter.bindings

Enlaces gráfico <-> (dimensión, grupo) y redibujado coordinado.

Cada :class:`ChartBinding` conoce su dominio de claves y produce un
:class:`ChartData` serializable a partir del grupo vigente. Los destinos de
render implementan el protocolo :class:`RenderTarget`; el destino en memoria
(:class:`MemoryTarget`) es el que usa la API HTTP.

Dominios
--------
- ``mes``: primer día de cada mes del año actual del pager (enero a diciembre).
- ``hora``: enteros 0..23.
- ``dia``: orden fijo Lun..Dom.
- ``tipo``: claves observadas (dominio dinámico).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Hashable, List, Optional, Protocol

from busquedas.crossfilter.index import Dimension, Group
from busquedas.crossfilter.records import DAY_ORDER

SHORT_MONTHS = ("Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic")

# Orden fijo de redibujado
CHART_ORDER = ("mes", "hora", "dia", "tipo")


@dataclass(frozen=True)
class ChartItem:
    key: Any
    label: str
    value: int


@dataclass(frozen=True)
class ChartData:
    name: str
    kind: str
    title: str
    items: List[ChartItem] = field(default_factory=list)
    filter: Optional[Dict[str, Any]] = None
    year: Optional[int] = None


class RenderTarget(Protocol):
    def render(self, chart: ChartData) -> None: ...

    def clear(self) -> None: ...


class MemoryTarget:
    """Destino que guarda el último gráfico renderizado."""

    def __init__(self) -> None:
        self.chart: Optional[ChartData] = None
        self.renders = 0

    def render(self, chart: ChartData) -> None:
        self.chart = chart
        self.renders += 1

    def clear(self) -> None:
        self.chart = None


def month_domain(year: Optional[int]) -> List[datetime]:
    if year is None:
        return []
    return [datetime(year, m, 1) for m in range(1, 13)]


def _json_key(key: Hashable) -> Any:
    if isinstance(key, datetime):
        return key.strftime("%Y-%m")
    return key


def _json_filter(desc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if desc is None:
        return None
    out = dict(desc)
    for field_name in ("range", "values"):
        if field_name in out:
            out[field_name] = [_json_key(v) for v in out[field_name]]
    return out


@dataclass
class ChartBinding:
    name: str
    kind: str
    title: str
    dimension: Dimension
    group: Group
    domain: Callable[[], Optional[List[Hashable]]]
    label: Callable[[Hashable], str] = str
    year: Callable[[], Optional[int]] = lambda: None

    def build(self) -> ChartData:
        """Construye el gráfico con el estado actual de filtros."""
        counts = self.group.as_dict()
        keys = self.domain()
        if keys is None:
            keys = list(counts)
        items = [
            ChartItem(key=_json_key(k), label=self.label(k), value=int(counts.get(k, 0)))
            for k in keys
        ]
        return ChartData(
            name=self.name,
            kind=self.kind,
            title=self.title,
            items=items,
            filter=_json_filter(self.dimension.current_filter),
            year=self.year(),
        )


class ChartBindings:
    """Registro explícito de gráficos; ``redraw_all`` los dibuja en orden fijo."""

    def __init__(self) -> None:
        self._bindings: Dict[str, ChartBinding] = {}
        self._targets: Dict[str, RenderTarget] = {}

    def bind(self, binding: ChartBinding, target: RenderTarget) -> None:
        self._bindings[binding.name] = binding
        self._targets[binding.name] = target

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __getitem__(self, name: str) -> ChartBinding:
        return self._bindings[name]

    def _ordered(self) -> List[str]:
        known = [n for n in CHART_ORDER if n in self._bindings]
        return known + [n for n in self._bindings if n not in CHART_ORDER]

    def redraw_all(self) -> Dict[str, ChartData]:
        out: Dict[str, ChartData] = {}
        for name in self._ordered():
            chart = self._bindings[name].build()
            self._targets[name].render(chart)
            out[name] = chart
        return out

    def clear_all(self) -> None:
        for name in self._ordered():
            self._targets[name].clear()


def bind_dashboard_charts(
    dimensions: Dict[str, Dimension],
    targets: Dict[str, RenderTarget],
    current_year: Callable[[], Optional[int]],
) -> ChartBindings:
    """Enlaza las cuatro dimensiones estándar a sus destinos."""
    bindings = ChartBindings()

    mes = dimensions["mes"]
    bindings.bind(
        ChartBinding(
            name="mes",
            kind="bar",
            title="Total Búsquedas por mes",
            dimension=mes,
            group=mes.group(),
            domain=lambda: month_domain(current_year()),
            label=lambda d: SHORT_MONTHS[d.month - 1],
            year=current_year,
        ),
        targets["mes"],
    )

    hora = dimensions["hora"]
    bindings.bind(
        ChartBinding(
            name="hora",
            kind="bar",
            title="Total Búsquedas por hora",
            dimension=hora,
            group=hora.group(),
            domain=lambda: list(range(24)),
        ),
        targets["hora"],
    )

    dia = dimensions["dia"]
    bindings.bind(
        ChartBinding(
            name="dia",
            kind="row",
            title="Búsquedas por día de la semana",
            dimension=dia,
            group=dia.group(),
            domain=lambda: list(DAY_ORDER),
        ),
        targets["dia"],
    )

    tipo = dimensions["tipo"]
    bindings.bind(
        ChartBinding(
            name="tipo",
            kind="pie",
            title="Tipos de búsqueda",
            dimension=tipo,
            group=tipo.group(),
            domain=lambda: None,
        ),
        targets["tipo"],
    )
    return bindings
