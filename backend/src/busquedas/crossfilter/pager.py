"""busquedas.crossfilter.pager

Paginación por año de la vista mensual.

El pager es independiente de los filtros: los años disponibles se calculan una
sola vez por carga a partir de todos los registros. Los suscriptores se
notifican en cada cambio efectivo de año (el controller usa esto para limpiar
el brush de la dimensión mensual antes de cambiar el dominio mostrado).
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from busquedas.crossfilter.records import SearchRecord

YearListener = Callable[[int], None]


class YearPager:
    def __init__(self, records: Iterable[SearchRecord] = ()) -> None:
        self.available_years: List[int] = sorted({r.year for r in records})
        self.current_index: Optional[int] = 0 if self.available_years else None
        self._listeners: List[YearListener] = []

    @classmethod
    def from_records(cls, records: Iterable[SearchRecord]) -> "YearPager":
        return cls(records)

    def subscribe(self, listener: YearListener) -> None:
        self._listeners.append(listener)

    def current_year(self) -> Optional[int]:
        """Año mostrado, o ``None`` si la carga no tiene datos."""
        if self.current_index is None:
            return None
        return self.available_years[self.current_index]

    @property
    def has_prev(self) -> bool:
        return bool(self.current_index)

    @property
    def has_next(self) -> bool:
        return self.current_index is not None and self.current_index < len(self.available_years) - 1

    def _move(self, step: int) -> bool:
        if self.current_index is None:
            return False
        target = self.current_index + step
        if not 0 <= target < len(self.available_years):
            return False
        self.current_index = target
        year = self.available_years[target]
        for listener in self._listeners:
            listener(year)
        return True

    def next(self) -> bool:
        """Avanza un año; no-op (False) en el último."""
        return self._move(1)

    def prev(self) -> bool:
        """Retrocede un año; no-op (False) en el primero."""
        return self._move(-1)

    def go_to(self, year: int) -> bool:
        """Salta a ``year`` si está disponible; False si no existe o ya es el actual."""
        if year not in self.available_years:
            return False
        step = self.available_years.index(year) - self.current_index
        return self._move(step) if step else False
