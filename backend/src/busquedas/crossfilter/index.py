"""busquedas.crossfilter.index

Índice multidimensional para cross-filtering en memoria.

Modelo
------
- Un único arreglo inmutable de registros por carga.
- Por cada dimensión: la lista de claves derivadas (una por registro) y una
  máscara booleana (numpy) que marca qué registros pasan el filtro de *esa*
  dimensión.
- El grupo de una dimensión cuenta por clave los registros que pasan los
  filtros de **todas las demás** dimensiones; el filtro propio se ignora.

No hay caché: cada consulta a un grupo recalcula con las máscaras vigentes,
por lo que los agregados nunca quedan desfasados respecto de los filtros.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from busquedas.crossfilter.records import SearchRecord

KeyFn = Callable[[SearchRecord], Hashable]
OrderFn = Callable[[Hashable], Any]


class Dimension:
    """Clave derivada de cada registro más un filtro ajustable."""

    def __init__(
        self,
        owner: "CrossFilter",
        name: str,
        key: KeyFn,
        order: Optional[OrderFn] = None,
    ) -> None:
        self._owner = owner
        self.name = name
        self._order = order
        self.keys: List[Hashable] = [key(r) for r in owner.records]
        self.mask = np.ones(len(self.keys), dtype=bool)
        self.current_filter: Optional[Dict[str, Any]] = None

    @property
    def has_filter(self) -> bool:
        return self.current_filter is not None

    def sort_keys(self, keys: Iterable[Hashable]) -> List[Hashable]:
        """Ordena claves con el orden propio de la dimensión (natural por defecto)."""
        return sorted(keys, key=self._order) if self._order else sorted(keys)

    # ------------------------------------------------------------------
    # Filtros
    # ------------------------------------------------------------------

    def _set_mask(self, mask: np.ndarray, description: Optional[Dict[str, Any]]) -> "Dimension":
        self.mask = mask
        self.current_filter = description
        return self

    def filter_all(self) -> "Dimension":
        """Quita el filtro de esta dimensión (acepta todo)."""
        return self._set_mask(np.ones(len(self.keys), dtype=bool), None)

    def filter_range(self, lo: Hashable, hi: Hashable) -> "Dimension":
        """Brush: conserva registros con ``lo <= clave < hi``."""
        mask = np.fromiter((lo <= k < hi for k in self.keys), dtype=bool, count=len(self.keys))
        return self._set_mask(mask, {"type": "range", "range": [lo, hi]})

    def filter_exact(self, value: Hashable) -> "Dimension":
        """Conserva registros cuya clave es exactamente ``value``."""
        mask = np.fromiter((k == value for k in self.keys), dtype=bool, count=len(self.keys))
        return self._set_mask(mask, {"type": "exact", "values": [value]})

    def filter_in(self, values: Iterable[Hashable]) -> "Dimension":
        """Conserva registros cuya clave está en ``values`` (selección múltiple)."""
        wanted = list(dict.fromkeys(values))
        if not wanted:
            return self.filter_all()
        allowed = set(wanted)
        mask = np.fromiter((k in allowed for k in self.keys), dtype=bool, count=len(self.keys))
        return self._set_mask(mask, {"type": "in", "values": wanted})

    def filter_function(self, predicate: Callable[[Hashable], bool]) -> "Dimension":
        """Conserva registros cuya clave cumple ``predicate``."""
        mask = np.fromiter((bool(predicate(k)) for k in self.keys), dtype=bool, count=len(self.keys))
        return self._set_mask(mask, {"type": "function"})

    # ------------------------------------------------------------------
    # Agregación
    # ------------------------------------------------------------------

    def group(self) -> "Group":
        return Group(self)


class Group:
    """Conteo clave -> registros, bajo los filtros de las otras dimensiones.

    Las claves observadas en la carga completa siempre aparecen, aunque su
    conteo actual sea 0.
    """

    def __init__(self, dimension: Dimension) -> None:
        self.dimension = dimension

    def all(self) -> List[Tuple[Hashable, int]]:
        dim = self.dimension
        passing = dim._owner.mask_excluding(dim.name)
        counts: Counter = Counter(k for k, ok in zip(dim.keys, passing) if ok)
        return [(k, int(counts.get(k, 0))) for k in dim.sort_keys(set(dim.keys))]

    def as_dict(self) -> Dict[Hashable, int]:
        return dict(self.all())

    def top(self, k: int) -> List[Tuple[Hashable, int]]:
        """Top-k por conteo desc (empates por orden de clave de la dimensión)."""
        items = self.all()
        position = {key: i for i, (key, _) in enumerate(items)}
        items.sort(key=lambda kv: (-kv[1], position[kv[0]]))
        return items[: max(0, int(k))]

    def size(self) -> int:
        return len(set(self.dimension.keys))


class CrossFilter:
    """Contenedor de registros + dimensiones de una carga."""

    def __init__(self, records: Sequence[SearchRecord]) -> None:
        self.records: Tuple[SearchRecord, ...] = tuple(records)
        self.dimensions: Dict[str, Dimension] = {}

    def size(self) -> int:
        return len(self.records)

    def dimension(self, name: str, key: KeyFn, order: Optional[OrderFn] = None) -> Dimension:
        """Crea (o reemplaza) la dimensión ``name``."""
        dim = Dimension(self, name, key, order=order)
        self.dimensions[name] = dim
        return dim

    def mask_excluding(self, name: Optional[str] = None) -> np.ndarray:
        """AND de las máscaras de todas las dimensiones salvo ``name``."""
        passing = np.ones(len(self.records), dtype=bool)
        for dim_name, dim in self.dimensions.items():
            if dim_name == name:
                continue
            passing &= dim.mask
        return passing

    def all_filtered(self) -> List[SearchRecord]:
        """Registros que pasan el filtro de todas las dimensiones."""
        passing = self.mask_excluding(None)
        return [r for r, ok in zip(self.records, passing) if ok]

    def filter_all(self) -> None:
        """Quita los filtros de todas las dimensiones."""
        for dim in self.dimensions.values():
            dim.filter_all()


def build_index(records: Sequence[SearchRecord]) -> CrossFilter:
    return CrossFilter(records)
