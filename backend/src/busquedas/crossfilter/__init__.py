"""busquedas.crossfilter

Pipeline de cross-filtering del dashboard: normalización de filas, índice
multidimensional, paginación por año, enlaces de gráficos, nube de palabras y
el controlador que los coordina.
"""

from .controller import (
    DashboardController,
    DashboardState,
    FilterValidationError,
    WordCloudResult,
    memory_targets,
    validate_range,
)
from .index import CrossFilter, Dimension, Group, build_index
from .pager import YearPager
from .records import DAY_NAMES, DAY_ORDER, SIN_INFORMACION, SearchRecord, normalize_rows
from .wordcloud import extract_word_counts, tokenize, top_words

__all__ = [
    "DashboardController",
    "DashboardState",
    "FilterValidationError",
    "WordCloudResult",
    "memory_targets",
    "validate_range",
    "CrossFilter",
    "Dimension",
    "Group",
    "build_index",
    "YearPager",
    "DAY_NAMES",
    "DAY_ORDER",
    "SIN_INFORMACION",
    "SearchRecord",
    "normalize_rows",
    "extract_word_counts",
    "tokenize",
    "top_words",
]
