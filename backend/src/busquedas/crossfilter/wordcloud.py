"""busquedas.crossfilter.wordcloud

Frecuencia de palabras de ``criterio_texto`` para la nube de palabras.

Tokenización
------------
1. Se pasa el texto a minúsculas.
2. Se separa por cualquier racha de caracteres no-palabra (``\\W+``). Las letras
   acentuadas y la ñ son caracteres de palabra, así que quedan dentro del token;
   los dígitos también, por lo que ``"gato123"`` sigue siendo un único token.
3. Solo se aceptan tokens de letras (``^[a-zà-ÿñ]+$``); el resto se descarta
   completo, nunca se recorta.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple

from busquedas.crossfilter.records import SearchRecord

_SPLIT_RE = re.compile(r"\W+")
_TOKEN_RE = re.compile(r"^[a-zà-ÿñ]+$")


def tokenize(text: str) -> List[str]:
    """Tokens válidos de ``text`` (en orden de aparición)."""
    if not text:
        return []
    return [t for t in _SPLIT_RE.split(text.lower()) if t and _TOKEN_RE.match(t)]


def extract_word_counts(records: Iterable[SearchRecord]) -> Dict[str, int]:
    counter: Counter[str] = Counter()
    for rec in records:
        counter.update(tokenize(rec.criterio_texto))
    return dict(counter)


def top_words(counts: Dict[str, int], limit: Optional[int] = None) -> List[Tuple[str, int]]:
    """Ordena por frecuencia desc y luego alfabéticamente."""
    items = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
    if limit is not None:
        items = items[: max(0, int(limit))]
    return items
