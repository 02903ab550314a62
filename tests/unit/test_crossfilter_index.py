from collections import Counter
from datetime import datetime

import pytest

from busquedas.crossfilter import DAY_ORDER, build_index, normalize_rows
from busquedas.crossfilter.controller import build_dimensions


ROWS = [
    {"fecha": "2022-03-14T09:15:00", "tipo_busqueda": "libro", "criterio_texto": "a"},
    {"fecha": "2022-03-15T10:30:00", "tipo_busqueda": "revista", "criterio_texto": "b"},
    {"fecha": "2022-07-02T22:05:00", "tipo_busqueda": None, "criterio_texto": "c"},
    {"fecha": "2023-01-08T09:45:00", "tipo_busqueda": "libro", "criterio_texto": "d"},
    {"fecha": "2023-01-09T15:00:00", "tipo_busqueda": "tesis", "criterio_texto": "e"},
    {"fecha": "2023-05-10T09:00:00", "tipo_busqueda": "libro", "criterio_texto": "f"},
]


@pytest.fixture
def index_and_dims():
    records = normalize_rows(ROWS)
    index = build_index(records)
    dims = build_dimensions(index)
    return index, dims, records


def _totals(records, key):
    return dict(Counter(key(r) for r in records))


def test_groups_without_filters_match_full_totals(index_and_dims):
    index, dims, records = index_and_dims
    assert index.size() == 6
    assert dims["hora"].group().as_dict() == _totals(records, lambda r: r.hour)
    assert dims["tipo"].group().as_dict() == {"libro": 3, "revista": 1, "sin informacion": 1, "tesis": 1}
    assert dims["mes"].group().as_dict()[datetime(2022, 3, 1)] == 2


def test_filter_on_tipo_updates_other_groups_not_its_own(index_and_dims):
    _, dims, _ = index_and_dims
    before_tipo = dims["tipo"].group().all()

    dims["tipo"].filter_exact("libro")

    assert dims["tipo"].group().all() == before_tipo
    hora = dims["hora"].group().as_dict()
    assert hora[9] == 3
    assert hora[10] == 0
    assert hora[15] == 0
    dia = dims["dia"].group().as_dict()
    assert dia == {"Lun": 1, "Mar": 0, "Mié": 1, "Sáb": 0, "Dom": 1}
    mes = dims["mes"].group().as_dict()
    assert mes[datetime(2022, 3, 1)] == 1
    assert mes[datetime(2022, 7, 1)] == 0


def test_filters_on_two_dimensions_combine(index_and_dims):
    index, dims, _ = index_and_dims
    dims["tipo"].filter_exact("libro")
    dims["hora"].filter_range(9, 10)

    # hora ve solo el filtro de tipo; tipo ve solo el de hora
    assert dims["hora"].group().as_dict()[9] == 3
    assert dims["tipo"].group().as_dict() == {"libro": 3, "revista": 0, "sin informacion": 0, "tesis": 0}
    assert len(index.all_filtered()) == 3


def test_filter_range_is_half_open(index_and_dims):
    index, dims, _ = index_and_dims
    dims["hora"].filter_range(9, 10)
    assert {r.hour for r in index.all_filtered()} == {9}
    dims["mes"].filter_range(datetime(2022, 3, 1), datetime(2022, 4, 1))
    assert [r.criterio_texto for r in index.all_filtered()] == ["a"]


def test_filter_all_everywhere_restores_totals(index_and_dims):
    index, dims, records = index_and_dims
    dims["tipo"].filter_in(["libro", "tesis"])
    dims["dia"].filter_exact("Lun")
    dims["mes"].filter_range(datetime(2023, 1, 1), datetime(2024, 1, 1))

    for dim in dims.values():
        dim.filter_all()

    assert not any(d.has_filter for d in dims.values())
    assert len(index.all_filtered()) == len(records)
    assert dims["hora"].group().as_dict() == _totals(records, lambda r: r.hour)
    assert dims["dia"].group().as_dict() == _totals(records, lambda r: r.dow)
    assert dims["tipo"].group().as_dict() == _totals(records, lambda r: r.tipo_busqueda)


def test_dia_group_uses_week_order(index_and_dims):
    _, dims, _ = index_and_dims
    keys = [k for k, _ in dims["dia"].group().all()]
    assert keys == sorted(keys, key=DAY_ORDER.index)
    assert keys[0] == "Lun"
    assert keys[-1] == "Dom"


def test_filter_function_and_top(index_and_dims):
    index, dims, _ = index_and_dims
    dims["hora"].filter_function(lambda h: h >= 15)
    assert {r.hour for r in index.all_filtered()} == {15, 22}
    assert dims["hora"].current_filter == {"type": "function"}
    assert dims["tipo"].group().top(1) == [("sin informacion", 1)]


def test_filter_in_empty_clears(index_and_dims):
    _, dims, _ = index_and_dims
    dims["tipo"].filter_in(["libro"])
    dims["tipo"].filter_in([])
    assert not dims["tipo"].has_filter


def test_empty_index_has_empty_groups():
    index = build_index([])
    dims = build_dimensions(index)
    assert index.size() == 0
    assert index.all_filtered() == []
    for dim in dims.values():
        assert dim.group().all() == []
        assert dim.group().size() == 0
    dims["hora"].filter_range(0, 5)
    assert dims["tipo"].group().all() == []
