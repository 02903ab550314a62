from datetime import datetime

import pytest

from busquedas.crossfilter import (
    DashboardController,
    FilterValidationError,
    memory_targets,
    validate_range,
)
from busquedas.crossfilter import controller as ctrl_mod


ROWS_2022 = [
    {"fecha": "2022-03-14 09:15:00", "tipo_busqueda": "libro", "criterio_texto": "historia del arte"},
    {"fecha": "2022-03-15 10:30:00", "tipo_busqueda": "revista", "criterio_texto": "café gato123"},
]
ROWS_2023 = [
    {"fecha": "2023-01-08 09:45:00", "tipo_busqueda": "libro", "criterio_texto": "historia"},
    {"fecha": "2023-04-03 18:00:00", "tipo_busqueda": "tesis", "criterio_texto": "12345"},
]


class FakeSource:
    def __init__(self, rows):
        self.rows = rows
        self.calls = []

    def __call__(self, start, end):
        self.calls.append((start, end))
        return list(self.rows)


class Collector:
    def __init__(self):
        self.calls = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))


@pytest.fixture
def events(monkeypatch):
    collected = {"requested": Collector(), "completed": Collector(), "failed": Collector()}
    monkeypatch.setattr(ctrl_mod, "emit_requested", collected["requested"])
    monkeypatch.setattr(ctrl_mod, "emit_completed", collected["completed"])
    monkeypatch.setattr(ctrl_mod, "emit_failed", collected["failed"])
    return collected


def _values(chart):
    return {i.key: i.value for i in chart.items}


@pytest.mark.parametrize(
    "start,end,fragment",
    [
        ("2023/01/01", None, "inicio"),
        (None, "31-12-2023", "fin"),
        ("2023-02-01", "2023-01-01", "mayor"),
    ],
)
def test_validate_range_rejects(start, end, fragment):
    with pytest.raises(FilterValidationError) as exc:
        validate_range(start, end)
    assert fragment in str(exc.value)


def test_validate_range_accepts_open_and_equal_bounds():
    validate_range(None, None)
    validate_range("", "")
    validate_range("2023-01-01", "2023-01-01")


def test_missing_target_is_rejected():
    targets = memory_targets(["mes", "hora", "dia"])
    with pytest.raises(ValueError):
        DashboardController(FakeSource([]), targets)


def test_invalid_range_does_not_reach_source(events):
    source = FakeSource(ROWS_2022)
    ctrl = DashboardController(source, memory_targets())
    with pytest.raises(FilterValidationError):
        ctrl.apply_filters("2023-02-01", "2023-01-01")
    assert source.calls == []
    assert events["requested"].calls == []


def test_load_installs_state_and_renders(events):
    source = FakeSource(ROWS_2022 + ROWS_2023)
    targets = memory_targets()
    ctrl = DashboardController(source, targets)

    state = ctrl.apply_filters("", "")

    assert source.calls == [(None, None)]
    assert state.status == "ready"
    assert state.year_label == "2022"
    assert state.pager.available_years == [2022, 2023]
    assert list(state.charts) == ["mes", "hora", "dia", "tipo"]
    assert all(t.chart is not None for t in targets.values())
    assert ctrl.nav_state() == {"prev_enabled": False, "next_enabled": True, "year_label": "2022"}

    (args, kwargs), = events["completed"].calls
    assert kwargs["n_rows"] == 4
    assert kwargs["n_records"] == 4
    assert kwargs["years"] == [2022, 2023]
    assert kwargs["por_tipo"] == {"libro": 2, "revista": 1, "tesis": 1}
    assert events["failed"].calls == []


def test_empty_load_clears_charts(events):
    targets = memory_targets()
    ctrl = DashboardController(FakeSource(ROWS_2022), targets)
    ctrl.load()
    assert all(t.chart is not None for t in targets.values())

    ctrl._fetch_rows = FakeSource([{"fecha": "no-es-fecha", "tipo_busqueda": "libro"}])
    state = ctrl.load()

    assert state.status == "empty"
    assert state.year_label == "Sin datos"
    assert state.charts == {}
    assert all(t.chart is None for t in targets.values())
    assert ctrl.nav_state() == {"prev_enabled": False, "next_enabled": False, "year_label": "Sin datos"}


def test_failed_load_reports_error(events):
    def broken(start, end):
        raise ConnectionError("servidor caído")

    targets = memory_targets()
    ctrl = DashboardController(broken, targets)
    state = ctrl.load("2023-01-01", None)

    assert state.status == "error"
    assert state.year_label == "Error cargando datos"
    assert not state.ready
    assert all(t.chart is None for t in targets.values())
    (args, kwargs), = events["failed"].calls
    assert kwargs["error"] == "servidor caído"
    assert kwargs["stage"] == "fetch"
    assert events["completed"].calls == []


def test_failed_normalization_reports_normalize_stage(events):
    def not_rows(start, end):
        return 42

    targets = memory_targets()
    ctrl = DashboardController(not_rows, targets)
    state = ctrl.load()

    assert state.status == "error"
    (args, kwargs), = events["failed"].calls
    assert kwargs["stage"] == "normalize"


def test_overlapping_loads_last_to_finish_wins(events):
    targets = memory_targets()
    ctrl = DashboardController(FakeSource([]), targets)

    def slow_2022(start, end):
        # otra carga se resuelve mientras esta sigue pendiente
        ctrl._fetch_rows = FakeSource(ROWS_2023)
        ctrl.load("2023-01-01", None)
        return list(ROWS_2022)

    ctrl._fetch_rows = slow_2022
    state = ctrl.load("2022-01-01", None)

    assert state.load_seq == 2
    assert state.pager.available_years == [2022]
    assert state.year_label == "2022"


def test_year_navigation_resets_month_filter(events):
    ctrl = DashboardController(FakeSource(ROWS_2022 + ROWS_2023), memory_targets())
    ctrl.load()

    ctrl.brush("mes", datetime(2022, 3, 1), datetime(2022, 4, 1))
    ctrl.select("tipo", "libro")
    assert ctrl.state.dimensions["mes"].has_filter

    assert ctrl.next_year() is True
    assert not ctrl.state.dimensions["mes"].has_filter
    # los demás filtros sobreviven al cambio de año
    assert ctrl.state.dimensions["tipo"].has_filter
    assert ctrl.state.year_label == "2023"
    assert ctrl.state.charts["mes"].year == 2023

    assert ctrl.next_year() is False
    assert ctrl.prev_year() is True
    assert ctrl.go_to_year(1999) is False
    assert ctrl.state.year_label == "2022"


def test_interactions_redraw_with_cross_filter(events):
    ctrl = DashboardController(FakeSource(ROWS_2022 + ROWS_2023), memory_targets())
    ctrl.load()

    charts = ctrl.select("tipo", "libro")
    assert _values(charts["hora"])[9] == 2
    assert _values(charts["hora"])[10] == 0
    assert _values(charts["tipo"]) == {"libro": 2, "revista": 1, "tesis": 1}
    assert len(ctrl.filtered_records()) == 2

    charts = ctrl.brush("hora", 9, 10)
    assert _values(charts["tipo"]) == {"libro": 2, "revista": 0, "tesis": 0}

    ctrl.clear_filter("tipo")
    assert len(ctrl.filtered_records()) == 2

    ctrl.clear_all_filters()
    assert len(ctrl.filtered_records()) == 4

    # gráfico desconocido: no-op
    assert ctrl.select("otro", "x") == ctrl.state.charts


def test_interactions_before_load_are_noops(events):
    ctrl = DashboardController(FakeSource([]), memory_targets())
    assert ctrl.brush("hora", 0, 5) == {}
    assert ctrl.next_year() is False
    assert ctrl.filtered_records() == []


def test_word_cloud_messages(events):
    ctrl = DashboardController(FakeSource(ROWS_2022 + ROWS_2023), memory_targets())

    before = ctrl.word_cloud()
    assert before.items == []
    assert before.message == "No hay datos para mostrar. Aplica un filtro primero."

    ctrl.load()
    result = ctrl.word_cloud(limit=2)
    assert result.message is None
    assert result.items == [("historia", 2), ("arte", 1)]

    ctrl.select("tipo", "tesis")
    empty = ctrl.word_cloud()
    assert empty.items == []
    assert empty.message.startswith("No se encontraron palabras válidas")
