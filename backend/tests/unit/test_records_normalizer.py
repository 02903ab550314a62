from datetime import datetime, timedelta, timezone

import pandas as pd

from busquedas.crossfilter.records import (
    SIN_INFORMACION,
    SearchRecord,
    normalize_rows,
    parse_fecha,
    to_record,
)


def test_unparseable_dates_are_dropped_in_order():
    rows = [
        {"fecha": "2023-01-08 09:45:00", "tipo_busqueda": "libro"},
        {"fecha": "no-es-fecha", "tipo_busqueda": "libro"},
        {"fecha": None, "tipo_busqueda": "libro"},
        {"fecha": "", "tipo_busqueda": "libro"},
        {"fecha": "2022-03-14 09:15:00", "tipo_busqueda": "revista"},
    ]
    out = normalize_rows(rows)
    assert [r.tipo_busqueda for r in out] == ["libro", "revista"]


def test_derived_fields():
    rec = to_record({"fecha": "2023-01-08 09:45:00", "tipo_busqueda": "libro", "criterio_texto": "x"})
    assert rec == SearchRecord(
        date=datetime(2023, 1, 8, 9, 45),
        year=2023,
        hour=9,
        dow="Dom",
        tipo_busqueda="libro",
        criterio_texto="x",
    )
    assert to_record({"fecha": "2022-03-14T00:00:00"}).dow == "Lun"
    assert to_record({"fecha": "2022-07-02"}).dow == "Sáb"


def test_missing_tipo_becomes_sentinel_and_texto_empty():
    rows = [
        {"fecha": "2023-01-01", "tipo_busqueda": None},
        {"fecha": "2023-01-01", "tipo_busqueda": ""},
        {"fecha": "2023-01-01"},
    ]
    out = normalize_rows(rows)
    assert {r.tipo_busqueda for r in out} == {SIN_INFORMACION}
    assert all(r.criterio_texto == "" for r in out)


def test_dataframe_input_with_nan():
    df = pd.DataFrame(
        {
            "fecha": ["2023-01-09 15:00:00", "basura"],
            "tipo_busqueda": [float("nan"), "tesis"],
            "criterio_texto": [float("nan"), "x"],
        }
    )
    out = normalize_rows(df)
    assert len(out) == 1
    assert out[0].tipo_busqueda == SIN_INFORMACION
    assert out[0].criterio_texto == ""
    assert out[0].hour == 15


def test_timezone_aware_values_become_local_naive():
    aware = datetime(2023, 1, 8, 12, 0, tzinfo=timezone(timedelta(hours=-3)))
    dt = parse_fecha(aware)
    assert dt.tzinfo is None
    assert dt == aware.astimezone().replace(tzinfo=None)
