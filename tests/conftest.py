# tests/conftest.py
"""Fixtures compartidas: log de búsquedas mínimo en SQLite + TestClient."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from busquedas.app.main import app  # noqa: E402

TABLE = "busquedas_clasificadas_v2"

# (fecha, tipo_busqueda, criterio_texto)
SAMPLE_ROWS: Tuple[Tuple[Optional[str], Optional[str], Optional[str]], ...] = (
    ("2022-03-14 09:15:00", "libro", "historia del arte"),  # Lun
    ("2022-03-15 10:30:00", "revista", "café gato123"),     # Mar
    ("2022-07-02 22:05:00", None, "el-niño"),               # Sáb
    ("2023-01-08 09:45:00", "libro", "historia"),           # Dom
    ("2023-01-09 15:00:00", "", None),                      # Lun
    ("no-es-fecha", "tesis", "x"),                          # descartada en el pipeline
)


def make_search_db(path: Path, rows: Iterable[Tuple[Optional[str], Optional[str], Optional[str]]]) -> Path:
    """Crea la tabla del log de búsquedas en `path` con `rows`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(str(path)) as conn:
        conn.execute(
            f"CREATE TABLE {TABLE} ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, fecha TEXT, tipo_busqueda TEXT, criterio_texto TEXT)"
        )
        conn.executemany(
            f"INSERT INTO {TABLE} (fecha, tipo_busqueda, criterio_texto) VALUES (?, ?, ?)",
            list(rows),
        )
    return path


@pytest.fixture
def search_db(tmp_path, monkeypatch) -> Path:
    """Log de búsquedas de ejemplo apuntado por BQ_DB_PATH."""
    db = make_search_db(tmp_path / "data" / "busquedas.db", SAMPLE_ROWS)
    monkeypatch.setenv("BQ_DB_PATH", str(db))
    monkeypatch.delenv("BQ_TABLE", raising=False)
    return db


@pytest.fixture
def missing_db(tmp_path, monkeypatch) -> Path:
    """BQ_DB_PATH apuntando a un archivo que no existe."""
    db = tmp_path / "no_existe.db"
    monkeypatch.setenv("BQ_DB_PATH", str(db))
    return db


@pytest.fixture(scope="session")
def client():
    return TestClient(app)
