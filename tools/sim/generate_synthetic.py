#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Genera un log de búsquedas sintético (SQLite) compatible con el dashboard.

Tabla: busquedas_clasificadas_v2(id, fecha, tipo_busqueda, criterio_texto)
- fecha: timestamp ISO con horas más cargadas en horario laboral
- tipo_busqueda: categorías con algunos nulos (-> "sin informacion" en la UI)
- criterio_texto: frases cortas con algunas palabras con dígitos/puntuación

Uso:
  python tools/sim/generate_synthetic.py --n 5000 --out data/busquedas.db
  python tools/sim/generate_synthetic.py --n 500 --years 2022 2023 --out data/demo.db
"""
import argparse
import os
import sqlite3

import numpy as np
import pandas as pd

TIPOS = ["libro", "revista", "tesis", "articulo", "base de datos", None]
P_TIPOS = [0.35, 0.15, 0.15, 0.2, 0.1, 0.05]
PALABRAS = [
    "historia", "derecho", "economía", "ingeniería", "química", "niño", "educación",
    "salud", "política", "música", "año2020", "covid-19", "filosofía", "datos",
]


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--n", type=int, default=2000, help="Filas a generar")
    ap.add_argument("--out", required=True, help="Ruta del archivo SQLite de salida")
    ap.add_argument("--years", type=int, nargs="+", default=[2023, 2024])
    ap.add_argument("--table", default="busquedas_clasificadas_v2")
    ap.add_argument("--seed", type=int, default=42)
    args = ap.parse_args()
    rng = np.random.default_rng(args.seed)

    N = args.n
    years = rng.choice(args.years, size=N)
    day_of_year = rng.integers(0, 365, size=N)
    # horas: mezcla de mañana/tarde con algo de ruido nocturno
    hours = np.clip(
        np.where(rng.random(N) < 0.5, rng.normal(10, 2, N), rng.normal(16, 2.5, N)),
        0,
        23,
    ).astype(int)
    minutes = rng.integers(0, 60, size=N)

    fechas = (
        pd.to_datetime([f"{y}-01-01" for y in years])
        + pd.to_timedelta(day_of_year, unit="D")
        + pd.to_timedelta(hours, unit="h")
        + pd.to_timedelta(minutes, unit="m")
    )

    tipos = rng.choice(len(TIPOS), size=N, p=P_TIPOS)
    n_words = rng.integers(1, 4, size=N)
    textos = [" ".join(rng.choice(PALABRAS, size=k)) for k in n_words]

    df = pd.DataFrame(
        {
            "fecha": fechas.strftime("%Y-%m-%d %H:%M:%S"),
            "tipo_busqueda": [TIPOS[i] for i in tipos],
            "criterio_texto": textos,
        }
    )

    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    with sqlite3.connect(args.out) as conn:
        conn.execute(f"DROP TABLE IF EXISTS {args.table}")
        conn.execute(
            f"CREATE TABLE {args.table} ("
            "id INTEGER PRIMARY KEY AUTOINCREMENT, fecha TEXT, tipo_busqueda TEXT, criterio_texto TEXT)"
        )
        df.to_sql(args.table, conn, if_exists="append", index=False)
    print(f"OK -> {args.out} ({len(df)} filas)")


if __name__ == "__main__":
    main()
