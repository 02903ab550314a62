# backend/src/busquedas/app/jobs/cmd_resumen_busquedas.py
"""
Resumen del dashboard por consola.

Carga el log de búsquedas configurado (BQ_DB_PATH / BQ_TABLE), aplica los
mismos filtros que la UI y vuelca los gráficos como JSON.

Uso:
  python -m busquedas.app.jobs.cmd_resumen_busquedas --start 2023-01-01 --end 2023-12-31
  python -m busquedas.app.jobs.cmd_resumen_busquedas --year 2023 --tipo libro --wordcloud 20
"""
import argparse
import json
import logging
import sys
from dataclasses import asdict

from busquedas.app.logging_config import setup_logging
from busquedas.crossfilter import DashboardController, FilterValidationError, memory_targets
from busquedas.dashboard.queries import fetch_raw_rows


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Resumen del dashboard de búsquedas")
    ap.add_argument("--start", default=None, help="Fecha inicial AAAA-MM-DD (incl.)")
    ap.add_argument("--end", default=None, help="Fecha final AAAA-MM-DD (incl.)")
    ap.add_argument("--year", type=int, default=None, help="Año de la vista mensual")
    ap.add_argument("--tipo", action="append", default=None, help="Tipo de búsqueda (repetible)")
    ap.add_argument("--wordcloud", type=int, default=0, help="Top N palabras (0 = no calcular)")
    args = ap.parse_args(argv)

    setup_logging()
    controller = DashboardController(fetch_raw_rows, memory_targets())
    try:
        state = controller.apply_filters(args.start, args.end)
    except FilterValidationError as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.year is not None and not controller.go_to_year(args.year):
        logging.getLogger("busquedas").info("Año %s no disponible o ya seleccionado", args.year)
    if args.tipo:
        controller.select("tipo", *args.tipo)

    out = {
        "status": state.status,
        "year_label": state.year_label,
        "available_years": state.pager.available_years,
        "nav": controller.nav_state(),
        "charts": {name: asdict(chart) for name, chart in state.charts.items()},
    }
    if args.wordcloud:
        wc = controller.word_cloud(limit=args.wordcloud)
        out["wordcloud"] = {"items": [list(x) for x in wc.items], "message": wc.message}

    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0 if state.status != "error" else 1


if __name__ == "__main__":
    sys.exit(main())
