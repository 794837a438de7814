# src/mietpreis/cli.py
# Mietpreis-Schätzung über die Kommandozeile: Daten laden -> bereinigen -> Faktoren -> Vorhersage
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import config
from .db import get_session, init_db
from .engine import NoDataError, build_session
from .ml.pricing import COEFFICIENT_SETS, get_coefficients
from .models import PredictionScenario
from .services.docs import render_estimate
from .services.ingest import load_raw_rows, read_rows, store_raw_rows

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mietpreis", description="Mietpreis-Schätzung für deutsche Wohnungen")
    ap.add_argument("--csv", default=config.DATA_CSV_PATH, help="Pfad zur immo_data CSV/ZIP")
    ap.add_argument("--from-db", action="store_true", help="Rohinserate aus der Datenbank statt aus der CSV lesen")
    ap.add_argument("--store", action="store_true", help="gelesene Rohinserate zusätzlich in der Datenbank ablegen")
    ap.add_argument("--max-rows", type=int, default=0, help="0 = alle Zeilen")
    ap.add_argument("--living-space", type=float, default=80.0)
    ap.add_argument("--rooms", type=float, default=3.0)
    ap.add_argument("--region", default=None, help="Bundesland (Default: erste Region im Datensatz)")
    ap.add_argument("--balcony", action="store_true")
    ap.add_argument("--garden", action="store_true")
    ap.add_argument("--lift", action="store_true")
    ap.add_argument("--coefficients", choices=sorted(COEFFICIENT_SETS), default=None,
                    help="Koeffizientensatz (Default: RENT_COEFFICIENT_SET bzw. 'standard')")
    ap.add_argument("--json", action="store_true", help="Ergebnis als JSON ausgeben")
    return ap


def _load_rows(args) -> list:
    if args.from_db:
        init_db()
        with get_session() as session:
            return load_raw_rows(session)
    rows = read_rows(args.csv, max_rows=args.max_rows or None)
    if args.store:
        init_db()
        with get_session() as session:
            store_raw_rows(session, rows)
    return rows


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(message)s")

    coefficient_set = args.coefficients or config.coefficient_set_name()
    try:
        rows = _load_rows(args)
        session = build_session(rows, coefficients=get_coefficients(coefficient_set))
    except FileNotFoundError as e:
        print(f"[Fehler] {e}", file=sys.stderr)
        return 1
    except NoDataError as e:
        print(f"[Fehler] {e}", file=sys.stderr)
        return 2

    region = args.region or (session.regions[0] if session.regions else "")
    scenario = PredictionScenario(
        living_space=args.living_space, no_rooms=args.rooms, region=region,
        balcony=args.balcony, garden=args.garden, lift=args.lift,
    )
    predicted = session.predict(scenario)
    impacts = session.estimate_impacts()
    chart = session.chart_scenarios(args.living_space, args.rooms, region)

    if args.json:
        print(json.dumps({
            "region": region,
            "predicted_rent": predicted,
            "multiplier": session.model.multiplier_for(region),
            "impacts": impacts,
            "scenarios": [s.as_dict() for s in chart],
        }, ensure_ascii=False, indent=2))
    else:
        print(render_estimate(
            region=region,
            living_space=args.living_space,
            rooms=args.rooms,
            predicted_rent=predicted,
            multiplier=session.model.multiplier_for(region),
            impacts=impacts,
            scenarios=chart,
            n_records=len(session.records),
            coefficient_set=coefficient_set,
        ))
    return 0


if __name__ == "__main__":
    sys.exit(main())
