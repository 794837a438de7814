from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

from ..coercion import clean_field, parse_float, to_amount, to_bool
from ..config import MIN_YEAR_CONSTRUCTED
from ..models import PropertyRecord
from .regions import UNKNOWN, canonicalize

logger = logging.getLogger(__name__)


def _clean_row(row: Mapping[str, Any]) -> dict:
    # Header und Werte gleich behandeln (Trim + Anführungszeichen weg)
    return {clean_field(k): clean_field(v) for k, v in row.items()}


def normalize_row(row: Mapping[str, Any], current_year: Optional[int] = None) -> Optional[PropertyRecord]:
    """
    Eine Rohzeile in einen PropertyRecord überführen.
    Gibt None zurück, wenn Pflichtfelder fehlen/ungültig sind oder das Baujahr unplausibel ist.
    """
    if current_year is None:
        current_year = date.today().year
    r = _clean_row(row)

    total_rent = parse_float(r.get("totalRent"))
    if total_rent is None or total_rent <= 0:
        return None
    living_space = parse_float(r.get("livingSpace"))
    if living_space is None or living_space <= 0:
        return None
    year = parse_float(r.get("yearConstructed")) or 0.0
    if not (MIN_YEAR_CONSTRUCTED <= year <= current_year):
        return None

    condition = r.get("condition") or UNKNOWN
    return PropertyRecord(
        total_rent=total_rent,
        base_rent=to_amount(r.get("baseRent")),
        service_charge=to_amount(r.get("serviceCharge")),
        heating_costs=to_amount(r.get("heatingCosts")),
        living_space=living_space,
        no_rooms=to_amount(r.get("noRooms")),
        year_constructed=int(year),
        price_per_sqm=round(total_rent / living_space, 2),
        region=canonicalize(r.get("regio1")),
        condition=condition,
        balcony=to_bool(r.get("balcony")),
        garden=to_bool(r.get("garden")),
        lift=to_bool(r.get("lift")),
    )


def normalize(raw_rows: Sequence[Mapping[str, Any]], current_year: Optional[int] = None) -> List[PropertyRecord]:
    """Alle Rohzeilen bereinigen; ungültige Zeilen fallen still heraus (kein Sampling)."""
    if current_year is None:
        current_year = date.today().year
    records: List[PropertyRecord] = []
    total = 0
    for row in raw_rows:
        total += 1
        rec = normalize_row(row, current_year=current_year)
        if rec is not None:
            records.append(rec)
    rejected = total - len(records)
    if rejected:
        logger.debug("%d von %d Zeilen verworfen (Miete/Fläche/Baujahr ungültig)", rejected, total)
    return records
