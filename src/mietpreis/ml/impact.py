from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Sequence

import pandas as pd

from ..coercion import round_half_up, to_amount
from ..models import AMENITIES, PredictionScenario, PropertyRecord, ScenarioResult
from .pricing import RentModel

# (Name, balcony, garden, lift, has_feature, feature_type) – Reihenfolge ist fest
SCENARIOS = [
    ("All true", True, True, True, True, "allTrue"),
    ("All false", False, False, False, True, "allFalse"),
    ("Balcony", True, False, False, True, "balcony"),
    ("No Balcony", False, True, True, False, "balcony"),
    ("Garden", False, True, False, True, "garden"),
    ("No Garden", True, False, True, False, "garden"),
    ("Lift", False, False, True, True, "lift"),
    ("No Lift", True, True, False, False, "lift"),
]


def estimate_impacts(model: RentModel, records: Sequence[PropertyRecord]) -> Dict[str, int]:
    """
    Ø Mietdifferenz (mit − ohne Ausstattung) je Merkmal über alle Inserate
    mit Fläche > 0 und Zimmern > 0. Leere Menge -> 0.
    """
    base = [PredictionScenario.from_record(r) for r in records
            if r.living_space > 0 and r.no_rooms > 0]
    impacts: Dict[str, int] = {}
    for amenity in AMENITIES:
        if not base:
            impacts[amenity] = 0
            continue
        diffs = [model.predict(replace(s, **{amenity: True})) - model.predict(replace(s, **{amenity: False}))
                 for s in base]
        impacts[amenity] = round_half_up(sum(diffs) / len(diffs))
    return impacts


def compare_scenarios(model: RentModel, living_space, rooms, region) -> List[ScenarioResult]:
    """Acht feste Was-wäre-wenn-Szenarien für eine Wohnung (Fläche, Zimmer, Region)."""
    ls, nr = to_amount(living_space), to_amount(rooms)
    region = "" if region is None else str(region)
    results = []
    for name, balcony, garden, lift, has_feature, feature_type in SCENARIOS:
        scenario = PredictionScenario(living_space=ls, no_rooms=nr, region=region,
                                      balcony=balcony, garden=garden, lift=lift)
        results.append(ScenarioResult(name=name, predicted_rent=model.predict(scenario),
                                      has_feature=has_feature, feature_type=feature_type))
    return results


def smooth_scenarios(results: Sequence[ScenarioResult]) -> List[ScenarioResult]:
    """
    Chart-Aufbereitung: Referenzszenarien ('allTrue'/'allFalse') fallen weg,
    "mit X" wird mit 'All true' gemittelt, "ohne X" mit 'All false'.
    """
    all_true = next((r for r in results if r.feature_type == "allTrue"), None)
    all_false = next((r for r in results if r.feature_type == "allFalse"), None)
    out = []
    for r in results:
        if r.feature_type in ("allTrue", "allFalse"):
            continue
        if r.feature_type in AMENITIES:
            ref = all_true if r.has_feature else all_false
            if ref is not None:
                r = replace(r, predicted_rent=round_half_up((r.predicted_rent + ref.predicted_rent) / 2))
        out.append(r)
    return out


def amenity_rent_comparison(records: Sequence[PropertyRecord]) -> List[dict]:
    """Beobachtete Ø Gesamtmiete mit/ohne Balkon, Garten, Lift (ohne Modell)."""
    df = pd.DataFrame([r.as_dict() for r in records],
                      columns=["total_rent", *AMENITIES])
    out = []
    for amenity in AMENITIES:
        yes = df.loc[df[amenity] == True, "total_rent"]  # noqa: E712
        no = df.loc[df[amenity] != True, "total_rent"]  # noqa: E712
        out.append({
            "feature": amenity.capitalize(),
            "yes": round(float(yes.mean()), 2) if len(yes) else 0.0,
            "no": round(float(no.mean()), 2) if len(no) else 0.0,
            "yes_count": int(len(yes)),
            "no_count": int(len(no)),
        })
    return out
