# src/mietpreis/services/stats.py
# Kennzahlen und Aggregationen für das Dashboard (reine Funktionen über bereinigte Inserate)
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from .. import config
from ..models import PropertyRecord
from .regions import UNKNOWN

ALL = "All"
_COLUMNS = [
    "total_rent", "base_rent", "service_charge", "heating_costs", "living_space",
    "no_rooms", "year_constructed", "price_per_sqm", "region", "condition",
    "balcony", "garden", "lift",
]


def records_frame(records: Sequence[PropertyRecord]) -> pd.DataFrame:
    """DataFrame mit festen Spalten – auch für leere Eingaben."""
    return pd.DataFrame([r.as_dict() for r in records], columns=_COLUMNS)


def filter_records(
    records: Sequence[PropertyRecord],
    regions: Optional[Iterable[str]] = None,
    condition: Optional[str] = None,
) -> List[PropertyRecord]:
    """Mehrfachauswahl Regionen (leer oder 'All' = alle) + Zustand ('All'/None = alle)."""
    selected = set(regions or [])
    all_regions = not selected or ALL in selected
    return [
        r for r in records
        if (all_regions or r.region in selected)
        and (condition in (None, "", ALL) or r.condition == condition)
    ]


def available_regions(records: Sequence[PropertyRecord]) -> List[str]:
    return sorted({r.region for r in records})


def available_conditions(records: Sequence[PropertyRecord]) -> List[str]:
    return sorted({r.condition for r in records if r.condition != UNKNOWN})


def kpi_summary(records: Sequence[PropertyRecord]) -> Dict[str, float]:
    df = records_frame(records)
    if df.empty:
        return {
            "total_properties": 0, "average_rent": 0, "average_price_per_sqm": 0.0,
            "average_living_space": 0, "total_regions": 0, "average_rooms": 0.0,
        }
    return {
        "total_properties": int(len(df)),
        "average_rent": round(float(df["total_rent"].mean())),
        "average_price_per_sqm": round(float(df["price_per_sqm"].mean()), 2),
        "average_living_space": round(float(df["living_space"].mean())),
        "total_regions": int(df["region"].nunique()),
        "average_rooms": round(float(df["no_rooms"].mean()), 1),
    }


def region_price_per_sqm(records: Sequence[PropertyRecord],
                         regions: Optional[Iterable[str]] = None) -> List[dict]:
    """Ø €/m² und Anzahl Inserate je Region, absteigend nach Ø €/m²."""
    df = records_frame(records)
    selected = [r for r in (regions or []) if r != ALL]
    if selected:
        df = df[df["region"].isin(selected)]
    if df.empty:
        return []
    agg = (
        df.groupby("region", sort=True)
          .agg(avg_price_per_sqm=("price_per_sqm", "mean"),
               property_count=("price_per_sqm", "size"))
          .reset_index()
    )
    agg["avg_price_per_sqm"] = agg["avg_price_per_sqm"].round(2)
    agg = agg[agg["avg_price_per_sqm"] > 0]
    agg = agg.sort_values("avg_price_per_sqm", ascending=False, kind="mergesort")
    return [
        {"region": str(row.region), "avg_price_per_sqm": float(row.avg_price_per_sqm),
         "property_count": int(row.property_count)}
        for row in agg.itertuples(index=False)
    ]


def region_rent_breakdown(records: Sequence[PropertyRecord],
                          condition: Optional[str] = None) -> List[dict]:
    """Ø Kaltmiete, Nebenkosten, Heizkosten (und Summe) je Region."""
    df = records_frame(filter_records(records, condition=condition))
    if df.empty:
        return []
    agg = (
        df.groupby("region", sort=True)
          .agg(avg_base_rent=("base_rent", "mean"),
               avg_service_charge=("service_charge", "mean"),
               avg_heating_costs=("heating_costs", "mean"))
          .reset_index()
    )
    agg["total_rent"] = agg["avg_base_rent"] + agg["avg_service_charge"] + agg["avg_heating_costs"]
    agg = agg.round({"avg_base_rent": 2, "avg_service_charge": 2, "avg_heating_costs": 2, "total_rent": 2})
    agg = agg[agg["total_rent"] > 0]
    agg = agg.sort_values("total_rent", ascending=False, kind="mergesort")
    return [
        {"region": str(row.region),
         "avg_base_rent": float(row.avg_base_rent),
         "avg_service_charge": float(row.avg_service_charge),
         "avg_heating_costs": float(row.avg_heating_costs),
         "total_rent": float(row.total_rent)}
        for row in agg.itertuples(index=False)
    ]


def condition_distribution(records: Sequence[PropertyRecord],
                           include_unknown: bool = False) -> List[dict]:
    """Anzahl und Anteil (%) je Zustand; 'All', 'negotiable' (und 'Unknown') ausgenommen."""
    df = records_frame(records)
    if df.empty:
        return []
    counts = df["condition"].value_counts(sort=False)
    total = len(df)
    out = []
    for cond, n in counts.items():
        cond = str(cond)
        if cond == ALL or cond.lower() == "negotiable":
            continue
        if cond == UNKNOWN and not include_unknown:
            continue
        out.append({"name": cond, "value": int(n), "percentage": round(float(n) / total * 100, 1)})
    out.sort(key=lambda d: (-d["value"], d["name"]))
    return out


def construction_year_histogram(records: Sequence[PropertyRecord]) -> List[dict]:
    """Baujahre in 5-Jahres-Klassen, aufsteigend."""
    df = records_frame(records)
    df = df[df["year_constructed"] > 0]
    if df.empty:
        return []
    buckets = (df["year_constructed"].astype(int) // 5 * 5).value_counts().sort_index()
    return [
        {"year": int(y), "count": int(n), "year_range": f"{int(y)}-{int(y) + 4}"}
        for y, n in buckets.items()
    ]


def rent_by_decade(records: Sequence[PropertyRecord], min_count: Optional[int] = None) -> List[dict]:
    """Ø Gesamtmiete je Baujahrzehnt; nur Jahrzehnte mit mind. min_count Inseraten."""
    if min_count is None:
        min_count = config.min_decade_count()
    df = records_frame(records)
    df = df[(df["year_constructed"] > 0) & (df["total_rent"] > 0)]
    if df.empty:
        return []
    df = df.assign(decade=df["year_constructed"].astype(int) // 10 * 10)
    agg = (
        df.groupby("decade", sort=True)
          .agg(avg_rent=("total_rent", "mean"), property_count=("total_rent", "size"))
          .reset_index()
    )
    agg = agg[agg["property_count"] >= min_count]
    return [
        {"decade": f"{int(row.decade)}s", "decade_number": int(row.decade),
         "avg_rent": round(float(row.avg_rent), 2), "property_count": int(row.property_count)}
        for row in agg.itertuples(index=False)
    ]
