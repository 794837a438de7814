# KEIN: from __future__ import annotations (SQLModel braucht echte Annotationen)
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from sqlmodel import SQLModel, Field

from .coercion import to_amount, to_bool

AMENITIES = ("balcony", "garden", "lift")

# Spalten des Kaggle-Exports (immo_data) -> Spalten in listings_raw
RAW_COLUMNS: Dict[str, str] = {
    "totalRent": "total_rent",
    "baseRent": "base_rent",
    "livingSpace": "living_space",
    "noRooms": "no_rooms",
    "yearConstructed": "year_constructed",
    "serviceCharge": "service_charge",
    "heatingCosts": "heating_costs",
    "regio1": "regio1",
    "condition": "condition",
    "balcony": "balcony",
    "garden": "garden",
    "lift": "lift",
}


class ListingRaw(SQLModel, table=True):
    """Rohinserat, alle Werte unverändert als String."""
    __tablename__ = "listings_raw"
    id: Optional[int] = Field(default=None, primary_key=True)
    source: Optional[str] = Field(default="kaggle", index=True)           # z.B. 'kaggle' / 'upload'
    total_rent: Optional[str] = None
    base_rent: Optional[str] = None
    living_space: Optional[str] = None
    no_rooms: Optional[str] = None
    year_constructed: Optional[str] = None
    service_charge: Optional[str] = None
    heating_costs: Optional[str] = None
    regio1: Optional[str] = Field(default=None, index=True)               # Bundesland
    condition: Optional[str] = None
    balcony: Optional[str] = None
    garden: Optional[str] = None
    lift: Optional[str] = None
    extra_json: Optional[str] = None                                      # JSON-String für sonstige Spalten


@dataclass(frozen=True)
class PropertyRecord:
    """Bereinigtes, vollständig validiertes Inserat."""
    total_rent: float
    base_rent: float
    service_charge: float
    heating_costs: float
    living_space: float
    no_rooms: float
    year_constructed: int
    price_per_sqm: float
    region: str
    condition: str
    balcony: bool
    garden: bool
    lift: bool

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PredictionScenario:
    living_space: float = 0.0
    no_rooms: float = 0.0
    region: str = ""
    balcony: bool = False
    garden: bool = False
    lift: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PredictionScenario":
        """Szenario aus Formular-/Zeilendaten; akzeptiert auch die CSV-Spaltennamen."""
        def first(*keys):
            for k in keys:
                if k in data and data[k] is not None:
                    return data[k]
            return None

        region = first("region", "regio1")
        return cls(
            living_space=to_amount(first("living_space", "livingSpace")),
            no_rooms=to_amount(first("no_rooms", "noRooms", "rooms")),
            region="" if region is None else str(region),
            balcony=to_bool(first("balcony")),
            garden=to_bool(first("garden")),
            lift=to_bool(first("lift")),
        )

    @classmethod
    def from_record(cls, record: PropertyRecord) -> "PredictionScenario":
        return cls(
            living_space=record.living_space,
            no_rooms=record.no_rooms,
            region=record.region,
            balcony=record.balcony,
            garden=record.garden,
            lift=record.lift,
        )


@dataclass(frozen=True)
class ScenarioResult:
    name: str
    predicted_rent: int
    has_feature: bool
    feature_type: str

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
