from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Union

import pandas as pd

from .. import config
from ..coercion import round_half_up, to_amount, to_bool
from ..models import PredictionScenario, PropertyRecord
from ..services.regions import canonicalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RentCoefficients:
    base: float
    living_space: float
    rooms: float
    balcony: float
    garden: float
    lift: float

    def for_amenity(self, amenity: str) -> float:
        return getattr(self, amenity)


# Zwei Koeffizientensätze existieren nebeneinander (Balkon 212 vs. 48, Lift 332 vs. 32).
COEFFICIENT_SETS: Dict[str, RentCoefficients] = {
    "standard": RentCoefficients(base=800, living_space=8.2, rooms=120, balcony=212, garden=65, lift=332),
    "reduced": RentCoefficients(base=800, living_space=8.2, rooms=120, balcony=48, garden=65, lift=32),
}


def get_coefficients(name: Optional[str] = None) -> RentCoefficients:
    """Koeffizientensatz nach Name; ohne Name gilt RENT_COEFFICIENT_SET (Default 'standard')."""
    key = (name or config.coefficient_set_name()).strip().lower()
    try:
        return COEFFICIENT_SETS[key]
    except KeyError:
        raise ValueError(f"Unbekannter Koeffizientensatz '{key}' (erlaubt: {sorted(COEFFICIENT_SETS)})")


ScenarioLike = Union[PredictionScenario, Mapping[str, Any]]


class RentModel:
    """
    Feste Linearformel × Regionsfaktor.

    Untrained: jeder Regionsfaktor ist 1.0.
    train() ersetzt die Faktortabelle komplett: Faktor = Ø totalRent der Region / baseline_rent.
    """

    def __init__(self, coefficients: Optional[RentCoefficients] = None,
                 baseline_rent: Optional[float] = None):
        self.coefficients = coefficients or get_coefficients()
        self.baseline_rent = baseline_rent if baseline_rent is not None else config.baseline_rent()
        self._multipliers: Dict[str, float] = {}
        self._trained = False
        self._train_runs = 0

    @property
    def is_trained(self) -> bool:
        return self._trained

    @property
    def multipliers(self) -> Dict[str, float]:
        return dict(self._multipliers)

    @property
    def train_runs(self) -> int:
        """Anzahl erfolgreicher train()-Läufe (für Caches beim Aufrufer)."""
        return self._train_runs

    def train(self, records: Sequence[PropertyRecord]) -> None:
        if not records:
            logger.info("train() ohne Datensätze – Modell bleibt unverändert")
            return
        df = pd.DataFrame({
            "region": [canonicalize(r.region) for r in records],
            "total_rent": [r.total_rent for r in records],
        })
        avg = df.groupby("region", sort=True)["total_rent"].mean()
        self._multipliers = {
            str(region): (float(a) / self.baseline_rent if a > 0 and math.isfinite(a / self.baseline_rent) else 1.0)
            for region, a in avg.items()
        }
        self._trained = True
        self._train_runs += 1
        logger.info("Regionsfaktoren für %d Regionen aus %d Inseraten berechnet",
                    len(self._multipliers), len(records))

    def multiplier_for(self, region: Optional[str]) -> float:
        return self._multipliers.get(canonicalize(region), 1.0)

    def base_price(self, scenario: PredictionScenario) -> float:
        """Linearformel ohne Regionsfaktor."""
        c = self.coefficients
        raw = (c.base
               + c.living_space * to_amount(scenario.living_space)
               + c.rooms * to_amount(scenario.no_rooms))
        if to_bool(scenario.balcony):
            raw += c.balcony
        if to_bool(scenario.garden):
            raw += c.garden
        if to_bool(scenario.lift):
            raw += c.lift
        return raw

    def predict(self, scenario: ScenarioLike) -> int:
        if not isinstance(scenario, PredictionScenario):
            scenario = PredictionScenario.from_mapping(scenario if isinstance(scenario, Mapping) else {})
        value = self.base_price(scenario) * self.multiplier_for(scenario.region)
        if not math.isfinite(value):
            # Überlauf -> ohne Regionsfaktor, notfalls Fläche/Zimmer als 0
            value = self.base_price(scenario)
        if not math.isfinite(value):
            value = self.base_price(replace(scenario, living_space=0.0, no_rooms=0.0))
        return round_half_up(value)
