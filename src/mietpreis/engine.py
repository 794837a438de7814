from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .ml.impact import amenity_rent_comparison, compare_scenarios, estimate_impacts, smooth_scenarios
from .ml.pricing import RentCoefficients, RentModel, ScenarioLike
from .models import PropertyRecord, ScenarioResult
from .services import stats
from .services.normalize import normalize

logger = logging.getLogger(__name__)


class NoDataError(RuntimeError):
    """Keine einzige verwertbare Zeile im Datensatz."""


@dataclass
class EstimationSession:
    """Bereinigte Inserate + trainiertes Modell einer Sitzung (explizit weitergereicht, kein globaler Cache)."""
    records: List[PropertyRecord]
    model: RentModel
    _impacts: Optional[Dict[str, int]] = field(default=None, repr=False)
    _impacts_source: Optional[Tuple[RentModel, int]] = field(default=None, repr=False)

    @property
    def regions(self) -> List[str]:
        return stats.available_regions(self.records)

    def predict(self, scenario: ScenarioLike) -> int:
        return self.model.predict(scenario)

    def estimate_impacts(self) -> Dict[str, int]:
        # neu rechnen, sobald das Modell getauscht oder neu trainiert wurde
        source = self._impacts_source
        if source is None or source[0] is not self.model or source[1] != self.model.train_runs:
            self._impacts = estimate_impacts(self.model, self.records)
            self._impacts_source = (self.model, self.model.train_runs)
        return dict(self._impacts)

    def compare_scenarios(self, living_space, rooms, region) -> List[ScenarioResult]:
        return compare_scenarios(self.model, living_space, rooms, region)

    def chart_scenarios(self, living_space, rooms, region) -> List[ScenarioResult]:
        return smooth_scenarios(self.compare_scenarios(living_space, rooms, region))

    def dashboard(self, regions: Optional[Iterable[str]] = None,
                  condition: Optional[str] = None) -> Dict[str, Any]:
        """Alle Dashboard-Aggregationen; KPIs global, Rest auf der gefilterten Menge."""
        regions = list(regions or [])
        filtered = stats.filter_records(self.records, regions=regions, condition=condition)
        return {
            "kpis": stats.kpi_summary(self.records),
            "price_per_sqm_by_region": stats.region_price_per_sqm(filtered, regions=regions),
            "rent_breakdown_by_region": stats.region_rent_breakdown(filtered),
            "condition_distribution": stats.condition_distribution(filtered),
            "construction_years": stats.construction_year_histogram(filtered),
            "rent_by_decade": stats.rent_by_decade(filtered),
            "amenity_rents": amenity_rent_comparison(filtered),
        }


def build_session(
    raw_rows: Sequence[Mapping[str, Any]],
    coefficients: Optional[RentCoefficients] = None,
    current_year: Optional[int] = None,
) -> EstimationSession:
    records = normalize(raw_rows, current_year=current_year)
    if not records:
        raise NoDataError(f"Keine verwertbaren Inserate gefunden ({len(raw_rows)} Zeilen gelesen).")
    model = RentModel(coefficients=coefficients)
    model.train(records)
    logger.info("Sitzung bereit: %d von %d Zeilen verwertbar", len(records), len(raw_rows))
    return EstimationSession(records=records, model=model)
