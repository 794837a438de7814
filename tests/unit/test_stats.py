import pytest

from mietpreis.services import stats
from mietpreis.services.normalize import normalize


@pytest.fixture
def dataset(row_factory):
    rows = []
    # 1990er: 5 Inserate, 1970er: 4 Inserate (unter der Mindestanzahl)
    for i in range(5):
        rows.append(row_factory(totalRent=1000 + i * 100, yearConstructed=1990 + i, regio1="Berlin",
                                condition="well_kept", baseRent=700, serviceCharge=200, heatingCosts=100))
    for i in range(4):
        rows.append(row_factory(totalRent=500, livingSpace=50, yearConstructed=1970 + i, regio1="Sachsen",
                                condition="negotiable", baseRent=400, serviceCharge=60, heatingCosts=40))
    rows.append(row_factory(totalRent=800, livingSpace=40, yearConstructed=2016, regio1="Bremen",
                            condition="", baseRent=0, serviceCharge=0, heatingCosts=0))
    return normalize(rows, current_year=2024)


def test_region_price_per_sqm_sorted_descending(dataset):
    out = stats.region_price_per_sqm(dataset)
    assert [d["region"] for d in out] == ["Bremen", "Berlin", "Sachsen"]
    assert out[0] == {"region": "Bremen", "avg_price_per_sqm": 20.0, "property_count": 1}
    assert out[1]["avg_price_per_sqm"] == 15.0
    assert out[1]["property_count"] == 5


def test_region_price_per_sqm_selection(dataset):
    out = stats.region_price_per_sqm(dataset, regions=["Sachsen"])
    assert [d["region"] for d in out] == ["Sachsen"]
    assert stats.region_price_per_sqm(dataset, regions=["All"]) == stats.region_price_per_sqm(dataset)


def test_region_rent_breakdown(dataset):
    out = stats.region_rent_breakdown(dataset)
    # Bremen hat nur 0-Komponenten -> fällt raus
    assert [d["region"] for d in out] == ["Berlin", "Sachsen"]
    assert out[0] == {"region": "Berlin", "avg_base_rent": 700.0, "avg_service_charge": 200.0,
                      "avg_heating_costs": 100.0, "total_rent": 1000.0}
    assert stats.region_rent_breakdown(dataset, condition="negotiable")[0]["region"] == "Sachsen"


def test_condition_distribution_excludes_placeholders(dataset):
    out = stats.condition_distribution(dataset)
    assert out == [{"name": "well_kept", "value": 5, "percentage": 50.0}]
    with_unknown = stats.condition_distribution(dataset, include_unknown=True)
    assert {"name": "Unknown", "value": 1, "percentage": 10.0} in with_unknown


def test_construction_year_histogram(dataset):
    out = stats.construction_year_histogram(dataset)
    assert out == [
        {"year": 1970, "count": 4, "year_range": "1970-1974"},
        {"year": 1990, "count": 5, "year_range": "1990-1994"},
        {"year": 2015, "count": 1, "year_range": "2015-2019"},
    ]


def test_rent_by_decade_requires_minimum_count(dataset):
    out = stats.rent_by_decade(dataset)
    assert out == [{"decade": "1990s", "decade_number": 1990, "avg_rent": 1200.0, "property_count": 5}]
    assert [d["decade"] for d in stats.rent_by_decade(dataset, min_count=1)] == ["1970s", "1990s", "2010s"]


def test_rent_by_decade_min_count_from_env(monkeypatch, dataset):
    monkeypatch.setenv("MIN_DECADE_COUNT", "4")
    assert [d["decade"] for d in stats.rent_by_decade(dataset)] == ["1970s", "1990s"]


def test_kpi_summary(dataset):
    kpis = stats.kpi_summary(dataset)
    assert kpis["total_properties"] == 10
    assert kpis["average_rent"] == round((6000 + 2000 + 800) / 10)
    assert kpis["total_regions"] == 3
    assert kpis["average_rooms"] == 3.0


def test_filter_records(dataset):
    assert len(stats.filter_records(dataset)) == 10
    assert len(stats.filter_records(dataset, regions=["Berlin", "Bremen"])) == 6
    assert len(stats.filter_records(dataset, regions=["All", "Berlin"])) == 10
    assert len(stats.filter_records(dataset, condition="negotiable")) == 4
    assert len(stats.filter_records(dataset, condition="All")) == 10


def test_available_values(dataset):
    assert stats.available_regions(dataset) == ["Berlin", "Bremen", "Sachsen"]
    assert stats.available_conditions(dataset) == ["negotiable", "well_kept"]


@pytest.mark.parametrize("reducer", [
    stats.region_price_per_sqm, stats.region_rent_breakdown, stats.condition_distribution,
    stats.construction_year_histogram, stats.rent_by_decade,
])
def test_reducers_on_empty_input(reducer):
    assert reducer([]) == []


def test_kpi_summary_empty():
    assert stats.kpi_summary([])["total_properties"] == 0


def test_reducers_are_deterministic(dataset):
    assert stats.region_price_per_sqm(dataset) == stats.region_price_per_sqm(list(dataset))
    assert stats.rent_by_decade(dataset) == stats.rent_by_decade(list(reversed(dataset)))
