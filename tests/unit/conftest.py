import pytest

from mietpreis.services.normalize import normalize


def make_row(**overrides):
    row = {
        "totalRent": "1000",
        "baseRent": "800",
        "livingSpace": "80",
        "noRooms": "3",
        "yearConstructed": "1995",
        "serviceCharge": "150",
        "heatingCosts": "50",
        "regio1": "Berlin",
        "condition": "well_kept",
        "balcony": "False",
        "garden": "False",
        "lift": "False",
    }
    row.update({k: str(v) for k, v in overrides.items()})
    return row


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def raw_rows():
    return [
        make_row(totalRent="1200", regio1="Berlin", balcony="True"),
        make_row(totalRent="2400", regio1="Berlin", lift="yes"),
        make_row(totalRent="600", livingSpace="60", regio1="Sachsen", condition="first_time_use"),
        make_row(totalRent="900", regio1="Baden_WÃ¼rttemberg", garden="TRUE", yearConstructed="1972"),
        make_row(totalRent="0", regio1="Hamburg"),
        make_row(livingSpace="abc", regio1="Hamburg"),
    ]


@pytest.fixture
def records(raw_rows):
    return normalize(raw_rows, current_year=2024)
