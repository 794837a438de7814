import math

import pytest

from mietpreis.coercion import clean_field, parse_float, round_half_up, to_amount, to_bool


def test_clean_field_trims_and_unquotes():
    assert clean_field('  "Berlin" ') == "Berlin"
    assert clean_field("'yes'") == "yes"
    assert clean_field('"') == '"'
    assert clean_field(None) == ""


@pytest.mark.parametrize("value, expected", [
    ("12.5", 12.5), (" 7 ", 7.0), ('"850"', 850.0), (3, 3.0),
    ("", None), ("abc", None), ("nan", None), ("inf", None), (None, None), (True, None),
])
def test_parse_float(value, expected):
    assert parse_float(value) == expected


def test_to_amount_clamps_invalid_values_to_zero():
    assert to_amount("-5") == 0.0
    assert to_amount(float("nan")) == 0.0
    assert to_amount(math.inf) == 0.0
    assert to_amount("42") == 42.0


@pytest.mark.parametrize("value", [True, "true", "TRUE", " yes ", '"Yes"'])
def test_to_bool_truthy(value):
    assert to_bool(value) is True


@pytest.mark.parametrize("value", [False, None, "", "false", "no", "1", "ja", 1])
def test_to_bool_everything_else_is_false(value):
    assert to_bool(value) is False


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(1815.5) == 1816
    assert round_half_up(-0.5) == 0
    assert round_half_up(1816.49) == 1816
