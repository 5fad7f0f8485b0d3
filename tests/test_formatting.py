import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from print_quote.engine.formatting import format_currency, format_duration, round_half_up


@pytest.mark.parametrize("hours,expected", [
    (0.5, "30 min"),
    (0, "0 min"),
    (0.25, "15 min"),
    (1, "1.0 hours"),
    (2.3, "2.3 hours"),
    (23.94, "23.9 hours"),
    (24, "1d 0.0h"),
    (30, "1d 6.0h"),
    (66.66, "2d 18.7h"),
])
def test_format_duration(hours, expected):
    assert format_duration(hours) == expected


def test_remainder_rounding_up_to_a_full_day_carries():
    assert format_duration(47.98) == "2d 0.0h"


@pytest.mark.parametrize("hours", [-1, float("nan"), float("inf")])
def test_format_duration_rejects_bad_hours(hours):
    with pytest.raises(ValueError):
        format_duration(hours)


@pytest.mark.parametrize("amount,currency,expected", [
    (2360, "PLN", "2360.00 PLN"),
    (808.0, "PLN", "808.00 PLN"),
    (0.005, "PLN", "0.01 PLN"),
    (12.3456, "EUR", "12.35 EUR"),
])
def test_format_currency(amount, currency, expected):
    assert format_currency(amount, currency) == expected


def test_format_currency_defaults_to_pln():
    assert format_currency(21240) == "21240.00 PLN"


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(40.05, 1) == 40.1
    assert round_half_up(1.0395, 3) == 1.04


def test_round_half_up_keeps_every_digit_of_large_values():
    assert round_half_up(2.36e28, 2) == 2.36e28
    assert round_half_up(1.652e300, 2) == 1.652e300
    assert format_currency(2.36e28) == f"{2.36e28:.2f} PLN"


def test_round_half_up_passes_non_finite_through():
    assert round_half_up(float("inf"), 2) == float("inf")
