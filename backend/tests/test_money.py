from decimal import Decimal

import pytest

from utils import line_amount, to_money


@pytest.mark.parametrize("quantity, rate, expected", [
    (1000, 5, "5000.00"),
    ("1234.5", "4.75", "5863.88"),
    ("0.125", 1, "0.13"),
    (0, "7.5", "0.00"),
    (None, 5, "0.00"),
])
def test_line_amount_rounds_half_up(quantity, rate, expected):
    assert line_amount(quantity, rate) == Decimal(expected)


def test_to_money_accepts_floats_and_none():
    assert to_money(0.1 + 0.2) == Decimal("0.30")
    assert to_money(None) == Decimal("0.00")
