import math

import pytest

from uw_companion.formatting import UNAVAILABLE, fmt_money, fmt_pct, fmt_years
from uw_companion.outcome import Undefined, Value, combine, ratio


def test_fmt_money():
    assert fmt_money(15_000_000, "USD") == "USD 15,000,000"
    assert fmt_money(12.5, "BMD") == "BMD 12.50"
    assert fmt_money(-2_500, "GBP") == "GBP -2,500"


def test_fmt_pct_and_years():
    assert fmt_pct(0.175) == "17.50%"
    assert fmt_years(1_800_000 / 900_000) == "2.00 yrs"


@pytest.mark.parametrize("fmt", [fmt_pct, fmt_years, lambda x: fmt_money(x, "USD")])
@pytest.mark.parametrize("x", [None, float("nan"), float(Undefined("equity <= 0"))])
def test_unavailable_marker(fmt, x):
    assert fmt(x) == UNAVAILABLE


def test_undefined_fails_every_comparison():
    u = ratio(1.0, 0.0, "denominator <= 0")
    assert isinstance(u, Undefined)
    assert not u.at_most(float("inf"))
    assert not u.at_least(float("-inf"))
    assert math.isnan(u.amount)


def test_combine_keeps_first_undefined():
    first = Undefined("a")
    assert combine(first, Undefined("b"), lambda x, y: x + y) is first
    assert combine(Value(1.0), Value(2.0), lambda x, y: x + y) == Value(3.0)


def test_infinite_values_are_still_shown():
    assert fmt_pct(float("inf")) == "inf%"
    assert fmt_years(float("-inf")) == "-inf yrs"
    assert fmt_money(float("inf"), "USD") != UNAVAILABLE
