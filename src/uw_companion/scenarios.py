"""
scenarios.py

Stress modes for the underwriting calculators.
Each mode scales the raw value of a field before any calculator sees it.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from .fields import FieldClass, InputField, field_class

# Upper bound for a stressed expected loss ratio
ELR_CAP = 0.999


class StressMode(str, Enum):
    NORMAL = "normal"
    CAT_YEAR = "cat"
    BAD_DEVELOPMENT = "baddev"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    StressMode.NORMAL: "Normal",
    StressMode.CAT_YEAR: "Cat year",
    StressMode.BAD_DEVELOPMENT: "Bad development",
}


def clamp(x: float, low: float, high: float) -> float:
    return max(low, min(high, x))


def apply_cat_year(field: Union[InputField, str], value: float) -> float:
    """
    Cat year scenario:
    - Occurrence / aggregate losses +35%
    - Expected loss ratio +10%, capped below 100%
    - Premium unchanged so the effect shows up in the ratios
    """
    kind = field_class(field)

    if kind is FieldClass.LOSS:
        return value * 1.35
    if kind is FieldClass.RATIO:
        return clamp(value * 1.10, 0.0, ELR_CAP)

    return value


def apply_bad_development(field: Union[InputField, str], value: float) -> float:
    """
    Bad development scenario:
    - Loss creep +18% (long-tail reserving)
    - Expense creep +6%
    - Expected loss ratio +8%, capped below 100%
    """
    kind = field_class(field)

    if kind is FieldClass.LOSS:
        return value * 1.18
    if kind is FieldClass.EXPENSE:
        return value * 1.06
    if kind is FieldClass.RATIO:
        return clamp(value * 1.08, 0.0, ELR_CAP)

    return value


def apply_stress(
    field: Union[InputField, str],
    value: float,
    mode: Union[StressMode, str],
) -> float:
    """Return the stressed value of one field. Pure; never chains modes."""
    mode = StressMode(mode)

    if mode is StressMode.CAT_YEAR:
        return apply_cat_year(field, value)
    if mode is StressMode.BAD_DEVELOPMENT:
        return apply_bad_development(field, value)

    return value
