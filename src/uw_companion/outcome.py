"""
outcome.py

A derived metric is either a Value or Undefined. Undefined carries the reason
(e.g. a non-positive denominator), exports as NaN and fails every hurdle.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union

import numpy as np


@dataclass(frozen=True)
class Value:
    amount: float

    @property
    def defined(self) -> bool:
        return True

    def __float__(self) -> float:
        return float(self.amount)

    def at_most(self, cap: float) -> bool:
        return bool(self.amount <= cap)

    def at_least(self, floor: float) -> bool:
        return bool(self.amount >= floor)

    def map(self, fn: Callable[[float], float]) -> "MetricValue":
        return Value(fn(self.amount))


@dataclass(frozen=True)
class Undefined:
    reason: str

    @property
    def defined(self) -> bool:
        return False

    @property
    def amount(self) -> float:
        return np.nan

    def __float__(self) -> float:
        return np.nan

    def at_most(self, cap: float) -> bool:
        return False

    def at_least(self, floor: float) -> bool:
        return False

    def map(self, fn: Callable[[float], float]) -> "MetricValue":
        return self


MetricValue = Union[Value, Undefined]


def divide(numerator: MetricValue, denominator: float, reason: str) -> MetricValue:
    """numerator / denominator, Undefined when the denominator is not positive."""
    if not denominator > 0:
        return Undefined(reason)
    return numerator.map(lambda x: x / denominator)


def ratio(numerator: float, denominator: float, reason: str) -> MetricValue:
    return divide(Value(numerator), denominator, reason)


def combine(
    a: MetricValue, b: MetricValue, fn: Callable[[float, float], float]
) -> MetricValue:
    """Apply fn to two values; the first Undefined wins."""
    if isinstance(a, Undefined):
        return a
    if isinstance(b, Undefined):
        return b
    return Value(fn(a.amount, b.amount))
