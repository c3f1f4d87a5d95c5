from __future__ import annotations

from typing import Optional

import numpy as np

UNAVAILABLE = "—"


def _missing(x: Optional[float]) -> bool:
    return x is None or bool(np.isnan(float(x)))


def fmt_money(x: Optional[float], ccy: str = "USD") -> str:
    """Currency label plus amount; whole units from 1,000 upwards."""
    if _missing(x):
        return UNAVAILABLE
    digits = 0 if abs(x) >= 1e3 else 2
    return f"{ccy} {x:,.{digits}f}"


def fmt_pct(x: Optional[float]) -> str:
    if _missing(x):
        return UNAVAILABLE
    return f"{x * 100:.2f}%"


def fmt_years(x: Optional[float]) -> str:
    if _missing(x):
        return UNAVAILABLE
    return f"{x:.2f} yrs"
