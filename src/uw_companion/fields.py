"""
fields.py

Catalogue of every input the calculators read. Each field carries its storage
key, the default its calculator falls back to, and the class the stress
transform keys off.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Union


class FieldClass(str, Enum):
    LOSS = "loss"
    EXPENSE = "expense"
    RATIO = "ratio"
    OTHER = "other"


# Keys with their own stress treatment
EXPENSE_KEY = "cr.expenses"
ELR_KEY = "elc.elr"


def classify_key(key: str) -> FieldClass:
    """
    Classify a free-form key the way the stress transform always has:
    any key containing "loss" or "losses" (case-sensitive) is loss-like,
    so "rol.expLoss" and "bc.layerLosses" are not.
    """
    if "loss" in key or "losses" in key:
        return FieldClass.LOSS
    if key == EXPENSE_KEY:
        return FieldClass.EXPENSE
    if key == ELR_KEY:
        return FieldClass.RATIO
    return FieldClass.OTHER


class InputField(Enum):
    # XoL layer
    XOL_LOSS = ("xol.loss", 0.0, FieldClass.LOSS)
    XOL_ATTACH = ("xol.attach", 0.0, FieldClass.OTHER)
    XOL_LIMIT = ("xol.limit", 0.0, FieldClass.OTHER)

    # ROL & payback
    ROL_PREMIUM = ("rol.premium", 0.0, FieldClass.OTHER)
    ROL_LIMIT = ("rol.limit", 0.0, FieldClass.OTHER)
    ROL_EXP_LOSS = ("rol.expLoss", 0.0, FieldClass.OTHER)

    # Burning cost
    BC_LAYER_LOSSES = ("bc.layerLosses", 0.0, FieldClass.OTHER)
    BC_YEARS = ("bc.years", 1.0, FieldClass.OTHER)
    BC_PREMIUM = ("bc.premium", 0.0, FieldClass.OTHER)
    BC_LOAD = ("bc.load", 0.20, FieldClass.OTHER)

    # Quota share
    QS_GWP = ("qs.gwp", 0.0, FieldClass.OTHER)
    QS_SHARE = ("qs.share", 0.25, FieldClass.OTHER)
    QS_LOSSES = ("qs.losses", 0.0, FieldClass.LOSS)

    # Surplus share
    SS_SUM_INSURED = ("ss.sumInsured", 0.0, FieldClass.OTHER)
    SS_RETENTION = ("ss.retention", 0.0, FieldClass.OTHER)
    SS_LINES = ("ss.lines", 0.0, FieldClass.OTHER)
    SS_LOSS = ("ss.loss", 0.0, FieldClass.LOSS)

    # Exposure loss cost
    ELC_SUB_PREM = ("elc.subPrem", 0.0, FieldClass.OTHER)
    ELC_ELR = ("elc.elr", 0.60, FieldClass.RATIO)
    ELC_LAYER_FACTOR = ("elc.layerFactor", 0.10, FieldClass.OTHER)

    # Combined ratio
    CR_LOSSES = ("cr.losses", 0.0, FieldClass.LOSS)
    CR_EARNED_PREM = ("cr.earnedPrem", 0.0, FieldClass.OTHER)
    CR_EXPENSES = ("cr.expenses", 0.0, FieldClass.EXPENSE)

    # ROE
    ROE_NET_INCOME = ("roe.netIncome", 0.0, FieldClass.OTHER)
    ROE_EQUITY = ("roe.equity", 0.0, FieldClass.OTHER)

    # Decision tool
    UW_TARGET_ROL = ("uw.targetROL", 0.18, FieldClass.OTHER)
    UW_MAX_PAYBACK = ("uw.maxPayback", 2.5, FieldClass.OTHER)
    UW_MAX_CR = ("uw.maxCR", 1.00, FieldClass.OTHER)
    UW_MIN_ROE = ("uw.minROE", 0.10, FieldClass.OTHER)
    UW_USE_STRUCTURE = ("uw.useStructure", "xol", FieldClass.OTHER)

    def __init__(self, key: str, default: Union[float, str], field_class: FieldClass):
        self.key = key
        self.default = default
        self.field_class = field_class

    @classmethod
    def from_key(cls, key: str) -> Optional["InputField"]:
        return _BY_KEY.get(key)


_BY_KEY: Dict[str, InputField] = {f.key: f for f in InputField}


def field_key(field: Union[InputField, str]) -> str:
    return field.key if isinstance(field, InputField) else field


def field_class(field: Union[InputField, str]) -> FieldClass:
    """Static class for catalogue fields, substring rule for anything else."""
    if isinstance(field, InputField):
        return field.field_class
    known = InputField.from_key(field)
    return known.field_class if known is not None else classify_key(field)
