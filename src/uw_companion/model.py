from __future__ import annotations

import operator
from dataclasses import dataclass, fields
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from .fields import InputField as F
from .outcome import MetricValue, combine, divide, ratio
from .scenarios import clamp
from .store import Scenario


# -----------------------------
# Result records
# -----------------------------
@dataclass(frozen=True)
class XolResult:
    loss: float
    attach: float
    limit: float
    payout: float


@dataclass(frozen=True)
class RolResult:
    premium: float
    limit: float
    rol: MetricValue


@dataclass(frozen=True)
class PaybackResult:
    premium: float
    exp_loss: float
    years: MetricValue


@dataclass(frozen=True)
class BurningCostResult:
    layer_losses: float
    years: float
    premium: float
    load: float
    burning_cost: MetricValue
    bc_rate: MetricValue
    loaded_rate: MetricValue


@dataclass(frozen=True)
class QuotaShareResult:
    gwp: float
    share: float
    losses: float
    ceded_prem: float
    ceded_loss: float
    net_prem: float
    net_loss: float


@dataclass(frozen=True)
class SurplusShareResult:
    sum_insured: float
    retention: float
    lines: float
    loss: float
    max_ceded: float
    ceded_share: float
    ceded_loss: float
    net_loss: float


@dataclass(frozen=True)
class ExposureLossCostResult:
    subject_premium: float
    elr: float
    layer_factor: float
    exp_gross_loss: float
    exp_layer_loss: float


@dataclass(frozen=True)
class CombinedRatioResult:
    """
    Underwriting profitability for the period, before investment income.
    All three ratios are Undefined together when earned premium is not positive.
    """
    losses: float
    earned_prem: float
    expenses: float
    loss_ratio: MetricValue
    exp_ratio: MetricValue
    combined: MetricValue


@dataclass(frozen=True)
class RoeResult:
    net_income: float
    equity: float
    roe: MetricValue


MetricResult = Union[
    XolResult,
    RolResult,
    PaybackResult,
    BurningCostResult,
    QuotaShareResult,
    SurplusShareResult,
    ExposureLossCostResult,
    CombinedRatioResult,
    RoeResult,
]


# -----------------------------
# Formulas
# -----------------------------
def xol_payout(loss: float, attach: float, limit: float) -> float:
    """Payout = min(max(loss - attach, 0), limit), never below 0."""
    return min(max(loss - attach, 0.0), max(limit, 0.0))


def surplus_ceded_share(sum_insured: float, retention: float, lines: float) -> float:
    """
    Share of a policy ceded under a surplus treaty: the part above retention,
    capped at `lines` multiples of retention. 0 for a non-positive sum insured.
    """
    if not sum_insured > 0:
        return 0.0
    max_ceded = retention * lines
    return clamp((sum_insured - retention) / sum_insured, 0.0, max_ceded / sum_insured)


# -----------------------------
# Calculators
# -----------------------------
def calc_xol(s: Scenario) -> XolResult:
    loss = s.get(F.XOL_LOSS)
    attach = s.get(F.XOL_ATTACH)
    limit = s.get(F.XOL_LIMIT)
    return XolResult(loss=loss, attach=attach, limit=limit, payout=xol_payout(loss, attach, limit))


def calc_rol(s: Scenario) -> RolResult:
    premium = s.get(F.ROL_PREMIUM)
    limit = s.get(F.ROL_LIMIT)
    return RolResult(premium=premium, limit=limit, rol=ratio(premium, limit, "limit <= 0"))


def calc_payback(s: Scenario) -> PaybackResult:
    premium = s.get(F.ROL_PREMIUM)
    exp_loss = s.get(F.ROL_EXP_LOSS)
    return PaybackResult(
        premium=premium,
        exp_loss=exp_loss,
        years=ratio(premium, exp_loss, "expected annual loss <= 0"),
    )


def calc_burning_cost(s: Scenario) -> BurningCostResult:
    """
    Annualised layer loss from history, as a rate on premium, then loaded
    for volatility / uncertainty / profit.
    """
    layer_losses = s.get(F.BC_LAYER_LOSSES)
    years = s.get(F.BC_YEARS)
    premium = s.get(F.BC_PREMIUM)
    load = s.get(F.BC_LOAD)

    burning_cost = ratio(layer_losses, years, "exposure period <= 0")
    bc_rate = divide(burning_cost, premium, "layer premium <= 0")
    loaded_rate = bc_rate.map(lambda r: r * (1.0 + load))

    return BurningCostResult(
        layer_losses=layer_losses,
        years=years,
        premium=premium,
        load=load,
        burning_cost=burning_cost,
        bc_rate=bc_rate,
        loaded_rate=loaded_rate,
    )


def calc_quota_share(s: Scenario) -> QuotaShareResult:
    gwp = s.get(F.QS_GWP)
    share = s.get(F.QS_SHARE)
    losses = s.get(F.QS_LOSSES)

    # Share is taken as entered; no clamp to [0, 1]
    ceded_prem = gwp * share
    ceded_loss = losses * share

    return QuotaShareResult(
        gwp=gwp,
        share=share,
        losses=losses,
        ceded_prem=ceded_prem,
        ceded_loss=ceded_loss,
        net_prem=gwp - ceded_prem,
        net_loss=losses - ceded_loss,
    )


def calc_surplus_share(s: Scenario) -> SurplusShareResult:
    sum_insured = s.get(F.SS_SUM_INSURED)
    retention = s.get(F.SS_RETENTION)
    lines = s.get(F.SS_LINES)
    loss = s.get(F.SS_LOSS)

    ceded_share = surplus_ceded_share(sum_insured, retention, lines)
    ceded_loss = loss * ceded_share

    return SurplusShareResult(
        sum_insured=sum_insured,
        retention=retention,
        lines=lines,
        loss=loss,
        max_ceded=retention * lines,
        ceded_share=ceded_share,
        ceded_loss=ceded_loss,
        net_loss=loss - ceded_loss,
    )


def calc_exposure_loss_cost(s: Scenario) -> ExposureLossCostResult:
    subject_premium = s.get(F.ELC_SUB_PREM)
    elr = s.get(F.ELC_ELR)
    layer_factor = s.get(F.ELC_LAYER_FACTOR)

    exp_gross_loss = subject_premium * elr

    return ExposureLossCostResult(
        subject_premium=subject_premium,
        elr=elr,
        layer_factor=layer_factor,
        exp_gross_loss=exp_gross_loss,
        exp_layer_loss=exp_gross_loss * layer_factor,
    )


def calc_combined_ratio(s: Scenario) -> CombinedRatioResult:
    losses = s.get(F.CR_LOSSES)
    earned_prem = s.get(F.CR_EARNED_PREM)
    expenses = s.get(F.CR_EXPENSES)

    loss_ratio = ratio(losses, earned_prem, "earned premium <= 0")
    exp_ratio = ratio(expenses, earned_prem, "earned premium <= 0")

    return CombinedRatioResult(
        losses=losses,
        earned_prem=earned_prem,
        expenses=expenses,
        loss_ratio=loss_ratio,
        exp_ratio=exp_ratio,
        combined=combine(loss_ratio, exp_ratio, operator.add),
    )


def calc_roe(s: Scenario) -> RoeResult:
    net_income = s.get(F.ROE_NET_INCOME)
    equity = s.get(F.ROE_EQUITY)
    return RoeResult(net_income=net_income, equity=equity, roe=ratio(net_income, equity, "equity <= 0"))


CALCULATORS = {
    "xol": calc_xol,
    "rol": calc_rol,
    "payback": calc_payback,
    "bc": calc_burning_cost,
    "qs": calc_quota_share,
    "ss": calc_surplus_share,
    "elc": calc_exposure_loss_cost,
    "cr": calc_combined_ratio,
    "roe": calc_roe,
}


def run_all(s: Scenario) -> Dict[str, MetricResult]:
    """Every calculator against one snapshot, keyed like CALCULATORS."""
    return {name: calc(s) for name, calc in CALCULATORS.items()}


# -----------------------------
# Flat export
# -----------------------------
def result_to_dict(r: MetricResult) -> Dict[str, float]:
    """Convert a result to a flat dict of raw numbers (NaN where undefined)."""
    return {f.name: float(getattr(r, f.name)) for f in fields(r)}


def results_table(s: Scenario) -> pd.DataFrame:
    """Long-format table of every calculator output for one snapshot."""
    rows: List[dict] = []
    for name, result in run_all(s).items():
        for metric, value in result_to_dict(result).items():
            rows.append(
                {
                    "calculator": name,
                    "metric": metric,
                    "value": value,
                    "available": bool(np.isfinite(value)),
                }
            )
    return pd.DataFrame(rows, columns=["calculator", "metric", "value", "available"])
