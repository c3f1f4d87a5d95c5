"""
decision.py

Mini underwriting decision tool: grades the live metrics of a scenario
against hurdles and maps the score to PASS / REVIEW / DECLINE.

Scoring:
- XoL structure: ROL and payback checks (2) + combined ratio and ROE (2).
- Quota share structure: one ceded-share sanity check + combined ratio and ROE.
- The score is always shown out of 4, so a quota share scenario can reach
  at most REVIEW (3 / 4). This is the long-standing behaviour of the tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from .config import Hurdles, base_hurdles
from .fields import InputField as F
from .formatting import fmt_pct, fmt_years
from .model import (
    CombinedRatioResult,
    PaybackResult,
    QuotaShareResult,
    RoeResult,
    RolResult,
    calc_combined_ratio,
    calc_payback,
    calc_quota_share,
    calc_roe,
    calc_rol,
    calc_xol,
)
from .scenarios import StressMode
from .store import Scenario, set_stress

MAX_SCORE = 4
PASS_SCORE = 4
REVIEW_SCORE = 2

# Quota share cessions at or above this are flagged
QS_SHARE_CEILING = 0.6


class Structure(str, Enum):
    XOL = "xol"
    QUOTA_SHARE = "qs"

    @classmethod
    def from_raw(cls, raw: object) -> "Structure":
        """Anything other than "xol" is treated as quota share."""
        return cls.XOL if str(raw) == cls.XOL.value else cls.QUOTA_SHARE


class Outcome(str, Enum):
    PASS = "PASS"
    REVIEW = "REVIEW"
    DECLINE = "DECLINE"


@dataclass(frozen=True)
class DecisionCheck:
    name: str
    ok: bool
    detail: str


@dataclass(frozen=True)
class DecisionVerdict:
    score: int
    checks: Tuple[DecisionCheck, ...]
    outcome: Outcome
    max_score: int = MAX_SCORE


def outcome_for(score: int) -> Outcome:
    if score >= PASS_SCORE:
        return Outcome.PASS
    if score >= REVIEW_SCORE:
        return Outcome.REVIEW
    return Outcome.DECLINE


def score_checks(checks: Iterable[DecisionCheck]) -> int:
    """Number of passing checks; order does not matter."""
    return sum(1 for c in checks if c.ok)


def hurdles_from_scenario(s: Scenario) -> Hurdles:
    """Hurdles entered on the decision page; base hurdles fill any gaps."""
    base = base_hurdles()
    return Hurdles(
        target_rol=s.get(F.UW_TARGET_ROL, base.target_rol),
        max_payback=s.get(F.UW_MAX_PAYBACK, base.max_payback),
        max_cr=s.get(F.UW_MAX_CR, base.max_cr),
        min_roe=s.get(F.UW_MIN_ROE, base.min_roe),
    )


def structure_from_scenario(s: Scenario) -> Structure:
    return Structure.from_raw(s.raw(F.UW_USE_STRUCTURE))


def evaluate(
    structure: Structure,
    hurdles: Hurdles,
    rol: RolResult,
    payback: PaybackResult,
    cr: CombinedRatioResult,
    roe: RoeResult,
    qs: Optional[QuotaShareResult] = None,
) -> DecisionVerdict:
    """
    Grade one set of metric results. Undefined metrics fail their check.

    Args:
        structure: XoL grades ROL + payback, quota share grades the ceded share.
        hurdles: thresholds to compare against.
        qs: quota share result; when missing the ceded-share check fails.

    Returns:
        DecisionVerdict with checks in display order.
    """
    checks: List[DecisionCheck] = []

    if structure is Structure.XOL:
        checks.append(
            DecisionCheck(
                name="ROL vs target",
                ok=rol.rol.at_most(hurdles.target_rol),
                detail=f"{fmt_pct(float(rol.rol))} vs target {fmt_pct(hurdles.target_rol)}",
            )
        )
        checks.append(
            DecisionCheck(
                name="Payback vs max",
                ok=payback.years.at_most(hurdles.max_payback),
                detail=f"{fmt_years(float(payback.years))} vs max {fmt_years(hurdles.max_payback)}",
            )
        )
    else:
        share = qs.share if qs is not None else None
        checks.append(
            DecisionCheck(
                name="Ceded share sanity",
                ok=share is not None and bool(0 < share < QS_SHARE_CEILING),
                detail=f"QS share {fmt_pct(share)} (learning check)",
            )
        )

    checks.append(
        DecisionCheck(
            name="Combined Ratio",
            ok=cr.combined.at_most(hurdles.max_cr),
            detail=f"{fmt_pct(float(cr.combined))} vs max {fmt_pct(hurdles.max_cr)}",
        )
    )
    checks.append(
        DecisionCheck(
            name="ROE",
            ok=roe.roe.at_least(hurdles.min_roe),
            detail=f"{fmt_pct(float(roe.roe))} vs min {fmt_pct(hurdles.min_roe)}",
        )
    )

    score = score_checks(checks)
    return DecisionVerdict(score=score, checks=tuple(checks), outcome=outcome_for(score))


def run_decision(s: Scenario) -> DecisionVerdict:
    """Run the calculators the decision needs and grade them."""
    structure = structure_from_scenario(s)
    return evaluate(
        structure=structure,
        hurdles=hurdles_from_scenario(s),
        rol=calc_rol(s),
        payback=calc_payback(s),
        cr=calc_combined_ratio(s),
        roe=calc_roe(s),
        qs=calc_quota_share(s) if structure is Structure.QUOTA_SHARE else None,
    )


def key_outputs(s: Scenario) -> Dict[str, float]:
    """Headline figures shown next to the verdict (NaN where unavailable)."""
    out = {
        "combined_ratio": float(calc_combined_ratio(s).combined),
        "roe": float(calc_roe(s).roe),
    }

    if structure_from_scenario(s) is Structure.XOL:
        out["rol"] = float(calc_rol(s).rol)
        out["payback_years"] = float(calc_payback(s).years)
        out["xol_payout"] = calc_xol(s).payout
    else:
        qs = calc_quota_share(s)
        out["qs_ceded_prem"] = qs.ceded_prem
        out["qs_ceded_loss"] = qs.ceded_loss

    return out


def compare_stress_modes(s: Scenario) -> pd.DataFrame:
    """
    Re-run the decision under every stress mode, starting each time from the
    same unstressed inputs. One row per mode, one column per check.
    """
    rows = []
    for mode in StressMode:
        stressed = set_stress(s, mode)
        verdict = run_decision(stressed)
        outputs = key_outputs(stressed)

        row = {
            "stress": mode.value,
            "label": mode.label,
            "score": verdict.score,
            "outcome": verdict.outcome.value,
            "combined_ratio": outputs["combined_ratio"],
            "roe": outputs["roe"],
        }
        for check in verdict.checks:
            row[check.name] = check.ok
        rows.append(row)

    return pd.DataFrame(rows)


def first_broken_hurdles(s: Scenario, mode: StressMode) -> List[str]:
    """Checks that pass unstressed but fail under `mode`."""
    base = {c.name: c.ok for c in run_decision(set_stress(s, StressMode.NORMAL)).checks}
    stressed = run_decision(set_stress(s, mode)).checks
    return [c.name for c in stressed if base.get(c.name, False) and not c.ok]
