from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import streamlit as st


# -----------------------------
# Repo path setup (robust)
# -----------------------------
def add_src_to_path() -> Path:
    """
    Ensure src/ is on sys.path so `import uw_companion` works when running
    Streamlit from a plain checkout.
    """
    here = Path(__file__).resolve()
    repo_root = here.parents[1]  # app/ -> repo root
    src = repo_root / "src"

    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    return repo_root


REPO_ROOT = add_src_to_path()

from uw_companion.config import settings
from uw_companion.decision import (
    Outcome,
    Structure,
    compare_stress_modes,
    first_broken_hurdles,
    key_outputs,
    run_decision,
    structure_from_scenario,
)
from uw_companion.fields import InputField as F
from uw_companion.formatting import fmt_money, fmt_pct, fmt_years
from uw_companion.model import (
    calc_burning_cost,
    calc_combined_ratio,
    calc_exposure_loss_cost,
    calc_quota_share,
    calc_roe,
    calc_rol,
    calc_payback,
    calc_surplus_share,
    calc_xol,
)
from uw_companion.presets import get_preset, list_preset_keys
from uw_companion.scenarios import StressMode
from uw_companion.store import (
    apply_preset,
    restore_session,
    save_scenario,
    set_active_tab,
    set_currency,
    set_input,
    set_stress,
)

logging.basicConfig(level=settings.LOG_LEVEL)

TABS = {
    "uw": "Decision Tool",
    "xol": "XoL Layer",
    "rol": "ROL & Payback",
    "bc": "Burning Cost",
    "qs": "Quota Share",
    "ss": "Surplus Share",
    "elc": "Exposure Loss Cost",
    "cr": "Combined Ratio",
    "roe": "ROE",
}

BADGE = {Outcome.PASS: "✅", Outcome.REVIEW: "⚠️", Outcome.DECLINE: "⛔"}


# -----------------------------
# Scenario state
# -----------------------------
def scenario():
    if "scenario" not in st.session_state:
        st.session_state["scenario"] = restore_session()
    return st.session_state["scenario"]


def commit(next_scenario) -> None:
    """Replace the snapshot and persist it; Streamlit reruns afterwards."""
    st.session_state["scenario"] = next_scenario
    save_scenario(next_scenario)


def _on_field(key: str) -> None:
    commit(set_input(scenario(), key, st.session_state[f"in::{key}"]))


def _on_preset() -> None:
    commit(apply_preset(scenario(), st.session_state["preset"]))
    for f in F:
        st.session_state.pop(f"in::{f.key}", None)


def _on_stress() -> None:
    commit(set_stress(scenario(), st.session_state["stress"]))


def _on_ccy() -> None:
    commit(set_currency(scenario(), st.session_state["ccy"]))


def _on_tab() -> None:
    commit(set_active_tab(scenario(), st.session_state["tab"]))


def input_field(field: F, label: str, help: str) -> None:
    """Free-text numeric input; thousands separators are accepted."""
    raw = scenario().raw(field, "")
    st.text_input(
        label,
        value=str(raw),
        help=help,
        key=f"in::{field.key}",
        on_change=_on_field,
        args=(field.key,),
    )


def kv_table(rows) -> None:
    st.dataframe(pd.DataFrame(rows, columns=["Metric", "Value"]), use_container_width=True, hide_index=True)


# -----------------------------
# Pages
# -----------------------------
def render_uw() -> None:
    s = scenario()
    ccy = s.ccy
    structure = structure_from_scenario(s)

    st.subheader("Mini Underwriting Decision Tool")
    st.caption("Set targets, stress the scenario, and see if the structure still holds.")

    options = [Structure.XOL.value, Structure.QUOTA_SHARE.value]
    st.session_state.setdefault(f"in::{F.UW_USE_STRUCTURE.key}", structure.value)
    st.selectbox(
        "Structure",
        options=options,
        format_func=lambda v: "XoL Layer" if v == Structure.XOL.value else "Quota Share",
        key=f"in::{F.UW_USE_STRUCTURE.key}",
        on_change=_on_field,
        args=(F.UW_USE_STRUCTURE.key,),
    )

    c1, c2 = st.columns(2)
    with c1:
        if structure is Structure.XOL:
            input_field(F.UW_TARGET_ROL, "Target ROL (max)", "Acceptable premium ÷ limit.")
        input_field(F.UW_MAX_CR, "Max Combined Ratio", "Underwriting-only profitability hurdle.")
    with c2:
        if structure is Structure.XOL:
            input_field(F.UW_MAX_PAYBACK, "Max Payback (years)", "Premium ÷ expected annual loss.")
        input_field(F.UW_MIN_ROE, "Min ROE", "Capital efficiency hurdle.")

    verdict = run_decision(s)
    st.divider()
    st.markdown(f"### {BADGE[verdict.outcome]} Decision: {verdict.outcome.value}")
    st.caption(f"Score: {verdict.score} / {verdict.max_score}")
    for check in verdict.checks:
        st.write(f"{'✅' if check.ok else '⚠️'} **{check.name}**: {check.detail}")

    st.divider()
    st.subheader("Key outputs at a glance")
    out = key_outputs(s)
    rows = [
        ("Combined Ratio", fmt_pct(out["combined_ratio"])),
        ("ROE", fmt_pct(out["roe"])),
    ]
    if structure is Structure.XOL:
        rows += [
            ("ROL", fmt_pct(out["rol"])),
            ("Payback", fmt_years(out["payback_years"])),
            ("Example Layer Payout (current loss)", fmt_money(out["xol_payout"], ccy)),
        ]
    else:
        rows += [
            ("Ceded Premium (QS)", fmt_money(out["qs_ceded_prem"], ccy)),
            ("Ceded Loss (QS)", fmt_money(out["qs_ceded_loss"], ccy)),
        ]
    kv_table(rows)

    render_stress_comparison()


def render_stress_comparison() -> None:
    s = scenario()
    st.divider()
    st.subheader("Stress comparison")
    st.caption("Which hurdle breaks first when the year turns bad?")

    table = compare_stress_modes(s)
    st.dataframe(table, use_container_width=True, hide_index=True)

    for mode in (StressMode.CAT_YEAR, StressMode.BAD_DEVELOPMENT):
        broken = first_broken_hurdles(s, mode)
        if broken:
            st.write(f"**{mode.label}** breaks: {', '.join(broken)}")

    fig, ax = plt.subplots(figsize=(8, 3.5))
    x = np.arange(len(table))
    ax.bar(x - 0.2, table["combined_ratio"], width=0.4, label="Combined ratio")
    ax.bar(x + 0.2, table["roe"], width=0.4, label="ROE")
    ax.axhline(s.get(F.UW_MAX_CR), linestyle="--", linewidth=1.5)
    ax.set_xticks(x)
    ax.set_xticklabels(table["label"])
    ax.set_ylabel("Ratio")
    ax.set_title("Portfolio ratios by stress mode")
    ax.legend()
    st.pyplot(fig)


def render_xol() -> None:
    r = calc_xol(scenario())
    st.subheader("Excess of Loss (XoL) Layer")
    st.caption("Payout = min(max(Loss − Attachment, 0), Limit)")
    c = st.columns(3)
    with c[0]:
        input_field(F.XOL_LOSS, "Loss Amount (Occurrence)", "The claim amount for the event.")
    with c[1]:
        input_field(F.XOL_ATTACH, "Attachment", "Reinsurer pays above this point.")
    with c[2]:
        input_field(F.XOL_LIMIT, "Limit", "Maximum the layer pays above attachment.")
    kv_table([("Layer payout", fmt_money(r.payout, scenario().ccy))])


def render_rol() -> None:
    s = scenario()
    r = calc_rol(s)
    pb = calc_payback(s)
    st.subheader("Rate on Line (ROL) & Payback")
    st.caption("ROL = Premium ÷ Limit. Payback = Premium ÷ Expected Annual Loss.")
    c = st.columns(3)
    with c[0]:
        input_field(F.ROL_PREMIUM, "Reinsurance Premium", "Annual premium for this layer.")
    with c[1]:
        input_field(F.ROL_LIMIT, "Limit", "Layer limit (same as XoL limit).")
    with c[2]:
        input_field(F.ROL_EXP_LOSS, "Expected Annual Loss (layer)", "Modelled or burning-cost expected loss.")
    kv_table([("ROL", fmt_pct(float(r.rol))), ("Payback", fmt_years(float(pb.years)))])


def render_bc() -> None:
    s = scenario()
    r = calc_burning_cost(s)
    st.subheader("Burning Cost")
    st.caption("Annualised layer loss cost from history, compared to premium, then loaded.")
    c = st.columns(4)
    with c[0]:
        input_field(F.BC_LAYER_LOSSES, "Historical Losses in Layer (sum)", "Claims that would have hit this layer.")
    with c[1]:
        input_field(F.BC_YEARS, "Exposure Period (years)", "Years of credible history.")
    with c[2]:
        input_field(F.BC_PREMIUM, "Layer Premium", "Annual premium for this layer.")
    with c[3]:
        input_field(F.BC_LOAD, "Load Factor (0–1)", "Margin for volatility, uncertainty, profit.")
    kv_table(
        [
            ("Annualised burning cost", fmt_money(float(r.burning_cost), s.ccy)),
            ("Burning cost rate (BC ÷ Premium)", fmt_pct(float(r.bc_rate))),
            ("Loaded BC rate", fmt_pct(float(r.loaded_rate))),
        ]
    )


def render_qs() -> None:
    s = scenario()
    r = calc_quota_share(s)
    st.subheader("Quota Share (QS)")
    st.caption("Reinsurer takes a fixed % of premium and the same % of losses.")
    c = st.columns(3)
    with c[0]:
        input_field(F.QS_GWP, "Gross Written Premium (GWP)", "Premium written before reinsurance.")
    with c[1]:
        input_field(F.QS_SHARE, "Quota Share % (0–1)", "Fraction ceded to the reinsurer.")
    with c[2]:
        input_field(F.QS_LOSSES, "Gross Losses", "Losses incurred before reinsurance.")
    kv_table(
        [
            ("Ceded premium", fmt_money(r.ceded_prem, s.ccy)),
            ("Ceded losses", fmt_money(r.ceded_loss, s.ccy)),
            ("Net premium (after QS)", fmt_money(r.net_prem, s.ccy)),
            ("Net losses (after QS)", fmt_money(r.net_loss, s.ccy)),
        ]
    )


def render_ss() -> None:
    s = scenario()
    r = calc_surplus_share(s)
    st.subheader("Surplus Share")
    st.caption("You keep a retention; the reinsurer takes the surplus up to a number of lines.")
    c = st.columns(4)
    with c[0]:
        input_field(F.SS_SUM_INSURED, "Policy Sum Insured", "Insured value of a single policy.")
    with c[1]:
        input_field(F.SS_RETENTION, "Retention (Net line)", "Max kept per policy before ceding.")
    with c[2]:
        input_field(F.SS_LINES, "Number of Lines", "Multiples of retention accepted as surplus.")
    with c[3]:
        input_field(F.SS_LOSS, "Policy Loss", "Loss on this policy.")
    kv_table(
        [
            ("Max ceded capacity", fmt_money(r.max_ceded, s.ccy)),
            ("Ceded share (approx)", fmt_pct(r.ceded_share)),
            ("Ceded loss", fmt_money(r.ceded_loss, s.ccy)),
            ("Net loss", fmt_money(r.net_loss, s.ccy)),
        ]
    )


def render_elc() -> None:
    s = scenario()
    r = calc_exposure_loss_cost(s)
    st.subheader("Exposure Loss Cost")
    st.caption("Expected layer loss = Subject Premium × ELR × Layer Factor.")
    c = st.columns(3)
    with c[0]:
        input_field(F.ELC_SUB_PREM, "Subject Premium", "Premium exposed to the risk.")
    with c[1]:
        input_field(F.ELC_ELR, "Expected Loss Ratio (ELR)", "Expected share of premium becoming losses.")
    with c[2]:
        input_field(F.ELC_LAYER_FACTOR, "Layer Factor", "Share of total losses falling in the layer.")
    kv_table(
        [
            ("Expected gross losses", fmt_money(r.exp_gross_loss, s.ccy)),
            ("Expected layer losses", fmt_money(r.exp_layer_loss, s.ccy)),
        ]
    )


def render_cr() -> None:
    r = calc_combined_ratio(scenario())
    st.subheader("Combined Ratio")
    st.caption("Combined = Loss Ratio + Expense Ratio. Below 100% is underwriting profit.")
    c = st.columns(3)
    with c[0]:
        input_field(F.CR_LOSSES, "Losses Incurred", "Paid + case reserves + IBNR.")
    with c[1]:
        input_field(F.CR_EARNED_PREM, "Earned Premium", "Premium earned over the period.")
    with c[2]:
        input_field(F.CR_EXPENSES, "Expenses", "Acquisition + admin + brokerage.")
    kv_table(
        [
            ("Loss ratio", fmt_pct(float(r.loss_ratio))),
            ("Expense ratio", fmt_pct(float(r.exp_ratio))),
            ("Combined ratio", fmt_pct(float(r.combined))),
        ]
    )


def render_roe() -> None:
    r = calc_roe(scenario())
    st.subheader("Return on Equity (ROE)")
    st.caption("ROE = Net Income ÷ Equity.")
    c = st.columns(2)
    with c[0]:
        input_field(F.ROE_NET_INCOME, "Net Income", "Profit after losses, expenses, reinsurance.")
    with c[1]:
        input_field(F.ROE_EQUITY, "Equity / Capital", "Capital supporting the book or layer.")
    kv_table([("ROE", fmt_pct(float(r.roe)))])


PAGES = {
    "uw": render_uw,
    "xol": render_xol,
    "rol": render_rol,
    "bc": render_bc,
    "qs": render_qs,
    "ss": render_ss,
    "elc": render_elc,
    "cr": render_cr,
    "roe": render_roe,
}


# -----------------------------
# Streamlit UI
# -----------------------------
st.set_page_config(page_title="Bermuda UW Companion", layout="wide")

st.title("Bermuda Underwriting Companion")
st.caption("Transparent reinsurance metrics and a hurdle-based decision tool. All state stays local.")

s = scenario()

with st.sidebar:
    st.header("Scenario")

    presets = list_preset_keys()
    st.session_state.setdefault("preset", s.preset if s.preset in presets else presets[0])
    st.selectbox(
        "Preset",
        options=presets,
        format_func=lambda k: get_preset(k).name,
        key="preset",
        on_change=_on_preset,
    )
    st.caption(" · ".join(get_preset(st.session_state["preset"]).tags))

    modes = [m.value for m in StressMode]
    st.session_state.setdefault("stress", s.stress.value)
    st.selectbox("Stress mode", options=modes, format_func=lambda v: StressMode(v).label, key="stress", on_change=_on_stress)

    ccys = list(settings.CURRENCIES)
    if s.ccy not in ccys:
        ccys.append(s.ccy)
    st.session_state.setdefault("ccy", s.ccy)
    st.selectbox("Currency (label only)", options=ccys, key="ccy", on_change=_on_ccy)

    st.divider()
    st.session_state.setdefault("tab", s.active_tab if s.active_tab in TABS else "uw")
    st.radio("Page", options=list(TABS), format_func=TABS.get, key="tab", on_change=_on_tab)

PAGES.get(scenario().active_tab, render_uw)()
