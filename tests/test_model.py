"""Metric calculators: formulas, defaults and undefined ratios."""
import math

import pytest

from uw_companion.model import (
    CALCULATORS,
    calc_burning_cost,
    calc_combined_ratio,
    calc_exposure_loss_cost,
    calc_payback,
    calc_quota_share,
    calc_roe,
    calc_rol,
    calc_surplus_share,
    calc_xol,
    result_to_dict,
    results_table,
    xol_payout,
)
from uw_companion.outcome import Undefined, Value
from uw_companion.presets import get_preset
from uw_companion.store import Scenario


def _make_scenario(**overrides) -> Scenario:
    inputs = dict(get_preset("bm_property_cat").values)
    inputs.update(overrides)
    return Scenario(inputs=inputs)


# ---------------------------------------------------------------------------
# XoL layer
# ---------------------------------------------------------------------------


def test_xol_property_cat_payout():
    r = calc_xol(_make_scenario())
    assert r.payout == 15_000_000


@pytest.mark.parametrize(
    "loss,attach,limit,expected",
    [
        (5_000_000, 10_000_000, 20_000_000, 0.0),
        (10_000_000, 10_000_000, 20_000_000, 0.0),
        (100_000_000, 10_000_000, 20_000_000, 20_000_000),
        (30_000_000, 10_000_000, 0.0, 0.0),
        (30_000_000, 10_000_000, -5_000_000, 0.0),
    ],
)
def test_xol_payout_bounds(loss, attach, limit, expected):
    payout = xol_payout(loss, attach, limit)
    assert payout == expected
    assert 0.0 <= payout <= max(limit, 0.0)


def test_xol_missing_fields_default_to_zero():
    r = calc_xol(Scenario())
    assert (r.loss, r.attach, r.limit, r.payout) == (0.0, 0.0, 0.0, 0.0)


# ---------------------------------------------------------------------------
# ROL / payback
# ---------------------------------------------------------------------------


def test_rol_and_payback_property_cat():
    s = _make_scenario()
    assert calc_rol(s).rol.amount == pytest.approx(0.175)
    assert calc_payback(s).years.amount == pytest.approx(1.9444, abs=1e-4)


def test_rol_undefined_without_limit():
    r = calc_rol(_make_scenario(**{"rol.limit": 0}))
    assert isinstance(r.rol, Undefined)
    assert math.isnan(result_to_dict(r)["rol"])


def test_payback_undefined_without_expected_loss():
    r = calc_payback(_make_scenario(**{"rol.expLoss": -1}))
    assert not r.years.defined
    assert r.years.reason


# ---------------------------------------------------------------------------
# Burning cost
# ---------------------------------------------------------------------------


def test_burning_cost_property_cat():
    r = calc_burning_cost(_make_scenario())
    assert r.burning_cost.amount == pytest.approx(1_800_000)
    assert r.bc_rate.amount == pytest.approx(1_800_000 / 3_500_000)
    assert r.loaded_rate.amount == pytest.approx(1_800_000 / 3_500_000 * 1.2)


def test_burning_cost_zero_years_propagates():
    r = calc_burning_cost(_make_scenario(**{"bc.years": 0}))
    assert not r.burning_cost.defined
    assert not r.bc_rate.defined
    assert not r.loaded_rate.defined


def test_burning_cost_zero_premium_keeps_annual_cost():
    r = calc_burning_cost(_make_scenario(**{"bc.premium": 0}))
    assert isinstance(r.burning_cost, Value)
    assert not r.bc_rate.defined
    assert not r.loaded_rate.defined


def test_burning_cost_years_default_to_one():
    r = calc_burning_cost(Scenario(inputs={"bc.layerLosses": 500_000}))
    assert r.years == 1.0
    assert r.burning_cost.amount == 500_000
    assert r.load == pytest.approx(0.20)


def test_burning_cost_blank_years_read_as_zero():
    r = calc_burning_cost(Scenario(inputs={"bc.layerLosses": 500_000, "bc.years": ""}))
    assert r.years == 0.0
    assert not r.burning_cost.defined
    assert math.isnan(result_to_dict(r)["burning_cost"])


# ---------------------------------------------------------------------------
# Proportional treaties
# ---------------------------------------------------------------------------


def test_quota_share_split():
    r = calc_quota_share(_make_scenario())
    assert r.ceded_prem == pytest.approx(4_500_000)
    assert r.ceded_loss == pytest.approx(3_000_000)
    assert r.net_prem == pytest.approx(13_500_000)
    assert r.net_loss == pytest.approx(9_000_000)


def test_quota_share_out_of_range_share_is_not_clamped():
    r = calc_quota_share(_make_scenario(**{"qs.share": 1.5}))
    assert r.ceded_prem == pytest.approx(27_000_000)
    assert r.net_prem == pytest.approx(-9_000_000)


def test_quota_share_default_share():
    r = calc_quota_share(Scenario(inputs={"qs.gwp": 1_000_000}))
    assert r.share == pytest.approx(0.25)
    assert r.ceded_prem == pytest.approx(250_000)


def test_surplus_share_property_cat():
    r = calc_surplus_share(_make_scenario())
    assert r.max_ceded == 8_000_000
    assert r.ceded_share == pytest.approx(0.8)
    assert r.ceded_loss == pytest.approx(1_200_000)
    assert r.net_loss == pytest.approx(300_000)


def test_surplus_share_capped_by_lines():
    r = calc_surplus_share(_make_scenario(**{"ss.lines": 2}))
    assert r.ceded_share == pytest.approx(0.4)


@pytest.mark.parametrize("sum_insured", [0, -1_000_000, 1_000_000])
def test_surplus_share_nothing_ceded(sum_insured):
    # 1M sum insured sits below the 2M retention
    r = calc_surplus_share(_make_scenario(**{"ss.sumInsured": sum_insured}))
    assert r.ceded_share == 0.0
    assert r.net_loss == r.loss


# ---------------------------------------------------------------------------
# Exposure, combined ratio, ROE
# ---------------------------------------------------------------------------


def test_exposure_loss_cost():
    r = calc_exposure_loss_cost(_make_scenario())
    assert r.exp_gross_loss == pytest.approx(11_160_000)
    assert r.exp_layer_loss == pytest.approx(1_562_400)


def test_exposure_loss_cost_defaults():
    r = calc_exposure_loss_cost(Scenario(inputs={"elc.subPrem": 1_000_000}))
    assert r.elr == pytest.approx(0.60)
    assert r.layer_factor == pytest.approx(0.10)
    assert r.exp_layer_loss == pytest.approx(60_000)


def test_exposure_loss_cost_blank_elr_is_zero():
    r = calc_exposure_loss_cost(Scenario(inputs={"elc.subPrem": 1_000_000, "elc.elr": "  "}))
    assert r.elr == 0.0
    assert r.exp_layer_loss == 0.0


def test_combined_ratio_property_cat():
    r = calc_combined_ratio(_make_scenario())
    assert r.loss_ratio.amount == pytest.approx(0.6667, abs=1e-4)
    assert r.exp_ratio.amount == pytest.approx(0.25)
    assert r.combined.amount == pytest.approx(0.9167, abs=1e-4)


def test_combined_ratio_zero_earned_premium_all_nan():
    d = result_to_dict(calc_combined_ratio(_make_scenario(**{"cr.earnedPrem": 0})))
    assert math.isnan(d["loss_ratio"])
    assert math.isnan(d["exp_ratio"])
    assert math.isnan(d["combined"])
    assert d["losses"] == 12_000_000


def test_roe():
    assert calc_roe(_make_scenario()).roe.amount == pytest.approx(0.08)
    assert not calc_roe(_make_scenario(**{"roe.equity": 0})).roe.defined


# ---------------------------------------------------------------------------
# Input coercion and export
# ---------------------------------------------------------------------------


def test_thousands_separators_and_junk_input():
    s = _make_scenario(**{"xol.loss": "25,000,000", "xol.attach": "ten million"})
    r = calc_xol(s)
    assert r.loss == 25_000_000
    assert r.attach == 0.0
    assert r.payout == 20_000_000


def test_underscore_separators_are_junk():
    assert calc_xol(Scenario(inputs={"xol.loss": "1_000"})).loss == 0.0
    assert calc_xol(Scenario(inputs={"xol.loss": "1,000"})).loss == 1000.0


def test_results_table_covers_every_calculator():
    table = results_table(Scenario())
    assert set(table["calculator"]) == set(CALCULATORS)

    rol = table[(table["calculator"] == "rol") & (table["metric"] == "rol")]
    assert not rol["available"].iloc[0]
