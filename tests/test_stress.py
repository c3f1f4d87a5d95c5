"""Stress transform: identity under normal, multipliers by field class,
ELR cap, and no chaining across mode switches."""
import pytest

from uw_companion.fields import FieldClass, InputField, classify_key, field_class
from uw_companion.scenarios import ELR_CAP, StressMode, apply_stress
from uw_companion.store import Scenario, set_stress

LOSS_KEYS = ["xol.loss", "cr.losses", "qs.losses", "ss.loss"]


# ---------------------------------------------------------------------------
# Field classification
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("field", list(InputField))
def test_catalogue_class_matches_substring_rule(field):
    assert field.field_class is classify_key(field.key)


def test_case_sensitive_loss_match():
    assert classify_key("rol.expLoss") is FieldClass.OTHER
    assert classify_key("bc.layerLosses") is FieldClass.OTHER
    assert classify_key("custom.grossloss") is FieldClass.LOSS


def test_from_key_round_trips_catalogue():
    assert InputField.from_key("cr.expenses") is InputField.CR_EXPENSES
    assert InputField.from_key("not.a.field") is None
    assert field_class("not.a.field") is FieldClass.OTHER


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("key", [f.key for f in InputField if f is not InputField.UW_USE_STRUCTURE])
@pytest.mark.parametrize("value", [0.0, 0.62, 1_500_000.0, -3.0])
def test_normal_is_identity(key, value):
    assert apply_stress(key, value, StressMode.NORMAL) == value


@pytest.mark.parametrize("key", LOSS_KEYS)
def test_cat_year_scales_losses(key):
    assert apply_stress(key, 10_000_000, StressMode.CAT_YEAR) == pytest.approx(13_500_000)


@pytest.mark.parametrize("key", LOSS_KEYS)
def test_bad_development_scales_losses(key):
    assert apply_stress(key, 10_000_000, StressMode.BAD_DEVELOPMENT) == pytest.approx(11_800_000)


def test_case_sensitive_keys_are_not_stressed():
    for mode in StressMode:
        assert apply_stress("rol.expLoss", 1_800_000, mode) == 1_800_000
        assert apply_stress("bc.layerLosses", 9_000_000, mode) == 9_000_000


def test_expenses_only_move_under_bad_development():
    assert apply_stress(InputField.CR_EXPENSES, 4_500_000, StressMode.CAT_YEAR) == 4_500_000
    assert apply_stress(InputField.CR_EXPENSES, 4_500_000, StressMode.BAD_DEVELOPMENT) == pytest.approx(4_770_000)


def test_elr_multipliers():
    assert apply_stress("elc.elr", 0.62, StressMode.CAT_YEAR) == pytest.approx(0.682)
    assert apply_stress("elc.elr", 0.62, StressMode.BAD_DEVELOPMENT) == pytest.approx(0.6696)


@pytest.mark.parametrize("mode", [StressMode.CAT_YEAR, StressMode.BAD_DEVELOPMENT])
@pytest.mark.parametrize("value", [0.0, 0.5, 0.93, 0.999, 5.0, 1_000.0])
def test_stressed_elr_stays_in_range(mode, value):
    stressed = apply_stress(InputField.ELC_ELR, value, mode)
    assert 0.0 <= stressed <= ELR_CAP


@pytest.mark.parametrize("key", LOSS_KEYS)
@pytest.mark.parametrize("value", [0.0, 1.0, 250_000.0, 25_000_000.0])
def test_cat_year_at_least_bad_development_at_least_base(key, value):
    cat = apply_stress(key, value, StressMode.CAT_YEAR)
    bad = apply_stress(key, value, StressMode.BAD_DEVELOPMENT)
    assert cat >= bad >= value


def test_mode_accepts_stored_string():
    assert apply_stress("xol.loss", 100.0, "cat") == pytest.approx(135.0)


def test_unknown_mode_raises():
    with pytest.raises(ValueError):
        apply_stress("xol.loss", 100.0, "hurricane")


def test_other_fields_pass_through():
    for mode in StressMode:
        assert apply_stress(InputField.ROL_PREMIUM, 3_500_000, mode) == 3_500_000
        assert apply_stress(InputField.ROE_NET_INCOME, 2_400_000, mode) == 2_400_000


# ---------------------------------------------------------------------------
# Reads through the scenario
# ---------------------------------------------------------------------------


def test_switching_modes_does_not_compound():
    s = Scenario(inputs={"cr.losses": 12_000_000})

    cat = set_stress(s, StressMode.CAT_YEAR)
    assert cat.get(InputField.CR_LOSSES) == pytest.approx(16_200_000)

    bad = set_stress(cat, StressMode.BAD_DEVELOPMENT)
    assert bad.get(InputField.CR_LOSSES) == pytest.approx(14_160_000)

    back = set_stress(bad, StressMode.NORMAL)
    assert back.get(InputField.CR_LOSSES) == 12_000_000


def test_stress_applies_after_string_coercion():
    s = Scenario(stress=StressMode.CAT_YEAR, inputs={"xol.loss": "10,000,000"})
    assert s.get("xol.loss") == pytest.approx(13_500_000)
