"""
presets.py

Named seed bundles for the scenario store.
Bermuda-flavoured learning numbers, not market quotes.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Preset(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    tags: Tuple[str, ...] = ()
    values: Dict[str, Union[float, str]] = Field(default_factory=dict)


_PRESETS: Dict[str, Preset] = {
    "bm_property_cat": Preset(
        key="bm_property_cat",
        name="Bermuda Property Cat (XoL layer)",
        tags=("Property cat", "Occ XoL", "Bermuda market framing"),
        values={
            # XoL
            "xol.loss": 25_000_000,
            "xol.attach": 10_000_000,
            "xol.limit": 20_000_000,
            # ROL
            "rol.premium": 3_500_000,
            "rol.limit": 20_000_000,
            "rol.expLoss": 1_800_000,
            # Burning cost
            "bc.layerLosses": 9_000_000,
            "bc.years": 5,
            "bc.premium": 3_500_000,
            "bc.load": 0.20,
            # Combined ratio
            "cr.losses": 12_000_000,
            "cr.earnedPrem": 18_000_000,
            "cr.expenses": 4_500_000,
            # ROE
            "roe.netIncome": 2_400_000,
            "roe.equity": 30_000_000,
            # Quota share
            "qs.gwp": 18_000_000,
            "qs.share": 0.25,
            "qs.losses": 12_000_000,
            # Surplus share
            "ss.sumInsured": 10_000_000,
            "ss.retention": 2_000_000,
            "ss.lines": 4,
            "ss.loss": 1_500_000,
            # Exposure loss cost
            "elc.subPrem": 18_000_000,
            "elc.elr": 0.62,
            "elc.layerFactor": 0.14,
            # Decision tool
            "uw.targetROL": 0.18,
            "uw.maxPayback": 2.5,
            "uw.maxCR": 1.00,
            "uw.minROE": 0.10,
            "uw.useStructure": "xol",
        },
    ),
    "bm_casualty_xol": Preset(
        key="bm_casualty_xol",
        name="Bermuda Casualty (XoL, attritional + large loss)",
        tags=("Casualty", "XoL", "Long-tail lens"),
        values={
            "xol.loss": 6_000_000,
            "xol.attach": 2_000_000,
            "xol.limit": 5_000_000,
            "rol.premium": 950_000,
            "rol.limit": 5_000_000,
            "rol.expLoss": 550_000,
            "bc.layerLosses": 2_800_000,
            "bc.years": 7,
            "bc.premium": 950_000,
            "bc.load": 0.25,
            "cr.losses": 7_200_000,
            "cr.earnedPrem": 9_000_000,
            "cr.expenses": 2_400_000,
            "roe.netIncome": 700_000,
            "roe.equity": 8_000_000,
            "qs.gwp": 9_000_000,
            "qs.share": 0.15,
            "qs.losses": 7_200_000,
            "ss.sumInsured": 5_000_000,
            "ss.retention": 1_000_000,
            "ss.lines": 5,
            "ss.loss": 900_000,
            "elc.subPrem": 9_000_000,
            "elc.elr": 0.80,
            "elc.layerFactor": 0.10,
            "uw.targetROL": 0.20,
            "uw.maxPayback": 3.0,
            "uw.maxCR": 1.02,
            "uw.minROE": 0.08,
            "uw.useStructure": "xol",
        },
    ),
    "bm_qs_portfolio": Preset(
        key="bm_qs_portfolio",
        name="Bermuda Quota Share (portfolio support)",
        tags=("Quota share", "Capital relief / growth"),
        values={
            "qs.gwp": 25_000_000,
            "qs.share": 0.30,
            "qs.losses": 14_000_000,
            "cr.losses": 14_000_000,
            "cr.earnedPrem": 22_000_000,
            "cr.expenses": 5_500_000,
            "roe.netIncome": 1_500_000,
            "roe.equity": 15_000_000,
            "elc.subPrem": 25_000_000,
            "elc.elr": 0.58,
            "elc.layerFactor": 1.00,
            "uw.targetROL": 0.00,
            "uw.maxPayback": 0.0,
            "uw.maxCR": 0.98,
            "uw.minROE": 0.10,
            "uw.useStructure": "qs",
        },
    ),
}

DEFAULT_PRESET = "bm_property_cat"


def get_preset(key: str) -> Optional[Preset]:
    """Return a preset by key, or None if unknown."""
    return _PRESETS.get(key)


def list_preset_keys() -> List[str]:
    """Return all available preset keys."""
    return list(_PRESETS.keys())
