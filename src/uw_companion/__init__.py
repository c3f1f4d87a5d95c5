"""Reinsurance underwriting companion: metric calculators, stress modes and
the hurdle-based decision tool."""

from .decision import Outcome, Structure, run_decision  # noqa
from .scenarios import StressMode, apply_stress  # noqa
from .store import Scenario, apply_preset, load_scenario, save_scenario  # noqa

__all__ = [
    "Outcome",
    "Structure",
    "run_decision",
    "StressMode",
    "apply_stress",
    "Scenario",
    "apply_preset",
    "load_scenario",
    "save_scenario",
]
