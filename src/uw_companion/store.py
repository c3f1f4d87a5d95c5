"""
store.py

Immutable scenario snapshot plus the reducers that produce the next one.
The whole snapshot is persisted as a single JSON blob under a fixed storage key.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import settings
from .fields import InputField, field_key
from .presets import DEFAULT_PRESET, get_preset
from .scenarios import StressMode, apply_stress

logger = logging.getLogger(__name__)

RawValue = Union[float, str]


def to_number(raw: Any, default: float) -> float:
    """
    Coerce a stored value to a float.

    Thousands separators are stripped ("1,500,000" -> 1500000.0). A blank
    string reads as 0. Unparseable or non-finite input falls back to the default.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = float(raw)
    else:
        text = str(raw).replace(",", "").strip()
        if not text:
            return 0.0
        if "_" in text:
            return default
        try:
            value = float(text)
        except ValueError:
            return default

    return value if np.isfinite(value) else default


class Scenario(BaseModel):
    """
    One read-only view of everything the user has entered.
    """

    model_config = ConfigDict(frozen=True)

    active_tab: str = Field(default="uw", description="Page currently shown.")
    preset: str = Field(default=DEFAULT_PRESET, description="Last preset applied.")
    stress: StressMode = Field(default=StressMode.NORMAL, description="Active stress mode.")
    ccy: str = Field(default="USD", description="Display currency label only.")
    inputs: Dict[str, RawValue] = Field(default_factory=dict)

    def raw(self, field: Union[InputField, str], default: Any = None) -> Any:
        """Stored value as entered: no coercion, no stress."""
        field = _resolve(field)
        if default is None and isinstance(field, InputField):
            default = field.default
        return self.inputs.get(field_key(field), default)

    def get(self, field: Union[InputField, str], default: Optional[float] = None) -> float:
        """
        Read a numeric input: default when absent, then string coercion,
        then the active stress mode.
        """
        field = _resolve(field)
        if default is None:
            default = field.default if isinstance(field, InputField) else 0.0
        key = field_key(field)

        value = to_number(self.inputs.get(key, default), float(default))
        return apply_stress(key, value, self.stress)


def _resolve(field: Union[InputField, str]) -> Union[InputField, str]:
    if isinstance(field, InputField):
        return field
    return InputField.from_key(field) or field


def default_scenario() -> Scenario:
    return Scenario()


# -----------------------------
# Reducers
# -----------------------------
def set_input(scenario: Scenario, field: Union[InputField, str], value: RawValue) -> Scenario:
    inputs = dict(scenario.inputs)
    inputs[field_key(field)] = value
    return scenario.model_copy(update={"inputs": inputs})


def set_stress(scenario: Scenario, mode: Union[StressMode, str]) -> Scenario:
    return scenario.model_copy(update={"stress": StressMode(mode)})


def set_currency(scenario: Scenario, ccy: str) -> Scenario:
    return scenario.model_copy(update={"ccy": ccy})


def set_active_tab(scenario: Scenario, tab: str) -> Scenario:
    return scenario.model_copy(update={"active_tab": tab})


def apply_preset(scenario: Scenario, key: str) -> Scenario:
    """
    Write every value of a preset in one step. Keys the preset does not
    mention keep their current values. Unknown presets leave the scenario as is.
    """
    preset = get_preset(key)
    if preset is None:
        logger.warning("Unknown preset %r, scenario unchanged", key)
        return scenario

    inputs = dict(scenario.inputs)
    inputs.update(preset.values)
    logger.info("Applied preset %s (%d fields)", key, len(preset.values))
    return scenario.model_copy(update={"inputs": inputs, "preset": key})


# -----------------------------
# Persistence
# -----------------------------
def _state_path(path: Union[str, Path, None]) -> Path:
    return Path(path if path is not None else settings.STATE_PATH).expanduser()


def save_scenario(scenario: Scenario, path: Union[str, Path, None] = None) -> Path:
    """Write the whole snapshot under the storage key; last write wins."""
    target = _state_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    blob = {settings.STORAGE_KEY: scenario.model_dump(mode="json")}
    target.write_text(json.dumps(blob), encoding="utf-8")
    logger.debug("Saved scenario to %s", target)
    return target


def load_scenario(path: Union[str, Path, None] = None) -> Scenario:
    """
    Reload the stored snapshot. Missing, unreadable or invalid state falls
    back to the default scenario.
    """
    source = _state_path(path)
    if not source.exists():
        logger.info("No saved state at %s, using default scenario", source)
        return default_scenario()

    try:
        data = json.loads(source.read_text(encoding="utf-8"))
        return Scenario.model_validate(data[settings.STORAGE_KEY])
    except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
        logger.warning("Saved state at %s is unusable, using default scenario: %s", source, e)
        return default_scenario()


def restore_session(path: Union[str, Path, None] = None) -> Scenario:
    """Startup: reload the stored snapshot, then re-seed it from its preset."""
    scenario = load_scenario(path)
    key = scenario.preset if get_preset(scenario.preset) is not None else DEFAULT_PRESET
    return apply_preset(scenario, key)
