from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    STATE_PATH: str = "~/.uw_companion/state.json"
    STORAGE_KEY: str = "bw_uw_companion_v1"
    CURRENCIES: List[str] = ["USD", "BMD", "EUR", "GBP"]
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_prefix": "UW_COMPANION_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }


settings = Settings()


class Hurdles(BaseModel):
    """
    Underwriting hurdles the decision tool grades a scenario against.
    """

    model_config = ConfigDict(frozen=True)

    # XoL structure
    target_rol: float = Field(
        default=0.18,
        description="Highest acceptable rate on line (premium / limit).",
    )

    max_payback: float = Field(
        default=2.5,
        description="Longest acceptable payback period in years.",
    )

    # Portfolio-wide
    max_cr: float = Field(
        default=1.00,
        description="Highest acceptable combined ratio.",
    )

    min_roe: float = Field(
        default=0.10,
        description="Lowest acceptable return on equity.",
    )


def base_hurdles() -> Hurdles:
    """Returns the hurdles used when a scenario sets none of its own."""
    return Hurdles()
