"""
Simulator configuration: starting balance, snapshot file and price-walk settings.

Defaults can be overridden from environment variables (see from_env).
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from stocksim_core.market import DEFAULT_MAX_CHANGE
from stocksim_core.stock import DEFAULT_PRICE_FLOOR

STARTING_BALANCE_ENV = "STOCKSIM_STARTING_BALANCE"
PORTFOLIO_FILE_ENV = "STOCKSIM_PORTFOLIO_FILE"
SEED_ENV = "STOCKSIM_SEED"
MAX_PRICE_CHANGE_ENV = "STOCKSIM_MAX_PRICE_CHANGE"
PRICE_FLOOR_ENV = "STOCKSIM_PRICE_FLOOR"


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class SimulatorConfig:
    """Settings for one trading session."""

    starting_balance: float = 10_000.0
    portfolio_file: str = "portfolio.txt"
    max_price_change: float = DEFAULT_MAX_CHANGE
    price_floor: float = DEFAULT_PRICE_FLOOR
    seed: int | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.starting_balance) or self.starting_balance < 0:
            raise ValueError(f"starting_balance must be a finite, non-negative number, got {self.starting_balance!r}")
        if not math.isfinite(self.max_price_change) or self.max_price_change < 0:
            raise ValueError(f"max_price_change must be a finite, non-negative number, got {self.max_price_change!r}")
        if not math.isfinite(self.price_floor) or self.price_floor <= 0:
            raise ValueError(f"price_floor must be a finite, positive number, got {self.price_floor!r}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> SimulatorConfig:
        """Build from STOCKSIM_* variables; unset or empty variables keep the defaults."""
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            starting_balance=_env_float(env, STARTING_BALANCE_ENV, defaults.starting_balance),
            portfolio_file=env.get(PORTFOLIO_FILE_ENV, "").strip() or defaults.portfolio_file,
            max_price_change=_env_float(env, MAX_PRICE_CHANGE_ENV, defaults.max_price_change),
            price_floor=_env_float(env, PRICE_FLOOR_ENV, defaults.price_floor),
            seed=_env_int(env, SEED_ENV),
        )
