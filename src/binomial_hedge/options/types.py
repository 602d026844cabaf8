"""Shared option-pricing dataclasses and aliases."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Literal, TypeAlias

from numpy.typing import ArrayLike

from binomial_hedge.options.errors import DomainError

# Tolerant input type accepted for stock-price and payoff distributions.
Distribution: TypeAlias = ArrayLike


class TreeMethod(StrEnum):
    """Lattice construction used before backward induction."""

    RECOMBINING = "recombining"
    EXPANDING = "expanding"


TreeMethodInput: TypeAlias = TreeMethod | Literal["recombining", "expanding"]


def normalize_tree_method(method: TreeMethodInput) -> TreeMethod:
    """Normalize a tree-method label to `TreeMethod`."""
    try:
        return TreeMethod(method)
    except ValueError as e:
        raise ValueError(
            "method must be one of {'recombining', 'expanding'}"
        ) from e


@dataclass(frozen=True)
class BinomialParameters:
    """Inputs of one CRR valuation plus the derived step quantities.

    Attributes:
        spot: Present stock price.
        strike: Exercise price of the call.
        volatility: Annualized volatility in decimals.
        time_to_maturity: Time to expiry in years.
        levels: Number of binomial time steps.
        risk_free_rate: Continuously-compounded annual risk-free rate.

    Raises:
        DomainError: If the inputs leave the rate/time model undefined.
    """

    spot: float
    strike: float
    volatility: float
    time_to_maturity: float
    levels: int
    risk_free_rate: float = 0.0

    def __post_init__(self) -> None:
        values = {
            "spot": self.spot,
            "strike": self.strike,
            "volatility": self.volatility,
            "time_to_maturity": self.time_to_maturity,
            "risk_free_rate": self.risk_free_rate,
            "levels": self.levels,
        }
        for name, value in values.items():
            if not math.isfinite(value):
                raise DomainError(f"{name} must be finite, got {value!r}")

        if isinstance(self.levels, bool) or int(self.levels) != self.levels:
            raise DomainError(f"levels must be an integer, got {self.levels!r}")
        if self.levels < 1:
            raise DomainError("levels must be >= 1")
        if self.time_to_maturity <= 0:
            raise DomainError("time_to_maturity must be > 0")
        if self.spot <= 0:
            raise DomainError("spot must be > 0")
        if self.strike < 0:
            raise DomainError("strike must be non-negative")
        if self.volatility < 0:
            raise DomainError("volatility must be non-negative")

    @property
    def dt(self) -> float:
        """Duration of one tree step in years."""
        return self.time_to_maturity / self.levels

    @property
    def gu(self) -> float:
        """Up growth factor per step."""
        return math.exp(self.volatility * math.sqrt(self.dt))

    @property
    def gd(self) -> float:
        """Down growth factor per step (symmetric tree)."""
        return 1.0 / self.gu

    def as_dict(self) -> dict[str, float]:
        return {
            "spot": self.spot,
            "strike": self.strike,
            "volatility": self.volatility,
            "time_to_maturity": self.time_to_maturity,
            "levels": int(self.levels),
            "risk_free_rate": self.risk_free_rate,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, float]) -> BinomialParameters:
        """Build parameters from a flat mapping (e.g. a merged config)."""
        return cls(
            spot=float(data["spot"]),
            strike=float(data["strike"]),
            volatility=float(data["volatility"]),
            time_to_maturity=float(data["time_to_maturity"]),
            levels=data["levels"],
            risk_free_rate=float(data.get("risk_free_rate", 0.0)),
        )


@dataclass(frozen=True, slots=True)
class HedgeNode:
    """Replicating position at one tree node.

    `bond_future` is the riskless leg that, held against one unit of stock,
    removes the down-state risk. `hedge_ratio` is the number of calls whose
    up-state payoff matches the hedged portfolio. A degenerate node has
    `hedge_ratio == 0` and `option_present == 0`.
    """

    bond_future: float
    bond_present: float
    hedge_future_up: float
    hedge_ratio: float
    option_present: float

    @property
    def degenerate(self) -> bool:
        return self.hedge_ratio == 0.0


@dataclass(frozen=True)
class OptionSpec:
    """Contract terms required for pricing one European call."""

    strike: float
    time_to_expiry: float


@dataclass(frozen=True)
class MarketState:
    """Market inputs used by pricing engines."""

    spot: float
    volatility: float
    rate: float = 0.0
