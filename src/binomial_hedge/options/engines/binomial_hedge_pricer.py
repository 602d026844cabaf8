"""Binomial-tree pricing engine for European calls."""

from __future__ import annotations

from dataclasses import dataclass

from binomial_hedge.options.errors import DomainError
from binomial_hedge.options.models.binomial_tree import (
    MAX_EXPANDING_LEVELS,
    european_call_price,
)
from binomial_hedge.options.types import (
    MarketState,
    OptionSpec,
    TreeMethod,
    TreeMethodInput,
    normalize_tree_method,
)


@dataclass(frozen=True)
class BinomialHedgePricer:
    """CRR tree pricer valued by hedge replication.

    `method="expanding"` builds every path explicitly and is meant only as a
    cross-check for small trees.
    """

    levels: int = 200
    method: TreeMethodInput = TreeMethod.RECOMBINING

    def __post_init__(self) -> None:
        if self.levels < 1:
            raise DomainError("levels must be >= 1")
        method = normalize_tree_method(self.method)
        if method == TreeMethod.EXPANDING and self.levels > MAX_EXPANDING_LEVELS:
            raise DomainError(
                f"expanding tree limited to {MAX_EXPANDING_LEVELS} levels"
            )
        object.__setattr__(self, "method", method)

    def price(self, spec: OptionSpec, state: MarketState) -> float:
        return european_call_price(
            spot=state.spot,
            strike=spec.strike,
            volatility=state.volatility,
            time_to_maturity=spec.time_to_expiry,
            levels=self.levels,
            risk_free_rate=state.rate,
            method=self.method,
        )
