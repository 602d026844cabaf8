"""Interface for option-pricing engines."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from binomial_hedge.options.types import MarketState, OptionSpec


@runtime_checkable
class PriceModel(Protocol):
    """Minimum pricing capability shared by the tree and reference engines."""

    def price(self, spec: OptionSpec, state: MarketState) -> float:
        """Return option value for one contract."""
