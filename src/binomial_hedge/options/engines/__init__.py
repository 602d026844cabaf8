"""Pricing engines over `OptionSpec` / `MarketState`."""

from .base import PriceModel
from .binomial_hedge_pricer import BinomialHedgePricer
from .bs_pricer import BlackScholesPricer

__all__ = [
    "PriceModel",
    "BinomialHedgePricer",
    "BlackScholesPricer",
]
