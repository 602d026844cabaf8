"""Lattice, hedge and backward-induction models."""

from .binomial_tree import (
    MAX_EXPANDING_LEVELS,
    Pairing,
    european_call_price,
    european_call_price_from_factors,
    fold_distribution,
    fold_layer,
    price_european_call,
    risk_neutral_call_price,
)
from .black_scholes import bs_call_price, bs_d1_d2
from .hedge import (
    callpp,
    hedge_node,
    hedge_values,
    risk_neutral_probability,
    risk_neutral_values,
)
from .lattice import (
    call_payoffs,
    collapse_near_duplicates,
    expand,
    expanded_distribution,
    growth_rate,
    revsplit,
    revsplit_pairs,
    split,
    spread,
    sreduce,
    terminal_distribution,
)

__all__ = [
    "MAX_EXPANDING_LEVELS",
    "Pairing",
    "european_call_price",
    "european_call_price_from_factors",
    "price_european_call",
    "risk_neutral_call_price",
    "fold_layer",
    "fold_distribution",
    "hedge_node",
    "hedge_values",
    "risk_neutral_values",
    "risk_neutral_probability",
    "callpp",
    "growth_rate",
    "split",
    "revsplit",
    "revsplit_pairs",
    "expand",
    "expanded_distribution",
    "spread",
    "terminal_distribution",
    "collapse_near_duplicates",
    "sreduce",
    "call_payoffs",
    "bs_d1_d2",
    "bs_call_price",
]
