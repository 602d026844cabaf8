"""European-call pricing on a CRR binomial tree by hedge replication."""

from .convergence import chunk_means, convergence_table
from .engines import BinomialHedgePricer, BlackScholesPricer, PriceModel
from .errors import BinomialPricingError, DomainError, TreeStructureError
from .models import (
    MAX_EXPANDING_LEVELS,
    Pairing,
    bs_call_price,
    call_payoffs,
    callpp,
    collapse_near_duplicates,
    european_call_price,
    european_call_price_from_factors,
    expand,
    expanded_distribution,
    fold_distribution,
    fold_layer,
    growth_rate,
    hedge_node,
    hedge_values,
    price_european_call,
    revsplit,
    risk_neutral_call_price,
    risk_neutral_values,
    split,
    spread,
    sreduce,
    terminal_distribution,
)
from .types import (
    BinomialParameters,
    HedgeNode,
    MarketState,
    OptionSpec,
    TreeMethod,
    TreeMethodInput,
)

__all__ = [
    "BinomialParameters",
    "HedgeNode",
    "OptionSpec",
    "MarketState",
    "TreeMethod",
    "TreeMethodInput",
    "BinomialPricingError",
    "DomainError",
    "TreeStructureError",
    "PriceModel",
    "BinomialHedgePricer",
    "BlackScholesPricer",
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
    "callpp",
    "growth_rate",
    "split",
    "revsplit",
    "expand",
    "expanded_distribution",
    "spread",
    "terminal_distribution",
    "collapse_near_duplicates",
    "sreduce",
    "call_payoffs",
    "bs_call_price",
    "convergence_table",
    "chunk_means",
]
