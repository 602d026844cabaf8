"""Black-Scholes pricing engine."""

from __future__ import annotations

from binomial_hedge.options.models.black_scholes import bs_call_price
from binomial_hedge.options.types import MarketState, OptionSpec


class BlackScholesPricer:
    """Analytical European-call pricer, the limit of the binomial tree."""

    def price(self, spec: OptionSpec, state: MarketState) -> float:
        return bs_call_price(
            S=state.spot,
            K=spec.strike,
            T=spec.time_to_expiry,
            sigma=state.volatility,
            r=state.rate,
        )
