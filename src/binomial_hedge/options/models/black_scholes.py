"""Black-Scholes reference price for European calls.

Used as the continuous-time limit the binomial tree converges to.
"""

from __future__ import annotations

import numpy as np
from scipy.stats import norm


def bs_d1_d2(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
) -> tuple[float, float]:
    """Compute d1 and d2 for Black-Scholes without dividends."""
    if T <= 0 or sigma <= 0:
        raise ValueError("T and sigma must be positive")
    d1 = (np.log(S / K) + (r + 0.5 * sigma**2) * T) / (sigma * np.sqrt(T))
    d2 = d1 - sigma * np.sqrt(T)
    return d1, d2


def bs_call_price(
    S: float,
    K: float,
    T: float,
    sigma: float,
    r: float = 0.0,
) -> float:
    """Black-Scholes price of a European call."""
    d1, d2 = bs_d1_d2(S, K, T, sigma, r)
    return float(S * norm.cdf(d1) - K * np.exp(-r * T) * norm.cdf(d2))
