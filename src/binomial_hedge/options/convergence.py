"""Convergence of the binomial price as the number of levels grows."""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np
import pandas as pd

from binomial_hedge.options.models.binomial_tree import european_call_price
from binomial_hedge.options.models.black_scholes import bs_call_price

logger = logging.getLogger(__name__)

DEFAULT_LEVELS = range(25, 85)


def convergence_table(
    spot: float,
    strike: float,
    volatility: float,
    time_to_maturity: float,
    risk_free_rate: float = 0.0,
    levels_range: Iterable[int] = DEFAULT_LEVELS,
) -> pd.DataFrame:
    """Price the same call across a range of level counts.

    Returns:
        DataFrame indexed by `levels` with columns `price` and `bs_reference`
        (Black-Scholes limit; NaN when `volatility == 0`) and `error`
        (`price - bs_reference`).
    """
    levels = [int(n) for n in levels_range]
    if not levels:
        raise ValueError("levels_range must not be empty")

    prices = [
        european_call_price(
            spot=spot,
            strike=strike,
            volatility=volatility,
            time_to_maturity=time_to_maturity,
            levels=n,
            risk_free_rate=risk_free_rate,
        )
        for n in levels
    ]

    if volatility > 0:
        reference = bs_call_price(
            spot, strike, time_to_maturity, volatility, risk_free_rate
        )
    else:
        reference = np.nan

    table = pd.DataFrame(
        {"price": prices},
        index=pd.Index(levels, name="levels"),
    )
    table["bs_reference"] = reference
    table["error"] = table["price"] - table["bs_reference"]

    logger.info(
        "Priced %d level counts (%d..%d); last price %.6f",
        len(levels),
        levels[0],
        levels[-1],
        prices[-1],
    )
    return table


def chunk_means(prices: pd.Series | Iterable[float], chunk_size: int = 10) -> pd.Series:
    """Average consecutive chunks of prices, dropping a trailing partial chunk.

    The CRR price oscillates with the parity of `levels`; chunk averages damp
    the oscillation and expose the trend.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")

    series = prices if isinstance(prices, pd.Series) else pd.Series(list(prices))
    n_chunks = len(series) // chunk_size
    if n_chunks == 0:
        return pd.Series(dtype=float, name="chunk_mean")

    values = series.to_numpy(dtype=float)[: n_chunks * chunk_size]
    means = values.reshape(n_chunks, chunk_size).mean(axis=1)

    if isinstance(series.index, pd.RangeIndex) or series.index.name is None:
        index = pd.RangeIndex(n_chunks, name="chunk")
    else:
        starts = series.index[: n_chunks * chunk_size : chunk_size]
        index = pd.Index(starts, name=f"{series.index.name}_start")

    return pd.Series(means, index=index, name="chunk_mean")
