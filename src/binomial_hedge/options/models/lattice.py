"""Stock-price lattice for the CRR binomial tree.

Two constructions are provided:

- `terminal_distribution`: closed-form recombining leaves, `levels + 1` nodes.
- `expand` / `spread`: explicit doubling of every node, `2**levels` paths.
  Exponential in `levels`; kept as a cross-check for small trees.
"""

from __future__ import annotations

import logging

import numpy as np

from binomial_hedge.options.errors import DomainError, TreeStructureError
from binomial_hedge.options.types import Distribution

logger = logging.getLogger(__name__)

DEFAULT_COLLAPSE_TOLERANCE = 0.01
REVSPLIT_TOLERANCE = 1e-4


def _check_factors(gu: float, gd: float) -> None:
    if gu <= 0 or gd <= 0:
        raise DomainError(f"growth factors must be > 0, got gu={gu!r}, gd={gd!r}")


def _as_distribution(values: Distribution) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise TreeStructureError(
            f"distribution must be one-dimensional, got shape {arr.shape}"
        )
    return arr


def growth_rate(volatility: float, dt: float) -> float:
    """Convert annualized volatility to the up growth factor over `dt` years."""
    if dt <= 0:
        raise DomainError("dt must be > 0")
    if volatility < 0:
        raise DomainError("volatility must be non-negative")
    return float(np.exp(volatility * np.sqrt(dt)))


def split(price: float, gu: float, gd: float) -> np.ndarray:
    """Return the `[down, up]` children of one node."""
    _check_factors(gu, gd)
    if price <= 0:
        raise DomainError("price must be > 0")
    return np.array([price * gd, price * gu])


def revsplit(
    pair: Distribution,
    gu: float,
    gd: float,
    rel_tol: float = REVSPLIT_TOLERANCE,
) -> float:
    """Reconstruct the ancestor price of a `(down, up)` node pair.

    Raises:
        TreeStructureError: If `down / gd` and `up / gu` disagree by more than
            `rel_tol`, i.e. the pair was not produced by `split`.
    """
    arr = _as_distribution(pair)
    if arr.size != 2:
        raise TreeStructureError(f"node pair must have two prices, got {arr.size}")
    down, up = arr
    return float(revsplit_pairs(down, up, gu, gd, rel_tol=rel_tol))


def revsplit_pairs(
    downs: Distribution,
    ups: Distribution,
    gu: float,
    gd: float,
    rel_tol: float = REVSPLIT_TOLERANCE,
) -> np.ndarray:
    """Vectorized `revsplit` over aligned arrays of down and up children."""
    _check_factors(gu, gd)
    downs = np.asarray(downs, dtype=float)
    ups = np.asarray(ups, dtype=float)
    from_up = ups / gu
    from_down = downs / gd

    bad = np.abs(from_up - from_down) >= rel_tol * np.abs(from_up)
    if np.any(bad):
        i = int(np.flatnonzero(bad)[0])
        down, up = np.atleast_1d(downs)[i], np.atleast_1d(ups)[i]
        raise TreeStructureError(
            f"inconsistent node pair ({down!r}, {up!r}) for gu={gu!r}, gd={gd!r}"
        )
    return from_up


def expand(distribution: Distribution, gu: float, gd: float) -> np.ndarray:
    """Replace every node by its two children.

    The output keeps traversal order: `[d0*gd, d0*gu, d1*gd, d1*gu, ...]`, so
    entries `2i` and `2i + 1` always share the ancestor `distribution[i]`.
    """
    _check_factors(gu, gd)
    arr = _as_distribution(distribution)
    return np.column_stack((arr * gd, arr * gu)).ravel()


def expanded_distribution(
    price: float, levels: int, gu: float, gd: float
) -> np.ndarray:
    """Full non-recombining distribution after `levels` doublings.

    Length is `2**levels`; entries are in traversal order (not sorted).
    """
    if levels < 0:
        raise DomainError("levels must be >= 0")
    if price <= 0:
        raise DomainError("price must be > 0")
    _check_factors(gu, gd)

    dist = np.array([float(price)])
    for _ in range(levels):
        dist = expand(dist, gu, gd)
    logger.debug("Expanded %d levels into %d paths", levels, dist.size)
    return dist


def collapse_near_duplicates(
    sorted_prices: Distribution,
    tolerance: float = DEFAULT_COLLAPSE_TOLERANCE,
) -> np.ndarray:
    """Merge adjacent values that agree within a relative tolerance.

    The first value of a run is kept; any later value within `tolerance` of it
    (relative to the kept value) is dropped.

    Args:
        sorted_prices: Ascending prices.
        tolerance: Relative tolerance used for merging.

    Returns:
        The collapsed, still ascending, prices.
    """
    if tolerance < 0:
        raise ValueError("tolerance must be non-negative")

    arr = _as_distribution(sorted_prices)
    if arr.size == 0:
        return arr

    kept = [arr[0]]
    for value in arr[1:]:
        anchor = kept[-1]
        if value == anchor or abs(value - anchor) < tolerance * abs(anchor):
            continue
        kept.append(value)
    return np.asarray(kept, dtype=float)


def spread(
    price: float,
    levels: int,
    gu: float,
    gd: float,
    tolerance: float = 1e-6,
) -> np.ndarray:
    """Sorted distinct terminal prices obtained by explicit doubling.

    This is the exponential counterpart of `terminal_distribution`. Paths that
    recombine only up to floating-point drift are merged with
    `collapse_near_duplicates`.
    """
    paths = expanded_distribution(price, levels, gu, gd)
    return collapse_near_duplicates(np.sort(paths), tolerance=tolerance)


def terminal_distribution(
    price: float, levels: int, gu: float, gd: float
) -> np.ndarray:
    """Closed-form recombining leaves, ascending.

    Node `i` (number of up moves) is `price * gd**(levels - i) * gu**i`, which
    for the symmetric tree (`gd = 1/gu`) is `price * gd**levels * (gu*gu)**i`.
    """
    if levels < 0:
        raise DomainError("levels must be >= 0")
    if price <= 0:
        raise DomainError("price must be > 0")
    _check_factors(gu, gd)

    j = np.arange(levels + 1)
    return price * (gd ** (levels - j)) * (gu**j)


def sreduce(prices: Distribution, gd: float) -> np.ndarray:
    """Step a recombining distribution back one layer.

    Drops the lowest node and scales the remainder by `gd`. Only valid for the
    symmetric tree, where the ancestor of `(p[i], p[i+1])` is `p[i+1] * gd`.
    """
    if gd <= 0:
        raise DomainError("gd must be > 0")
    arr = _as_distribution(prices)
    if arr.size < 2:
        raise TreeStructureError("need at least two prices to step back a layer")
    return arr[1:] * gd


def call_payoffs(prices: Distribution, strike: float) -> np.ndarray:
    """Terminal call payoffs `max(0, price - strike)`."""
    return np.maximum(_as_distribution(prices) - strike, 0.0)
