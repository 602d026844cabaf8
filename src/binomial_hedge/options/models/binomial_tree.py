"""CRR binomial-tree pricing of European calls by backward induction."""

from __future__ import annotations

import logging
import math
from enum import StrEnum
from typing import Literal, TypeAlias

import numpy as np

from binomial_hedge.options.errors import DomainError, TreeStructureError
from binomial_hedge.options.models.hedge import hedge_values, risk_neutral_values
from binomial_hedge.options.models.lattice import (
    call_payoffs,
    expanded_distribution,
    revsplit_pairs,
    sreduce,
    terminal_distribution,
)
from binomial_hedge.options.types import (
    BinomialParameters,
    Distribution,
    TreeMethod,
    TreeMethodInput,
    normalize_tree_method,
)

logger = logging.getLogger(__name__)

# Node count doubles per level; 2**20 paths is about 8 MB per layer.
MAX_EXPANDING_LEVELS = 20


class Pairing(StrEnum):
    """How adjacent nodes of one layer share an ancestor."""

    ADJACENT = "adjacent"  # recombining: (i, i+1), n+1 -> n
    DISJOINT = "disjoint"  # doubling order: (2i, 2i+1), 2n -> n


PairingInput: TypeAlias = Pairing | Literal["adjacent", "disjoint"]


def _check_layer(prices: np.ndarray, payoffs: np.ndarray, pairing: Pairing) -> None:
    if prices.ndim != 1 or payoffs.ndim != 1:
        raise TreeStructureError("prices and payoffs must be one-dimensional")
    if prices.shape != payoffs.shape:
        raise TreeStructureError(
            f"prices and payoffs differ in length: {prices.size} != {payoffs.size}"
        )
    if prices.size < 2:
        raise TreeStructureError("need at least two nodes to fold a layer")
    if pairing == Pairing.DISJOINT and prices.size % 2:
        raise TreeStructureError(
            f"disjoint pairing needs an even number of nodes, got {prices.size}"
        )


def fold_layer(
    prices: Distribution,
    payoffs: Distribution,
    gu: float,
    gd: float,
    r: float,
    dt: float,
    pairing: PairingInput = Pairing.ADJACENT,
) -> tuple[np.ndarray, np.ndarray]:
    """Apply one backward-induction step to a whole layer.

    Args:
        prices: Stock prices at the layer being folded.
        payoffs: Option values paired with `prices`.
        gu: Up growth factor per step.
        gd: Down growth factor per step.
        r: Continuously-compounded risk-free rate.
        dt: Step duration in years.
        pairing: `"adjacent"` for recombining leaves or `"disjoint"` for the
            doubling order of `expand`. Ancestors come from `sreduce` for a
            symmetric recombining layer and from `revsplit` otherwise.

    Returns:
        Ancestor stock prices and their option values, one layer earlier.

    Raises:
        TreeStructureError: If the layer cannot be paired, or if a disjoint
            pair does not reconstruct to a single ancestor.
    """
    pairing = Pairing(pairing)
    prices = np.asarray(prices, dtype=float)
    payoffs = np.asarray(payoffs, dtype=float)
    _check_layer(prices, payoffs, pairing)

    if pairing == Pairing.ADJACENT:
        sd, su = prices[:-1], prices[1:]
        cd, cu = payoffs[:-1], payoffs[1:]
    else:
        sd, su = prices[0::2], prices[1::2]
        cd, cu = payoffs[0::2], payoffs[1::2]

    if pairing == Pairing.ADJACENT and math.isclose(gu * gd, 1.0):
        ancestors = sreduce(prices, gd)
    else:
        ancestors = revsplit_pairs(sd, su, gu, gd)

    values = hedge_values(ancestors, sd, su, cd, cu, r, dt)
    return ancestors, values


def fold_distribution(
    prices: Distribution,
    payoffs: Distribution,
    gu: float,
    gd: float,
    r: float,
    dt: float,
    pairing: PairingInput = Pairing.ADJACENT,
) -> float:
    """Fold a terminal layer back to the present value at the root.

    Iterates `fold_layer` until one value remains; a two-node layer is a
    single fold.
    """
    pairing = Pairing(pairing)
    prices = np.asarray(prices, dtype=float)
    payoffs = np.asarray(payoffs, dtype=float)

    folds = 0
    while True:
        prices, payoffs = fold_layer(prices, payoffs, gu, gd, r, dt, pairing)
        folds += 1
        if payoffs.size == 1:
            break

    logger.debug("Folded %d layers (%s pairing)", folds, pairing.value)
    return float(payoffs[0])


def _deterministic_call_value(params: BinomialParameters) -> float:
    # Zero volatility: the stock grows at the risk-free rate to a known forward.
    t = params.time_to_maturity
    r = params.risk_free_rate
    forward = params.spot * math.exp(r * t)
    return max(0.0, forward - params.strike) * math.exp(-r * t)


def _terminal_layer(
    spot: float, levels: int, gu: float, gd: float, method: TreeMethod
) -> tuple[np.ndarray, Pairing]:
    if method == TreeMethod.RECOMBINING:
        return terminal_distribution(spot, levels, gu, gd), Pairing.ADJACENT

    if levels > MAX_EXPANDING_LEVELS:
        raise DomainError(
            f"expanding tree limited to {MAX_EXPANDING_LEVELS} levels, got {levels}; "
            "use method='recombining'"
        )
    return expanded_distribution(spot, levels, gu, gd), Pairing.DISJOINT


def _warn_if_arbitrage(gu: float, gd: float, r: float, dt: float) -> None:
    growth = math.exp(r * dt)
    if not gd <= growth <= gu:
        logger.warning(
            "Bond growth %.10g per step lies outside [gd=%.10g, gu=%.10g]; "
            "the tree admits arbitrage for these inputs.",
            growth,
            gd,
            gu,
        )


def _price_on_tree(
    spot: float,
    strike: float,
    levels: int,
    gu: float,
    gd: float,
    r: float,
    dt: float,
    method: TreeMethod,
) -> float:
    _warn_if_arbitrage(gu, gd, r, dt)

    prices, pairing = _terminal_layer(spot, levels, gu, gd, method)
    payoffs = call_payoffs(prices, strike)
    logger.debug("Terminal layer: %d nodes", prices.size)

    price = fold_distribution(prices, payoffs, gu, gd, r, dt, pairing)
    logger.debug("Call value: %.10g", price)
    return price


def price_european_call(
    params: BinomialParameters,
    method: TreeMethodInput = TreeMethod.RECOMBINING,
) -> float:
    """Price a European call from validated `BinomialParameters`."""
    method = normalize_tree_method(method)
    logger.debug(
        "Pricing call %s (dt=%.6g, gu=%.10g, gd=%.10g, method=%s)",
        params.as_dict(),
        params.dt,
        params.gu,
        params.gd,
        method.value,
    )

    if params.volatility == 0:
        price = _deterministic_call_value(params)
        logger.debug("Zero volatility: deterministic forward value %.10g", price)
        return price

    return _price_on_tree(
        params.spot,
        params.strike,
        int(params.levels),
        params.gu,
        params.gd,
        params.risk_free_rate,
        params.dt,
        method,
    )


def european_call_price(
    spot: float,
    strike: float,
    volatility: float,
    time_to_maturity: float,
    levels: int,
    risk_free_rate: float = 0.0,
    method: TreeMethodInput = TreeMethod.RECOMBINING,
) -> float:
    """Price a European call with a CRR tree valued by hedge replication.

    Args:
        spot: Present stock price.
        strike: Exercise price.
        volatility: Annualized volatility in decimals.
        time_to_maturity: Time to expiry in years.
        levels: Number of binomial time steps.
        risk_free_rate: Continuously-compounded annual risk-free rate.
        method: `"recombining"` (closed-form leaves, linear in `levels`) or
            `"expanding"` (explicit doubling, exponential in `levels`).

    Returns:
        Present value of one call.

    Raises:
        DomainError: If `levels < 1`, `time_to_maturity <= 0`, `spot <= 0`,
            `volatility < 0`, `strike < 0`, any input is non-finite, or the
            expanding tree is requested for more than `MAX_EXPANDING_LEVELS`.
    """
    params = BinomialParameters(
        spot=spot,
        strike=strike,
        volatility=volatility,
        time_to_maturity=time_to_maturity,
        levels=levels,
        risk_free_rate=risk_free_rate,
    )
    return price_european_call(params, method=method)


def european_call_price_from_factors(
    spot: float,
    strike: float,
    gu: float,
    gd: float,
    time_to_maturity: float,
    levels: int,
    risk_free_rate: float = 0.0,
    method: TreeMethodInput = TreeMethod.RECOMBINING,
) -> float:
    """Price a European call on a tree with explicit (possibly asymmetric) moves.

    Raises:
        DomainError: If `gd <= 0`, `gu <= gd`, `levels < 1`,
            `time_to_maturity <= 0`, `spot <= 0` or `strike < 0`.
    """
    method = normalize_tree_method(method)
    if gd <= 0 or gu <= 0:
        raise DomainError("growth factors must be > 0")
    if gu <= gd:
        raise DomainError("gu must be greater than gd")
    if levels < 1:
        raise DomainError("levels must be >= 1")
    if time_to_maturity <= 0:
        raise DomainError("time_to_maturity must be > 0")
    if spot <= 0:
        raise DomainError("spot must be > 0")
    if strike < 0:
        raise DomainError("strike must be non-negative")

    dt = time_to_maturity / levels
    return _price_on_tree(
        spot, strike, int(levels), gu, gd, risk_free_rate, dt, method
    )


def risk_neutral_call_price(
    spot: float,
    strike: float,
    volatility: float,
    time_to_maturity: float,
    levels: int,
    risk_free_rate: float = 0.0,
) -> float:
    """Same model priced with explicit risk-neutral probabilities.

    Reference implementation for cross-checking `european_call_price`.
    """
    params = BinomialParameters(
        spot=spot,
        strike=strike,
        volatility=volatility,
        time_to_maturity=time_to_maturity,
        levels=levels,
        risk_free_rate=risk_free_rate,
    )
    if params.volatility == 0:
        return _deterministic_call_value(params)

    gu, gd = params.gu, params.gd
    prices = terminal_distribution(params.spot, int(params.levels), gu, gd)
    values = call_payoffs(prices, params.strike)
    while values.size > 1:
        values = risk_neutral_values(
            values[:-1], values[1:], gu, gd, params.risk_free_rate, params.dt
        )
    return float(values[0])
