"""No-arbitrage valuation of one binomial node by hedge replication.

For a node with stock children `(sd, su)` and call children `(cd, cu)`, one
unit of stock financed by a riskless bond replicates a fixed number of calls:

1. `bond_future` makes the stock-minus-bond position proportional to the call
   in both states: `sd - cd` if `cd == 0`, else `(cu*sd - su*cd) / (cu - cd)`.
2. `bond_present = bond_future * exp(-r*dt)`.
3. `hedge_future_up = su - bond_future`.
4. `hedge_ratio = hedge_future_up / cu`, or `(su - sd) / (cu - cd)` when
   `cu == 0` (the same quantity).
5. `option_present = (sp - bond_present) / hedge_ratio`.

Equal call children (worthless or not) leave no hedge; the node value is
then defined as `0`.

All functions accept scalars or equally-shaped arrays.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from binomial_hedge.options.errors import DomainError
from binomial_hedge.options.types import HedgeNode


def _hedge_terms(
    sp: ArrayLike,
    sd: ArrayLike,
    su: ArrayLike,
    cd: ArrayLike,
    cu: ArrayLike,
    r: float,
    dt: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    sp, sd, su, cd, cu = (np.asarray(x, dtype=float) for x in (sp, sd, su, cd, cu))

    payoff_spread = cu - cd
    flat_payoff = payoff_spread == 0.0
    safe_spread = np.where(flat_payoff, 1.0, payoff_spread)

    # Both forms agree only at cd == 0; child values may be negative when
    # exp(r*dt) < gd, so every other node takes the general form.
    bond_future = np.where(
        cd == 0.0,
        sd - cd,
        (cu * sd - su * cd) / safe_spread,
    )
    bond_present = bond_future * np.exp(-r * dt)
    hedge_future_up = su - bond_future

    safe_cu = np.where(cu == 0.0, 1.0, cu)
    hedge_ratio = np.where(
        flat_payoff,
        0.0,
        np.where(cu == 0.0, (su - sd) / safe_spread, hedge_future_up / safe_cu),
    )

    degenerate = hedge_ratio == 0.0
    safe_ratio = np.where(degenerate, 1.0, hedge_ratio)
    option_present = np.where(degenerate, 0.0, (sp - bond_present) / safe_ratio)

    return bond_future, bond_present, hedge_future_up, hedge_ratio, option_present


def hedge_node(
    sp: float,
    stock_pair: ArrayLike,
    call_pair: ArrayLike,
    r: float,
    dt: float,
) -> HedgeNode:
    """Return the full replicating position for one node.

    Args:
        sp: Stock price at the node (ancestor of `stock_pair`).
        stock_pair: Stock prices `(down, up)` one step forward.
        call_pair: Call values `(down, up)` one step forward.
        r: Continuously-compounded risk-free rate.
        dt: Step duration in years.
    """
    sd, su = stock_pair
    cd, cu = call_pair
    terms = _hedge_terms(sp, sd, su, cd, cu, r, dt)
    return HedgeNode(*(float(t) for t in terms))


def hedge_values(
    sp: ArrayLike,
    sd: ArrayLike,
    su: ArrayLike,
    cd: ArrayLike,
    cu: ArrayLike,
    r: float,
    dt: float,
) -> np.ndarray:
    """Vectorized present option value over many nodes of one layer."""
    return _hedge_terms(sp, sd, su, cd, cu, r, dt)[-1]


def risk_neutral_values(
    cd: ArrayLike,
    cu: ArrayLike,
    gu: float,
    gd: float,
    r: float,
    dt: float,
) -> np.ndarray:
    """Discounted risk-neutral expectation of the two child values.

    Closed-form counterpart of `hedge_values`, used to cross-check the hedge
    construction. Requires `gu != gd`.
    """
    p = risk_neutral_probability(gu, gd, r, dt)
    cd = np.asarray(cd, dtype=float)
    cu = np.asarray(cu, dtype=float)
    return np.exp(-r * dt) * (p * cu + (1.0 - p) * cd)


def risk_neutral_probability(gu: float, gd: float, r: float, dt: float) -> float:
    if gu == gd:
        raise DomainError("risk-neutral probability undefined for gu == gd")
    return float((np.exp(r * dt) - gd) / (gu - gd))


def callpp(
    sp: float,
    stock_pair: ArrayLike,
    strike: float,
    r: float,
    dt: float,
) -> float:
    """One-step call value with the child payoffs inferred from the strike.

    Shortcut of `hedge_node` for a node whose children are at expiry:
    worthless when `strike >= su`, a discounted forward when `strike < sd`, and
    a fraction `(su - strike) / (su - sd)` of the hedge otherwise.
    """
    sd, su = (float(x) for x in stock_pair)
    discount = np.exp(-r * dt)
    if sd <= strike < su:
        return float((sp - sd * discount) * (su - strike) / (su - sd))
    if strike < sd:
        return float(sp - strike * discount)
    return 0.0
