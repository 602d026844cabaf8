"""Exceptions raised by the binomial pricing layer."""

from __future__ import annotations


class BinomialPricingError(ValueError):
    """Base class for binomial pricing failures."""


class DomainError(BinomialPricingError):
    """Inputs for which the rate/time model is undefined.

    Raised before any tree construction, e.g. for `dt <= 0`, a non-positive
    growth factor or `levels < 1`.
    """


class TreeStructureError(BinomialPricingError):
    """A distribution that could not have been produced by the lattice."""
