"""CRR binomial-tree pricing of European calls by hedge replication."""

from binomial_hedge.options import european_call_price

__all__ = ["european_call_price"]
